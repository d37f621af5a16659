"""Google Custom Search JSON API collector with retry/backoff."""

import asyncio
import logging

import httpx

from visibility.core.config import Settings, is_usable_key
from visibility.core.errors import ConfigurationError, ModelCallError, RateLimitedError
from visibility.discovery.types import SearchResult, Strictness

logger = logging.getLogger(__name__)

API_URL = "https://www.googleapis.com/customsearch/v1"


class GoogleSearchCollector:
    """Run one query against Google Custom Search and return SearchResults.

    Retry policy: HTTP 429 backs off exponentially (``base_delay * 2**(n-1)``),
    any other failure waits ``base_delay``. Once ``max_retries`` attempts are
    spent, FAIL_CLOSED raises and FAIL_OPEN returns an empty list.
    """

    provider = "google_search"

    def __init__(
        self,
        api_key: str,
        cse_id: str,
        *,
        strictness: Strictness = Strictness.FAIL_OPEN,
        max_retries: int = 3,
        base_delay: float = 2.0,
        timeout: float = 10.0,
    ):
        self.api_key = api_key
        self.cse_id = cse_id
        self.strictness = strictness
        self.max_retries = max(1, max_retries)
        self.base_delay = base_delay
        self.timeout = timeout

    @classmethod
    def from_settings(cls, config: Settings, strictness: Strictness) -> "GoogleSearchCollector":
        """Build a collector, failing fast when either search secret is missing."""
        if not config.search_configured:
            missing = "google_cse_id" if is_usable_key(config.google_api_key) else "google_api_key"
            raise ConfigurationError("Google Custom Search credentials not configured", setting=missing)
        return cls(
            config.google_api_key,
            config.google_cse_id,
            strictness=strictness,
            max_retries=config.search_max_retries,
            base_delay=config.search_base_delay,
            timeout=config.search_timeout,
        )

    async def search(self, query: str) -> list[SearchResult]:
        if not query or not query.strip():
            raise ValueError("query must be a non-empty string")

        last_error: Exception | None = None
        rate_limited = False

        for attempt in range(1, self.max_retries + 1):
            try:
                return await self._fetch(query)
            except httpx.HTTPStatusError as e:
                last_error = e
                rate_limited = e.response.status_code == 429
            except (httpx.HTTPError, ValueError) as e:
                last_error = e
                rate_limited = False

            if attempt == self.max_retries:
                break

            if rate_limited:
                delay = self.base_delay * 2 ** (attempt - 1)
                logger.info("[search] Rate limited on %r, waiting %.1fs before retry", query, delay)
            else:
                delay = self.base_delay
                logger.info("[search] Attempt %d/%d failed for %r: %s", attempt, self.max_retries, query, last_error)
            await asyncio.sleep(delay)

        logger.error("[search] Failed after %d attempts for %r: %s", self.max_retries, query, last_error)

        if self.strictness == Strictness.FAIL_OPEN:
            return []
        if rate_limited:
            raise RateLimitedError(
                f"Google Search rate limited after {self.max_retries} attempts",
                provider=self.provider,
                attempts=self.max_retries,
            ) from last_error
        status = last_error.response.status_code if isinstance(last_error, httpx.HTTPStatusError) else 0
        raise ModelCallError(
            f"Google Search failed after {self.max_retries} attempts: {last_error}",
            provider=self.provider,
            status_code=status,
        ) from last_error

    async def _fetch(self, query: str) -> list[SearchResult]:
        params = {"q": query, "key": self.api_key, "cx": self.cse_id}

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            resp = await client.get(API_URL, params=params)
            resp.raise_for_status()
            data = resp.json()

        items = (data or {}).get("items") or []
        results = [
            SearchResult(
                name=item.get("title", ""),
                link=item.get("link", ""),
                snippet=item.get("snippet", ""),
            )
            for item in items
        ]
        logger.debug("[search] %r -> %d results", query, len(results))
        return results
