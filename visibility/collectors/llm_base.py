"""Base LLM collector shared by every answer/extraction backend.

Each backend implements ``query_llm`` (one raw HTTP round-trip). Pipelines
call ``generate`` instead, which applies the per-provider concurrency cap and
RPM limiter and converts transport failures into the pipeline error types.
"""

import asyncio
import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass

import httpx

from visibility.core.errors import ModelCallError, RateLimitedError

logger = logging.getLogger(__name__)


@dataclass
class LlmResponse:
    """Raw response from an LLM API."""

    text: str
    model: str
    tokens: int = 0
    cost_usd: float = 0.0


# ---------------------------------------------------------------------------
# RPM-aware rate limiter (token bucket)
# ---------------------------------------------------------------------------


class RpmLimiter:
    """Token-bucket rate limiter that enforces requests-per-minute.

    Allows bursts up to *burst* tokens, refills at *rpm* tokens per minute.
    Each ``acquire()`` consumes one token, sleeping when the bucket is empty.
    """

    def __init__(self, rpm: int, burst: int | None = None):
        self.rpm = rpm
        self.burst = burst or max(rpm // 4, 1)
        self._tokens = float(self.burst)
        self._last_refill = time.monotonic()
        self._lock = asyncio.Lock()

    async def acquire(self) -> None:
        async with self._lock:
            now = time.monotonic()
            elapsed = now - self._last_refill
            self._tokens = min(
                self.burst,
                self._tokens + elapsed * (self.rpm / 60.0),
            )
            self._last_refill = now

            if self._tokens >= 1.0:
                self._tokens -= 1.0
                return

            deficit = 1.0 - self._tokens
            wait = deficit / (self.rpm / 60.0)

        # Sleep outside the lock so other coroutines can refill
        logger.debug("RpmLimiter: waiting %.2fs (rpm=%d)", wait, self.rpm)
        await asyncio.sleep(wait)

        async with self._lock:
            self._tokens = max(0.0, self._tokens - 1.0)
            self._last_refill = time.monotonic()


# ---------------------------------------------------------------------------
# Concurrency & RPM settings per provider
# ---------------------------------------------------------------------------

# Max parallel connections per provider (semaphore size)
_COLLECTOR_CONCURRENCY: dict[str, int] = {
    "chatgpt": 5,
    "gemini": 4,
    "claude": 3,
    "perplexity": 2,  # Tight rate limits on free/low tiers
}

# Requests per minute per provider (for RPM limiter)
_COLLECTOR_RPM: dict[str, int] = {
    "chatgpt": 60,
    "gemini": 60,
    "claude": 40,
    "perplexity": 15,  # Conservative estimate
}


class BaseLlmCollector(ABC):
    """Base class for all LLM collectors."""

    provider: str = "unknown"

    def __init__(self, api_key: str, model: str, timeout: float = 60.0, rpm: int | None = None):
        self.api_key = api_key
        self.model = model
        self.timeout = timeout

        concurrency = _COLLECTOR_CONCURRENCY.get(self.provider, 5)
        rpm = _COLLECTOR_RPM.get(self.provider, 20) if rpm is None else rpm
        self._semaphore = asyncio.Semaphore(concurrency)
        # rpm=0 disables pacing (used by tests and offline replays)
        self._rpm_limiter = RpmLimiter(rpm=rpm, burst=max(concurrency, 3)) if rpm > 0 else None

    @abstractmethod
    async def query_llm(self, prompt: str) -> LlmResponse:
        """Send a prompt to the LLM and return the raw response. Implemented by subclasses."""
        ...

    async def generate(self, prompt: str) -> str:
        """Return the answer text for *prompt*.

        Raises RateLimitedError on HTTP 429 and ModelCallError on any other
        transport or payload failure, so callers can apply their own
        fail-open policy per unit of work.
        """
        if self._rpm_limiter is not None:
            await self._rpm_limiter.acquire()

        try:
            async with self._semaphore:
                resp = await self.query_llm(prompt)
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            if status == 429:
                raise RateLimitedError(f"{self.provider} rate limited", provider=self.provider, attempts=1) from e
            raise ModelCallError(f"{self.provider} HTTP {status}", provider=self.provider, status_code=status) from e
        except httpx.HTTPError as e:
            raise ModelCallError(f"{self.provider} transport error: {e}", provider=self.provider) from e
        except (KeyError, IndexError, TypeError, ValueError) as e:
            raise ModelCallError(f"{self.provider} returned an unexpected payload: {e}", provider=self.provider) from e

        logger.debug("%s: %d chars, %d tokens, $%.6f", self.provider, len(resp.text), resp.tokens, resp.cost_usd)
        return resp.text

    @staticmethod
    def _log_error_body(provider: str, model: str, resp: httpx.Response) -> None:
        """Log the vendor error message before ``raise_for_status`` fires."""
        if resp.status_code < 400:
            return
        try:
            error_body = resp.json()
            error = error_body.get("error", {})
            error_msg = error.get("message", resp.text[:500]) if isinstance(error, dict) else str(error)
        except Exception:
            error_msg = resp.text[:500]
        logger.error("%s API %d for model=%s: %s", provider, resp.status_code, model, error_msg)
