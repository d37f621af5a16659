"""Competitor Discovery orchestrator.

One implementation serves both observed pipeline variants; a
``DiscoveryProfile`` selects methods, pacing, search strictness, extraction
prompt and validation threshold.

Usage:
    competitors = await discover_competitors("Semrush", "SEO software")
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from visibility.collectors.google_search import GoogleSearchCollector
from visibility.collectors.llm_base import BaseLlmCollector
from visibility.collectors.registry import build_llm_collector
from visibility.core.config import Settings
from visibility.core.config import settings as default_settings
from visibility.core.errors import ConfigurationError
from visibility.discovery.aggregator import FrequencyAccumulator
from visibility.discovery.cleaning import clean_candidate_names
from visibility.discovery.extraction import extract_competitor_names
from visibility.discovery.queries import DetectionMethod, build_queries
from visibility.discovery.types import SearchResult, Strictness, ValidatedCompetitor
from visibility.discovery.validator import (
    COMPREHENSIVE_THRESHOLD,
    ENHANCED_THRESHOLD,
    RelevanceValidator,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DiscoveryProfile:
    """Policy knobs for one discovery run."""

    name: str
    methods: tuple[DetectionMethod, ...]
    strictness: Strictness
    parallel: bool  # Fan out methods/queries/validations vs. sequential with delays
    threshold: int
    include_snippets: bool  # Extraction sees "title: snippet" instead of titles only


COMPREHENSIVE = DiscoveryProfile(
    name="comprehensive",
    methods=(
        DetectionMethod.INDUSTRY_NEWS,
        DetectionMethod.PUBLIC_DATABASE,
        DetectionMethod.WEB_SEARCH,
        DetectionMethod.WIKIPEDIA,
    ),
    strictness=Strictness.FAIL_CLOSED,
    parallel=False,
    threshold=COMPREHENSIVE_THRESHOLD,
    include_snippets=False,
)

ENHANCED = DiscoveryProfile(
    name="enhanced",
    methods=(
        DetectionMethod.INDUSTRY_SEARCH,
        DetectionMethod.DIRECT_COMPETITORS,
        DetectionMethod.MARKET_ANALYSIS,
    ),
    strictness=Strictness.FAIL_OPEN,
    parallel=True,
    threshold=ENHANCED_THRESHOLD,
    include_snippets=True,
)


class CompetitorDiscovery:
    """Run every detection method, merge by frequency, then validate."""

    def __init__(
        self,
        search: GoogleSearchCollector,
        extractor_llm: BaseLlmCollector | None,
        validator_llm: BaseLlmCollector | None,
        profile: DiscoveryProfile = ENHANCED,
        config: Settings | None = None,
    ):
        self.search = search
        self.extractor_llm = extractor_llm
        self.validator_llm = validator_llm
        self.profile = profile
        self.config = config or default_settings

    async def discover(
        self,
        company_name: str,
        industry: str = "",
        seed_results: list[SearchResult] | None = None,
    ) -> list[ValidatedCompetitor]:
        company = (company_name or "").strip()
        if not company:
            raise ValueError("company_name must be a non-empty string")
        if self.extractor_llm is None:
            raise ConfigurationError("Gemini API key not configured for name extraction", setting="gemini_api_key")
        industry = (industry or "").strip()

        logger.info(
            "[discover] %s: starting %s discovery (%d methods)",
            company, self.profile.name, len(self.profile.methods),
            extra={"company": company},
        )

        accumulator = FrequencyAccumulator()
        methods = self.profile.methods

        if self.profile.parallel:
            outcomes = await asyncio.gather(
                *(self._run_method(m, company, industry, seed_results) for m in methods)
            )
            # Merge in declaration order so ties break the same way every run
            for method, names in zip(methods, outcomes):
                self._merge(accumulator, method, names)
        else:
            for i, method in enumerate(methods):
                names = await self._run_method(method, company, industry, seed_results)
                self._merge(accumulator, method, names)
                if self.config.method_delay and i < len(methods) - 1:
                    await asyncio.sleep(self.config.method_delay)

        accumulator.log_summary()

        validator = RelevanceValidator(
            self.validator_llm,
            threshold=self.profile.threshold,
            parallel=self.profile.parallel,
            delay=self.config.validation_delay,
        )
        validated = await validator.validate(company, accumulator.ranked())
        logger.info(
            "[discover] %s: %d validated competitors", company, len(validated), extra={"company": company}
        )
        return validated

    @staticmethod
    def _merge(accumulator: FrequencyAccumulator, method: DetectionMethod, names: list) -> None:
        cleaned = clean_candidate_names(names)
        if cleaned:
            logger.info("[discover] %s: %d competitors", method.value, len(cleaned))
        else:
            logger.info("[discover] %s: no competitors found", method.value)
        accumulator.add_method(method.value, cleaned)

    async def _run_method(
        self,
        method: DetectionMethod,
        company: str,
        industry: str,
        seed_results: list[SearchResult] | None,
    ) -> list:
        if method == DetectionMethod.WEB_SEARCH:
            results = list(seed_results or [])
        else:
            results = await self._collect(method, company, industry)

        if not results:
            return []

        try:
            return await extract_competitor_names(
                self.extractor_llm,
                company,
                results,
                industry,
                include_snippets=self.profile.include_snippets,
            )
        except ConfigurationError:
            raise
        except Exception as e:
            logger.error("[discover] %s: extraction failed: %s", method.value, e)
            return []

    async def _collect(self, method: DetectionMethod, company: str, industry: str) -> list[SearchResult]:
        queries = build_queries(method, company, industry)

        if self.profile.parallel:
            batches = await asyncio.gather(*(self._search_one(method, q) for q in queries))
        else:
            batches = []
            for i, query in enumerate(queries):
                batches.append(await self._search_one(method, query))
                if self.config.search_query_delay and i < len(queries) - 1:
                    await asyncio.sleep(self.config.search_query_delay)

        results = [r for batch in batches for r in batch]
        logger.info("[discover] %s: %d search results from %d queries", method.value, len(results), len(queries))
        return results

    async def _search_one(self, method: DetectionMethod, query: str) -> list[SearchResult]:
        if self.profile.strictness == Strictness.FAIL_CLOSED:
            return await self.search.search(query)
        try:
            return await self.search.search(query)
        except Exception as e:
            logger.error("[discover] %s query %r failed: %s", method.value, query, e)
            return []


async def discover_competitors(
    company_name: str,
    industry: str | None = None,
    *,
    profile: DiscoveryProfile = ENHANCED,
    settings: Settings | None = None,
    seed_results: list[SearchResult] | None = None,
) -> list[ValidatedCompetitor]:
    """Discover, rank and validate competitors of *company_name*.

    Search and Gemini secrets are checked once here, before any call is made.
    """
    config = settings or default_settings
    search = GoogleSearchCollector.from_settings(config, profile.strictness)
    gemini = build_llm_collector("gemini", config)

    discovery = CompetitorDiscovery(search, gemini, gemini, profile=profile, config=config)
    return await discovery.discover(company_name, industry or "", seed_results)
