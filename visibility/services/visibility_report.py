"""Visibility report service: discovery, then citation scoring and traffic share.

Pure-function orchestration: discover competitors, then score the target
company and every validated competitor. Citation metrics, traffic share and
SEO metrics run concurrently; a failing section is logged and left empty
instead of failing the whole report.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field

from visibility.citations.engine import CitationScoringEngine
from visibility.citations.query_pool import GeoContext
from visibility.citations.traffic_share import TrafficShare, TrafficShareReport, compute_traffic_shares
from visibility.citations.types import CitationMetric
from visibility.collectors.llm_base import BaseLlmCollector
from visibility.collectors.registry import build_llm_collectors
from visibility.core.config import Settings
from visibility.core.config import settings as default_settings
from visibility.discovery.pipeline import ENHANCED, CompetitorDiscovery, DiscoveryProfile, discover_competitors
from visibility.discovery.types import ValidatedCompetitor
from visibility.seo.provider import NullSeoMetricsProvider, SeoMetrics, SeoMetricsProvider

logger = logging.getLogger(__name__)


@dataclass
class CompetitorReport:
    name: str
    relevance_score: int | None = None
    frequency: int = 0  # 0 for the target company itself
    is_target: bool = False
    citations: CitationMetric | None = None
    traffic_share: TrafficShare | None = None
    seo: SeoMetrics | None = None

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "isTarget": self.is_target,
            "relevanceScore": self.relevance_score,
            "frequency": self.frequency,
            "citations": self.citations.to_dict() if self.citations else None,
            "aiTraffic": self.traffic_share.to_dict() if self.traffic_share else None,
            "seo": self.seo.to_dict() if self.seo else None,
        }


@dataclass
class VisibilityReport:
    company: str
    industry: str = ""
    competitors: list[CompetitorReport] = field(default_factory=list)
    models: list[str] = field(default_factory=list)
    queries: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "company": self.company,
            "industry": self.industry,
            "models": list(self.models),
            "queries": list(self.queries),
            "competitors": [c.to_dict() for c in self.competitors],
        }


async def _seo_for(provider: SeoMetricsProvider, domains: dict[str, str]) -> dict[str, SeoMetrics]:
    names = list(domains)
    results = await asyncio.gather(*(provider.get_metrics(domains[n]) for n in names), return_exceptions=True)
    out: dict[str, SeoMetrics] = {}
    for name, result in zip(names, results):
        if isinstance(result, Exception):
            logger.warning("[report] SEO metrics for %s failed: %s", name, result)
            continue
        out[name] = result
    return out


async def build_visibility_report(
    company_name: str,
    industry: str = "",
    *,
    fast_mode: bool = True,
    profile: DiscoveryProfile = ENHANCED,
    settings: Settings | None = None,
    seo_provider: SeoMetricsProvider | None = None,
    domains: dict[str, str] | None = None,
    product: str = "",
    geo: GeoContext | None = None,
    discovery: CompetitorDiscovery | None = None,
    collectors: dict[str, BaseLlmCollector] | None = None,
) -> VisibilityReport:
    """Build the full report for *company_name*.

    ``discovery`` and ``collectors`` default to instances built from settings.
    ``domains`` maps names to websites for the SEO section.
    """
    config = settings or default_settings
    company = company_name.strip()

    if discovery is not None:
        validated = await discovery.discover(company, industry)
    else:
        validated = await discover_competitors(company, industry, profile=profile, settings=config)

    rows: list[ValidatedCompetitor] = [c for c in validated if c.name.casefold() != company.casefold()]
    names = [company] + [c.name for c in rows]
    logger.info(
        "[report] %s: scoring %d names (target + %d competitors)",
        company, len(names), len(rows),
        extra={"company": company},
    )

    if collectors is None:
        collectors = build_llm_collectors(config)
    engine = CitationScoringEngine(collectors, settings=config)
    seo_provider = seo_provider or NullSeoMetricsProvider()
    wanted_domains = {n: d for n, d in (domains or {}).items() if n in names and d}

    citations, traffic, seo = await asyncio.gather(
        engine.compute_citation_metrics(names, industry, fast_mode, company_name=company, product=product, geo=geo),
        compute_traffic_shares(
            collectors, names, industry, fast_mode,
            settings=config, company_name=company, product=product, geo=geo,
        ),
        _seo_for(seo_provider, wanted_domains),
        return_exceptions=True,
    )

    if isinstance(citations, Exception):
        logger.error("[report] Citation scoring failed for %s: %s", company, citations, extra={"company": company})
        citations = {}
    if isinstance(traffic, Exception):
        logger.error("[report] Traffic share failed for %s: %s", company, traffic, extra={"company": company})
        traffic = TrafficShareReport()
    if isinstance(seo, Exception):
        logger.error("[report] SEO metrics failed for %s: %s", company, seo, extra={"company": company})
        seo = {}

    report = VisibilityReport(
        company=company,
        industry=industry,
        models=list(collectors),
        queries=list(traffic.queries),
    )
    report.competitors.append(
        CompetitorReport(
            name=company,
            is_target=True,
            citations=citations.get(company),
            traffic_share=traffic.shares.get(company),
            seo=seo.get(company),
        )
    )
    for c in rows:
        report.competitors.append(
            CompetitorReport(
                name=c.name,
                relevance_score=c.relevance_score,
                frequency=c.frequency,
                citations=citations.get(c.name),
                traffic_share=traffic.shares.get(c.name),
                seo=seo.get(c.name),
            )
        )
    return report
