"""Citation Scoring Engine: multi-LLM mention scoring weighted by sentiment and prominence.

Every (model, query) pair is one attempted call and counts toward that
model's ``total_queries`` whether it succeeds, fails or times out. A failed
call is a non-detection for every competitor; it never blocks other calls.

Usage:
    engine = CitationScoringEngine(build_llm_collectors(settings), settings=settings)
    metrics = await engine.compute_citation_metrics(["Semrush", "Ahrefs"], "SEO software", fast_mode=True)
"""

from __future__ import annotations

import asyncio
import logging
import re
from dataclasses import dataclass

from visibility.citations.detection import detect_mention
from visibility.citations.prominence import compute_prominence_factor
from visibility.citations.query_pool import GeoContext, default_query_pool
from visibility.citations.sentiment import quick_sentiment_score, sentiment_weight_from_score
from visibility.citations.types import (
    CitationMetric,
    CitationQueryResult,
    GlobalCitationMetric,
    ModelCitationMetric,
)
from visibility.collectors.llm_base import BaseLlmCollector
from visibility.collectors.registry import build_llm_collectors
from visibility.core.config import Settings
from visibility.core.config import settings as default_settings

logger = logging.getLogger(__name__)

FAST_QUERY_COUNT = 6
FULL_QUERY_COUNT = 12

DEFAULT_DOMAIN_KEYWORDS: tuple[str, ...] = (
    "cloud",
    "migration",
    "file",
    "sharing",
    "security",
    "saas",
    "platform",
    "software",
    "ai",
    "storage",
)

SMOOTHING_ALPHA = 1
CONFIDENCE_MENTIONS = 50


@dataclass
class ModelAnswer:
    """One attempted (model, query) call."""

    model: str
    query: str
    text: str = ""

    @property
    def ok(self) -> bool:
        return bool(self.text.strip())


def select_queries(
    industry: str,
    fast_mode: bool,
    *,
    company_name: str = "",
    product: str = "",
    geo: GeoContext | None = None,
) -> list[str]:
    pool = default_query_pool(industry, geo=geo, company_name=company_name, product=product)
    return pool[: FAST_QUERY_COUNT if fast_mode else FULL_QUERY_COUNT]


def domain_keywords_for(industry: str) -> list[str]:
    """Fixed defaults plus the tokens of the industry string."""
    keywords = list(DEFAULT_DOMAIN_KEYWORDS)
    for token in re.findall(r"[a-z0-9]+", (industry or "").lower()):
        if len(token) > 1 and token not in keywords:
            keywords.append(token)
    return keywords


async def collect_answers(
    collectors: dict[str, BaseLlmCollector],
    queries: list[str],
    prompt_for,
    timeout: float,
) -> list[ModelAnswer]:
    """Fan out every (model, query) call; failures come back as empty answers."""

    async def _ask(model: str, collector: BaseLlmCollector, query: str) -> ModelAnswer:
        try:
            text = await asyncio.wait_for(collector.generate(prompt_for(query)), timeout=timeout)
        except asyncio.TimeoutError:
            logger.warning("[%s] Timed out after %.0fs on %r", model, timeout, query)
            return ModelAnswer(model=model, query=query)
        except Exception as e:
            logger.warning("[%s] Call failed on %r: %s", model, query, e)
            return ModelAnswer(model=model, query=query)
        return ModelAnswer(model=model, query=query, text=text or "")

    calls = [
        _ask(model, collector, query)
        for model, collector in collectors.items()
        for query in queries
    ]
    logger.info("Fanning out %d calls (%d models x %d queries)", len(calls), len(collectors), len(queries))
    return list(await asyncio.gather(*calls))


def score_citation(
    answer: ModelAnswer,
    competitor: str,
    domain_keywords: list[str],
) -> CitationQueryResult:
    """Detection → sentiment weight x prominence → contribution (<= 1.0)."""
    result = CitationQueryResult(competitor=competitor, model=answer.model, query=answer.query)
    if not answer.ok:
        return result

    detection = detect_mention(answer.text, competitor, domain_keywords)
    if not detection.detected:
        return result

    sentiment = quick_sentiment_score(answer.text)
    weight = sentiment_weight_from_score(sentiment)
    prominence = compute_prominence_factor(answer.text, competitor)

    result.detected = True
    result.mention_count = detection.count
    result.sentiment_score = sentiment
    result.sentiment_weight = weight
    result.prominence_factor = prominence
    result.contribution = min(1.0, min(1, detection.count) * weight * prominence)
    return result


def finalize_citation_metric(per_model: dict[str, ModelCitationMetric]) -> CitationMetric:
    """Fill per-model rates/scores and the global aggregates.

    Models with zero attempted queries are left out of every global figure.
    """
    used: dict[str, ModelCitationMetric] = {}
    for model, pm in per_model.items():
        if pm.total_queries <= 0:
            continue
        pm.citation_score = pm.raw_citation_score / pm.total_queries
        pm.citation_rate = pm.citation_count / pm.total_queries
        used[model] = pm

    sum_totals = sum(pm.total_queries for pm in used.values())
    sum_raw = sum(pm.raw_citation_score for pm in used.values())
    sum_mentions = sum(pm.citation_count for pm in used.values())

    global_ = GlobalCitationMetric(
        citation_count=sum_mentions,
        total_queries=sum_totals,
        citation_rate=sum_mentions / sum_totals if sum_totals else 0.0,
        raw_citation_score=sum_raw,
        citation_score=sum_raw / sum_totals if sum_totals else 0.0,
        equal_weighted_global=(
            sum(pm.citation_score for pm in used.values()) / len(used) if used else 0.0
        ),
        citation_rate_smoothed=(sum_mentions + SMOOTHING_ALPHA) / (sum_totals + 2 * SMOOTHING_ALPHA),
        confidence=min(1.0, sum_mentions / CONFIDENCE_MENTIONS),
        models_available=list(used),
    )
    return CitationMetric(per_model=used, global_=global_)


class CitationScoringEngine:
    """Score how often, how early and how positively competitors are cited."""

    def __init__(self, collectors: dict[str, BaseLlmCollector], *, settings: Settings | None = None):
        self.collectors = collectors
        self.config = settings or default_settings

    async def compute_citation_metrics(
        self,
        competitor_names: list[str],
        industry: str = "",
        fast_mode: bool = True,
        *,
        company_name: str = "",
        product: str = "",
        geo: GeoContext | None = None,
    ) -> dict[str, CitationMetric]:
        names = list(dict.fromkeys(n for n in competitor_names if n and n.strip()))

        if not self.collectors:
            logger.warning("[citations] No LLM backends configured, returning zero metrics for %d competitors", len(names))
            return {name: finalize_citation_metric({}) for name in names}

        queries = select_queries(industry, fast_mode, company_name=company_name, product=product, geo=geo)
        timeout = self.config.citation_timeout_fast if fast_mode else self.config.citation_timeout_full
        keywords = domain_keywords_for(industry)

        answers = await collect_answers(self.collectors, queries, lambda q: f"Answer briefly: {q}", timeout)

        tallies = {name: {model: ModelCitationMetric() for model in self.collectors} for name in names}
        for answer in answers:
            for name in names:
                pm = tallies[name][answer.model]
                pm.total_queries += 1
                scored = score_citation(answer, name, keywords)
                if not scored.detected:
                    continue
                logger.debug(
                    "[citations] [%s] %s: count=%d sentiment=%.2f weight=%.2f prominence=%.2f contribution=%.3f",
                    answer.model, name, scored.mention_count, scored.sentiment_score,
                    scored.sentiment_weight, scored.prominence_factor, scored.contribution,
                )
                pm.citation_count += 1
                pm.raw_citation_score += scored.contribution

        failed = sum(1 for a in answers if not a.ok)
        if failed:
            logger.info("[citations] %d/%d calls returned no answer", failed, len(answers))

        metrics = {name: finalize_citation_metric(tallies[name]) for name in names}
        for name, metric in metrics.items():
            logger.info(
                "[citations] %s: score=%.3f equal_weighted=%.3f rate=%.3f (%d/%d)",
                name, metric.global_.citation_score, metric.global_.equal_weighted_global,
                metric.global_.citation_rate, metric.global_.citation_count, metric.global_.total_queries,
            )
        return metrics


async def compute_citation_metrics(
    competitor_names: list[str],
    industry: str = "",
    fast_mode: bool = True,
    *,
    settings: Settings | None = None,
    company_name: str = "",
    product: str = "",
    geo: GeoContext | None = None,
) -> dict[str, CitationMetric]:
    """Score *competitor_names* on every configured LLM backend."""
    config = settings or default_settings
    engine = CitationScoringEngine(build_llm_collectors(config), settings=config)
    return await engine.compute_citation_metrics(
        competitor_names, industry, fast_mode, company_name=company_name, product=product, geo=geo
    )
