"""AI traffic share: how often each competitor shows up when models compare vendors.

Uses the same query pool and fan-out as citation scoring, but every prompt
names all vendors and asks which are most relevant. A competitor's share on a
model is the percentage of that model's attempted answers that mention it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from visibility.citations.detection import build_aliases, word_boundary_regex
from visibility.citations.engine import collect_answers, select_queries
from visibility.citations.query_pool import GeoContext
from visibility.collectors.llm_base import BaseLlmCollector
from visibility.core.config import Settings
from visibility.core.config import settings as default_settings

logger = logging.getLogger(__name__)


@dataclass
class TrafficShare:
    """Shares in percent (0..100)."""

    by_model: dict[str, float] = field(default_factory=dict)
    global_share: float = 0.0  # Volume-weighted across models
    equal_weighted: float = 0.0  # Mean of per-model shares

    def to_dict(self) -> dict:
        return {
            "byModel": dict(self.by_model),
            "global": self.global_share,
            "weightedGlobal": self.equal_weighted,
        }


@dataclass
class TrafficShareReport:
    shares: dict[str, TrafficShare] = field(default_factory=dict)
    totals: dict[str, int] = field(default_factory=dict)  # model -> attempted queries
    counts: dict[str, dict[str, int]] = field(default_factory=dict)  # model -> competitor -> answers mentioning it
    queries: list[str] = field(default_factory=list)


def build_vendor_prompt(query: str, vendors: list[str]) -> str:
    return (
        f'For the topic: "{query}", consider these vendors: {", ".join(vendors)}. '
        "Briefly discuss which of these are most relevant/recommended today. "
        "Mention vendor names directly."
    )


def mentions_any_alias(text: str, aliases: list[str]) -> bool:
    return any(word_boundary_regex(a).search(text) for a in aliases)


async def compute_traffic_shares(
    collectors: dict[str, BaseLlmCollector],
    competitor_names: list[str],
    industry: str = "",
    fast_mode: bool = True,
    *,
    settings: Settings | None = None,
    company_name: str = "",
    product: str = "",
    geo: GeoContext | None = None,
) -> TrafficShareReport:
    config = settings or default_settings
    names = list(dict.fromkeys(n for n in competitor_names if n and n.strip()))

    if not collectors:
        logger.warning("[traffic] No LLM backends configured, returning zero shares")
        return TrafficShareReport(shares={name: TrafficShare() for name in names})

    queries = select_queries(industry, fast_mode, company_name=company_name, product=product, geo=geo)
    timeout = config.citation_timeout_fast if fast_mode else config.citation_timeout_full

    answers = await collect_answers(collectors, queries, lambda q: build_vendor_prompt(q, names), timeout)

    aliases = {name: build_aliases(name) for name in names}
    totals = {model: 0 for model in collectors}
    counts = {model: {name: 0 for name in names} for model in collectors}

    for answer in answers:
        totals[answer.model] += 1
        if not answer.ok:
            continue
        for name in names:
            if mentions_any_alias(answer.text, aliases[name]):
                counts[answer.model][name] += 1

    usable = [m for m in collectors if totals[m] > 0]
    shares: dict[str, TrafficShare] = {}
    for name in names:
        by_model = {m: counts[m][name] / totals[m] * 100 for m in usable}
        mentions = sum(counts[m][name] for m in usable)
        attempted = sum(totals[m] for m in usable)
        shares[name] = TrafficShare(
            by_model=by_model,
            global_share=mentions / attempted * 100 if attempted else 0.0,
            equal_weighted=sum(by_model.values()) / len(by_model) if by_model else 0.0,
        )
        logger.info("[traffic] %s: global=%.1f%% equal=%.1f%%", name, shares[name].global_share, shares[name].equal_weighted)

    return TrafficShareReport(shares=shares, totals=totals, counts=counts, queries=queries)
