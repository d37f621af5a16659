"""LLM-backed relevance validation of ranked candidates."""

from __future__ import annotations

import asyncio
import logging
import re

from visibility.collectors.llm_base import BaseLlmCollector
from visibility.discovery.types import CandidateCompetitor, ValidatedCompetitor

logger = logging.getLogger(__name__)

COMPREHENSIVE_THRESHOLD = 50
ENHANCED_THRESHOLD = 60

_SCORING_PROMPT = """You are a business analyst. Rate how likely it is that {competitor} is a direct competitor to {company} on a scale of 0-100. Consider factors like:
- Same industry/market
- Similar products/services
- Target customers
- Business model

Return only a number between 0-100."""

_SCORE_RE = re.compile(r"\d+")


def build_scoring_prompt(company: str, competitor: str) -> str:
    return _SCORING_PROMPT.format(company=company, competitor=competitor)


def parse_relevance_score(text: str) -> int:
    """First integer in *text*, clamped to 100. No digits → 0."""
    match = _SCORE_RE.search(text or "")
    if not match:
        return 0
    return min(int(match.group(0)), 100)


class RelevanceValidator:
    """Keep candidates whose relevance score meets the threshold.

    A model that answers but scores low rejects the candidate. A model that
    cannot be reached keeps it, unscored.
    """

    def __init__(
        self,
        llm: BaseLlmCollector | None,
        *,
        threshold: int,
        parallel: bool,
        delay: float = 0.5,
        unscored_limit: int = 10,
    ):
        self.llm = llm
        self.threshold = threshold
        self.parallel = parallel
        self.delay = delay
        self.unscored_limit = unscored_limit

    async def validate(self, company: str, candidates: list[CandidateCompetitor]) -> list[ValidatedCompetitor]:
        if self.llm is None:
            logger.warning(
                "[validate] No validation model configured, returning top %d candidates unscored",
                self.unscored_limit,
            )
            return [
                ValidatedCompetitor(name=c.name, relevance_score=None, frequency=c.frequency)
                for c in candidates[: self.unscored_limit]
            ]

        logger.info("[validate] Scoring %d candidates for %s (threshold=%d)", len(candidates), company, self.threshold)

        if self.parallel:
            outcomes = await asyncio.gather(*(self._score(company, c) for c in candidates))
        else:
            outcomes = []
            for i, c in enumerate(candidates):
                outcomes.append(await self._score(company, c))
                if self.delay and i < len(candidates) - 1:
                    await asyncio.sleep(self.delay)

        validated = [o for o in outcomes if o is not None]
        logger.info("[validate] %d/%d candidates accepted for %s", len(validated), len(candidates), company)
        return validated

    async def _score(self, company: str, candidate: CandidateCompetitor) -> ValidatedCompetitor | None:
        try:
            answer = await self.llm.generate(build_scoring_prompt(company, candidate.name))
        except Exception as e:
            logger.warning("[validate] Scoring %s failed, keeping it unscored: %s", candidate.name, e)
            return ValidatedCompetitor(name=candidate.name, relevance_score=None, frequency=candidate.frequency)

        score = parse_relevance_score(answer)
        accepted = score >= self.threshold
        logger.debug("[validate] %s scored %d/100 - %s", candidate.name, score, "VALID" if accepted else "REJECTED")
        if not accepted:
            return None
        return ValidatedCompetitor(name=candidate.name, relevance_score=score, frequency=candidate.frequency)
