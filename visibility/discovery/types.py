"""Core types for the Competitor Discovery pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from visibility.core.errors import ExtractionParseError


class Strictness(str, Enum):
    """How exhausted search retries are surfaced to the pipeline."""

    FAIL_OPEN = "fail-open"  # Log and contribute an empty result
    FAIL_CLOSED = "fail-closed"  # Raise to the caller


@dataclass(frozen=True)
class SearchResult:
    """One organic result from the search API."""

    name: str  # Result title
    link: str = ""
    snippet: str = ""


@dataclass
class CandidateCompetitor:
    """A name proposed by at least one detection method."""

    name: str
    frequency: int = 1  # Number of distinct methods that proposed it
    methods: list[str] = field(default_factory=list)


@dataclass
class ValidatedCompetitor:
    """A candidate that passed (or bypassed) relevance validation."""

    name: str
    relevance_score: int | None = None  # None = unscored (degraded / fail-open)
    frequency: int = 1

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "relevanceScore": self.relevance_score,
            "frequency": self.frequency,
        }


@dataclass
class ExtractionResult:
    """Typed outcome of parsing an extraction answer."""

    names: list = field(default_factory=list)
    error: ExtractionParseError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None
