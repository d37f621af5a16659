"""Core types for the Citation Scoring Engine."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class MentionDetection:
    """Outcome of looking for one competitor in one answer."""

    detected: bool = False
    count: int = 0  # 1..3 when detected


@dataclass
class CitationQueryResult:
    """Intermediate result for one (competitor, model, query) tuple."""

    competitor: str
    model: str
    query: str
    detected: bool = False
    mention_count: int = 0
    sentiment_score: float = 0.0  # -1.0 .. +1.0
    sentiment_weight: float = 0.0
    prominence_factor: float = 0.0  # 0.5 .. 1.5 when detected
    contribution: float = 0.0  # 0.0 .. 1.0


@dataclass
class ModelCitationMetric:
    """Citation aggregates for one competitor on one model."""

    citation_count: int = 0
    total_queries: int = 0
    citation_rate: float = 0.0
    raw_citation_score: float = 0.0
    citation_score: float = 0.0

    def to_dict(self) -> dict:
        return {
            "citationCount": self.citation_count,
            "totalQueries": self.total_queries,
            "citationRate": self.citation_rate,
            "rawCitationScore": self.raw_citation_score,
            "citationScore": self.citation_score,
        }


@dataclass
class GlobalCitationMetric:
    """Citation aggregates for one competitor across contributing models."""

    citation_count: int = 0
    total_queries: int = 0
    citation_rate: float = 0.0
    raw_citation_score: float = 0.0
    citation_score: float = 0.0  # Volume-weighted: sum(raw) / sum(total)
    equal_weighted_global: float = 0.0  # Mean of per-model citation_score
    citation_rate_smoothed: float = 0.5  # Laplace, alpha = 1
    confidence: float = 0.0  # min(1, mentions / 50)
    models_available: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "citationCount": self.citation_count,
            "totalQueries": self.total_queries,
            "citationRate": self.citation_rate,
            "citationRateSmoothed": self.citation_rate_smoothed,
            "rawCitationScore": self.raw_citation_score,
            "citationScore": self.citation_score,
            "equalWeightedGlobal": self.equal_weighted_global,
            "confidence": self.confidence,
            "modelsAvailable": list(self.models_available),
        }


@dataclass
class CitationMetric:
    """Per-competitor citation metrics: per model plus global."""

    per_model: dict[str, ModelCitationMetric] = field(default_factory=dict)
    global_: GlobalCitationMetric = field(default_factory=GlobalCitationMetric)

    def to_dict(self) -> dict:
        return {
            "perModel": {m: pm.to_dict() for m, pm in self.per_model.items()},
            "global": self.global_.to_dict(),
        }
