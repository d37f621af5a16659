"""Lexical sentiment heuristic for LLM answers."""

from __future__ import annotations

import re

_POSITIVE_RE = re.compile(
    r"\b(?:best|leading|top|innovative|recommended|trusted|popular|positive|strong|leader|growing)s?\b"
)
_NEGATIVE_RE = re.compile(r"\b(?:problem|issue|concern|negative|bad|poor|not\s+recommended|decline|weak)s?\b")
# "not recommended" is negative only; its "recommended" must not also count as positive
_NOT_RECOMMENDED_RE = re.compile(r"\bnot\s+recommended\b")

# (lower bound, weight), checked top-down
_WEIGHT_BINS: tuple[tuple[float, float], ...] = (
    (0.6, 1.2),
    (0.2, 1.1),
    (-0.2, 1.0),
    (-0.6, 0.6),
)
_FLOOR_WEIGHT = 0.2


def quick_sentiment_score(text: str) -> float:
    """(positive - negative) / max(1, positive + negative), in [-1, 1]."""
    lowered = (text or "").lower()
    pos = len(_POSITIVE_RE.findall(_NOT_RECOMMENDED_RE.sub(" ", lowered)))
    neg = len(_NEGATIVE_RE.findall(lowered))
    raw = (pos - neg) / max(1, pos + neg)
    return max(-1.0, min(1.0, raw))


def sentiment_weight_from_score(score: float) -> float:
    """Monotonic step map: neutral → 1.0, very negative → 0.2, capped at 1.2."""
    for lower, weight in _WEIGHT_BINS:
        if score >= lower:
            return weight
    return _FLOOR_WEIGHT
