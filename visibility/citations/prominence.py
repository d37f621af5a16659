"""Prominence factor: how early and how structurally visible a mention is."""

from __future__ import annotations

import math
import re

from visibility.citations.detection import alias_regex, build_aliases

MIN_FACTOR = 0.5
MAX_FACTOR = 1.5

EARLY_WINDOW = 200  # chars
EARLY_BOOST = 0.15
BURIED_PENALTY = 0.25
BURIED_TAIL = 0.2  # last 20% of the answer
LONG_TEXT = 600  # chars; shorter answers are never "buried"
RECOMMEND_BOOST = 0.1
HEADING_BOOST = 0.1
MAX_RANK_BOOST = 0.3
RANK_LINES = 20  # only the first lines are scanned for list ranks

_RECOMMEND_RE = re.compile(r"recommend|top\s+pick|best\s+choice", re.IGNORECASE)
_LIST_ITEM_RE = re.compile(r"^\s*(\d+)[.)]?\s+(.+)$")
_HEADING_RE = re.compile(r"^\s*(?:#{1,6}\s+.+|\*\*.+\*\*:?)\s*$")


def _rank_boost(lines: list[str], pattern: re.Pattern) -> float:
    boost = 0.0
    for line in lines[:RANK_LINES]:
        m = _LIST_ITEM_RE.match(line)
        if not m or not pattern.search(line):
            continue
        rank = max(1, int(m.group(1)))
        boost = max(boost, MAX_RANK_BOOST / math.log2(1 + rank))
    return min(MAX_RANK_BOOST, boost)


def compute_prominence_factor(text: str, name: str) -> float:
    """Weight in [0.5, 1.5]; 1.0 for a plain mention somewhere in the middle."""
    if not text or not name or not name.strip():
        return 1.0

    # Same spellings detect_mention accepts
    pattern = alias_regex(build_aliases(name))
    factor = 1.0

    first = pattern.search(text)
    if first is not None:
        idx = first.start()
        if idx < EARLY_WINDOW:
            factor += EARLY_BOOST
        elif len(text) >= LONG_TEXT and idx >= len(text) * (1 - BURIED_TAIL):
            factor -= BURIED_PENALTY

    if _RECOMMEND_RE.search(text):
        factor += RECOMMEND_BOOST

    lines = [ln for ln in re.split(r"\n+", text) if ln.strip()]
    if any(_HEADING_RE.match(ln) and pattern.search(ln) for ln in lines):
        factor += HEADING_BOOST

    factor += _rank_boost(lines, pattern)
    return max(MIN_FACTOR, min(MAX_FACTOR, factor))
