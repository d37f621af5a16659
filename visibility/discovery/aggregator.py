"""Frequency aggregation across detection methods."""

from __future__ import annotations

import logging

from visibility.discovery.types import CandidateCompetitor

logger = logging.getLogger(__name__)


class FrequencyAccumulator:
    """Per-invocation name → frequency map.

    Each method adds at most 1 to a name, however many times the name shows
    up in that method's output. Names are keyed case-insensitively and keep
    the casing of their first occurrence.
    """

    def __init__(self):
        self._entries: dict[str, CandidateCompetitor] = {}
        self.method_results: dict[str, list[str]] = {}

    def add_method(self, method: str, names: list[str]) -> None:
        seen: set[str] = set()
        distinct: list[str] = []
        for name in names:
            key = name.casefold()
            if key in seen:
                continue
            seen.add(key)

            entry = self._entries.get(key)
            if entry is None:
                entry = CandidateCompetitor(name=name, frequency=0)
                self._entries[key] = entry
            entry.frequency += 1
            entry.methods.append(method)
            distinct.append(entry.name)

        self.method_results[method] = distinct

    def frequency(self, name: str) -> int:
        entry = self._entries.get(name.casefold())
        return entry.frequency if entry else 0

    def ranked(self) -> list[CandidateCompetitor]:
        """Descending frequency; ties keep first-seen order (stable sort)."""
        return sorted(self._entries.values(), key=lambda c: c.frequency, reverse=True)

    def log_summary(self) -> None:
        logger.info("[aggregate] %d unique candidates", len(self))
        for i, c in enumerate(self.ranked(), start=1):
            logger.debug("[aggregate] %d. %s (frequency=%d, methods=%s)", i, c.name, c.frequency, ", ".join(c.methods))

    def __len__(self) -> int:
        return len(self._entries)
