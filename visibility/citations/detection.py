"""Competitor mention detection in free-text LLM answers."""

from __future__ import annotations

import re

from visibility.citations.types import MentionDetection

# Names that are ordinary words; they only count next to a domain keyword
COMMON_NAMES = frozenset({"box", "meta", "apple", "oracle", "data", "cloud", "drive"})

MAX_MENTION_COUNT = 3

_LEGAL_SUFFIX_RE = re.compile(
    r"\b(?:corp(?:oration)?|inc|ltd|llc|co|technologies|technology|systems|solutions)\b\.?",
    re.IGNORECASE,
)
_SEPARATOR = r"[\s._-]*"
_BOUNDARY_BEFORE = r"(?<![A-Za-z0-9])"
_BOUNDARY_AFTER = r"(?![A-Za-z0-9])"


def build_aliases(name: str) -> list[str]:
    """Spelling variants a model might use for *name*, original first.

    Covers lower-case, no-space, hyphenated, legal-suffix-stripped and
    ``.com`` / ``.ai`` domain forms, plus the swapped order of two-word names.
    """
    raw = " ".join((name or "").split())
    if not raw:
        return []
    canon = raw.lower()
    no_space = canon.replace(" ", "")
    hyphen = canon.replace(" ", "-")

    stripped = " ".join(_LEGAL_SUFFIX_RE.sub(" ", canon).replace(",", " ").split())
    words = canon.split()
    swapped = f"{words[1]} {words[0]}" if len(words) == 2 else ""

    candidates = [
        raw,
        canon,
        no_space,
        hyphen,
        stripped,
        stripped.replace(" ", ""),
        stripped.replace(" ", "-"),
        f"{no_space}.com",
        f"{no_space}.ai",
        swapped,
        swapped.replace(" ", ""),
        swapped.replace(" ", "-"),
    ]

    aliases: list[str] = []
    seen: set[str] = set()
    for alias in candidates:
        if alias and alias not in seen:
            seen.add(alias)
            aliases.append(alias)
    return aliases


def _flexible(term: str) -> str:
    # "cloud fuze" also matches "cloud-fuze", "cloud.fuze" and "cloudfuze"
    return _SEPARATOR.join(re.escape(token) for token in term.split())


def word_boundary_regex(term: str) -> re.Pattern:
    """Case-insensitive regex for *term* bounded by non-alphanumerics."""
    return re.compile(_BOUNDARY_BEFORE + _flexible(term) + _BOUNDARY_AFTER, re.IGNORECASE)


def alias_regex(aliases: list[str]) -> re.Pattern:
    """One case-insensitive pattern matching any of *aliases*, longest first."""
    # Longest first so "acme corp" wins over "acme" in a single scan
    ordered = sorted(aliases, key=len, reverse=True)
    alternation = "|".join(_flexible(a) for a in ordered)
    return re.compile(f"{_BOUNDARY_BEFORE}(?:{alternation}){_BOUNDARY_AFTER}", re.IGNORECASE)


def detect_mention(text: str, name: str, domain_keywords: list[str] | tuple[str, ...] = ()) -> MentionDetection:
    """Detect *name* (or an alias) in *text*; count is capped at 3."""
    aliases = build_aliases(name)
    if not text or not aliases:
        return MentionDetection()

    matches = alias_regex(aliases).findall(text)
    if not matches:
        return MentionDetection()

    if name.strip().lower() in COMMON_NAMES:
        if not any(re.search(rf"\b{re.escape(k)}\b", text, re.IGNORECASE) for k in domain_keywords if k):
            return MentionDetection()

    return MentionDetection(detected=True, count=max(1, min(MAX_MENTION_COUNT, len(matches))))
