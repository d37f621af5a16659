"""Name cleaning: drop non-company noise from extracted names."""

from __future__ import annotations

# Substrings that mark a source or content type rather than a company
NAME_DENYLIST: tuple[str, ...] = ("wikipedia", "linkedin", "news", "article")


def clean_candidate_names(names) -> list[str]:
    """Return trimmed string names, order kept, noise removed.

    Non-strings, empty strings and names containing a denylisted substring
    (case-insensitive) are dropped. Applying it twice equals applying it once.
    """
    cleaned: list[str] = []
    for name in names or ():
        if not isinstance(name, str):
            continue
        name = name.strip()
        if not name:
            continue
        lowered = name.lower()
        if any(term in lowered for term in NAME_DENYLIST):
            continue
        cleaned.append(name)
    return cleaned
