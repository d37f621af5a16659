"""LLM-backed competitor name extraction from search results.

The model is asked for a bare JSON array of names. Answers are parsed in two
stages: strict ``json.loads`` after fence stripping, then a bracket-depth scan
for the first balanced ``[...]`` substring. Parse failures never raise; they
come back as an ``ExtractionResult`` carrying an ``ExtractionParseError``.
"""

from __future__ import annotations

import json
import logging
import re

from visibility.collectors.llm_base import BaseLlmCollector
from visibility.core.errors import ConfigurationError, ExtractionParseError
from visibility.discovery.types import ExtractionResult, SearchResult

logger = logging.getLogger(__name__)

_EXTRACTION_PROMPT = """Analyze these search results and extract ONLY the competitor company names for "{company}".

Instructions:
1. Focus on companies that compete directly with {company}
2. Exclude {company} itself from the results
3. Exclude generic terms like "competitors", "companies", "businesses"
4. Return ONLY a JSON array of company names
5. No explanations, no markdown formatting

Search results:
{search_text}

Return format: ["Company1", "Company2", "Company3"]"""

_EXTRACTION_PROMPT_DETAILED = """You are a business analyst specializing in competitive intelligence. Analyze these search results and extract ONLY the direct competitor company names for "{company}"{industry_clause}.

CRITICAL INSTRUCTIONS:
1. Focus ONLY on companies that directly compete with {company} in the same market
2. Exclude {company} itself from the results
3. Exclude generic terms like "competitors", "companies", "businesses", "solutions"
4. Exclude companies that are partners, suppliers, or complementary services
5. Only include companies that offer similar products/services to {company}
6. Return ONLY a JSON array of company names, no explanations
7. Ensure all company names are real, established businesses

Search results to analyze:
{search_text}

Return format: ["Company1", "Company2", "Company3"]"""

_FENCE_RE = re.compile(r"```(?:json)?\s*", re.IGNORECASE)


def build_extraction_prompt(
    company: str,
    results: list[SearchResult],
    industry: str = "",
    *,
    include_snippets: bool,
) -> str:
    """Build the extraction prompt from result titles (or ``title: snippet`` pairs)."""
    if include_snippets:
        search_text = "\n\n".join(f"{r.name}: {r.snippet}" for r in results)
        industry_clause = f" in the {industry} industry" if industry else ""
        return _EXTRACTION_PROMPT_DETAILED.format(
            company=company, industry_clause=industry_clause, search_text=search_text
        )
    search_text = "\n".join(r.name for r in results)
    return _EXTRACTION_PROMPT.format(company=company, search_text=search_text)


def _first_balanced_array(text: str) -> str | None:
    """Return the first ``[...]`` substring with balanced brackets.

    Brackets inside JSON string literals are ignored.
    """
    start = text.find("[")
    while start != -1:
        depth = 0
        in_string = False
        escaped = False
        for i in range(start, len(text)):
            ch = text[i]
            if in_string:
                if escaped:
                    escaped = False
                elif ch == "\\":
                    escaped = True
                elif ch == '"':
                    in_string = False
                continue
            if ch == '"':
                in_string = True
            elif ch == "[":
                depth += 1
            elif ch == "]":
                depth -= 1
                if depth == 0:
                    return text[start : i + 1]
        # Unbalanced from this opening bracket; try the next one
        start = text.find("[", start + 1)
    return None


def parse_name_list(raw: str) -> ExtractionResult:
    """Parse an LLM answer into a list of names."""
    cleaned = _FENCE_RE.sub("", raw or "").replace("```", "").strip()
    if not cleaned:
        return ExtractionResult([], ExtractionParseError("Empty response", raw=raw or ""))

    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError:
        data = None

    if not isinstance(data, list):
        # Prose or a wrapping object: fall back to the first array in the text
        candidate = _first_balanced_array(cleaned)
        if candidate is None:
            return ExtractionResult([], ExtractionParseError("No JSON array in response", raw=raw))
        try:
            data = json.loads(candidate)
        except json.JSONDecodeError as e:
            return ExtractionResult([], ExtractionParseError(f"Invalid JSON array: {e}", raw=raw))

    return ExtractionResult(data)


async def extract_competitor_names(
    llm: BaseLlmCollector | None,
    company: str,
    results: list[SearchResult],
    industry: str = "",
    *,
    include_snippets: bool,
) -> list:
    """Ask the extraction model for competitor names found in *results*.

    Call failures propagate (the method runner degrades them); parse failures
    are logged with the raw answer and yield ``[]``.
    """
    if llm is None:
        raise ConfigurationError("Gemini API key not configured for name extraction", setting="gemini_api_key")

    prompt = build_extraction_prompt(company, results, industry, include_snippets=include_snippets)
    logger.debug("[extract] %s: analyzing %d search results", company, len(results))

    raw = await llm.generate(prompt)
    parsed = parse_name_list(raw)
    if not parsed.ok:
        logger.warning("[extract] %s: %s. Raw response: %s", company, parsed.error, raw[:500])
        return []

    logger.info("[extract] %s: model returned %d names", company, len(parsed.names))
    return parsed.names
