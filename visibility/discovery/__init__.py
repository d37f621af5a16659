"""Competitor Discovery pipeline.

Multi-method competitor detection for a target company:
  1. Query Generator (templated search queries per detection method)
  2. Search collector (Google Custom Search, retry/backoff, strictness)
  3. LLM name extraction (JSON array of names, two-stage parse)
  4. Name cleaning (denylist of generic sources)
  5. Frequency aggregation (one vote per method per name)
  6. LLM relevance validation (0-100 score, threshold filter)

Input:  company name (+ optional industry)
Output: list[ValidatedCompetitor] in frequency order
"""
