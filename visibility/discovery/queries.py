"""Query Generator: templated search queries per detection method.

Pure functions only: no network or LLM calls happen here.
"""

from __future__ import annotations

from enum import Enum


class DetectionMethod(str, Enum):
    """Independent evidence sources used to propose competitor names."""

    # Comprehensive profile
    INDUSTRY_NEWS = "industry_news"
    PUBLIC_DATABASE = "public_database"
    WEB_SEARCH = "web_search"  # Caller-supplied seed results, no queries
    WIKIPEDIA = "wikipedia"

    # Enhanced profile
    INDUSTRY_SEARCH = "industry_search"
    DIRECT_COMPETITORS = "direct_competitors"
    MARKET_ANALYSIS = "market_analysis"


QUERY_TEMPLATES: dict[DetectionMethod, tuple[str, ...]] = {
    DetectionMethod.INDUSTRY_NEWS: (
        "{company} vs competitors",
        "{company} market analysis",
        "{company} industry report",
        "{company} competitive landscape",
        "{company} market share analysis",
    ),
    DetectionMethod.PUBLIC_DATABASE: (
        "{company} company profile",
        "{company} competitors list",
        "{company} industry competitors",
        "{company} market competitors",
        "{company} business competitors",
    ),
    DetectionMethod.WIKIPEDIA: (
        "{company} wikipedia competitors",
        "{company} wikipedia alternative companies",
        "{company} wikipedia industry companies",
        "{company} wikipedia market companies",
        "{company} wikipedia similar companies",
    ),
    DetectionMethod.INDUSTRY_SEARCH: (
        "{company} competitors {industry}",
        "{company} vs {industry} companies",
        "{company} {industry} market competitors",
        "{company} {industry} industry rivals",
        "{company} {industry} alternative companies",
        "{company} {industry} competing businesses",
    ),
    DetectionMethod.DIRECT_COMPETITORS: (
        "{company} competitors",
        "{company} vs",
        "{company} alternatives",
        "{company} rivals",
        "{company} competing companies",
        "{company} similar companies",
    ),
    DetectionMethod.MARKET_ANALYSIS: (
        "{company} market analysis",
        "{company} industry report",
        "{company} competitive landscape",
        "{company} market share",
        "{company} industry overview",
        "{company} market competitors",
    ),
}


def build_queries(method: DetectionMethod, company_name: str, industry: str = "") -> list[str]:
    """Return the ordered search queries for one detection method.

    An empty industry leaves no double spaces behind. Methods without
    templates (``WEB_SEARCH``) yield an empty list.
    """
    company = " ".join((company_name or "").split())
    if not company:
        raise ValueError("company_name must be a non-empty string")
    industry = " ".join((industry or "").split())

    templates = QUERY_TEMPLATES.get(method, ())
    return [" ".join(t.format(company=company, industry=industry).split()) for t in templates]
