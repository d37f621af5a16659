"""Tests for the discovery query generator."""

import pytest

from visibility.discovery.queries import QUERY_TEMPLATES, DetectionMethod, build_queries


class TestBuildQueries:
    @pytest.mark.parametrize("method", list(QUERY_TEMPLATES))
    @pytest.mark.parametrize("company", ["Semrush", "Acme Corp", "  padded name  ", "Ünïcode GmbH"])
    def test_length_matches_template_count(self, method, company):
        queries = build_queries(method, company, "SEO software")
        assert len(queries) == len(QUERY_TEMPLATES[method])
        assert len(queries) >= 5
        assert all(q.strip() for q in queries)

    def test_substitutes_company_and_industry(self):
        queries = build_queries(DetectionMethod.INDUSTRY_SEARCH, "Semrush", "SEO")
        assert queries[0] == "Semrush competitors SEO"
        assert "Semrush SEO industry rivals" in queries

    def test_empty_industry_leaves_no_double_spaces(self):
        queries = build_queries(DetectionMethod.INDUSTRY_SEARCH, "Semrush")
        assert queries[0] == "Semrush competitors"
        assert queries[2] == "Semrush market competitors"
        assert all("  " not in q and q == q.strip() for q in queries)

    def test_order_is_stable(self):
        assert build_queries(DetectionMethod.INDUSTRY_NEWS, "Acme") == [
            "Acme vs competitors",
            "Acme market analysis",
            "Acme industry report",
            "Acme competitive landscape",
            "Acme market share analysis",
        ]

    def test_web_search_has_no_queries(self):
        assert build_queries(DetectionMethod.WEB_SEARCH, "Acme") == []

    @pytest.mark.parametrize("company", ["", "   ", None])
    def test_empty_company_rejected(self, company):
        with pytest.raises(ValueError):
            build_queries(DetectionMethod.DIRECT_COMPETITORS, company)
