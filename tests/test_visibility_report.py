"""Tests for the visibility report service and its CLI."""

import json
import logging

import pytest

from run_visibility_report import _parse_args
from visibility.core.errors import ConfigurationError
from visibility.core.logging import JSONFormatter
from visibility.discovery.types import ValidatedCompetitor
from visibility.seo.provider import NullSeoMetricsProvider
from visibility.services.visibility_report import build_visibility_report


class StubDiscovery:
    def __init__(self, competitors):
        self.competitors = competitors
        self.calls = []

    async def discover(self, company_name, industry=""):
        self.calls.append((company_name, industry))
        return list(self.competitors)


class FlakySeoProvider(NullSeoMetricsProvider):
    async def get_metrics(self, domain):
        if "bad" in domain:
            raise RuntimeError("analytics API down")
        return await super().get_metrics(domain)


VALIDATED = [
    ValidatedCompetitor("Globex", relevance_score=90, frequency=2),
    ValidatedCompetitor("acme", relevance_score=80, frequency=1),
    ValidatedCompetitor("Initech", relevance_score=70, frequency=1),
]


class TestBuildVisibilityReport:
    @pytest.mark.asyncio
    async def test_target_first_and_scored(self, make_llm, test_settings):
        discovery = StubDiscovery(VALIDATED)
        llm = make_llm("Acme and Globex are the leaders.")

        report = await build_visibility_report(
            " Acme ", "CRM", settings=test_settings, discovery=discovery, collectors={"gemini": llm}
        )

        assert discovery.calls == [("Acme", "CRM")]
        assert [c.name for c in report.competitors] == ["Acme", "Globex", "Initech"]
        target = report.competitors[0]
        assert target.is_target
        assert target.frequency == 0
        assert target.relevance_score is None
        assert target.citations.global_.citation_count == 6
        assert target.traffic_share.global_share == pytest.approx(100.0)

        globex, initech = report.competitors[1:]
        assert (globex.relevance_score, globex.frequency) == (90, 2)
        assert initech.citations.global_.citation_score == 0.0
        assert initech.traffic_share.global_share == 0.0

        assert report.models == ["gemini"]
        assert len(report.queries) == 6

    @pytest.mark.asyncio
    async def test_to_dict(self, make_llm, test_settings):
        report = await build_visibility_report(
            "Acme", "CRM", settings=test_settings, discovery=StubDiscovery([]), collectors={"gemini": make_llm("")}
        )
        data = report.to_dict()
        assert data["company"] == "Acme"
        row = data["competitors"][0]
        assert row["isTarget"] is True
        assert set(row) == {"name", "isTarget", "relevanceScore", "frequency", "citations", "aiTraffic", "seo"}
        assert row["citations"]["global"]["totalQueries"] == 6
        assert row["seo"] is None

    @pytest.mark.asyncio
    async def test_seo_section_degrades_per_domain(self, make_llm, test_settings):
        report = await build_visibility_report(
            "Acme",
            settings=test_settings,
            discovery=StubDiscovery(VALIDATED),
            collectors={"gemini": make_llm("")},
            seo_provider=FlakySeoProvider(),
            domains={"Acme": "https://www.acme.com/", "Globex": "bad.example", "Nobody": "nobody.com"},
        )
        rows = {c.name: c for c in report.competitors}
        assert rows["Acme"].seo.domain == "acme.com"
        assert rows["Globex"].seo is None
        assert rows["Initech"].seo is None

    @pytest.mark.asyncio
    async def test_citation_failure_leaves_section_empty(self, make_llm, test_settings, monkeypatch):
        async def broken(self, *args, **kwargs):
            raise RuntimeError("engine exploded")

        monkeypatch.setattr(
            "visibility.services.visibility_report.CitationScoringEngine.compute_citation_metrics", broken
        )
        report = await build_visibility_report(
            "Acme", settings=test_settings, discovery=StubDiscovery(VALIDATED), collectors={"gemini": make_llm("Globex")}
        )

        assert all(c.citations is None for c in report.competitors)
        assert report.competitors[1].traffic_share.global_share == pytest.approx(100.0)

    @pytest.mark.asyncio
    async def test_log_records_carry_company(self, make_llm, test_settings, caplog):
        caplog.set_level(logging.INFO, logger="visibility.services.visibility_report")
        await build_visibility_report(
            "Acme", settings=test_settings, discovery=StubDiscovery(VALIDATED), collectors={"gemini": make_llm("")}
        )

        tagged = [r for r in caplog.records if r.name == "visibility.services.visibility_report"]
        assert tagged
        assert all(r.company == "Acme" for r in tagged)
        assert json.loads(JSONFormatter().format(tagged[0]))["company"] == "Acme"

    @pytest.mark.asyncio
    async def test_missing_secrets_fail_fast(self, empty_settings):
        with pytest.raises(ConfigurationError):
            await build_visibility_report("Acme", "CRM", settings=empty_settings)


class TestCli:
    def test_defaults(self):
        args = _parse_args(["Semrush"])
        assert args.company == "Semrush"
        assert args.industry == ""
        assert not args.full
        assert not args.comprehensive

    def test_flags(self):
        args = _parse_args(["Semrush", "SEO software", "--full", "--comprehensive", "--out", "r.json"])
        assert args.industry == "SEO software"
        assert args.full and args.comprehensive
        assert args.out == "r.json"
