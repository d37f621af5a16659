"""Tests for AI traffic share."""

import pytest

from visibility.citations.traffic_share import (
    TrafficShare,
    build_vendor_prompt,
    compute_traffic_shares,
    mentions_any_alias,
)
from visibility.core.errors import ModelCallError


class TestHelpers:
    def test_vendor_prompt_lists_every_vendor(self):
        prompt = build_vendor_prompt("best tools in SEO", ["Semrush", "Ahrefs"])
        assert '"best tools in SEO"' in prompt
        assert "Semrush, Ahrefs" in prompt

    def test_alias_match(self):
        assert mentions_any_alias("Try semrush.com", ["Semrush", "semrush.com"])
        assert not mentions_any_alias("Try Ahrefs", ["Semrush"])

    def test_serialized_keys(self):
        share = TrafficShare(by_model={"gemini": 50.0}, global_share=50.0, equal_weighted=50.0)
        assert share.to_dict() == {"byModel": {"gemini": 50.0}, "global": 50.0, "weightedGlobal": 50.0}


class TestComputeTrafficShares:
    @pytest.mark.asyncio
    async def test_shares_per_model_and_global(self, make_llm, test_settings):
        chatgpt = make_llm("Semrush and Ahrefs are the most relevant.")
        gemini = make_llm("Ahrefs leads today.")
        report = await compute_traffic_shares(
            {"chatgpt": chatgpt, "gemini": gemini}, ["Semrush", "Ahrefs"], "SEO", settings=test_settings
        )

        semrush = report.shares["Semrush"]
        assert semrush.by_model == {"chatgpt": 100.0, "gemini": 0.0}
        assert semrush.global_share == pytest.approx(50.0)
        assert semrush.equal_weighted == pytest.approx(50.0)
        assert report.shares["Ahrefs"].global_share == pytest.approx(100.0)
        assert report.totals == {"chatgpt": 6, "gemini": 6}
        assert len(report.queries) == 6
        assert "Semrush, Ahrefs" in chatgpt.prompts[0]

    @pytest.mark.asyncio
    async def test_failed_model_still_counts_attempts(self, make_llm, test_settings):
        report = await compute_traffic_shares(
            {
                "chatgpt": make_llm("Semrush is relevant."),
                "gemini": make_llm(ModelCallError("down", provider="gemini")),
            },
            ["Semrush"],
            "SEO",
            fast_mode=False,
            settings=test_settings,
        )

        assert report.totals == {"chatgpt": 12, "gemini": 12}
        assert report.shares["Semrush"].by_model["gemini"] == 0.0
        assert report.shares["Semrush"].global_share == pytest.approx(50.0)

    @pytest.mark.asyncio
    async def test_no_backends(self, test_settings):
        report = await compute_traffic_shares({}, ["Semrush"], "SEO", settings=test_settings)
        assert report.shares["Semrush"].global_share == 0.0
        assert report.shares["Semrush"].by_model == {}
        assert report.queries == []
