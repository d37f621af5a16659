"""Tests for LLM relevance validation."""

import re

import pytest

from visibility.core.errors import ModelCallError
from visibility.discovery.types import CandidateCompetitor
from visibility.discovery.validator import (
    COMPREHENSIVE_THRESHOLD,
    ENHANCED_THRESHOLD,
    RelevanceValidator,
    build_scoring_prompt,
    parse_relevance_score,
)


def _candidates(*names):
    return [CandidateCompetitor(name=n, frequency=len(names) - i) for i, n in enumerate(names)]


def _score_by_name(scores):
    """Responder answering with the score configured for the candidate in the prompt."""

    def respond(prompt):
        name = re.search(r"that (.+?) is a direct competitor", prompt).group(1)
        value = scores[name]
        return value

    return respond


class TestParseRelevanceScore:
    @pytest.mark.parametrize(
        "text, expected",
        [
            ("85", 85),
            ("Score: 72/100", 72),
            ("I'd say 50.", 50),
            ("no idea", 0),
            ("", 0),
            ("250", 100),
            ("0", 0),
        ],
    )
    def test_first_integer(self, text, expected):
        assert parse_relevance_score(text) == expected


class TestThresholdConstants:
    def test_values(self):
        assert COMPREHENSIVE_THRESHOLD == 50
        assert ENHANCED_THRESHOLD == 60


class TestRelevanceValidator:
    @pytest.mark.asyncio
    async def test_score_exactly_at_threshold_is_retained(self, make_llm):
        llm = make_llm(_score_by_name({"Moz": "50"}))
        validator = RelevanceValidator(llm, threshold=50, parallel=False, delay=0)

        result = await validator.validate("Semrush", _candidates("Moz"))

        assert [(v.name, v.relevance_score) for v in result] == [("Moz", 50)]

    @pytest.mark.asyncio
    async def test_below_threshold_rejected(self, make_llm):
        llm = make_llm(_score_by_name({"Moz": "59", "Ahrefs": "60"}))
        validator = RelevanceValidator(llm, threshold=60, parallel=True)

        result = await validator.validate("Semrush", _candidates("Moz", "Ahrefs"))

        assert [v.name for v in result] == ["Ahrefs"]

    @pytest.mark.asyncio
    async def test_unparseable_answer_scores_zero(self, make_llm):
        llm = make_llm("I cannot say.")
        validator = RelevanceValidator(llm, threshold=50, parallel=True)
        assert await validator.validate("Semrush", _candidates("Moz")) == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("parallel", [True, False])
    async def test_call_failure_keeps_candidate_unscored(self, make_llm, parallel):
        llm = make_llm(
            _score_by_name({"Moz": ModelCallError("down", provider="gemini"), "Ahrefs": "90", "Foo": "5"})
        )
        validator = RelevanceValidator(llm, threshold=60, parallel=parallel, delay=0)

        result = await validator.validate("Semrush", _candidates("Moz", "Ahrefs", "Foo"))

        assert [(v.name, v.relevance_score) for v in result] == [("Moz", None), ("Ahrefs", 90)]

    @pytest.mark.asyncio
    async def test_output_keeps_ranking_order(self, make_llm):
        llm = make_llm(_score_by_name({"A": "61", "B": "99", "C": "75"}))
        validator = RelevanceValidator(llm, threshold=60, parallel=True)

        result = await validator.validate("Target", _candidates("A", "B", "C"))

        assert [v.name for v in result] == ["A", "B", "C"]
        assert [v.frequency for v in result] == [3, 2, 1]

    @pytest.mark.asyncio
    async def test_no_llm_returns_top_ten_unscored(self):
        names = [f"Company {i}" for i in range(15)]
        validator = RelevanceValidator(None, threshold=50, parallel=False)

        result = await validator.validate("Target", _candidates(*names))

        assert [v.name for v in result] == names[:10]
        assert all(v.relevance_score is None for v in result)

    @pytest.mark.asyncio
    async def test_sequential_sleeps_between_candidates(self, make_llm, monkeypatch):
        delays = []

        async def fake_sleep(seconds):
            delays.append(seconds)

        monkeypatch.setattr("visibility.discovery.validator.asyncio.sleep", fake_sleep)
        llm = make_llm("80")
        validator = RelevanceValidator(llm, threshold=50, parallel=False, delay=0.5)

        await validator.validate("Target", _candidates("A", "B", "C"))

        assert delays == [0.5, 0.5]

    def test_prompt_mentions_both_companies(self):
        prompt = build_scoring_prompt("Semrush", "Ahrefs")
        assert "Ahrefs is a direct competitor to Semrush" in prompt
        assert "0-100" in prompt
