"""Tests for Perplexity collector."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from visibility.collectors.llm_perplexity import PerplexityCollector


@pytest.fixture
def collector():
    return PerplexityCollector(api_key="pplx-test-fake-key", model="sonar", rpm=0)


def _mock_httpx_client(mock_resp):
    mock_client = AsyncMock()
    mock_client.post.return_value = mock_resp
    mock_client.__aenter__ = AsyncMock(return_value=mock_client)
    mock_client.__aexit__ = AsyncMock(return_value=False)
    return mock_client


class TestCalculateCost:
    def test_cost_sonar(self, collector):
        # sonar: input=1.00/1M, output=1.00/1M
        cost = collector._calculate_cost(input_tokens=1000, output_tokens=500)
        expected = (1000 * 1.00 + 500 * 1.00) / 1_000_000
        assert cost == round(expected, 6)

    def test_cost_zero_tokens(self, collector):
        assert collector._calculate_cost(0, 0) == 0.0

    def test_cost_sonar_pro(self):
        c = PerplexityCollector(api_key="test", model="sonar-pro", rpm=0)
        cost = c._calculate_cost(input_tokens=1000, output_tokens=500)
        expected = (1000 * 3.00 + 500 * 15.00) / 1_000_000
        assert cost == round(expected, 6)


class TestQueryLlm:
    @pytest.mark.asyncio
    async def test_query_llm_success(self, collector):
        mock_resp = MagicMock()
        mock_resp.status_code = 200
        mock_resp.json.return_value = {
            "choices": [
                {
                    "message": {"content": "Semrush and Ahrefs lead the SEO market."},
                    "finish_reason": "stop",
                }
            ],
            "model": "sonar",
            "usage": {"prompt_tokens": 30, "completion_tokens": 70, "total_tokens": 100},
        }
        mock_resp.raise_for_status = MagicMock()

        with patch("visibility.collectors.llm_perplexity.httpx.AsyncClient") as MockClient:
            MockClient.return_value = _mock_httpx_client(mock_resp)
            result = await collector.query_llm("Top SEO tools?")

        assert result.text == "Semrush and Ahrefs lead the SEO market."
        assert result.tokens == 100
        assert result.model == "sonar"

    @pytest.mark.asyncio
    async def test_query_llm_null_content(self, collector):
        """A null message content comes back as an empty string."""
        mock_resp = MagicMock()
        mock_resp.status_code = 200
        mock_resp.json.return_value = {
            "choices": [{"message": {"content": None}, "finish_reason": "length"}],
            "model": "sonar",
            "usage": {"prompt_tokens": 10, "completion_tokens": 20, "total_tokens": 30},
        }
        mock_resp.raise_for_status = MagicMock()

        with patch("visibility.collectors.llm_perplexity.httpx.AsyncClient") as MockClient:
            MockClient.return_value = _mock_httpx_client(mock_resp)
            result = await collector.query_llm("test")

        assert result.text == ""
        assert result.tokens == 30


class TestProvider:
    def test_provider_name(self, collector):
        assert collector.provider == "perplexity"

    def test_default_model(self):
        c = PerplexityCollector(api_key="test", rpm=0)
        assert c.model == "sonar"

    def test_api_url(self):
        from visibility.collectors.llm_perplexity import API_URL

        assert "api.perplexity.ai" in API_URL
