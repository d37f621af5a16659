"""Tests for Anthropic Claude collector."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from visibility.collectors.llm_claude import API_VERSION, ClaudeCollector


@pytest.fixture
def collector():
    return ClaudeCollector(api_key="sk-ant-test-fake-key", rpm=0)


def _mock_httpx_client(mock_resp):
    mock_client = AsyncMock()
    mock_client.post.return_value = mock_resp
    mock_client.__aenter__ = AsyncMock(return_value=mock_client)
    mock_client.__aexit__ = AsyncMock(return_value=False)
    return mock_client


class TestCalculateCost:
    def test_cost_haiku(self, collector):
        # claude-3-5-haiku: input=0.80/1M, output=4.00/1M
        cost = collector._calculate_cost(input_tokens=1000, output_tokens=500)
        expected = (1000 * 0.80 + 500 * 4.00) / 1_000_000
        assert cost == round(expected, 6)

    def test_cost_zero_tokens(self, collector):
        assert collector._calculate_cost(0, 0) == 0.0


class TestQueryLlm:
    @pytest.mark.asyncio
    async def test_query_llm_joins_text_blocks(self, collector):
        mock_resp = MagicMock()
        mock_resp.status_code = 200
        mock_resp.json.return_value = {
            "content": [
                {"type": "text", "text": "Semrush is popular. "},
                {"type": "tool_use", "id": "x", "name": "noop", "input": {}},
                {"type": "text", "text": "Moz is older."},
            ],
            "model": "claude-3-5-haiku-latest",
            "usage": {"input_tokens": 20, "output_tokens": 30},
        }
        mock_resp.raise_for_status = MagicMock()

        with patch("visibility.collectors.llm_claude.httpx.AsyncClient") as MockClient:
            MockClient.return_value = _mock_httpx_client(mock_resp)
            result = await collector.query_llm("Top SEO tools?")

        assert result.text == "Semrush is popular. Moz is older."
        assert result.tokens == 50
        assert result.cost_usd > 0

    @pytest.mark.asyncio
    async def test_query_llm_sends_anthropic_headers(self, collector):
        mock_resp = MagicMock()
        mock_resp.status_code = 200
        mock_resp.json.return_value = {"content": [{"type": "text", "text": "ok"}], "usage": {}}
        mock_resp.raise_for_status = MagicMock()

        with patch("visibility.collectors.llm_claude.httpx.AsyncClient") as MockClient:
            mock_client = _mock_httpx_client(mock_resp)
            MockClient.return_value = mock_client

            await collector.query_llm("test")

            call_args = mock_client.post.call_args
            assert call_args[0][0] == "https://api.anthropic.com/v1/messages"
            headers = call_args[1]["headers"]
            assert headers["x-api-key"] == "sk-ant-test-fake-key"
            assert headers["anthropic-version"] == API_VERSION
            assert "Authorization" not in headers
            assert call_args[1]["json"]["max_tokens"] == 400


class TestProvider:
    def test_provider_name(self, collector):
        assert collector.provider == "claude"

    def test_default_model(self, collector):
        assert collector.model == "claude-3-5-haiku-latest"
