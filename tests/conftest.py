import pytest

from visibility.collectors.llm_base import BaseLlmCollector, LlmResponse
from visibility.core.config import Settings


class FakeLlm(BaseLlmCollector):
    """In-memory LLM backend.

    ``responder`` is a string, an exception, or a callable taking the prompt
    and returning either of those.
    """

    def __init__(self, responder="", provider: str = "fake"):
        self.provider = provider
        super().__init__(api_key="test-key", model="fake-model", rpm=0)
        self.responder = responder
        self.prompts: list[str] = []

    async def query_llm(self, prompt: str) -> LlmResponse:
        self.prompts.append(prompt)
        result = self.responder(prompt) if callable(self.responder) else self.responder
        if isinstance(result, BaseException):
            raise result
        return LlmResponse(text=result or "", model=self.model)


class FakeSearch:
    """In-memory search collector; ``responder(query)`` returns results or raises."""

    def __init__(self, responder=None):
        self.responder = responder or (lambda q: [])
        self.queries: list[str] = []

    async def search(self, query: str):
        self.queries.append(query)
        result = self.responder(query)
        if isinstance(result, BaseException):
            raise result
        return result


@pytest.fixture
def test_settings():
    """Fake keys for Gemini, OpenAI and Google CSE; every delay zeroed."""
    return Settings(
        _env_file=None,
        openai_api_key="sk-test-openai",
        gemini_api_key="AIzaSy-test-gemini",
        anthropic_api_key="",
        perplexity_api_key="",
        google_api_key="AIzaSy-test-search",
        google_cse_id="test-cse-id",
        search_base_delay=0.0,
        search_query_delay=0.0,
        method_delay=0.0,
        validation_delay=0.0,
        citation_timeout_fast=2.0,
        citation_timeout_full=2.0,
        sentry_dsn="",
    )


@pytest.fixture
def empty_settings():
    """No usable secrets at all."""
    return Settings(
        _env_file=None,
        openai_api_key="",
        gemini_api_key="",
        anthropic_api_key="",
        perplexity_api_key="",
        google_api_key="",
        google_cse_id="",
        sentry_dsn="",
    )


@pytest.fixture
def make_llm():
    return FakeLlm


@pytest.fixture
def make_search():
    return FakeSearch
