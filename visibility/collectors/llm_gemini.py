"""Google Gemini LLM collector (OpenAI-compatible API).

Gemini is the hard-required backend for competitor name extraction and
relevance scoring, and one of the optional backends for citation scoring.
"""

import logging

import httpx

from visibility.collectors.llm_base import BaseLlmCollector, LlmResponse

logger = logging.getLogger(__name__)

# Pricing per 1M tokens
MODEL_PRICING = {
    "gemini-2.5-pro": {"input": 1.25, "output": 10.00},
    "gemini-2.5-flash": {"input": 0.30, "output": 2.50},
    "gemini-2.5-flash-lite": {"input": 0.10, "output": 0.40},
    "gemini-2.0-flash": {"input": 0.10, "output": 0.40},
}

DEFAULT_MODEL = "gemini-2.5-flash"
API_URL = "https://generativelanguage.googleapis.com/v1beta/openai/chat/completions"


class GeminiCollector(BaseLlmCollector):
    """Answer prompts through Google Gemini API (OpenAI-compatible)."""

    provider = "gemini"

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        timeout: float = 30.0,
        rpm: int | None = None,
        max_tokens: int = 2048,
    ):
        super().__init__(api_key=api_key, model=model, timeout=timeout, rpm=rpm)
        self.max_tokens = max_tokens

    async def query_llm(self, prompt: str) -> LlmResponse:
        """Send a prompt to Gemini via the OpenAI-compatible endpoint."""
        payload = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": 0.0,
            "max_tokens": self.max_tokens,
        }

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            resp = await client.post(
                API_URL,
                json=payload,
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
            )
            self._log_error_body("Gemini", self.model, resp)
            resp.raise_for_status()
            data = resp.json()

        choice = data["choices"][0]
        text = choice["message"]["content"] or ""

        usage = data.get("usage", {})
        input_tokens = usage.get("prompt_tokens", 0)
        output_tokens = usage.get("completion_tokens", 0)

        return LlmResponse(
            text=text,
            model=data.get("model", self.model),
            tokens=input_tokens + output_tokens,
            cost_usd=self._calculate_cost(input_tokens, output_tokens),
        )

    def _calculate_cost(self, input_tokens: int, output_tokens: int) -> float:
        """Calculate cost in USD based on model pricing."""
        pricing = MODEL_PRICING.get(self.model, MODEL_PRICING[DEFAULT_MODEL])
        cost = (input_tokens * pricing["input"] + output_tokens * pricing["output"]) / 1_000_000
        return round(cost, 6)
