"""Anthropic Claude LLM collector (Messages API)."""

import logging

import httpx

from visibility.collectors.llm_base import BaseLlmCollector, LlmResponse

logger = logging.getLogger(__name__)

# Pricing per 1M tokens
MODEL_PRICING = {
    "claude-3-5-haiku-latest": {"input": 0.80, "output": 4.00},
    "claude-3-5-sonnet-latest": {"input": 3.00, "output": 15.00},
    "claude-3-7-sonnet-latest": {"input": 3.00, "output": 15.00},
}

DEFAULT_MODEL = "claude-3-5-haiku-latest"
API_URL = "https://api.anthropic.com/v1/messages"
API_VERSION = "2023-06-01"


class ClaudeCollector(BaseLlmCollector):
    """Answer prompts through the Anthropic Messages API."""

    provider = "claude"

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        timeout: float = 30.0,
        rpm: int | None = None,
        max_tokens: int = 400,
    ):
        super().__init__(api_key=api_key, model=model, timeout=timeout, rpm=rpm)
        self.max_tokens = max_tokens

    async def query_llm(self, prompt: str) -> LlmResponse:
        """Send a prompt to the Messages API and join the text blocks."""
        payload = {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "messages": [{"role": "user", "content": prompt}],
        }

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            resp = await client.post(
                API_URL,
                json=payload,
                headers={
                    "x-api-key": self.api_key,
                    "anthropic-version": API_VERSION,
                    "Content-Type": "application/json",
                },
            )
            self._log_error_body("Anthropic", self.model, resp)
            resp.raise_for_status()
            data = resp.json()

        blocks = data["content"]
        text = "".join(b.get("text", "") for b in blocks if b.get("type") == "text")

        usage = data.get("usage", {})
        input_tokens = usage.get("input_tokens", 0)
        output_tokens = usage.get("output_tokens", 0)

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
