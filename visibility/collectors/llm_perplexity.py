"""Perplexity LLM collector (OpenAI-compatible chat completions API)."""

import logging

import httpx

from visibility.collectors.llm_base import BaseLlmCollector, LlmResponse

logger = logging.getLogger(__name__)

# Pricing per 1M tokens
MODEL_PRICING = {
    "sonar": {"input": 1.00, "output": 1.00},
    "sonar-pro": {"input": 3.00, "output": 15.00},
    "sonar-reasoning": {"input": 1.00, "output": 5.00},
    "sonar-reasoning-pro": {"input": 2.00, "output": 8.00},
}

DEFAULT_MODEL = "sonar"
API_URL = "https://api.perplexity.ai/chat/completions"


class PerplexityCollector(BaseLlmCollector):
    """Answer prompts through the Perplexity API."""

    provider = "perplexity"

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        timeout: float = 25.0,
        rpm: int | None = None,
        max_tokens: int = 400,
    ):
        super().__init__(api_key=api_key, model=model, timeout=timeout, rpm=rpm)
        self.max_tokens = max_tokens

    async def query_llm(self, prompt: str) -> LlmResponse:
        """Send a prompt to Perplexity Chat Completions API."""
        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": "You are a helpful market analyst."},
                {"role": "user", "content": prompt},
            ],
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
            self._log_error_body("Perplexity", self.model, resp)
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
