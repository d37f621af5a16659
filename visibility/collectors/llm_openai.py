"""OpenAI (ChatGPT) LLM collector."""

import logging

import httpx

from visibility.collectors.llm_base import BaseLlmCollector, LlmResponse

logger = logging.getLogger(__name__)

# Pricing per 1M tokens
MODEL_PRICING = {
    "gpt-4.1": {"input": 2.00, "output": 8.00},
    "gpt-4.1-mini": {"input": 0.40, "output": 1.60},
    "gpt-4.1-nano": {"input": 0.10, "output": 0.40},
    "gpt-4o": {"input": 2.50, "output": 10.00},
    "gpt-4o-mini": {"input": 0.15, "output": 0.60},
    "gpt-5-mini": {"input": 0.25, "output": 2.00},
}

DEFAULT_MODEL = "gpt-4.1-mini"
API_URL = "https://api.openai.com/v1/chat/completions"

# GPT-5 series are reasoning models that do NOT support temperature
# and require max_completion_tokens instead of max_tokens.
_REASONING_MODEL_PREFIXES = ("gpt-5", "o1", "o3", "o4")


def _is_reasoning_model(model: str) -> bool:
    """Check if a model is a reasoning model (GPT-5 / o-series)."""
    return any(model.startswith(p) for p in _REASONING_MODEL_PREFIXES)


class OpenAiCollector(BaseLlmCollector):
    """Answer prompts through the OpenAI Chat Completions API."""

    provider = "chatgpt"

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        timeout: float = 20.0,
        rpm: int | None = None,
        max_tokens: int = 400,
    ):
        super().__init__(api_key=api_key, model=model, timeout=timeout, rpm=rpm)
        self.max_tokens = max_tokens

    async def query_llm(self, prompt: str) -> LlmResponse:
        """Send a prompt to OpenAI Chat Completions API."""
        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": "You are a helpful market analyst."},
                {"role": "user", "content": prompt},
            ],
        }

        if _is_reasoning_model(self.model):
            payload["max_completion_tokens"] = self.max_tokens
        else:
            payload["temperature"] = 0.0
            payload["max_tokens"] = self.max_tokens

        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            resp = await client.post(API_URL, json=payload, headers=headers)
            self._log_error_body("OpenAI", self.model, resp)
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
