"""Build LLM collectors from settings."""

import logging

from visibility.collectors.llm_base import BaseLlmCollector
from visibility.collectors.llm_claude import ClaudeCollector
from visibility.collectors.llm_gemini import GeminiCollector
from visibility.collectors.llm_openai import OpenAiCollector
from visibility.collectors.llm_perplexity import PerplexityCollector
from visibility.core.config import Settings, is_usable_key
from visibility.core.config import settings as default_settings
from visibility.core.errors import ConfigurationError

logger = logging.getLogger(__name__)

COLLECTOR_CLASSES: dict[str, type[BaseLlmCollector]] = {
    "chatgpt": OpenAiCollector,
    "gemini": GeminiCollector,
    "claude": ClaudeCollector,
    "perplexity": PerplexityCollector,
}

_KEY_SETTING = {
    "chatgpt": "openai_api_key",
    "gemini": "gemini_api_key",
    "claude": "anthropic_api_key",
    "perplexity": "perplexity_api_key",
}


def build_llm_collector(name: str, config: Settings | None = None) -> BaseLlmCollector:
    """Instantiate one backend. Raises ConfigurationError when its key is unusable."""
    config = config or default_settings
    if name not in COLLECTOR_CLASSES:
        raise ValueError(f"Unknown LLM backend: {name!r}")

    api_key = config.api_key_for(name)
    if not is_usable_key(api_key):
        raise ConfigurationError(f"{name} API key not configured", setting=_KEY_SETTING[name])

    cls = COLLECTOR_CLASSES[name]
    return cls(api_key=api_key, model=config.model_for(name), timeout=config.llm_timeout)


def build_llm_collectors(
    config: Settings | None = None,
    backends: list[str] | None = None,
) -> dict[str, BaseLlmCollector]:
    """Instantiate every usable backend, skipping the ones without a key.

    ``backends`` narrows the candidates; order follows ``configured_backends()``.
    """
    config = config or default_settings
    usable = config.configured_backends()
    if backends is not None:
        unknown = [b for b in backends if b not in COLLECTOR_CLASSES]
        if unknown:
            raise ValueError(f"Unknown LLM backend(s): {', '.join(unknown)}")
        usable = [b for b in usable if b in backends]

    collectors = {name: build_llm_collector(name, config) for name in usable}
    logger.info("LLM backends available: %s", ", ".join(collectors) or "none")
    return collectors
