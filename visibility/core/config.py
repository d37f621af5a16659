from pydantic_settings import BaseSettings, SettingsConfigDict

# Order in which usable backends are reported and queried.
LLM_BACKENDS: tuple[str, ...] = ("chatgpt", "gemini", "claude", "perplexity")

_PLACEHOLDER_VALUES = {"changeme", "none", "null", "todo"}


def is_usable_key(value: str | None) -> bool:
    """Return True when *value* looks like a real secret, not a blank or a .env placeholder."""
    if not value or not value.strip():
        return False
    lowered = value.strip().lower()
    if lowered in _PLACEHOLDER_VALUES:
        return False
    return "your_" not in lowered and not lowered.endswith("_here")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # LLM backends
    openai_api_key: str = ""
    gemini_api_key: str = ""
    anthropic_api_key: str = ""
    perplexity_api_key: str = ""

    openai_model: str = "gpt-4.1-mini"
    gemini_model: str = "gemini-2.5-flash"
    claude_model: str = "claude-3-5-haiku-latest"
    perplexity_model: str = "sonar"

    # Google Custom Search (Programmable Search Engine)
    google_api_key: str = ""
    google_cse_id: str = ""

    # Search retry policy
    search_timeout: float = 10.0
    search_max_retries: int = 3
    search_base_delay: float = 2.0  # seconds; doubled on each 429

    # Pacing for the sequential discovery profile
    search_query_delay: float = 1.0  # between queries within one method
    method_delay: float = 2.0  # between detection methods
    validation_delay: float = 0.5  # between relevance-scoring calls

    # LLM call timeouts
    llm_timeout: float = 30.0
    citation_timeout_fast: float = 8.0
    citation_timeout_full: float = 12.0

    # App
    app_env: str = "development"

    # Logging
    log_level: str = "INFO"
    log_json: bool = False  # set True in production for structured JSON logs

    # Sentry
    sentry_dsn: str = ""  # leave empty to disable

    def api_key_for(self, backend: str) -> str:
        """Return the configured secret for an LLM backend name."""
        keys = {
            "chatgpt": self.openai_api_key,
            "gemini": self.gemini_api_key,
            "claude": self.anthropic_api_key,
            "perplexity": self.perplexity_api_key,
        }
        if backend not in keys:
            raise ValueError(f"Unknown LLM backend: {backend!r}")
        return keys[backend]

    def model_for(self, backend: str) -> str:
        models = {
            "chatgpt": self.openai_model,
            "gemini": self.gemini_model,
            "claude": self.claude_model,
            "perplexity": self.perplexity_model,
        }
        if backend not in models:
            raise ValueError(f"Unknown LLM backend: {backend!r}")
        return models[backend]

    def configured_backends(self) -> list[str]:
        """LLM backends whose secret is present and not a placeholder."""
        return [b for b in LLM_BACKENDS if is_usable_key(self.api_key_for(b))]

    @property
    def search_configured(self) -> bool:
        return is_usable_key(self.google_api_key) and is_usable_key(self.google_cse_id)


settings = Settings()
