"""Error taxonomy shared by the discovery and citation pipelines.

Only ConfigurationError (and, for fail-closed search, RateLimitedError /
ModelCallError) ever reach a pipeline caller. Everything else is converted
into an empty or zero contribution at the unit of work where it happened.
"""


class VisibilityError(Exception):
    """Base class for all pipeline errors."""


class ConfigurationError(VisibilityError):
    """A required secret is missing. Raised once at entry and never retried."""

    def __init__(self, message: str, setting: str = ""):
        super().__init__(message)
        self.setting = setting


class ModelCallError(VisibilityError):
    """A search or LLM backend call failed."""

    def __init__(self, message: str, provider: str = "", status_code: int = 0):
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code


class RateLimitedError(ModelCallError):
    """HTTP 429 persisted after the retry ceiling was reached."""

    def __init__(self, message: str, provider: str = "", attempts: int = 0):
        super().__init__(message, provider=provider, status_code=429)
        self.attempts = attempts


class ExtractionParseError(VisibilityError):
    """An LLM answer could not be parsed as a JSON list of names."""

    def __init__(self, message: str, raw: str = ""):
        super().__init__(message)
        self.raw = raw
