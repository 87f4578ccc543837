class FetchError(Exception):
    """Raised when the insight provider call fails (transport, status or provider error)."""


class ConfigError(ValueError):
    """Raised when required configuration (e.g. the Gemini API key) is missing."""
