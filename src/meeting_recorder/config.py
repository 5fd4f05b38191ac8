"""
Relay configuration.

Environment variables:
    RECALL_API_KEY: Recall.ai API token (required)
    RECALL_API_BASE_URL: Recall.ai API base URL
    API_TIMEOUT: Per-request timeout to the provider, in milliseconds (default: 60000)
    MAX_RETRIES: Maximum attempts per relayed call (default: 10)
    RETRY_DELAY: Delay between attempts, in milliseconds (default: 5000)
        MAX_RETRIES * RETRY_DELAY + API_TIMEOUT bounds how long a status or
        recordings request may be held while the bot is not ready yet
    PORT: Listening port (default: 3000)
    BOT_NAME: Display name of the bot in the meeting (default: "Recording Bot")
    RELAY_NORMALIZE_RESPONSES: "true" to return a normalized subset of the
        provider's bot payload instead of the raw payload (default: "false")
    RATE_LIMIT_STORAGE_URI: Flask-Limiter storage backend (default: "memory://")
"""

import os

from .errors import ConfigurationError

DEFAULT_BASE_URL = "https://us-west-2.recall.ai/api/v1"


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "")
    try:
        return int(raw) if raw else default
    except ValueError:
        return default


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name, "")
    if not raw:
        return default
    return raw.lower() in ("1", "true", "yes")


class RelayConfig:
    """
    Configuration for the relay and its provider client.

    Reads from environment variables; every option except the API key has a
    hard-coded default.
    """

    def __init__(self) -> None:
        # Provider
        self.api_key = os.getenv("RECALL_API_KEY", "")
        self.base_url = os.getenv("RECALL_API_BASE_URL", "") or DEFAULT_BASE_URL
        self.timeout_ms = _env_int("API_TIMEOUT", 60000)

        # Retry policy
        self.max_retries = _env_int("MAX_RETRIES", 10)
        self.retry_delay_ms = _env_int("RETRY_DELAY", 5000)

        # Bot defaults
        self.bot_name = os.getenv("BOT_NAME", "") or "Recording Bot"
        self.normalize_responses = _env_bool("RELAY_NORMALIZE_RESPONSES")

        # Server
        self.port = _env_int("PORT", 3000)
        self.debug = _env_bool("DEBUG")
        self.rate_limit_storage_uri = os.getenv("RATE_LIMIT_STORAGE_URI", "memory://")

    @property
    def timeout_seconds(self) -> float:
        """Per-request provider timeout in seconds (for requests)."""
        return self.timeout_ms / 1000

    @property
    def readiness_wait_ms(self) -> int:
        """
        Longest a status or recordings request waits for the bot to be ready.

        Covers every delayed re-poll plus one provider call running to its
        timeout. Clients of the relay must wait longer than this.
        """
        return self.max_retries * self.retry_delay_ms + self.timeout_ms

    @property
    def is_configured(self) -> bool:
        """Check if provider credentials are configured."""
        return bool(self.api_key)

    def validate(self) -> list[str]:
        """
        Validate configuration and return list of errors.

        Returns:
            List of error strings (empty if valid)
        """
        errors = []

        if not self.api_key:
            errors.append("RECALL_API_KEY is required")
        if not self.base_url.startswith(("http://", "https://")):
            errors.append("RECALL_API_BASE_URL must be an http(s) URL")
        if self.max_retries < 1:
            errors.append("MAX_RETRIES must be at least 1")
        if self.retry_delay_ms < 0:
            errors.append("RETRY_DELAY must not be negative")
        if self.timeout_ms <= 0:
            errors.append("API_TIMEOUT must be positive")

        return errors

    def require_valid(self) -> "RelayConfig":
        """Raise ConfigurationError unless the configuration is usable."""
        errors = self.validate()
        if errors:
            raise ConfigurationError(errors)
        return self

    def to_dict(self) -> dict:
        """Return safe (no secrets) configuration summary."""
        return {
            "base_url": self.base_url,
            "configured": self.is_configured,
            "timeout_ms": self.timeout_ms,
            "max_retries": self.max_retries,
            "retry_delay_ms": self.retry_delay_ms,
            "readiness_wait_ms": self.readiness_wait_ms,
            "bot_name": self.bot_name,
            "normalize_responses": self.normalize_responses,
            "port": self.port,
        }


# Singleton instance
_config: RelayConfig | None = None


def get_relay_config() -> RelayConfig:
    """Get the relay config singleton."""
    global _config
    if _config is None:
        _config = RelayConfig()
    return _config


def reset_relay_config() -> None:
    """Drop the cached config so the next call re-reads the environment."""
    global _config
    _config = None
