"""
Exception hierarchy for the meeting recorder relay.

All exceptions inherit from RelayError so the HTTP boundary can convert
any of them into a structured error response.
"""

from typing import Any


class RelayError(Exception):
    """Base exception for all relay errors."""


class ConfigurationError(RelayError):
    """Raised at startup when required configuration is missing."""

    def __init__(self, errors: list[str]) -> None:
        self.errors = errors
        super().__init__("Invalid configuration: " + "; ".join(errors))


class InvalidMeetingUrlError(RelayError, ValueError):
    """Raised when a meeting URL is missing or not from a supported platform."""

    status_code = 400


class ProviderError(RelayError):
    """
    Raised when a call to the bot provider fails.

    Attributes:
        status_code: HTTP status returned by the provider (None for
            timeouts and connection failures)
        payload: Decoded provider error body, if any
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        payload: Any = None,
    ) -> None:
        self.message = message
        self.status_code = status_code
        self.payload = payload
        super().__init__(message)

    def __str__(self) -> str:
        if self.status_code:
            return f"[{self.status_code}] {self.message}"
        return self.message


class BotNotFoundError(ProviderError):
    """The bot id is unknown to the provider or has expired. Never retried."""

    def __init__(self, bot_id: str, message: str | None = None, payload: Any = None) -> None:
        self.bot_id = bot_id
        super().__init__(message or f"Bot {bot_id} not found", status_code=404, payload=payload)


class RetriesExhaustedError(ProviderError):
    """Raised when every attempt of a retried call failed with a transient error."""

    def __init__(self, operation: str, attempts: int, last_error: Exception) -> None:
        self.operation = operation
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(
            getattr(last_error, "message", None) or str(last_error) or type(last_error).__name__,
            status_code=getattr(last_error, "status_code", None),
            payload=getattr(last_error, "payload", None),
        )


class RelayRequestError(RelayError):
    """Raised by the polling client when a call to the relay fails."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)

    @property
    def not_found(self) -> bool:
        return self.status_code == 404
