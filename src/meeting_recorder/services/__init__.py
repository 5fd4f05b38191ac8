"""Service layer for the relay."""

from .relay_service import BotRelayService, error_response

__all__ = ["BotRelayService", "error_response"]
