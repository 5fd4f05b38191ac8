"""
Bot provider base class.

Defines the contract the relay consumes from a meeting-bot service.
"""

from abc import ABC, abstractmethod
from typing import Any


class BotProvider(ABC):
    """
    Abstract base class for meeting-bot providers.

    Providers create bots that join a meeting and record it, and expose
    the bot (status plus recordings) by id. Calls are blocking; failures
    are raised as ProviderError (BotNotFoundError for an unknown id).
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable provider name (e.g., 'Recall.ai')."""
        ...

    @abstractmethod
    def create_bot(self, meeting_url: str, **kwargs: Any) -> dict[str, Any]:
        """
        Ask the provider to send a bot into a meeting.

        Args:
            meeting_url: The meeting URL to join
            **kwargs: Provider-specific options (bot_name, etc.)

        Returns:
            dict: The provider's bot creation payload, including its id

        Raises:
            ProviderError: If creation fails
        """
        ...

    @abstractmethod
    def get_bot(self, bot_id: str) -> dict[str, Any]:
        """
        Fetch a bot with its current status and recordings.

        Args:
            bot_id: The provider-issued bot id

        Returns:
            dict: The provider's bot payload

        Raises:
            BotNotFoundError: If the id is unknown or expired
            ProviderError: On any other failure
        """
        ...
