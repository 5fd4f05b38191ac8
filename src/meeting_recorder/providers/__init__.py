"""
Meeting-bot providers.

Usage:
    from meeting_recorder.providers import get_provider

    provider = get_provider()
    bot = provider.create_bot("https://zoom.us/j/123")
"""

from .base import BotProvider
from .recall_provider import RecallBotProvider

__all__ = ["BotProvider", "RecallBotProvider", "get_provider"]


def get_provider(**kwargs) -> BotProvider:
    """Create the configured bot provider (currently always Recall.ai)."""
    return RecallBotProvider(**kwargs)
