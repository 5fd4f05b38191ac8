"""Data models for bots and recordings."""

from .bot import BotStatus, Recording, bot_id_of, recordings_from

__all__ = ["BotStatus", "Recording", "bot_id_of", "recordings_from"]
