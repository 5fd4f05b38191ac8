"""
Recall.ai bot provider.

Creates Recall.ai bots that join video meetings (Zoom, Google Meet, Teams)
to record them, and reads bots back with their status and recordings.
"""

import logging
from typing import Any

import requests

from meeting_recorder.config import RelayConfig, get_relay_config
from meeting_recorder.errors import BotNotFoundError, ProviderError

from .base import BotProvider

logger = logging.getLogger(__name__)


def error_message_from(response: requests.Response) -> str:
    """
    Human-readable message from a provider error response.

    Prefers the body's ``detail``, then ``message``, then ``error`` field,
    falling back to the raw response text.
    """
    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict):
        for key in ("detail", "message", "error"):
            if body.get(key):
                return str(body[key])

    return response.text or f"HTTP {response.status_code}"


class RecallBotProvider(BotProvider):
    """Bot provider backed by the Recall.ai REST API."""

    def __init__(
        self,
        config: RelayConfig | None = None,
        session: requests.Session | None = None,
    ) -> None:
        """
        Initialize the Recall provider.

        Args:
            config: Relay configuration (defaults to the env-configured singleton)
            session: HTTP session to reuse (created if omitted)
        """
        self.config = config or get_relay_config()
        self._session = session or requests.Session()
        self._session.headers.update({
            "Authorization": f"Token {self.config.api_key}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        })

    @property
    def name(self) -> str:
        """Human-readable provider name."""
        return "Recall.ai"

    def _url(self, path: str) -> str:
        return f"{self.config.base_url.rstrip('/')}/{path.lstrip('/')}"

    def _request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        url = self._url(path)
        logger.debug("API request %s %s", method, url)

        try:
            response = self._session.request(
                method, url, timeout=self.config.timeout_seconds, **kwargs
            )
        except requests.Timeout as e:
            raise ProviderError(
                f"Request to {self.name} timed out after {self.config.timeout_ms}ms"
            ) from e
        except requests.RequestException as e:
            raise ProviderError(f"Request to {self.name} failed: {e}") from e

        if not response.ok:
            message = error_message_from(response)
            logger.warning(
                "API error %s %s -> %s: %s", method, url, response.status_code, message
            )
            payload = None
            try:
                payload = response.json()
            except ValueError:
                pass
            raise ProviderError(message, status_code=response.status_code, payload=payload)

        logger.debug("API response %s %s -> %s", method, url, response.status_code)
        return response.json()

    def create_bot(self, meeting_url: str, **kwargs: Any) -> dict[str, Any]:
        """
        Create a bot to join a meeting and record it.

        Args:
            meeting_url: The meeting URL to join
            **kwargs:
                bot_name: Display name for the bot (defaults to BOT_NAME)

        Returns:
            dict: Bot creation payload from Recall
        """
        payload = {
            "meeting_url": meeting_url,
            "bot_name": kwargs.get("bot_name") or self.config.bot_name,
            "recording": True,
        }

        bot_data = self._request("POST", "/bot/", json=payload)
        logger.info("Bot created for %s: %s", meeting_url, bot_data.get("id"))
        return bot_data

    def get_bot(self, bot_id: str) -> dict[str, Any]:
        """
        Get a bot with its current status and recordings.

        Args:
            bot_id: The bot's UUID

        Returns:
            dict: Bot payload from Recall
        """
        try:
            return self._request("GET", f"/bot/{bot_id}/")
        except ProviderError as e:
            if e.status_code == 404:
                raise BotNotFoundError(bot_id, payload=e.payload) from e
            raise
