"""
Bot relay service.

Business logic behind the relay endpoints:
- Creating a bot that joins a meeting
- Reading bot status, waiting out the "joining" phase
- Reading recordings, waiting for the first ones to appear
- Converting failures into (body, status code) error responses
"""

import asyncio
import logging
from collections.abc import Coroutine
from typing import Any

from meeting_recorder.config import RelayConfig, get_relay_config
from meeting_recorder.errors import ProviderError, RelayError
from meeting_recorder.models import BotStatus, Recording
from meeting_recorder.polling import wait_for_bot, wait_for_recordings
from meeting_recorder.providers import BotProvider, get_provider
from meeting_recorder.retry import SleepFn
from meeting_recorder.utils.url_validator import UrlValidator

logger = logging.getLogger(__name__)


def error_response(error: Exception) -> tuple[dict[str, str], int]:
    """
    Map a failure to a JSON error body and HTTP status code.

    The provider's status code is kept when there is one; anything else
    becomes a 500.
    """
    status_code = getattr(error, "status_code", None) or 500
    if isinstance(error, ProviderError):
        message = error.message
    else:
        message = str(error) or "Unknown error occurred"
    return {"error": message}, status_code


class BotRelayService:
    """Relays bot operations to the provider with retries and readiness waits."""

    def __init__(
        self,
        provider: BotProvider | None = None,
        config: RelayConfig | None = None,
        sleep: SleepFn = asyncio.sleep,
    ) -> None:
        """
        Initialize the relay service.

        Args:
            provider: Bot provider (defaults to the env-configured provider)
            config: Relay configuration (defaults to the env-configured singleton)
            sleep: Suspension used between retries, in seconds
        """
        self.config = config or get_relay_config()
        self._provider = provider
        self._sleep = sleep

    @property
    def provider(self) -> BotProvider:
        """Get the bot provider (lazy initialization)."""
        if self._provider is None:
            self._provider = get_provider(config=self.config)
        return self._provider

    @staticmethod
    def _run_async(coro: Coroutine) -> Any:
        """Run an async coroutine synchronously (Python 3.12+ safe)."""
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None

        if loop and loop.is_running():
            # Already in an async context, run on a fresh loop in a worker
            import concurrent.futures
            with concurrent.futures.ThreadPoolExecutor() as pool:
                return pool.submit(asyncio.run, coro).result()
        return asyncio.run(coro)

    async def _fetch_bot(self, bot_id: str) -> dict[str, Any]:
        return await asyncio.to_thread(self.provider.get_bot, bot_id)

    def _shape(self, payload: dict[str, Any]) -> dict[str, Any]:
        if self.config.normalize_responses:
            return BotStatus.from_payload(payload).to_dict()
        return payload

    async def create_bot_async(self, meeting_url: str) -> dict[str, Any]:
        """
        Send a bot into a meeting.

        Args:
            meeting_url: The meeting URL to join

        Returns:
            The provider's creation payload (or its normalized subset)

        Raises:
            InvalidMeetingUrlError: If the URL is missing or not supported
            ProviderError: If the provider rejects the request
        """
        meeting_url = UrlValidator.require_meeting_url(meeting_url)
        logger.info("Creating bot for meeting %s", meeting_url)

        bot_data = await asyncio.to_thread(
            self.provider.create_bot, meeting_url, bot_name=self.config.bot_name
        )
        return self._shape(bot_data)

    async def get_bot_async(self, bot_id: str) -> dict[str, Any]:
        """
        Get bot status, waiting while the bot is still joining.

        Raises:
            BotNotFoundError: If the provider does not know the bot
            RetriesExhaustedError: If every attempt failed transiently
        """
        logger.info("Fetching bot status for %s", bot_id)
        payload = await wait_for_bot(
            lambda: self._fetch_bot(bot_id),
            max_attempts=self.config.max_retries,
            delay_ms=self.config.retry_delay_ms,
            sleep=self._sleep,
        )
        return self._shape(payload)

    async def get_recordings_async(self, bot_id: str) -> dict[str, list[dict[str, Any]]]:
        """
        Get a bot's recordings, waiting for the first ones to appear.

        Returns:
            ``{"recordings": [...]}``, possibly empty
        """
        logger.info("Fetching recordings for %s", bot_id)
        recordings = await wait_for_recordings(
            lambda: self._fetch_bot(bot_id),
            max_attempts=self.config.max_retries,
            delay_ms=self.config.retry_delay_ms,
            sleep=self._sleep,
        )
        logger.info("Retrieved %d recording(s) for %s", len(recordings), bot_id)

        if self.config.normalize_responses:
            recordings = [Recording.from_dict(r).to_dict() for r in recordings]
        return {"recordings": recordings}

    def create_bot(self, meeting_url: str) -> dict[str, Any]:
        return self._run_async(self.create_bot_async(meeting_url))

    def get_bot(self, bot_id: str) -> dict[str, Any]:
        return self._run_async(self.get_bot_async(bot_id))

    def get_recordings(self, bot_id: str) -> dict[str, list[dict[str, Any]]]:
        return self._run_async(self.get_recordings_async(bot_id))

    def relay(self, operation: str, *args: str) -> tuple[dict[str, Any], int]:
        """
        Run a relay operation and never raise past this boundary.

        Args:
            operation: One of "create_bot", "get_bot", "get_recordings"
            *args: Arguments for the operation

        Returns:
            Tuple of (response body, HTTP status code)
        """
        handler = {
            "create_bot": self.create_bot,
            "get_bot": self.get_bot,
            "get_recordings": self.get_recordings,
        }[operation]

        try:
            return handler(*args), 200
        except RelayError as e:
            logger.error("%s%s failed: %s", operation, args, e)
            return error_response(e)
        except Exception as e:
            logger.exception("%s%s failed unexpectedly", operation, args)
            return error_response(e)
