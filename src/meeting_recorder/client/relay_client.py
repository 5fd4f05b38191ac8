"""
HTTP client for the relay's own API.

Environment variables:
    RELAY_URL: Base URL of the relay API (default: http://localhost:3000/api)
    RELAY_TIMEOUT: Request timeout in milliseconds. Defaults to the relay's
        readiness wait (MAX_RETRIES * RETRY_DELAY + API_TIMEOUT) plus a
        margin, so a request the relay holds on purpose is not cut short.
"""

import logging
import os
from typing import Any

import requests

from meeting_recorder.config import RelayConfig
from meeting_recorder.errors import RelayRequestError

logger = logging.getLogger(__name__)

DEFAULT_RELAY_URL = "http://localhost:3000/api"
TIMEOUT_MARGIN_MS = 10000


def default_timeout_ms(config: RelayConfig | None = None) -> int:
    """Client timeout that outlasts the relay's longest readiness wait."""
    config = config or RelayConfig()
    return config.readiness_wait_ms + TIMEOUT_MARGIN_MS


class RelayClient:
    """Calls the relay endpoints and turns failures into RelayRequestError."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout_ms: int | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = (base_url or os.getenv("RELAY_URL") or DEFAULT_RELAY_URL).rstrip("/")
        self.timeout_ms = (
            timeout_ms or int(os.getenv("RELAY_TIMEOUT") or 0) or default_timeout_ms()
        )
        self._session = session or requests.Session()

    def _request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        try:
            response = self._session.request(
                method,
                f"{self.base_url}{path}",
                timeout=self.timeout_ms / 1000,
                **kwargs,
            )
        except requests.RequestException as e:
            raise RelayRequestError(str(e)) from e

        try:
            body = response.json()
        except ValueError:
            body = {}

        if not response.ok:
            message = body.get("error") if isinstance(body, dict) else None
            raise RelayRequestError(
                message or response.text or f"HTTP {response.status_code}",
                status_code=response.status_code,
            )
        if not isinstance(body, dict):
            logger.warning("Unexpected %s body from %s", type(body).__name__, path)
            raise RelayRequestError(
                "Relay returned an unexpected response", status_code=response.status_code
            )
        return body

    def create_bot(self, meeting_url: str) -> dict[str, Any]:
        """POST /create-bot and return the creation payload."""
        return self._request("POST", "/create-bot", json={"meeting_url": meeting_url})

    def get_bot(self, bot_id: str) -> dict[str, Any]:
        """GET /bot/<id> and return the bot payload."""
        return self._request("GET", f"/bot/{bot_id}")

    def get_recordings(self, bot_id: str) -> list[dict[str, Any]]:
        """GET /bot/<id>/recordings and return the recordings list."""
        return self._request("GET", f"/bot/{bot_id}/recordings").get("recordings") or []
