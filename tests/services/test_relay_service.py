"""
Tests for BotRelayService.

Test coverage:
- create_bot: validation, provider payload passthrough, normalization
- get_bot: joining wait loop, 404 propagation, retry exhaustion
- get_recordings: empty-list wait loop, wrapped response
- relay(): never raises, maps failures to (body, status)
"""

from unittest.mock import MagicMock

import pytest

from meeting_recorder.errors import (
    BotNotFoundError,
    InvalidMeetingUrlError,
    ProviderError,
    RetriesExhaustedError,
)
from meeting_recorder.providers import BotProvider
from meeting_recorder.services import BotRelayService, error_response


@pytest.fixture
def mock_provider() -> MagicMock:
    """Mock BotProvider instance."""
    return MagicMock(spec=BotProvider)


@pytest.fixture
def service(mock_provider, relay_config, fake_sleep) -> BotRelayService:
    """BotRelayService with mocked provider and instant sleeps."""
    return BotRelayService(provider=mock_provider, config=relay_config, sleep=fake_sleep)


class TestCreateBot:
    """Tests for create_bot."""

    def test_create_bot_returns_provider_payload(self, service, mock_provider) -> None:
        # Arrange
        payload = {"id": "abc123", "status_changes": [], "meeting_url": {"platform": "zoom"}}
        mock_provider.create_bot.return_value = payload

        # Act
        result = service.create_bot("https://zoom.us/j/123")

        # Assert
        assert result == payload
        mock_provider.create_bot.assert_called_once_with(
            "https://zoom.us/j/123", bot_name="Recording Bot"
        )

    def test_create_bot_normalized(self, service, mock_provider) -> None:
        service.config.normalize_responses = True
        mock_provider.create_bot.return_value = {"id": "abc123", "status": "ready"}

        result = service.create_bot("https://zoom.us/j/123")

        assert result["bot_id"] == "abc123"
        assert result["phase"] == "requested"

    def test_create_bot_invalid_url(self, service, mock_provider) -> None:
        with pytest.raises(InvalidMeetingUrlError):
            service.create_bot("https://evil.com/fake")

        mock_provider.create_bot.assert_not_called()

    def test_create_bot_is_not_retried(self, service, mock_provider) -> None:
        mock_provider.create_bot.side_effect = ProviderError("Server error", status_code=500)

        with pytest.raises(ProviderError):
            service.create_bot("https://zoom.us/j/123")

        assert mock_provider.create_bot.call_count == 1


class TestGetBot:
    """Tests for get_bot."""

    def test_waits_while_joining(self, service, mock_provider, fake_sleep) -> None:
        mock_provider.get_bot.side_effect = [
            {"id": "abc123", "status": "joining"},
            {"id": "abc123", "status": "joining"},
            {"id": "abc123", "status": "joined"},
        ]

        result = service.get_bot("abc123")

        assert result["status"] == "joined"
        assert fake_sleep.delays == [2.0, 2.0]

    def test_not_found_propagates(self, service, mock_provider, fake_sleep) -> None:
        mock_provider.get_bot.side_effect = BotNotFoundError("abc123")

        with pytest.raises(BotNotFoundError):
            service.get_bot("abc123")

        assert mock_provider.get_bot.call_count == 1
        assert fake_sleep.count == 0

    def test_transient_failures_exhaust_budget(self, service, mock_provider) -> None:
        mock_provider.get_bot.side_effect = ProviderError("Bad gateway", status_code=502)

        with pytest.raises(RetriesExhaustedError):
            service.get_bot("abc123")

        assert mock_provider.get_bot.call_count == 3


class TestGetRecordings:
    """Tests for get_recordings."""

    def test_waits_for_first_recording(self, service, mock_provider, fake_sleep) -> None:
        mock_provider.get_bot.side_effect = [
            {"id": "abc123", "recordings": []},
            {"id": "abc123"},
            {"id": "abc123", "recordings": [{"id": "r1", "status": "done"}]},
        ]

        result = service.get_recordings("abc123")

        assert result == {"recordings": [{"id": "r1", "status": "done"}]}
        assert fake_sleep.count == 2

    def test_no_recordings_is_empty_list(self, service, mock_provider) -> None:
        mock_provider.get_bot.return_value = {"id": "abc123", "recordings": []}

        assert service.get_recordings("abc123") == {"recordings": []}

    def test_normalized_recordings(self, service, mock_provider) -> None:
        service.config.normalize_responses = True
        mock_provider.get_bot.return_value = {
            "id": "abc123",
            "recordings": [{"id": "r1", "status": {"code": "done"}}],
        }

        result = service.get_recordings("abc123")

        assert result["recordings"][0]["status"] == "done"
        assert result["recordings"][0]["download_url"] is None


class TestRelay:
    """Tests for the relay() boundary."""

    def test_success(self, service, mock_provider) -> None:
        mock_provider.get_bot.return_value = {"id": "abc123", "status": "joined"}

        body, status = service.relay("get_bot", "abc123")

        assert status == 200
        assert body["status"] == "joined"

    def test_not_found_maps_to_404(self, service, mock_provider) -> None:
        mock_provider.get_bot.side_effect = BotNotFoundError("abc123", "Not found.")

        body, status = service.relay("get_bot", "abc123")

        assert status == 404
        assert body == {"error": "Not found."}

    def test_exhausted_keeps_provider_status(self, service, mock_provider) -> None:
        mock_provider.get_bot.side_effect = ProviderError("Bad gateway", status_code=502)

        body, status = service.relay("get_recordings", "abc123")

        assert status == 502
        assert body == {"error": "Bad gateway"}

    def test_invalid_url_maps_to_400(self, service) -> None:
        body, status = service.relay("create_bot", "ftp://zoom.us/j/1")

        assert status == 400
        assert "http or https" in body["error"]

    def test_unexpected_error_maps_to_500(self, service, mock_provider) -> None:
        mock_provider.create_bot.side_effect = RuntimeError("boom")

        body, status = service.relay("create_bot", "https://zoom.us/j/123")

        assert status == 500
        assert body == {"error": "boom"}


class TestErrorResponse:
    """Tests for error_response."""

    def test_without_status_code(self) -> None:
        assert error_response(ProviderError("connection refused")) == (
            {"error": "connection refused"},
            500,
        )

    def test_empty_message(self) -> None:
        assert error_response(Exception()) == ({"error": "Unknown error occurred"}, 500)
