"""
Bot and recording data models.

Defines the normalized shapes the relay can return in place of the
provider's raw payloads, and that the polling client renders.
"""

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any

from meeting_recorder.lifecycle import LifecyclePhase, extract_status, phase_for


def _parse_time(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


@dataclass
class Recording:
    """
    Recording descriptor.

    Metadata for one captured recording artifact attached to a bot.
    """

    id: str
    status: str
    created_at: str = ""  # ISO format datetime
    download_url: str | None = None
    duration: float | None = None  # seconds

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Recording":
        """
        Create Recording from a provider recording entry.

        Handles both flat entries and Recall.ai's nested shape, where the
        status is ``{"code": ...}`` and the download link lives under
        ``media_shortcuts.video_mixed.data.download_url``.

        Args:
            data: Recording dictionary from the provider

        Returns:
            Recording instance
        """
        status = data.get("status", "")
        if isinstance(status, dict):
            status = status.get("code", "")

        download_url = data.get("download_url")
        if not download_url:
            video = (data.get("media_shortcuts") or {}).get("video_mixed") or {}
            download_url = (video.get("data") or {}).get("download_url")

        duration = data.get("duration")
        if duration is None:
            started = _parse_time(data.get("started_at"))
            completed = _parse_time(data.get("completed_at"))
            if started and completed:
                duration = (completed - started).total_seconds()

        return cls(
            id=str(data.get("id", "")),
            status=str(status or ""),
            created_at=data.get("created_at") or data.get("started_at") or "",
            download_url=download_url,
            duration=duration,
        )

    @property
    def duration_minutes(self) -> int | None:
        """Duration rounded to whole minutes, for display."""
        if self.duration is None:
            return None
        return round(self.duration / 60)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class BotStatus:
    """Normalized subset of a provider bot payload."""

    id: str
    status: str
    phase: LifecyclePhase
    meeting_url: str | None = None
    recordings: list[Recording] = field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "BotStatus":
        """
        Create BotStatus from a raw provider bot payload.

        Args:
            payload: Bot dictionary as returned by the provider

        Returns:
            BotStatus instance
        """
        status = extract_status(payload)
        meeting_url = payload.get("meeting_url")
        if isinstance(meeting_url, dict):
            # Recall returns {"meeting_id": ..., "platform": ...} on reads
            meeting_url = meeting_url.get("url") or meeting_url.get("meeting_id")

        return cls(
            id=str(payload.get("id") or payload.get("bot_id") or ""),
            status=status,
            phase=phase_for(status),
            meeting_url=meeting_url,
            recordings=recordings_from(payload),
        )

    def to_dict(self) -> dict[str, Any]:
        """
        Convert to a JSON-serializable dictionary.

        ``bot_id`` duplicates ``id`` for clients that read either key.
        """
        return {
            "id": self.id,
            "bot_id": self.id,
            "status": self.status,
            "phase": self.phase.value,
            "meeting_url": self.meeting_url,
            "recordings": [r.to_dict() for r in self.recordings],
        }


def recordings_from(payload: dict[str, Any] | None) -> list[Recording]:
    """Parse the ``recordings`` array of a bot payload (missing -> empty)."""
    if not payload:
        return []
    return [Recording.from_dict(r) for r in payload.get("recordings") or []]


def bot_id_of(payload: dict[str, Any]) -> str:
    """Job identifier of a creation payload (``id``, or legacy ``bot_id``)."""
    return str(payload.get("id") or payload.get("bot_id") or "")
