"""
Bot lifecycle phases.

Normalizes the provider's status vocabulary into a handful of phases that
both the relay and the polling client act on, and holds the user-facing
text for each phase.
"""

from enum import Enum
from typing import Any


class LifecyclePhase(Enum):
    """Normalized stage of a bot's meeting participation."""

    REQUESTED = "requested"
    JOINING = "joining"
    JOINED = "joined"
    ENDED = "ended"
    UNKNOWN = "unknown"

    @property
    def is_terminal(self) -> bool:
        """Polling stops only once the bot has left the meeting."""
        return self is LifecyclePhase.ENDED

    @property
    def is_waiting(self) -> bool:
        """The bot is still on its way into the meeting."""
        return self is LifecyclePhase.JOINING


# Raw provider status -> phase. Includes Recall.ai's detailed status codes.
_STATUS_PHASES: dict[str, LifecyclePhase] = {
    "requested": LifecyclePhase.REQUESTED,
    "ready": LifecyclePhase.REQUESTED,
    "joining": LifecyclePhase.JOINING,
    "joining_call": LifecyclePhase.JOINING,
    "in_waiting_room": LifecyclePhase.JOINING,
    "joined": LifecyclePhase.JOINED,
    "in_call_not_recording": LifecyclePhase.JOINED,
    "in_call_recording": LifecyclePhase.JOINED,
    "recording_permission_allowed": LifecyclePhase.JOINED,
    "left": LifecyclePhase.ENDED,
    "ended": LifecyclePhase.ENDED,
    "call_ended": LifecyclePhase.ENDED,
    "done": LifecyclePhase.ENDED,
}

PHASE_MESSAGES: dict[LifecyclePhase, str] = {
    LifecyclePhase.REQUESTED: "Bot created! Waiting to join meeting...",
    LifecyclePhase.JOINING: "Bot is joining the meeting... This may take a few moments.",
    LifecyclePhase.JOINED: "Bot has joined the meeting and is recording",
    LifecyclePhase.ENDED: "Meeting ended. Processing recordings...",
}


def extract_status(payload: dict[str, Any] | None) -> str:
    """
    Pull the raw status string out of a bot payload.

    Accepts a plain ``status`` string, a ``{"code": ...}`` status object,
    or falls back to the latest entry of ``status_changes``.
    """
    if not payload:
        return ""

    status = payload.get("status")
    if isinstance(status, dict):
        status = status.get("code")
    if status:
        return str(status)

    status_changes = payload.get("status_changes") or []
    if status_changes:
        return str(status_changes[-1].get("code") or "")
    return ""


def phase_for(status: str | None) -> LifecyclePhase:
    """Map a raw status string to its phase (UNKNOWN when unrecognized)."""
    if not status:
        return LifecyclePhase.UNKNOWN
    return _STATUS_PHASES.get(status.strip().lower(), LifecyclePhase.UNKNOWN)


def phase_of(payload: dict[str, Any] | None) -> LifecyclePhase:
    """Phase of a bot payload."""
    return phase_for(extract_status(payload))


def status_message(phase: LifecyclePhase, raw_status: str = "") -> str:
    """Human-readable status line for a phase."""
    if phase in PHASE_MESSAGES:
        return PHASE_MESSAGES[phase]
    return f"Bot status: {raw_status or 'unknown'}"
