"""Tests for lifecycle phase mapping."""

import pytest

from meeting_recorder.lifecycle import (
    LifecyclePhase,
    extract_status,
    phase_for,
    phase_of,
    status_message,
)


class TestPhaseFor:
    """Tests for phase_for."""

    @pytest.mark.parametrize(
        ("status", "phase"),
        [
            ("joining", LifecyclePhase.JOINING),
            ("joining_call", LifecyclePhase.JOINING),
            ("in_waiting_room", LifecyclePhase.JOINING),
            ("joined", LifecyclePhase.JOINED),
            ("in_call_recording", LifecyclePhase.JOINED),
            ("left", LifecyclePhase.ENDED),
            ("ended", LifecyclePhase.ENDED),
            ("call_ended", LifecyclePhase.ENDED),
            ("done", LifecyclePhase.ENDED),
            ("ready", LifecyclePhase.REQUESTED),
            ("JOINED", LifecyclePhase.JOINED),
        ],
    )
    def test_known_statuses(self, status: str, phase: LifecyclePhase) -> None:
        assert phase_for(status) is phase

    @pytest.mark.parametrize("status", ["", None, "fatal", "something_new"])
    def test_unknown_statuses(self, status) -> None:
        assert phase_for(status) is LifecyclePhase.UNKNOWN

    def test_left_and_ended_are_equivalent(self) -> None:
        assert phase_for("left") is phase_for("ended")

    def test_only_ended_is_terminal(self) -> None:
        terminal = [p for p in LifecyclePhase if p.is_terminal]
        assert terminal == [LifecyclePhase.ENDED]
        assert not LifecyclePhase.UNKNOWN.is_terminal


class TestExtractStatus:
    """Tests for extract_status."""

    def test_plain_status(self) -> None:
        assert extract_status({"status": "joined"}) == "joined"

    def test_status_object(self) -> None:
        assert extract_status({"status": {"code": "in_call_recording"}}) == "in_call_recording"

    def test_falls_back_to_status_changes(self) -> None:
        payload = {"status_changes": [{"code": "joining_call"}, {"code": "done"}]}

        assert extract_status(payload) == "done"
        assert phase_of(payload) is LifecyclePhase.ENDED

    def test_missing_status(self) -> None:
        assert extract_status({}) == ""
        assert extract_status(None) == ""


class TestStatusMessage:
    """Tests for status_message."""

    def test_phase_messages(self) -> None:
        assert status_message(LifecyclePhase.JOINING).startswith("Bot is joining")
        assert status_message(LifecyclePhase.JOINED) == "Bot has joined the meeting and is recording"
        assert status_message(LifecyclePhase.ENDED) == "Meeting ended. Processing recordings..."

    def test_unknown_shows_raw_status(self) -> None:
        assert status_message(LifecyclePhase.UNKNOWN, "fatal") == "Bot status: fatal"
