"""
Client-side polling session.

A PollingSession owns the single status-polling loop for one bot and the
UI-facing view derived from it. Starting a session for a new bot cancels
the previous loop first, so two loops never poll at once. Every callback
checks the session generation before touching the view, so nothing
scheduled before a stop can mutate state after it.

States:
    IDLE -> POLLING      start(bot_id)
    POLLING -> STOPPED   bot ended, bot not found, too many errors, or stop()
"""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum

from meeting_recorder.errors import RelayRequestError
from meeting_recorder.lifecycle import (
    LifecyclePhase,
    extract_status,
    phase_for,
    status_message,
)
from meeting_recorder.models import Recording, bot_id_of, recordings_from
from meeting_recorder.retry import RetryBudget, SleepFn

from .relay_client import RelayClient

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "Bot not found or has expired."
TOO_MANY_ERRORS_MESSAGE = "Too many errors occurred. Please try again."
NO_RECORDINGS_MESSAGE = (
    "No recordings found after multiple attempts. Please check the Recall dashboard."
)


class SessionState(Enum):
    """Polling session states."""

    IDLE = "idle"
    POLLING = "polling"
    STOPPED = "stopped"


@dataclass
class SessionView:
    """What the UI shows for the current session."""

    bot_id: str = ""
    state: SessionState = SessionState.IDLE
    phase: LifecyclePhase = LifecyclePhase.UNKNOWN
    status_text: str = ""
    error: str | None = None
    recordings: list[Recording] = field(default_factory=list)

    @property
    def completed(self) -> bool:
        """The bot has left the meeting and its recordings are available."""
        return self.phase is LifecyclePhase.ENDED and bool(self.recordings)


class PollingSession:
    """Interval-driven bot status polling with a bounded error budget."""

    def __init__(
        self,
        client: RelayClient,
        *,
        interval: float = 5.0,
        max_errors: int = 5,
        final_check_delay: float = 10.0,
        recordings_retry_interval: float = 30.0,
        max_recording_checks: int = 5,
        sleep: SleepFn = asyncio.sleep,
        on_change: Callable[[SessionView], None] | None = None,
    ) -> None:
        """
        Initialize the session.

        Args:
            client: Relay API client
            interval: Seconds between status polls
            max_errors: Consecutive poll failures tolerated before giving up
            final_check_delay: Seconds to wait after the bot ends before
                the first recordings check
            recordings_retry_interval: Seconds between recordings checks
            max_recording_checks: Re-checks allowed while no recordings exist
            sleep: Suspension used for every wait
            on_change: Called with the view after every update
        """
        self.client = client
        self.interval = interval
        self.max_errors = max_errors
        self.final_check_delay = final_check_delay
        self.recordings_retry_interval = recordings_retry_interval
        self.max_recording_checks = max_recording_checks
        self._sleep = sleep
        self._on_change = on_change

        self.view = SessionView()
        self._errors = RetryBudget(max_errors)
        self._generation = 0
        self._poll_task: asyncio.Task | None = None
        self._recordings_task: asyncio.Task | None = None

    @property
    def active(self) -> bool:
        """True while the polling loop is armed."""
        return self._poll_task is not None

    @property
    def recordings_pending(self) -> bool:
        return self._recordings_task is not None

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change(self.view)

    def _set_status(self, text: str, error: str | None = None) -> None:
        self.view.status_text = text
        self.view.error = error
        self._notify()

    @staticmethod
    def _cancel(task: asyncio.Task | None) -> None:
        try:
            current = asyncio.current_task()
        except RuntimeError:
            current = None
        if task is not None and task is not current and not task.done():
            task.cancel()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def join(self, meeting_url: str) -> str | None:
        """
        Create a bot through the relay and start polling it.

        Returns:
            The new bot id, or None if creation failed
        """
        self.stop()
        self._set_status("Creating bot and joining meeting...")

        try:
            bot_data = await asyncio.to_thread(self.client.create_bot, meeting_url)
        except RelayRequestError as e:
            logger.error("Failed to create bot: %s", e.message)
            self._set_status("Failed to create bot", error=e.message)
            return None

        bot_id = bot_id_of(bot_data)
        if not bot_id:
            self._set_status("Failed to create bot", error="Relay returned no bot id")
            return None

        self._set_status(status_message(LifecyclePhase.REQUESTED))
        self.start(bot_id)
        return bot_id

    def start(self, bot_id: str) -> None:
        """
        Start polling ``bot_id``, replacing any active session.

        Must be called from inside a running event loop. The first status
        check runs immediately; later ones follow every ``interval`` seconds,
        measured from the end of the previous check.
        """
        self._cancel_all()
        self._generation += 1
        generation = self._generation

        self._errors = RetryBudget(self.max_errors)
        self.view = SessionView(
            bot_id=bot_id,
            state=SessionState.POLLING,
            status_text=self.view.status_text,
        )
        self._poll_task = asyncio.get_running_loop().create_task(
            self._poll_loop(generation, bot_id)
        )
        logger.info("Polling started for bot %s", bot_id)

    def stop(self) -> None:
        """Stop polling and any pending recordings check. Idempotent."""
        was_active = self.active or self.recordings_pending
        self._cancel_all()
        self._generation += 1
        if self.view.state is SessionState.POLLING:
            self.view.state = SessionState.STOPPED
        if was_active:
            logger.info("Polling stopped for bot %s", self.view.bot_id)

    def _cancel_all(self) -> None:
        poll_task, self._poll_task = self._poll_task, None
        recordings_task, self._recordings_task = self._recordings_task, None
        self._cancel(poll_task)
        self._cancel(recordings_task)

    def _halt(self, generation: int) -> bool:
        """Disarm the polling loop from inside it. Returns False if already disarmed."""
        if not self._is_current(generation) or self._poll_task is None:
            return False
        task, self._poll_task = self._poll_task, None
        self._cancel(task)
        self.view.state = SessionState.STOPPED
        return True

    async def wait(self) -> None:
        """Wait until polling and any recordings check have finished."""
        while True:
            task = self._poll_task or self._recordings_task
            if task is None:
                return
            try:
                await asyncio.shield(task)
            except asyncio.CancelledError:
                if not task.cancelled():
                    raise
            # A finished task that is still registered would spin here
            if task is self._poll_task or task is self._recordings_task:
                return

    # ------------------------------------------------------------------
    # Status polling
    # ------------------------------------------------------------------

    async def _poll_loop(self, generation: int, bot_id: str) -> None:
        try:
            while self._is_current(generation) and self._poll_task is not None:
                await self._tick(generation, bot_id)
                if not self._is_current(generation) or self._poll_task is None:
                    return
                await self._sleep(self.interval)
        finally:
            # The handle stays set only while this loop is running
            if self._is_current(generation) and self._poll_task is asyncio.current_task():
                self._poll_task = None
                self.view.state = SessionState.STOPPED

    async def _tick(self, generation: int, bot_id: str) -> None:
        try:
            payload = await asyncio.to_thread(self.client.get_bot, bot_id)
        except RelayRequestError as e:
            if self._is_current(generation):
                self._on_poll_error(generation, e)
            return

        if not self._is_current(generation):
            return

        self._errors.reset()
        raw_status = extract_status(payload)
        phase = phase_for(raw_status)
        self.view.phase = phase

        recordings = recordings_from(payload)
        if recordings:
            self.view.recordings = recordings

        if phase.is_terminal and self._halt(generation):
            self._set_status(status_message(phase, raw_status))
            self._schedule_recordings_check(generation, bot_id)
            return

        self._set_status(status_message(phase, raw_status))

    def _on_poll_error(self, generation: int, error: RelayRequestError) -> None:
        if error.not_found:
            logger.error("Bot %s not found, stopping", self.view.bot_id)
            if self._halt(generation):
                self._set_status("Bot not found", error=NOT_FOUND_MESSAGE)
            return

        failures = self._errors.consume()
        logger.warning("Poll error %d/%d: %s", failures, self.max_errors, error.message)
        if failures > self.max_errors and self._halt(generation):
            self.view.error = TOO_MANY_ERRORS_MESSAGE
            self._notify()

    # ------------------------------------------------------------------
    # Recordings check
    # ------------------------------------------------------------------

    def _schedule_recordings_check(self, generation: int, bot_id: str) -> None:
        if self._recordings_task is not None:
            return
        self._recordings_task = asyncio.get_running_loop().create_task(
            self._check_recordings(generation, bot_id)
        )

    async def _check_recordings(self, generation: int, bot_id: str) -> None:
        try:
            await self._sleep(self.final_check_delay)
            checks = RetryBudget(self.max_recording_checks)

            while self._is_current(generation):
                self._set_status("Checking for recordings...", error=self.view.error)
                try:
                    raw = await asyncio.to_thread(self.client.get_recordings, bot_id)
                except RelayRequestError as e:
                    if not self._is_current(generation):
                        return
                    if e.not_found:
                        logger.error("Bot %s not found while checking recordings", bot_id)
                        self._set_status("Bot not found", error=NOT_FOUND_MESSAGE)
                        return
                    if checks.exhausted:
                        self._set_status("Failed to fetch recordings", error=e.message)
                        return
                    failures = checks.consume()
                    logger.warning(
                        "Recordings check failed (%d/%d): %s",
                        failures, self.max_recording_checks, e.message,
                    )
                    await self._sleep(self.recordings_retry_interval)
                    continue

                if not self._is_current(generation):
                    return

                if raw:
                    self.view.recordings = [Recording.from_dict(r) for r in raw]
                    self._set_status("Recordings are ready!")
                    return

                if checks.exhausted:
                    self._set_status(self.view.status_text, error=NO_RECORDINGS_MESSAGE)
                    return

                checks.consume()
                self._set_status(
                    "No recordings found yet. Checking again in "
                    f"{self.recordings_retry_interval:g} seconds..."
                )
                await self._sleep(self.recordings_retry_interval)
        finally:
            if self._is_current(generation):
                self._recordings_task = None
