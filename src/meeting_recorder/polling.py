"""
Server-side readiness polling.

Both pollers share one loop: fetch the bot through the retry executor,
and while the result is "not ready yet" (bot still joining, no
recordings) wait and fetch again until a separate readiness budget runs
out. Not-ready is never an error; running out of budget returns the
last result as-is.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from .lifecycle import phase_of
from .retry import RetryBudget, SleepFn, call_with_retry

logger = logging.getLogger(__name__)

T = TypeVar("T")

FetchBot = Callable[[], Awaitable[dict[str, Any]]]


async def wait_until_ready(
    fetch: Callable[[], Awaitable[T]],
    still_waiting: Callable[[T], bool],
    *,
    max_attempts: int,
    delay_ms: int,
    sleep: SleepFn = asyncio.sleep,
    label: str = "provider call",
) -> T:
    """
    Poll ``fetch`` until ``still_waiting`` is false or the budget is spent.

    Each fetch gets its own failure budget (``max_attempts`` attempts via
    call_with_retry). The waiting budget is counted separately and allows
    up to ``max_attempts`` delayed re-polls.
    """
    waits = RetryBudget(max_attempts)

    while True:
        result = await call_with_retry(
            fetch,
            max_attempts=max_attempts,
            delay_ms=delay_ms,
            sleep=sleep,
            label=label,
        )
        if not still_waiting(result):
            return result
        if waits.exhausted:
            logger.info("%s: still not ready after %d re-polls, returning current state",
                        label, waits.used)
            return result

        waits.consume()
        logger.info("%s: not ready yet (%d/%d), re-polling in %dms",
                    label, waits.used, max_attempts, delay_ms)
        await sleep(delay_ms / 1000)


async def wait_for_bot(
    fetch_bot: FetchBot,
    *,
    max_attempts: int,
    delay_ms: int,
    sleep: SleepFn = asyncio.sleep,
) -> dict[str, Any]:
    """
    Fetch a bot, re-polling while it is still joining.

    Returns:
        The first payload whose phase is not JOINING, or the last payload
        seen when the joining budget is exhausted

    Raises:
        BotNotFoundError: If the provider does not know the bot
        RetriesExhaustedError: If a single fetch failed on every attempt
    """
    return await wait_until_ready(
        fetch_bot,
        lambda payload: phase_of(payload).is_waiting,
        max_attempts=max_attempts,
        delay_ms=delay_ms,
        sleep=sleep,
        label="bot status",
    )


async def wait_for_recordings(
    fetch_bot: FetchBot,
    *,
    max_attempts: int,
    delay_ms: int,
    sleep: SleepFn = asyncio.sleep,
) -> list[dict[str, Any]]:
    """
    Fetch a bot's recordings, re-polling while the list is empty.

    Returns:
        The provider's recordings list; empty when none appeared in time
    """
    payload = await wait_until_ready(
        fetch_bot,
        lambda bot: not (bot.get("recordings") or []),
        max_attempts=max_attempts,
        delay_ms=delay_ms,
        sleep=sleep,
        label="recordings",
    )
    return list(payload.get("recordings") or [])
