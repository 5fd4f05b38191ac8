"""Bounded retry with a fixed delay.

Failures are classified before any retry is spent: a missing bot
(BotNotFoundError) is terminal and re-raised at once, anything else the
provider raises is transient and retried until the attempt budget runs out.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeVar

import requests

from .errors import BotNotFoundError, ProviderError, RetriesExhaustedError

logger = logging.getLogger(__name__)

T = TypeVar("T")

SleepFn = Callable[[float], Awaitable[None]]

RETRYABLE_EXCEPTIONS: tuple[type[Exception], ...] = (
    ProviderError,
    requests.RequestException,
)


@dataclass
class RetryBudget:
    """Bounded attempt counter for one logical operation."""

    max_attempts: int
    used: int = 0

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

    @property
    def remaining(self) -> int:
        return max(self.max_attempts - self.used, 0)

    @property
    def exhausted(self) -> bool:
        return self.used >= self.max_attempts

    def consume(self) -> int:
        """Count one attempt and return the running total."""
        self.used += 1
        return self.used

    def reset(self) -> None:
        self.used = 0


async def call_with_retry(
    operation: Callable[[], Awaitable[T]],
    *,
    max_attempts: int,
    delay_ms: int,
    sleep: SleepFn = asyncio.sleep,
    label: str = "provider call",
    retryable_exceptions: tuple[type[Exception], ...] = RETRYABLE_EXCEPTIONS,
) -> T:
    """
    Await ``operation()`` up to ``max_attempts`` times.

    Args:
        operation: Zero-argument coroutine function performing the remote call
        max_attempts: Upper bound on attempts for this call
        delay_ms: Pause between attempts, in milliseconds
        sleep: Suspension used between attempts (seconds)
        label: Name used in log lines
        retryable_exceptions: Exception types treated as transient

    Returns:
        The first successful result

    Raises:
        BotNotFoundError: Immediately, on the first 404
        RetriesExhaustedError: When every attempt failed transiently; the
            last failure is chained as ``__cause__``
    """
    budget = RetryBudget(max_attempts)

    while True:
        attempt = budget.consume()
        try:
            return await operation()
        except BotNotFoundError as exc:
            logger.error("%s: bot not found (%s), not retrying", label, exc.bot_id)
            raise
        except retryable_exceptions as exc:
            if budget.exhausted:
                logger.error(
                    "%s failed after %d attempt(s): %s", label, attempt, exc
                )
                raise RetriesExhaustedError(label, attempt, exc) from exc

            logger.warning(
                "Retry %d/%d for %s in %dms: %s",
                attempt,
                max_attempts,
                label,
                delay_ms,
                exc,
            )
            await sleep(delay_ms / 1000)
