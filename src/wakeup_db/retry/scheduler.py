"""
Retry scheduler for connection attempts.

Runs a connect-and-verify operation until it succeeds, fails fatally, runs
out of attempts, or is cancelled. It is the only component that retries.

State machine:
    Idle -> Attempting
    Attempting -> Succeeded        (Success)
    Attempting -> FailedFatal      (FatalFailure, no further attempts)
    Attempting -> BackingOff       (TransientFailure, attempts left)
    BackingOff -> Attempting       (jittered delay elapsed)
    Attempting -> FailedExhausted  (TransientFailure, no attempts left)
    Attempting/BackingOff -> Cancelled (cancel event set or deadline passed)

Usage:
    scheduler = RetryScheduler(RetryPolicy())
    engine, metadata = await scheduler.run(
        lambda: connector.connect_and_verify(dsn, verify_timeout=60),
        cancel_event,
    )
"""

import asyncio
import random
from typing import Awaitable, Callable, Generic, Optional, TypeVar

import structlog

from wakeup_db.exceptions import WakeupError
from wakeup_db.models.outcomes import (
    AttemptOutcome,
    Cancelled,
    FatalFailure,
    Success,
    TransientFailure,
)
from wakeup_db.retry.exceptions import RetryCancelled, RetryExhausted
from wakeup_db.retry.metadata import RetryMetadata
from wakeup_db.retry.policy import RetryPolicy

logger = structlog.get_logger(__name__)

T = TypeVar("T")

Operation = Callable[[], Awaitable[AttemptOutcome[T]]]


class RetryScheduler(Generic[T]):
    """
    Drives attempts according to a RetryPolicy.

    A scheduler instance holds no state between runs; every call to ``run``
    keeps its own attempt counter and last error, so independent runs (for
    example several databases woken in parallel) never interfere.

    Attributes:
        policy: Retry policy
        rng: Random source for jitter (inject a seeded one in tests)
    """

    def __init__(self, policy: RetryPolicy, rng: Optional[random.Random] = None):
        self.policy = policy
        self.rng = rng or random.Random()

    async def run(
        self,
        operation: Operation[T],
        cancel_event: Optional[asyncio.Event] = None,
    ) -> tuple[T, RetryMetadata]:
        """
        Run the operation under the retry policy.

        Args:
            operation: Zero-argument coroutine function making one attempt
            cancel_event: Set it to abort promptly, even mid-sleep

        Returns:
            Tuple of (handle from the successful attempt, run metadata)

        Raises:
            Exception: The fatal failure's original cause, unchanged
            RetryExhausted: Every attempt hit the transient condition
            RetryCancelled: Cancelled or overall deadline passed
        """
        policy = self.policy
        loop = asyncio.get_running_loop()
        started = loop.time()
        deadline = started + policy.overall_deadline
        cancel_event = cancel_event or asyncio.Event()

        attempts = 0
        delays: list[float] = []
        last_error: Optional[Exception] = None

        def metadata(outcome: str) -> RetryMetadata:
            return RetryMetadata(
                attempts=attempts,
                max_attempts=policy.max_attempts,
                elapsed_s=round(loop.time() - started, 3),
                outcome=outcome,
                delays=list(delays),
            )

        def cancelled() -> RetryCancelled:
            reason = "cancelled" if cancel_event.is_set() else "deadline"
            result = metadata("cancelled")
            logger.warning(
                "Retry run cancelled",
                reason=reason,
                attempts=result.attempts,
                elapsed_s=result.elapsed_s,
            )
            return RetryCancelled(result, reason, last_error)

        for attempt in range(1, policy.max_attempts + 1):
            if attempt > 1:
                if self._should_stop(cancel_event, deadline, loop):
                    raise cancelled()
                delay = policy.jittered_delay(attempt - 1, self.rng)
                logger.info(
                    "Backing off before next attempt",
                    attempt=attempt,
                    max_attempts=policy.max_attempts,
                    delay_s=round(delay, 2),
                    nominal_delay_s=policy.nominal_delay(attempt - 1),
                )
                remaining = deadline - loop.time()
                if await self._wait(cancel_event, min(delay, remaining)) or delay > remaining:
                    raise cancelled()
                delays.append(delay)

            if self._should_stop(cancel_event, deadline, loop):
                raise cancelled()

            attempts = attempt
            logger.info("Connection attempt", attempt=attempt, max_attempts=policy.max_attempts)
            outcome = await self._attempt(operation, cancel_event, deadline, loop)

            if isinstance(outcome, Success):
                result = metadata("succeeded")
                logger.info(
                    "Connection established",
                    attempts=result.attempts,
                    elapsed_s=result.elapsed_s,
                )
                return outcome.handle, result

            if isinstance(outcome, FatalFailure):
                result = metadata("failed_fatal")
                cause = outcome.cause
                if isinstance(cause, WakeupError):
                    cause.details.update(attempts=result.attempts, elapsed_s=result.elapsed_s)
                logger.error(
                    "Fatal connection failure, not retrying",
                    attempt=attempt,
                    error_type=type(cause).__name__,
                    elapsed_s=result.elapsed_s,
                )
                raise cause

            if isinstance(outcome, Cancelled):
                raise cancelled()

            last_error = outcome.cause
            logger.warning(
                "Transient connection failure",
                attempt=attempt,
                max_attempts=policy.max_attempts,
                error=str(last_error),
            )

        # Falling out of the loop means every attempt was transient
        assert last_error is not None
        result = metadata("failed_exhausted")
        logger.error(
            "Retry attempts exhausted",
            attempts=result.attempts,
            elapsed_s=result.elapsed_s,
        )
        raise RetryExhausted(result, last_error)

    @staticmethod
    def _should_stop(
        cancel_event: asyncio.Event, deadline: float, loop: asyncio.AbstractEventLoop
    ) -> bool:
        return cancel_event.is_set() or loop.time() >= deadline

    @staticmethod
    async def _wait(cancel_event: asyncio.Event, timeout: float) -> bool:
        """Sleep up to ``timeout`` seconds; True if cancellation fired first."""
        if timeout <= 0:
            return cancel_event.is_set()
        try:
            await asyncio.wait_for(cancel_event.wait(), timeout=timeout)
        except asyncio.TimeoutError:
            return False
        return True

    @staticmethod
    async def _attempt(
        operation: Operation[T],
        cancel_event: asyncio.Event,
        deadline: float,
        loop: asyncio.AbstractEventLoop,
    ) -> AttemptOutcome[T]:
        """Run one attempt, abandoning it if cancellation or the deadline wins."""
        attempt_task = asyncio.ensure_future(operation())
        cancel_task = asyncio.ensure_future(cancel_event.wait())
        try:
            done, _ = await asyncio.wait(
                {attempt_task, cancel_task},
                timeout=max(0.0, deadline - loop.time()),
                return_when=asyncio.FIRST_COMPLETED,
            )
        except asyncio.CancelledError:
            attempt_task.cancel()
            raise
        finally:
            cancel_task.cancel()

        if attempt_task in done:
            return attempt_task.result()

        attempt_task.cancel()
        await asyncio.wait({attempt_task})
        if not attempt_task.cancelled() and attempt_task.exception() is not None:
            logger.debug("Abandoned attempt raised", error=str(attempt_task.exception()))
        return Cancelled()
