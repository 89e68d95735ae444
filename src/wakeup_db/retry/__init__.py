"""
Retry scheduling for waking paused databases.

The scheduler retries only the transient "instance paused" condition, with
fixed or exponential backoff plus additive jitter, within an attempt budget
and an overall deadline. Fatal failures abort immediately.

Main Components:
    - RetryScheduler: Drives attempts and backoff sleeps
    - RetryPolicy: Attempt budget, delays, jitter and deadline
    - RetryMetadata: Summary of a finished run
    - RetryExhausted / RetryCancelled: Terminal non-fatal failures

Usage:
    >>> from wakeup_db.retry import RetryPolicy, RetryScheduler
    >>> scheduler = RetryScheduler(RetryPolicy(max_attempts=15, base_delay=25))
    >>> engine, metadata = await scheduler.run(attempt, cancel_event)
"""

from wakeup_db.retry.exceptions import RetryCancelled, RetryExhausted
from wakeup_db.retry.metadata import RetryMetadata
from wakeup_db.retry.policy import BackoffKind, RetryPolicy, apply_jitter
from wakeup_db.retry.scheduler import RetryScheduler

__all__ = [
    "BackoffKind",
    "RetryCancelled",
    "RetryExhausted",
    "RetryMetadata",
    "RetryPolicy",
    "RetryScheduler",
    "apply_jitter",
]
