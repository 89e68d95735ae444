"""
Attempt outcomes.

Every connection attempt produces exactly one of these. The retry scheduler
consumes them immediately to decide whether to stop, back off, or give up.
"""

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Success(Generic[T]):
    """Attempt succeeded; ``handle`` is now owned by the caller."""

    handle: T


@dataclass(frozen=True)
class TransientFailure:
    """Attempt hit the paused/throttled condition and may be retried."""

    cause: Exception


@dataclass(frozen=True)
class FatalFailure:
    """Attempt failed in a way that retrying will not fix."""

    cause: Exception


@dataclass(frozen=True)
class Cancelled:
    """Attempt was abandoned because the run was cancelled."""


AttemptOutcome = Union[Success[T], TransientFailure, FatalFailure, Cancelled]
