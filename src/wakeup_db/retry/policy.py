"""
Retry policy and backoff computation.

Two backoff shapes are supported:

- **fixed** (default): the same delay before every retry. Waking a paused
  Azure SQL instance usually takes 30-60 seconds, so a flat 25s delay over
  15 attempts polls at a steady rate until the overall deadline.
- **exponential**: ``base_delay * multiplier ** (n - 1)`` before retry ``n``.

Jitter is only ever added on top of the nominal delay, never subtracted.
"""

import random
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class BackoffKind(str, Enum):
    FIXED = "fixed"
    EXPONENTIAL = "exponential"


@dataclass(frozen=True)
class RetryPolicy:
    """
    Constant retry configuration for one wakeup run.

    Attributes:
        max_attempts: Maximum number of connection attempts (first included)
        base_delay: Nominal delay in seconds before the first retry
        backoff: Fixed or exponential delay growth
        backoff_multiplier: Growth factor for exponential backoff
        jitter_fraction: Maximum extra share of the delay added as jitter (0..1)
        overall_deadline: Seconds after which the run is cancelled
    """

    max_attempts: int = 15
    base_delay: float = 25.0
    backoff: BackoffKind = BackoffKind.FIXED
    backoff_multiplier: float = 2.0
    jitter_fraction: float = 0.1
    overall_deadline: float = 300.0

    def __post_init__(self) -> None:
        """Validate policy invariants."""
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")

        if self.base_delay < 0:
            raise ValueError("base_delay must be >= 0")

        if self.backoff_multiplier < 1:
            raise ValueError("backoff_multiplier must be >= 1")

        if not 0 <= self.jitter_fraction <= 1:
            raise ValueError("jitter_fraction must be between 0 and 1")

        if self.overall_deadline <= 0:
            raise ValueError("overall_deadline must be > 0")

        # Accept plain strings such as "exponential" from configuration
        object.__setattr__(self, "backoff", BackoffKind(self.backoff))

    @classmethod
    def exponential(cls, **overrides) -> "RetryPolicy":
        """Doubling backoff variant: 6 attempts starting at 5s (5, 10, 20, 40, 80)."""
        values = {
            "max_attempts": 6,
            "base_delay": 5.0,
            "backoff": BackoffKind.EXPONENTIAL,
            "backoff_multiplier": 2.0,
        }
        values.update(overrides)
        return cls(**values)

    def nominal_delay(self, retry: int) -> float:
        """
        Nominal delay in seconds before retry number ``retry``.

        ``retry`` counts from 1 (the wait between attempt 1 and attempt 2).
        The first attempt never waits.
        """
        if retry < 1:
            raise ValueError("retry must be >= 1")
        if self.backoff is BackoffKind.EXPONENTIAL:
            return self.base_delay * self.backoff_multiplier ** (retry - 1)
        return self.base_delay

    def jittered_delay(self, retry: int, rng: Optional[random.Random] = None) -> float:
        """Nominal delay extended by up to ``jitter_fraction`` of itself."""
        return apply_jitter(self.nominal_delay(retry), self.jitter_fraction, rng)


def apply_jitter(delay: float, jitter_fraction: float, rng: Optional[random.Random] = None) -> float:
    """
    Add random jitter to a delay.

    Returns a value in ``[delay, delay * (1 + jitter_fraction)]``.
    """
    source = rng if rng is not None else random
    return delay * (1 + source.uniform(0, jitter_fraction))
