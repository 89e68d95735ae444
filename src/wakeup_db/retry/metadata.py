"""
Retry metadata tracking.

This module defines the RetryMetadata dataclass that summarises one retry
run, for logs and for the error messages shown to the user.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class RetryMetadata:
    """
    Summary of a finished retry run.

    Attributes:
        attempts: Number of connection attempts made
        max_attempts: Attempt budget of the policy
        elapsed_s: Seconds from the start of the run to its end
        delays: Realised backoff sleeps in seconds, in order
        outcome: Terminal state (succeeded, failed_fatal, failed_exhausted, cancelled)
    """

    attempts: int
    max_attempts: int
    elapsed_s: float
    outcome: str
    delays: list[float] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Validate metadata invariants."""
        if self.attempts < 0:
            raise ValueError("attempts must be >= 0")

        if self.attempts > self.max_attempts:
            raise ValueError("attempts must not exceed max_attempts")

        if self.elapsed_s < 0:
            raise ValueError("elapsed_s must be >= 0")

    def describe(self) -> str:
        return f"after {self.attempts}/{self.max_attempts} attempts in {self.elapsed_s:.1f}s"
