"""
Retry scheduler exceptions.

Raised when a retry run ends without a connection and without a fatal
failure: either the attempt budget ran out or the run was cancelled.
"""

from typing import TYPE_CHECKING, Optional

from wakeup_db.exceptions import WakeupError

if TYPE_CHECKING:
    from wakeup_db.retry.metadata import RetryMetadata


class RetryExhausted(WakeupError):
    """
    Raised when every attempt hit the paused/throttled condition.

    Attributes:
        retry_metadata: Summary of the run
        last_error: Cause of the final transient failure
    """

    def __init__(self, retry_metadata: "RetryMetadata", last_error: Exception) -> None:
        self.retry_metadata = retry_metadata
        self.last_error = last_error
        super().__init__(
            f"failed {retry_metadata.describe()}: {last_error}",
            {
                "attempts": retry_metadata.attempts,
                "elapsed_s": retry_metadata.elapsed_s,
            },
        )


class RetryCancelled(WakeupError):
    """
    Raised when the deadline passed or cancellation was requested mid-run.

    Attributes:
        retry_metadata: Summary of the run
        last_error: Cause of the last transient failure, if any
        reason: ``deadline`` or ``cancelled``
    """

    def __init__(
        self,
        retry_metadata: "RetryMetadata",
        reason: str,
        last_error: Optional[Exception] = None,
    ) -> None:
        self.retry_metadata = retry_metadata
        self.last_error = last_error
        self.reason = reason
        what = "deadline exceeded" if reason == "deadline" else "cancelled"
        message = f"{what} {retry_metadata.describe()}"
        if last_error is not None:
            message += f": {last_error}"
        super().__init__(
            message,
            {
                "attempts": retry_metadata.attempts,
                "elapsed_s": retry_metadata.elapsed_s,
                "reason": reason,
            },
        )
