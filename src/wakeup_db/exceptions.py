"""
Exceptions raised while waking a database.

The hierarchy lets callers tell apart the failure modes that matter for the
retry policy: configuration problems fail before any attempt, the paused
instance condition is retried, and everything else aborts immediately.
"""


class WakeupError(Exception):
    """
    Base exception for all wakeup errors.

    Carries a ``details`` dict so that diagnostic context (attempt number,
    elapsed time, server) can be attached without changing the message.
    """
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(WakeupError):
    """
    Raised when no usable connection target was provided.

    Never retried and never consumes retry budget.
    """
    pass


class TransientAvailabilityError(WakeupError):
    """
    Raised when the instance is paused, resuming or throttled (error 40613).

    The only error type the retry scheduler retries.
    """
    pass


class FatalConnectionError(WakeupError):
    """
    Raised for failures that will not go away by waiting.

    Examples:
    - Login failed (bad user or password)
    - Malformed connection string
    - Unreachable host or DNS failure
    - Liveness probe timed out
    """
    pass
