"""Data models shared by the DSN builder, connector and retry scheduler."""

from wakeup_db.models.outcomes import (
    AttemptOutcome,
    Cancelled,
    FatalFailure,
    Success,
    TransientFailure,
)
from wakeup_db.models.parameters import (
    DEFAULT_PORT,
    ConnectionParameters,
    ConnectionSource,
    resolve_parameters,
)

__all__ = [
    "AttemptOutcome",
    "Cancelled",
    "ConnectionParameters",
    "ConnectionSource",
    "DEFAULT_PORT",
    "FatalFailure",
    "Success",
    "TransientFailure",
    "resolve_parameters",
]
