"""
Unit tests for the throttling classifier.
"""

import pytest

from wakeup_db.db.classifier import THROTTLING_ERROR_CODE, is_throttling
from wakeup_db.exceptions import FatalConnectionError


class NumberedDriverError(Exception):
    """pymssql-style error exposing the SQL Server error number."""

    def __init__(self, number: int, message: str):
        super().__init__(message)
        self.number = number


def test_none_is_not_throttling():
    assert is_throttling(None) is False


def test_marker_in_message():
    assert is_throttling(Exception("Database is not currently available. (40613)"))


def test_wrapped_driver_error(paused_error):
    """SQLAlchemy wraps the driver error; the marker is found through .orig."""
    assert is_throttling(paused_error)


def test_structured_error_number():
    assert is_throttling(NumberedDriverError(THROTTLING_ERROR_CODE, "unavailable"))


def test_integer_code_in_args():
    assert is_throttling(Exception(THROTTLING_ERROR_CODE, "Database unavailable"))


def test_marker_found_through_cause_chain():
    try:
        try:
            raise RuntimeError("Database 'app' is not currently available (40613)")
        except RuntimeError as inner:
            raise FatalConnectionError("error connecting to database") from inner
    except FatalConnectionError as outer:
        assert is_throttling(outer)


def test_login_failure_is_not_throttling(login_failed_error):
    assert is_throttling(login_failed_error) is False


@pytest.mark.parametrize(
    "failure",
    [
        ConnectionRefusedError("[Errno 111] Connection refused"),
        TimeoutError("timed out"),
        Exception("Incorrect syntax near 'SELEC'. (102)"),
        Exception("Login timeout expired (HYT00)"),
        NumberedDriverError(18456, "Login failed for user 'sa'."),
        Exception(40197, "The service has encountered an error"),
    ],
)
def test_other_failures_are_not_throttling(failure):
    assert is_throttling(failure) is False


def test_self_referencing_chain_terminates():
    error = Exception("boom")
    error.__context__ = error

    assert is_throttling(error) is False
