"""Shared test fixtures and configuration for all tests.

This conftest.py provides common fixtures used across unit and integration tests.
"""

import os
import random
from typing import Callable

import pytest
from sqlalchemy.exc import OperationalError

from wakeup_db.models.parameters import ConnectionParameters
from wakeup_db.retry.policy import RetryPolicy

PAUSED_MESSAGE = (
    "[Microsoft][ODBC Driver 18 for SQL Server][SQL Server]Database 'app' on server "
    "'myserver' is not currently available.  Please retry the connection later. "
    "(40613) (SQLDriverConnect)"
)
LOGIN_FAILED_MESSAGE = (
    "[Microsoft][ODBC Driver 18 for SQL Server][SQL Server]Login failed for user 'sa'. "
    "(18456) (SQLDriverConnect)"
)


class FakeDriverError(Exception):
    """Stand-in for a DBAPI error as raised by pyodbc: args = (sqlstate, message)."""


@pytest.fixture(autouse=True)
def clean_wakeup_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove WAKEUP_* variables so tests never pick up the developer's environment."""
    for name in list(os.environ):
        if name.upper().startswith("WAKEUP_"):
            monkeypatch.delenv(name, raising=False)


@pytest.fixture
def sample_params() -> ConnectionParameters:
    """Fully populated connection parameters."""
    return ConnectionParameters(
        server="myserver.database.windows.net",
        port=1433,
        database="app",
        user="sa",
        password="s3cret",
    )


@pytest.fixture
def fast_policy() -> RetryPolicy:
    """Retry policy with tiny delays so scheduler tests run quickly."""
    return RetryPolicy(
        max_attempts=5,
        base_delay=0.01,
        jitter_fraction=0.1,
        overall_deadline=5.0,
    )


@pytest.fixture
def seeded_rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def make_db_error() -> Callable[[str], OperationalError]:
    """Factory for SQLAlchemy errors wrapping a driver error with the given message.

    Usage:
        def test_something(make_db_error):
            error = make_db_error(PAUSED_MESSAGE)
    """
    def _create(message: str) -> OperationalError:
        orig = FakeDriverError("HY000", message)
        return OperationalError("SELECT 1", None, orig)

    return _create


@pytest.fixture
def paused_error(make_db_error) -> OperationalError:
    """Error raised while the serverless instance is paused or resuming."""
    return make_db_error(PAUSED_MESSAGE)


@pytest.fixture
def login_failed_error(make_db_error) -> OperationalError:
    """Authentication failure, which must never be retried."""
    return make_db_error(LOGIN_FAILED_MESSAGE)
