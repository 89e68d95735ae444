"""
Unit tests for structured logging setup.
"""

import json
import logging
import sys

import pytest
import structlog

from wakeup_db.logging_config import (
    APP_NAME,
    add_app_context,
    configure_logging,
    redact_secrets,
)


@pytest.fixture
def restore_logging():
    """Undo configure_logging's changes to the root logger and structlog."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)
    structlog.reset_defaults()


def test_add_app_context():
    event = add_app_context(None, "info", {"event": "hello"})

    assert event["app"] == APP_NAME


def test_redact_secrets_masks_password_fields():
    event = redact_secrets(None, "info", {"event": "x", "password": "pw", "PWD": "pw"})

    assert event["password"] == "***"
    assert event["PWD"] == "***"


def test_redact_secrets_masks_connection_strings():
    event = redact_secrets(
        None,
        "info",
        {
            "event": "x",
            "dsn": "sqlserver://sa:secret@db:1433",
            "conn_str": "server=db;password=secret",
            "server": "db",
        },
    )

    assert event["dsn"] == "sqlserver://sa:***@db:1433"
    assert event["conn_str"] == "server=db;password=***"
    assert event["server"] == "db"


def test_configure_logging_writes_to_stderr(restore_logging):
    configure_logging("DEBUG", "development")

    handlers = restore_logging.handlers
    assert len(handlers) == 1
    assert handlers[0].stream is sys.stderr
    assert restore_logging.level == logging.DEBUG
    assert logging.getLogger("sqlalchemy").level == logging.WARNING


def test_unknown_level_falls_back_to_info(restore_logging):
    configure_logging("chatty", "development")

    assert restore_logging.level == logging.INFO


def test_production_renders_json(restore_logging):
    configure_logging("INFO", "production")
    formatter = restore_logging.handlers[0].formatter

    record = logging.LogRecord(
        "wakeup_db.test", logging.INFO, __file__, 1, "plain stdlib message", None, None
    )
    rendered = json.loads(formatter.format(record))

    assert rendered["event"] == "plain stdlib message"
    assert rendered["app"] == APP_NAME
    assert rendered["level"] == "info"
