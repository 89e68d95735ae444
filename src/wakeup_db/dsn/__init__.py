"""
Connection string handling.

Main Components:
    - build_dsn: Assemble a ``sqlserver://`` URL from ConnectionParameters
    - is_placeholder_dsn: Recognise the "nothing configured" shape
    - to_sqlalchemy_url: Translate any accepted dialect for the driver
    - redact_dsn: Mask passwords before logging

Usage:
    >>> from wakeup_db.dsn import build_dsn, redact_dsn
    >>> dsn = build_dsn(params, dial_timeout=300)
    >>> logger.info("Connecting", dsn=redact_dsn(dsn))
"""

from wakeup_db.dsn.builder import APP_NAME, build_dsn, is_placeholder_dsn
from wakeup_db.dsn.dialects import (
    DEFAULT_ODBC_DRIVER,
    DSNParseError,
    ParsedDSN,
    parse_key_values,
    to_sqlalchemy_url,
)
from wakeup_db.dsn.redaction import redact_dsn

__all__ = [
    "APP_NAME",
    "DEFAULT_ODBC_DRIVER",
    "DSNParseError",
    "ParsedDSN",
    "build_dsn",
    "is_placeholder_dsn",
    "parse_key_values",
    "redact_dsn",
    "to_sqlalchemy_url",
]
