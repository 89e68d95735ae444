"""
Password redaction for connection strings.

Connection strings are only ever logged or echoed after passing through
``redact_dsn``. Handles the URL forms (user-info, query parameters and the
ODBC string inside ``odbc_connect``) and the ``key=value;`` forms, with or
without the ``odbc:`` prefix.
"""

import re
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import structlog

from wakeup_db.dsn.dialects import ODBC_PREFIX, SQLALCHEMY_PREFIX

REDACTED = "***"

logger = structlog.get_logger(__name__)

_KV_SECRET = re.compile(
    r"(?P<key>(?:^|;)\s*(?:password|pwd)\s*=\s*)(?P<value>\{(?:[^}]|\}\})*\}|[^;]*)",
    re.IGNORECASE,
)
_SECRET_KEYS = {"password", "pwd"}
_ODBC_CONNECT = "odbc_connect"


def redact_dsn(conn_str: str) -> str:
    """
    Mask every password in a connection string.

    Args:
        conn_str: Connection string in any accepted form

    Returns:
        The same string with password values replaced by ``***``

    Examples:
        >>> redact_dsn("sqlserver://sa:secret@db:1433?database=app")
        'sqlserver://sa:***@db:1433?database=app'
        >>> redact_dsn("server=db;user id=sa;password=secret")
        'server=db;user id=sa;password=***'
    """
    if not conn_str:
        return conn_str

    lowered = conn_str.lower()
    if lowered.startswith(ODBC_PREFIX):
        prefix, body = conn_str[:len(ODBC_PREFIX)], conn_str[len(ODBC_PREFIX):]
        return prefix + _redact_key_values(body)
    if "://" in conn_str or lowered.startswith(SQLALCHEMY_PREFIX):
        return _redact_url(conn_str)
    return _redact_key_values(conn_str)


def _redact_key_values(text: str) -> str:
    return _KV_SECRET.sub(lambda m: m.group("key") + REDACTED, text)


def _redact_query(query: str) -> str:
    """Mask password parameters and passwords inside an ``odbc_connect`` value."""
    pairs = parse_qsl(query, keep_blank_values=True)
    changed = False
    redacted = []
    for key, value in pairs:
        lowered = key.lower()
        if lowered in _SECRET_KEYS:
            new_value = REDACTED
        elif lowered == _ODBC_CONNECT:
            new_value = _redact_key_values(value)
        else:
            new_value = value
        changed = changed or new_value != value
        redacted.append((key, new_value))
    if not changed:
        return query
    return urlencode(redacted, safe="*")


def _redact_url(conn_str: str) -> str:
    try:
        parts = urlsplit(conn_str)
    except ValueError:
        # Unparseable URL, fall back to masking the whole user-info section
        logger.debug("Could not parse connection URL for redaction")
        return re.sub(r"(://[^:/@]*:)[^@]*@", r"\1" + REDACTED + "@", conn_str)

    netloc = parts.netloc
    if "@" in netloc:
        userinfo, _, hostport = netloc.rpartition("@")
        if ":" in userinfo:
            user = userinfo.split(":", 1)[0]
            netloc = f"{user}:{REDACTED}@{hostport}"
    query = _redact_query(parts.query)
    return urlunsplit((parts.scheme, netloc, parts.path, query, parts.fragment))
