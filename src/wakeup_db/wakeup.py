"""
Wake a paused database: resolve, build, check, then retry connect-and-verify.
"""

import asyncio
from typing import Optional

import structlog
from sqlalchemy.engine import Engine

from wakeup_db.db.connector import Connector
from wakeup_db.dsn.builder import build_dsn, is_placeholder_dsn
from wakeup_db.dsn.redaction import redact_dsn
from wakeup_db.exceptions import ConfigurationError
from wakeup_db.models.parameters import ConnectionSource, resolve_parameters
from wakeup_db.retry.policy import RetryPolicy
from wakeup_db.retry.scheduler import RetryScheduler

logger = structlog.get_logger(__name__)

NO_CONFIGURATION_MESSAGE = (
    "no connection string provided via --dsn flag or environment variables"
)


async def wake_database(
    source: ConnectionSource,
    *,
    policy: RetryPolicy,
    connector: Connector,
    verify_timeout: float,
    cancel_event: Optional[asyncio.Event] = None,
    verbose: bool = False,
) -> Engine:
    """
    Connect to a possibly paused database, waiting for it to resume.

    Args:
        source: Raw connection string, field mapping, or ConnectionParameters
        policy: Retry policy; its deadline also sizes the dial timeout
        connector: Connector performing each attempt
        verify_timeout: Upper bound for each liveness probe in seconds
        cancel_event: Optional external cancellation signal
        verbose: Log the (redacted) connection string before connecting

    Returns:
        Verified SQLAlchemy engine; the caller must ``dispose()`` it

    Raises:
        ConfigurationError: Nothing to connect to (no attempt is made)
        FatalConnectionError: Permanent failure on some attempt
        RetryExhausted: Still paused after every attempt
        RetryCancelled: Cancelled or overall deadline passed
    """
    params = resolve_parameters(source)
    dsn = build_dsn(params, dial_timeout=policy.overall_deadline)

    if verbose:
        logger.info("Connecting", dsn=redact_dsn(dsn))

    if params.is_empty or is_placeholder_dsn(dsn):
        raise ConfigurationError(NO_CONFIGURATION_MESSAGE)

    logger.info(
        "Waking database",
        server=params.server or None,
        database=params.database,
        raw_dsn=params.has_raw_dsn,
        max_attempts=policy.max_attempts,
        backoff=policy.backoff.value,
        overall_deadline_s=policy.overall_deadline,
    )

    scheduler: RetryScheduler[Engine] = RetryScheduler(policy)
    engine, _metadata = await scheduler.run(
        lambda: connector.connect_and_verify(dsn, verify_timeout),
        cancel_event,
    )
    return engine
