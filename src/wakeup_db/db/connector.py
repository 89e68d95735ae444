"""
Connect-and-verify against SQL Server.

Opens a small pooled SQLAlchemy engine and proves it usable with a liveness
probe. One call is one attempt: the connector never retries, it only reports
how the attempt ended so the retry scheduler can decide what to do next.
"""

import asyncio
import time
from typing import Any, Optional

import structlog
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from wakeup_db.db.classifier import is_throttling
from wakeup_db.dsn.dialects import DEFAULT_ODBC_DRIVER, DSNParseError, to_sqlalchemy_url
from wakeup_db.exceptions import FatalConnectionError, TransientAvailabilityError
from wakeup_db.models.outcomes import AttemptOutcome, FatalFailure, Success, TransientFailure

logger = structlog.get_logger(__name__)

DEFAULT_POOL_SIZE = 5
DEFAULT_POOL_RECYCLE = 360  # seconds
PROBE_QUERY = "SELECT 1"


class Connector:
    """
    Opens and verifies database connections.

    Pool policy:
    - At most ``pool_size`` open connections (no overflow), the same number
      kept idle
    - Connections recycled after ``pool_recycle`` seconds, so a connection
      made while the instance was still waking is not held forever

    Attributes:
        driver: ODBC driver name used when the connection string names none
        pool_size: Maximum open (and idle) connections
        pool_recycle: Connection lifetime cap in seconds
        probe_query: Statement used as liveness probe
    """

    def __init__(
        self,
        driver: str = DEFAULT_ODBC_DRIVER,
        pool_size: int = DEFAULT_POOL_SIZE,
        pool_recycle: int = DEFAULT_POOL_RECYCLE,
        probe_query: str = PROBE_QUERY,
    ):
        self.driver = driver
        self.pool_size = pool_size
        self.pool_recycle = pool_recycle
        self.probe_query = probe_query

    def create_engine(self, conn_str: str, verify_timeout: float) -> Engine:
        """
        Create a pooled engine for the connection string.

        No network I/O happens here; the pool connects lazily.

        Raises:
            FatalConnectionError: If the connection string is malformed
        """
        try:
            parsed = to_sqlalchemy_url(conn_str, driver=self.driver)
        except DSNParseError as e:
            raise FatalConnectionError(
                f"error opening database: {e}", {"stage": "parse"}
            ) from e

        login_timeout = max(1, int(verify_timeout))
        if parsed.login_timeout:
            login_timeout = min(login_timeout, parsed.login_timeout)

        connect_args: dict[str, Any] = {}
        if parsed.url.get_backend_name() == "mssql" and parsed.url.get_driver_name() == "pyodbc":
            connect_args["timeout"] = login_timeout

        try:
            return create_engine(
                parsed.url,
                pool_size=self.pool_size,
                max_overflow=0,
                pool_recycle=self.pool_recycle,
                pool_timeout=login_timeout,
                connect_args=connect_args,
            )
        except (SQLAlchemyError, ImportError) as e:
            raise FatalConnectionError(
                f"error opening database: {e}", {"stage": "open"}
            ) from e

    async def connect_and_verify(
        self, conn_str: str, verify_timeout: float
    ) -> AttemptOutcome[Engine]:
        """
        Open a connection and run the liveness probe once.

        Args:
            conn_str: Connection string in any accepted dialect
            verify_timeout: Upper bound for the probe in seconds

        Returns:
            Success(engine) on a working connection (the caller must
            ``dispose()`` it), TransientFailure when the instance is still
            paused, FatalFailure for anything else
        """
        try:
            engine = self.create_engine(conn_str, verify_timeout)
        except FatalConnectionError as e:
            logger.warning("Could not open database", error=str(e))
            return FatalFailure(e)

        started = time.monotonic()
        loop = asyncio.get_running_loop()
        probe = loop.run_in_executor(None, self._probe, engine)

        try:
            await asyncio.wait_for(asyncio.shield(probe), timeout=verify_timeout)
        except asyncio.TimeoutError:
            _dispose_when_done(probe, engine)
            error = FatalConnectionError(
                f"error connecting to database: liveness probe timed out after {verify_timeout}s",
                {"verify_timeout_s": verify_timeout},
            )
            logger.warning("Liveness probe timed out", verify_timeout_s=verify_timeout)
            return FatalFailure(error)
        except asyncio.CancelledError:
            _dispose_when_done(probe, engine)
            raise
        except SQLAlchemyError as e:
            engine.dispose()
            return self._classify(e, time.monotonic() - started)

        latency_ms = int((time.monotonic() - started) * 1000)
        logger.info("Liveness probe succeeded", latency_ms=latency_ms)
        return Success(engine)

    def _probe(self, engine: Engine) -> None:
        with engine.connect() as conn:
            conn.execute(text(self.probe_query))

    def _classify(self, error: SQLAlchemyError, elapsed: float) -> AttemptOutcome[Engine]:
        details = {"error_type": type(error).__name__, "probe_s": round(elapsed, 3)}
        message = f"error connecting to database: {error}"
        if is_throttling(error):
            logger.info("Database unavailable, instance is paused or resuming", **details)
            cause = TransientAvailabilityError(message, details)
            cause.__cause__ = error
            return TransientFailure(cause)

        logger.warning("Database connection failed", error=str(error), **details)
        fatal = FatalConnectionError(message, details)
        fatal.__cause__ = error
        return FatalFailure(fatal)


def _dispose_when_done(probe: "asyncio.Future[Optional[Any]]", engine: Engine) -> None:
    """Release the engine once the abandoned probe thread finishes."""

    def _release(future: "asyncio.Future[Optional[Any]]") -> None:
        if not future.cancelled():
            future.exception()  # mark retrieved
        engine.dispose()

    probe.add_done_callback(_release)
