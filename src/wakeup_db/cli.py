"""Command line entry point: ``azure-wakeup-db``.

Exits 0 once the database answers a liveness probe, 1 otherwise.
"""

import asyncio
import signal
import sys

import click
import structlog
from pydantic import ValidationError

from wakeup_db import __version__
from wakeup_db.config import Settings
from wakeup_db.db.connector import Connector
from wakeup_db.exceptions import ConfigurationError, WakeupError
from wakeup_db.logging_config import configure_logging
from wakeup_db.retry.exceptions import RetryCancelled, RetryExhausted
from wakeup_db.retry.policy import BackoffKind
from wakeup_db.wakeup import wake_database

logger = structlog.get_logger(__name__)

SUCCESS_MESSAGE = "Connection successful: database is awake."

HELP = """Connect to awaken a paused Azure DB.

Provide connection details to connect. Every option has an environment
variable named WAKEUP_<OPTION>, e.g. --server=myserver -> WAKEUP_SERVER=myserver.
Command line options take priority. The DSN option always overrides any and
all other connection values.
"""


@click.command(help=HELP, context_settings={"help_option_names": ["-h", "--help"]})
@click.option("--server", help="Database server")
@click.option("--port", type=click.IntRange(1, 65535), help="Database port  [default: 1433]")
@click.option("--instance", help="SQL Server instance name")
@click.option("--database", help="Database name")
@click.option("--user", help="Database user")
@click.option("--password", help="Database password")
@click.option("--dsn", help="Database connection string")
@click.option("--timeout", type=click.FloatRange(min=0, min_open=True), help="Overall deadline in seconds  [default: 300]")
@click.option("--max-attempts", type=click.IntRange(min=1), help="Maximum connection attempts  [default: 15]")
@click.option("--retry-delay", type=click.FloatRange(min=0), help="Seconds between attempts  [default: 25]")
@click.option(
    "--backoff",
    type=click.Choice([kind.value for kind in BackoffKind]),
    help="Delay growth between attempts  [default: fixed]",
)
@click.option("--verbose", is_flag=True, help="Log the connection string (password redacted)")
@click.version_option(__version__, prog_name="azure-wakeup-db")
def main(**options: object) -> None:
    # Unset options (and an absent --verbose flag) fall back to WAKEUP_* variables
    overrides = {
        key.upper(): value
        for key, value in options.items()
        if value is not None and value is not False
    }
    try:
        settings = Settings(**overrides)
    except ValidationError as e:
        click.echo(f"Error: invalid configuration: {e}", err=True)
        sys.exit(1)

    configure_logging(settings.LOG_LEVEL, settings.ENVIRONMENT)

    try:
        asyncio.run(_run(settings))
    except ConfigurationError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    except ValueError as e:
        click.echo(f"Error: invalid configuration: {e}", err=True)
        sys.exit(1)
    except (RetryExhausted, RetryCancelled) as e:
        click.echo(str(e), err=True)
        sys.exit(1)
    except WakeupError as e:
        click.echo(format_failure(e), err=True)
        sys.exit(1)

    click.echo(SUCCESS_MESSAGE)


async def _run(settings: Settings) -> None:
    cancel_event = asyncio.Event()
    _install_signal_handlers(cancel_event)

    connector = Connector(
        driver=settings.ODBC_DRIVER,
        pool_size=settings.POOL_SIZE,
        pool_recycle=settings.POOL_RECYCLE,
    )
    engine = await wake_database(
        settings.connection_parameters(),
        policy=settings.retry_policy(),
        connector=connector,
        verify_timeout=settings.VERIFY_TIMEOUT,
        cancel_event=cancel_event,
        verbose=settings.VERBOSE,
    )
    engine.dispose()


def format_failure(error: WakeupError) -> str:
    """Render a fatal failure with the attempt count and elapsed time."""
    attempts = error.details.get("attempts")
    elapsed = error.details.get("elapsed_s")
    if attempts is None or elapsed is None:
        return str(error)
    return f"{error} (after {attempts} attempt(s) in {elapsed:.1f}s)"


def _install_signal_handlers(cancel_event: asyncio.Event) -> None:
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, cancel_event.set)
        except (NotImplementedError, RuntimeError):
            # Windows event loops and non-main threads
            logger.debug("Signal handler not installed", signal=sig.name)
