"""
Configuration settings for azure-wakeup-db.

All settings are loaded from ``WAKEUP_*`` environment variables with sensible
defaults (e.g. ``WAKEUP_SERVER``, ``WAKEUP_DSN``). A ``.env`` file is read
for local development. Command-line options override environment values.
"""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from wakeup_db.dsn.dialects import DEFAULT_ODBC_DRIVER
from wakeup_db.models.parameters import ConnectionParameters
from wakeup_db.retry.policy import BackoffKind, RetryPolicy


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="WAKEUP_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # === Connection target ===
    SERVER: str = ""
    PORT: int = 1433
    INSTANCE: Optional[str] = None
    DATABASE: Optional[str] = None
    USER: str = ""
    PASSWORD: str = ""
    DSN: Optional[str] = None  # Overrides all fields above

    # === Output ===
    VERBOSE: bool = False  # Log the (redacted) connection string
    LOG_LEVEL: str = "INFO"
    ENVIRONMENT: str = "development"  # "production" switches logs to JSON

    # === Retry ===
    MAX_ATTEMPTS: int = 15
    RETRY_DELAY: float = 25.0  # seconds
    BACKOFF: BackoffKind = BackoffKind.FIXED
    BACKOFF_MULTIPLIER: float = 2.0
    JITTER_FRACTION: float = 0.1
    TIMEOUT: float = 300.0  # overall deadline, seconds
    VERIFY_TIMEOUT: float = 300.0  # per liveness probe, seconds

    # === Driver ===
    ODBC_DRIVER: str = DEFAULT_ODBC_DRIVER
    POOL_SIZE: int = 5
    POOL_RECYCLE: int = 360  # seconds

    def connection_parameters(self) -> ConnectionParameters:
        """Project the connection fields into ConnectionParameters."""
        return ConnectionParameters(
            server=self.SERVER,
            port=self.PORT,
            instance_name=self.INSTANCE or None,
            database=self.DATABASE or None,
            user=self.USER,
            password=self.PASSWORD,
            raw_dsn=self.DSN or None,
        )

    def retry_policy(self) -> RetryPolicy:
        """Project the retry fields into a RetryPolicy."""
        return RetryPolicy(
            max_attempts=self.MAX_ATTEMPTS,
            base_delay=self.RETRY_DELAY,
            backoff=self.BACKOFF,
            backoff_multiplier=self.BACKOFF_MULTIPLIER,
            jitter_fraction=self.JITTER_FRACTION,
            overall_deadline=self.TIMEOUT,
        )
