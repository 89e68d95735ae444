"""
Database access: throttling classification and connect-and-verify.

Main Components:
    - Connector: Opens a pooled engine and runs the liveness probe once
    - is_throttling: Detects the paused/resuming instance error (40613)
"""

from wakeup_db.db.classifier import THROTTLING_ERROR_CODE, is_throttling
from wakeup_db.db.connector import Connector

__all__ = [
    "Connector",
    "THROTTLING_ERROR_CODE",
    "is_throttling",
]
