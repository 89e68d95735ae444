"""
Wake up an auto-paused Azure SQL database.

Serverless Azure SQL instances reject connections with error 40613 while
they resume. This package keeps connecting (with backoff and jitter) until
the instance answers a liveness probe, gives up immediately on permanent
failures, and respects an overall deadline.

Architecture: DSN builder + throttling classifier + pooled connector,
driven by an asyncio retry scheduler.
"""

__version__ = "0.1.0"
