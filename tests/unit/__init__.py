"""
Unit tests for azure-wakeup-db.

Test individual components in isolation:
- Connection parameters and DSN builder (raw passthrough, placeholder shape)
- Dialect translation and password redaction
- Throttling classifier (structured and substring checks)
- Connector (pool policy, probe outcomes, cleanup) with a mocked engine
- Retry policy and scheduler (backoff, jitter, cancellation, exhaustion)
- Settings, orchestration and CLI exit codes
"""
