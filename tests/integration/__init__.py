"""
Integration tests for azure-wakeup-db.

Run against a real SQL Server / Azure SQL database, selected with the
WAKEUP_TEST_DSN environment variable. Skipped when it is not set.
"""
