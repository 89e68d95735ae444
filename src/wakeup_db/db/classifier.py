"""Recognise the Azure SQL "database unavailable, retry later" error."""

from typing import Iterator, Optional

# Azure SQL: database on server is not currently available (paused or resuming)
THROTTLING_ERROR_CODE = 40613


def is_throttling(failure: Optional[BaseException]) -> bool:
    """
    Return True if the failure is the paused/throttled instance condition.

    Prefers a structured check (driver error ``number`` or an integer in
    ``args``) and falls back to looking for the error code in the message,
    since not every failure path exposes the code as a typed field. Walks
    the wrapped driver error and the exception chain.
    """
    if failure is None:
        return False

    marker = str(THROTTLING_ERROR_CODE)
    for exc in _chain(failure):
        if getattr(exc, "number", None) == THROTTLING_ERROR_CODE:
            return True
        if any(isinstance(arg, int) and arg == THROTTLING_ERROR_CODE for arg in exc.args):
            return True
        if marker in str(exc):
            return True
    return False


def _chain(failure: BaseException) -> Iterator[BaseException]:
    seen: set[int] = set()
    pending = [failure]
    while pending:
        exc = pending.pop()
        if id(exc) in seen:
            continue
        seen.add(id(exc))
        yield exc
        # SQLAlchemy keeps the DBAPI exception on .orig
        for linked in (getattr(exc, "orig", None), exc.__cause__, exc.__context__):
            if isinstance(linked, BaseException):
                pending.append(linked)
