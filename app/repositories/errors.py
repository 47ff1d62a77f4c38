"""Classification of storage engine errors.

Drivers report constraint violations in their own way: SQLite through
extended result codes, PostgreSQL through SQLSTATE. ``classify_error`` reads
those codes and reduces any engine exception to an ``ErrorKind`` so the
repositories can raise the matching domain error. Message text is never
inspected.
"""

from enum import Enum

# sqlite3 extended result code for a UNIQUE constraint violation
SQLITE_CONSTRAINT_UNIQUE = 2067

# SQLSTATE unique_violation
PG_UNIQUE_VIOLATION = "23505"


class ErrorKind(str, Enum):
    """Outcome classes an engine error can map to."""

    ALREADY_EXISTS = "already_exists"
    STORAGE_FAILURE = "storage_failure"


def _driver_error(exc: BaseException) -> BaseException:
    # SQLAlchemy wraps the DBAPI exception in ``orig``
    orig = getattr(exc, "orig", None)
    return orig if orig is not None else exc


def is_unique_violation(exc: BaseException) -> bool:
    """True if ``exc`` is a unique-constraint violation on a supported engine."""
    driver_error = _driver_error(exc)

    if getattr(driver_error, "sqlite_errorcode", None) == SQLITE_CONSTRAINT_UNIQUE:
        return True

    sqlstate = getattr(driver_error, "sqlstate", None) or getattr(driver_error, "pgcode", None)
    return sqlstate == PG_UNIQUE_VIOLATION


def classify_error(exc: BaseException) -> ErrorKind:
    """Map an engine exception (wrapped by SQLAlchemy or raw DBAPI) to an ErrorKind."""
    if is_unique_violation(exc):
        return ErrorKind.ALREADY_EXISTS
    return ErrorKind.STORAGE_FAILURE
