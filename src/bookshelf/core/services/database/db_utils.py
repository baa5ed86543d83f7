from enum import Enum

from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError

# PostgreSQL SQLSTATE codes
_PG_UNIQUE_VIOLATION = "23505"
_PG_FOREIGN_KEY_VIOLATION = "23503"


class IntegrityViolation(str, Enum):
    UNIQUE = "unique"
    FOREIGN_KEY = "foreign_key"
    OTHER = "other"


def enable_sqlite_foreign_keys(engine: Engine) -> None:
    """Turn on foreign key enforcement for every new SQLite connection.

    SQLite ignores ``ON DELETE CASCADE`` unless the pragma is set per connection.
    """

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, _connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def classify_integrity_error(exc: IntegrityError) -> IntegrityViolation:
    """Tell unique violations apart from foreign key violations."""
    orig = exc.orig
    code = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    if code == _PG_UNIQUE_VIOLATION:
        return IntegrityViolation.UNIQUE
    if code == _PG_FOREIGN_KEY_VIOLATION:
        return IntegrityViolation.FOREIGN_KEY

    message = str(orig).upper()
    if "UNIQUE CONSTRAINT FAILED" in message or "DUPLICATE KEY" in message:
        return IntegrityViolation.UNIQUE
    if "FOREIGN KEY CONSTRAINT FAILED" in message:
        return IntegrityViolation.FOREIGN_KEY
    return IntegrityViolation.OTHER
