"""
Store failures raised by the data-access layer.

Every database error leaves the services as a StoreError carrying a
machine-readable code (PostgreSQL SQLSTATE) and a readable message.
"""

from typing import Optional
from sqlalchemy.exc import DBAPIError, SQLAlchemyError

UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"
NOT_NULL_VIOLATION = "23502"
INVALID_TEXT_REPRESENTATION = "22P02"
INSUFFICIENT_PRIVILEGE = "42501"
UNKNOWN = "UNKNOWN"

# SQLite reports constraint failures only in the message text
_MESSAGE_CODES = (
    ("unique constraint failed", UNIQUE_VIOLATION),
    ("duplicate key value", UNIQUE_VIOLATION),
    ("foreign key constraint failed", FOREIGN_KEY_VIOLATION),
    ("not null constraint failed", NOT_NULL_VIOLATION),
    ("permission denied", INSUFFICIENT_PRIVILEGE),
    ("row-level security", INSUFFICIENT_PRIVILEGE),
)


class StoreError(Exception):
    """A failed read or write against the backing store."""

    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code
        self.message = message

    def __repr__(self) -> str:
        return f"StoreError(code={self.code!r}, message={self.message!r})"


class RecordNotFound(Exception):
    """Update or delete addressed an id with no matching row."""

    def __init__(self, resource: str, record_id):
        super().__init__(f"{resource} {record_id} not found")
        self.resource = resource
        self.record_id = record_id


def _code_from_driver(orig) -> Optional[str]:
    # psycopg2 exposes pgcode, psycopg 3 exposes sqlstate
    return getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)


def _code_from_message(message: str) -> str:
    lowered = message.lower()
    for fragment, code in _MESSAGE_CODES:
        if fragment in lowered:
            return code
    return UNKNOWN


def store_error_from_exception(exc: SQLAlchemyError) -> StoreError:
    """Translate a SQLAlchemy exception into a StoreError."""
    if isinstance(exc, DBAPIError) and exc.orig is not None:
        message = str(exc.orig).strip()
        code = _code_from_driver(exc.orig) or _code_from_message(message)
    else:
        message = str(exc).strip()
        code = _code_from_message(message)
    return StoreError(code=code, message=message)
