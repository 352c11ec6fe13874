"""Classification of store failures.

The signal list is closed: a failure is "schema missing" only if it matches one
of the codes or phrases below. Anything else is opaque and must reach the
caller untouched.
"""
from enum import Enum
from typing import Iterable, Optional

from core.exceptions import ConfigurationError, StoreError


class ErrorKind(str, Enum):
    CONFIGURATION = "configuration"
    SCHEMA_MISSING = "schema_missing"
    OPAQUE = "opaque"


# PostgREST: table not found in the schema cache
MISSING_TABLE_CODES = frozenset({"PGRST205"})

MISSING_TABLE_PHRASES = (
    "schema cache",
    "does not exist",  # PostgreSQL: relation "x" does not exist
    "no such table",  # SQLite
)


def classify_error(error: Optional[BaseException]) -> Optional[ErrorKind]:
    """Return the kind of `error`, or None when there is no error."""
    if error is None:
        return None
    if isinstance(error, ConfigurationError):
        return ErrorKind.CONFIGURATION

    if isinstance(error, StoreError):
        code, message = error.code, error.message
    else:
        code, message = None, str(error)

    if code in MISSING_TABLE_CODES:
        return ErrorKind.SCHEMA_MISSING
    message = message or ""
    if any(phrase in message for phrase in MISSING_TABLE_PHRASES):
        return ErrorKind.SCHEMA_MISSING
    return ErrorKind.OPAQUE


def is_table_missing_error(error: Optional[BaseException]) -> bool:
    return classify_error(error) == ErrorKind.SCHEMA_MISSING


def any_table_missing(errors: Iterable[Optional[BaseException]]) -> bool:
    return any(is_table_missing_error(error) for error in errors)
