"""Exception taxonomy shared by the query builder, records and the migration runner."""

from typing import Optional


class RecordMapError(Exception):
    """Base class for every error raised by recordmap."""


class ValidationError(RecordMapError, ValueError):
    """Malformed input detected before any SQL is sent.

    Examples: an operator outside the allow-list, an unknown sort direction,
    an unknown attribute, a required attribute missing at save time.
    """

    def __init__(self, message: str, column: Optional[str] = None):
        super().__init__(message)
        self.column = column


class ConstraintViolation(RecordMapError):
    """A uniqueness, foreign-key, not-null or check constraint rejected a write.

    ``column`` is filled in when the driver error message names it.
    The driver exception is available as ``__cause__``.
    """

    def __init__(self, message: str, column: Optional[str] = None):
        super().__init__(message)
        self.column = column


class NotFoundError(RecordMapError, LookupError):
    """Raised by the ``*_or_fail`` helpers; plain lookups return ``None`` instead."""


class MigrationFailure(RecordMapError):
    """A migration unit raised while being applied or reversed."""

    def __init__(self, identifier: str, direction: str, message: str):
        super().__init__(f"Migration {identifier} failed ({direction}): {message}")
        self.identifier = identifier
        self.direction = direction


class TransactionError(RecordMapError):
    """A transaction handle was used outside of its scope."""


__all__ = [
    "RecordMapError",
    "ValidationError",
    "ConstraintViolation",
    "NotFoundError",
    "MigrationFailure",
    "TransactionError",
]
