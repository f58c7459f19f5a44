"""recordmap: active-record entities, a fluent query builder and schema migrations, built on Pydantic and SQL."""

from .connection import Connection, connect, open_connection
from .errors import (
    ConstraintViolation,
    MigrationFailure,
    NotFoundError,
    RecordMapError,
    TransactionError,
    ValidationError,
)
from .query import Query
from .record import Record, scope
from .relations import belongs_to, belongs_to_many, has_many, has_one
from .schema import Blueprint, Schema
from .transaction import transaction

__all__ = [
    "Connection",
    "connect",
    "open_connection",
    "transaction",
    "Query",
    "Record",
    "scope",
    "has_one",
    "has_many",
    "belongs_to",
    "belongs_to_many",
    "Schema",
    "Blueprint",
    "RecordMapError",
    "ValidationError",
    "ConstraintViolation",
    "NotFoundError",
    "MigrationFailure",
    "TransactionError",
]
