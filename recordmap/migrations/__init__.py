"""Versioned schema changes: units, ledger and runner."""

from .ledger import MigrationLedger
from .migration import Migration, guess_table_name, load_migrations, make_migration
from .runner import MigrationRunner, MigrationStatus

__all__ = [
    "Migration",
    "MigrationLedger",
    "MigrationRunner",
    "MigrationStatus",
    "load_migrations",
    "make_migration",
    "guess_table_name",
]
