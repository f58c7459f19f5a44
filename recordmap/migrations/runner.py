"""Applies pending migration units in order and reverses the latest batches."""

import logging
from contextlib import nullcontext
from typing import Callable, ContextManager, Iterable, Optional

from pydantic import BaseModel

from ..connection import Connection
from ..errors import MigrationFailure, ValidationError
from ..schema import Schema
from .ledger import MigrationLedger
from .migration import Migration

logger = logging.getLogger("recordmap")


class MigrationStatus(BaseModel):
    """One row of ``MigrationRunner.status()``."""

    identifier: str
    applied: bool
    batch: Optional[int] = None

    @property
    def state(self) -> str:
        return f"applied (batch {self.batch})" if self.applied else "pending"


def _check_steps(steps: Optional[int]) -> Optional[int]:
    if steps is not None and (isinstance(steps, bool) or not isinstance(steps, int) or steps < 1):
        raise ValidationError(f"steps must be a positive integer, got {steps!r}")
    return steps


class MigrationRunner:
    """Sequences migration units against the ledger of one connection.

    The runner never opens transactions itself. ``unit_boundary`` is an
    optional factory of context managers wrapped around each unit's apply (or
    reverse) together with its ledger write, e.g. ``connection.transaction``.
    """

    def __init__(
        self,
        connection: Connection,
        migrations: Iterable[Migration],
        table: str = "migrations",
        unit_boundary: Optional[Callable[[], ContextManager]] = None,
    ):
        self.connection = connection
        self.migrations = sorted(migrations, key=lambda migration: migration.identifier)
        seen = set()
        for migration in self.migrations:
            if migration.identifier in seen:
                raise ValidationError(f"Duplicate migration identifier: {migration.identifier}")
            seen.add(migration.identifier)
        self.schema = Schema(connection)
        self.ledger = MigrationLedger(connection, table)
        self.unit_boundary = unit_boundary

    def _boundary(self) -> ContextManager:
        return self.unit_boundary() if self.unit_boundary is not None else nullcontext()

    def _run(self, migration: Migration, direction: str, bookkeeping: Callable[[], None]) -> None:
        try:
            with self._boundary():
                getattr(migration, direction)(self.schema)
                bookkeeping()
        except Exception as error:
            logger.error("Migration %s failed (%s): %s", migration.identifier, direction, error)
            raise MigrationFailure(migration.identifier, direction, str(error)) from error

    def pending(self) -> list[str]:
        """Identifiers not in the ledger, ascending."""
        applied = set(self.ledger.applied())
        return [m.identifier for m in self.migrations if m.identifier not in applied]

    def migrate(self, steps: Optional[int] = None) -> list[str]:
        """Apply pending units (at most ``steps``) as one new batch.

        Stops at the first failing unit with ``MigrationFailure``; units already
        applied by this call stay applied and recorded.
        """
        _check_steps(steps)
        pending = set(self.pending())
        units = [m for m in self.migrations if m.identifier in pending]
        if steps is not None:
            units = units[:steps]
        if not units:
            logger.info("Nothing to migrate")
            return []
        batch = self.ledger.next_batch_number()
        applied = []
        for migration in units:
            self._run(migration, "up", lambda: self.ledger.record(migration.identifier, batch))
            logger.info("Migrated %s (batch %d)", migration.identifier, batch)
            applied.append(migration.identifier)
        return applied

    def rollback(self, steps: Optional[int] = None) -> list[str]:
        """Reverse the last ``steps`` batches (default 1), newest unit first."""
        steps = _check_steps(steps) or 1
        batches = self.ledger.batches(steps)
        identifiers = self.ledger.identifiers_in(batches) if batches else []
        if not identifiers:
            logger.info("Nothing to rollback")
            return []
        known = {migration.identifier: migration for migration in self.migrations}
        for identifier in identifiers:
            if identifier not in known:
                logger.error("Migration %s is applied but no longer known", identifier)
                raise MigrationFailure(identifier, "down", "unit not found")
        reversed_ = []
        for identifier in identifiers:
            migration = known[identifier]
            self._run(migration, "down", lambda: self.ledger.forget(migration.identifier))
            logger.info("Rolled back %s", identifier)
            reversed_.append(identifier)
        return reversed_

    def reset(self) -> list[str]:
        """Roll back every batch, one at a time."""
        reversed_ = []
        while self.ledger.last_batch_number():
            reversed_ += self.rollback(1)
        if not reversed_:
            logger.info("Nothing to reset")
        return reversed_

    def refresh(self) -> tuple[list[str], list[str]]:
        """``reset()`` then ``migrate()``."""
        return self.reset(), self.migrate()

    def status(self) -> list[MigrationStatus]:
        """Every known unit with its ledger state, ascending; executes nothing."""
        entries = self.ledger.entries()
        return [
            MigrationStatus(
                identifier=migration.identifier,
                applied=migration.identifier in entries,
                batch=entries.get(migration.identifier),
            )
            for migration in self.migrations
        ]


__all__ = ["MigrationRunner", "MigrationStatus"]
