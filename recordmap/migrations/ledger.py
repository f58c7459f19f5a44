"""Persisted record of applied migration units, grouped in batches."""

from typing import Optional

from ..connection import Connection
from ..query import Query
from ..schema import Schema
from ..utils.now import utcnow


class MigrationLedger:
    """The ``migrations`` table: one row per applied unit.

    This table is the only source of truth for "applied"; the live schema is
    never inspected. It is created on first use.
    """

    def __init__(self, connection: Connection, table: str = "migrations"):
        self.connection = connection
        self.table = table
        self.ensure_table()

    def ensure_table(self) -> None:
        def columns(table):
            table.id()
            table.string("migration").unique()
            table.integer("batch")
            table.timestamp("executed_at").nullable()
        Schema(self.connection).create_if_not_exists(self.table, columns)

    def query(self) -> Query:
        return Query(connection=self.connection, table=self.table)

    def applied(self) -> list[str]:
        """Applied identifiers, ascending."""
        return self.query().order_by("migration").pluck("migration")

    def entries(self) -> dict[str, int]:
        """Applied identifier -> batch number."""
        rows = self.query().select("migration", "batch").order_by("migration").get()
        return {row["migration"]: row["batch"] for row in rows}

    def last_batch_number(self) -> int:
        return int(self.query().max("batch") or 0)

    def next_batch_number(self) -> int:
        return self.last_batch_number() + 1

    def batches(self, steps: int = 1) -> list[int]:
        """The last ``steps`` batch numbers, most recent first."""
        return (
            self.query().distinct().order_by("batch", "desc").limit(steps).pluck("batch")
        )

    def identifiers_in(self, batches: list[int]) -> list[str]:
        """Identifiers of the given batches in reverse order: newest batch first, then descending name."""
        return (
            self.query()
            .where_in("batch", batches)
            .order_by("batch", "desc")
            .order_by("migration", "desc")
            .pluck("migration")
        )

    def batch_of(self, identifier: str) -> Optional[int]:
        batches = self.query().where("migration", identifier).pluck("batch")
        return batches[0] if batches else None

    def record(self, identifier: str, batch: int) -> None:
        self.query().insert(
            {"migration": identifier, "batch": batch, "executed_at": utcnow()},
            returning=False,
        )

    def forget(self, identifier: str) -> None:
        self.query().where("migration", identifier).force_delete()


__all__ = ["MigrationLedger"]
