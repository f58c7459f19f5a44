"""Schema facade handed to migration units."""

from typing import Callable

from ..connection import Connection
from .blueprint import Blueprint, _check_name


class Schema:
    """Runs blueprint DDL on one connection."""

    def __init__(self, connection: Connection):
        self.connection = connection

    @property
    def dialect(self):
        return self.connection.dialect

    def _run(self, statements: list[str]) -> None:
        for sql in statements:
            self.connection.execute(sql)

    def _blueprint(self, table: str, callback: Callable[[Blueprint], None]) -> Blueprint:
        blueprint = Blueprint(table)
        callback(blueprint)
        return blueprint

    def create(self, table: str, callback: Callable[[Blueprint], None]) -> None:
        """CREATE TABLE from the columns declared by ``callback(blueprint)``."""
        self._run(self._blueprint(table, callback).to_create_sql(self.dialect))

    def create_if_not_exists(self, table: str, callback: Callable[[Blueprint], None]) -> None:
        self._run(self._blueprint(table, callback).to_create_sql(self.dialect, if_not_exists=True))

    def table(self, table: str, callback: Callable[[Blueprint], None]) -> None:
        """ALTER an existing table: add, rename and drop columns, add indexes."""
        self._run(self._blueprint(table, callback).to_alter_sql(self.dialect))

    def drop(self, table: str) -> None:
        self.connection.execute(f"DROP TABLE {_check_name(table)}")

    def drop_if_exists(self, table: str) -> None:
        self.connection.execute(f"DROP TABLE IF EXISTS {_check_name(table)}")

    def rename(self, old: str, new: str) -> None:
        self.connection.execute(f"ALTER TABLE {_check_name(old)} RENAME TO {_check_name(new)}")

    def has_table(self, table: str) -> bool:
        rows = self.connection.execute(self.dialect.table_exists_sql(), (table,))
        return bool(rows)

    def get_column_listing(self, table: str) -> list[str]:
        """Column names of ``table`` (empty if the table does not exist)."""
        rows = self.connection.execute(self.dialect.column_names_sql(), (table,))
        return [row[0] for row in rows]

    def has_column(self, table: str, column: str) -> bool:
        return column in self.get_column_listing(table)

    def has_columns(self, table: str, columns) -> bool:
        listing = set(self.get_column_listing(table))
        return all(column in listing for column in columns)

    def statement(self, sql: str, bindings=()) -> list:
        """Run any statement (data backfills, vendor-specific DDL)."""
        return self.connection.execute(sql, bindings)
