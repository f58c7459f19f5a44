"""SQLite dialect."""

import logging
import sqlite3
import urllib.parse
from typing import ClassVar, Optional

from ..expressions import FunctionExpression, RawExpression

from .base import Dialect

logger = logging.getLogger(__name__)


def _strftime_part(fmt: str):
    return lambda column: RawExpression(
        text=f"CAST(strftime('{fmt}', {column.sql}) AS INTEGER)"
    )


class SqliteDialect(Dialect):
    """Dialect for SQLite (scheme sqlite)."""

    SUPPORTED_SCHEMA: ClassVar[tuple[str, ...]] = ("sqlite",)

    F: ClassVar[dict[str, callable]] = {
        "escape_for_like": lambda s: s.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_"),
        "date": lambda column: FunctionExpression(symbol="DATE", arguments=(column,)),
        "year": _strftime_part("%Y"),
        "month": _strftime_part("%m"),
        "day": _strftime_part("%d"),
    }

    SUPPORTS_RETURNING: ClassVar[bool] = sqlite3.sqlite_version_info >= (3, 35, 0)

    AUTOINCREMENT_PRIMARY_KEY: ClassVar[str] = "{name} INTEGER PRIMARY KEY AUTOINCREMENT"

    ALTER_ADD_FOREIGN_KEY: ClassVar[bool] = False

    def connect(self, url: str):
        parsed = urllib.parse.urlparse(url)
        path = (parsed.path or "")[1:] or parsed.hostname or ":memory:"
        logger.debug("Connecting to SQLite database %s", path)
        conn = sqlite3.connect(path)
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    def integrity_error_types(self):
        return (sqlite3.IntegrityError,)

    def constraint_column(self, error: BaseException) -> Optional[str]:
        # "UNIQUE constraint failed: users.email" / "NOT NULL constraint failed: users.name"
        found = self._search((r"constraint failed: ([\w.]+)",), str(error))
        return self._last_identifier(found) if found else None

    def limit_offset_sql(self, limit, offset) -> str:
        if limit is None and offset is not None:
            limit = -1
        return super().limit_offset_sql(limit, offset)

    def begin(self, raw) -> None:
        if not raw.in_transaction:
            raw.execute("BEGIN")

    def table_exists_sql(self) -> str:
        return "SELECT name FROM sqlite_master WHERE type = 'table' AND name = ?"

    def column_names_sql(self) -> str:
        return "SELECT name FROM pragma_table_info(?)"
