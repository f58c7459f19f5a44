"""PostgreSQL dialect."""

import urllib.parse
from typing import ClassVar, Optional

from ..expressions import RawExpression

from .base import Dialect


def _extract(part: str):
    return lambda column: RawExpression(text=f"EXTRACT({part} FROM {column.sql})")


class PostgresDialect(Dialect):
    """Dialect for PostgreSQL (schemes postgresql, postgres)."""

    SUPPORTED_SCHEMA: ClassVar[tuple[str, ...]] = ("postgresql", "postgres")

    F: ClassVar[dict[str, callable]] = {
        "escape_for_like": lambda s: s.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_"),
        "date": lambda column: RawExpression(text=f"CAST({column.sql} AS DATE)"),
        "year": _extract("YEAR"),
        "month": _extract("MONTH"),
        "day": _extract("DAY"),
    }

    PARAMSTYLE: ClassVar[str] = "format"

    SUPPORTS_RETURNING: ClassVar[bool] = True

    AUTOINCREMENT_PRIMARY_KEY: ClassVar[str] = "{name} SERIAL PRIMARY KEY"

    COLUMN_TYPES: ClassVar[dict[str, str]] = {
        **Dialect.COLUMN_TYPES,
        "float": "DOUBLE PRECISION",
        "json": "JSONB",
    }

    def connect(self, url: str):
        import psycopg2  # pylint: disable=import-outside-toplevel,import-error
        parsed = urllib.parse.urlparse(url)
        return psycopg2.connect(
            host=parsed.hostname,
            user=parsed.username,
            password=parsed.password,
            database=(parsed.path or "")[1:] or None,
            port=parsed.port,
        )

    def integrity_error_types(self):
        import psycopg2  # pylint: disable=import-outside-toplevel,import-error
        return (psycopg2.IntegrityError,)

    def constraint_column(self, error: BaseException) -> Optional[str]:
        diag = getattr(error, "diag", None)
        column = getattr(diag, "column_name", None)
        if column:
            return column
        # DETAIL:  Key (email)=(a@b.c) already exists.
        found = self._search((r"Key \(([^)]+)\)=",), str(error))
        if found:
            return self._last_identifier(found.split(",")[0])
        return None
