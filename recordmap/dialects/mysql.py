"""MySQL dialect."""

import urllib.parse
from typing import ClassVar, Optional

from ..expressions import FunctionExpression

from .base import Dialect


def _function(symbol: str):
    return lambda column: FunctionExpression(symbol=symbol, arguments=(column,))


class MysqlDialect(Dialect):
    """Dialect for MySQL (scheme mysql)."""

    SUPPORTED_SCHEMA: ClassVar[tuple[str, ...]] = ("mysql",)

    F: ClassVar[dict[str, callable]] = {
        "escape_for_like": lambda s: s.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_"),
        "date": _function("DATE"),
        "year": _function("YEAR"),
        "month": _function("MONTH"),
        "day": _function("DAY"),
    }

    PARAMSTYLE: ClassVar[str] = "format"

    AUTOINCREMENT_PRIMARY_KEY: ClassVar[str] = "{name} INT AUTO_INCREMENT PRIMARY KEY"

    COLUMN_TYPES: ClassVar[dict[str, str]] = {
        **Dialect.COLUMN_TYPES,
        "float": "DOUBLE",
        "datetime": "DATETIME",
        "boolean": "TINYINT(1)",
    }

    def connect(self, url: str):
        import pymysql  # pylint: disable=import-outside-toplevel,import-error
        parsed = urllib.parse.urlparse(url)
        return pymysql.connect(
            host=parsed.hostname,
            user=parsed.username,
            password=parsed.password,
            database=(parsed.path or "")[1:] or None,
            port=parsed.port or 3306,
        )

    def integrity_error_types(self):
        import pymysql  # pylint: disable=import-outside-toplevel,import-error
        return (pymysql.err.IntegrityError,)

    def constraint_column(self, error: BaseException) -> Optional[str]:
        found = self._search(
            (
                r"for key '([^']+)'",
                r"Column '([^']+)' cannot be null",
                r"FOREIGN KEY \(`([^`]+)`\)",
            ),
            str(error),
        )
        return self._last_identifier(found) if found else None

    def limit_offset_sql(self, limit, offset) -> str:
        if limit is None and offset is not None:
            limit = 18446744073709551615
        return super().limit_offset_sql(limit, offset)

    def table_exists_sql(self) -> str:
        return (
            "SELECT table_name FROM information_schema.tables "
            "WHERE table_schema = DATABASE() AND table_name = ?"
        )

    def column_names_sql(self) -> str:
        return (
            "SELECT column_name FROM information_schema.columns "
            "WHERE table_schema = DATABASE() AND table_name = ?"
        )
