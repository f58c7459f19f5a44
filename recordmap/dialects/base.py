"""Base Dialect type: subclasses implement connect() and the engine-specific SQL hooks."""

import re
from abc import ABC, abstractmethod
from typing import Any, Callable, ClassVar, Optional

from pydantic import BaseModel


class _DialectF:
    """Helper for dialect.f: __getattr__ returns the callable from the dialect's F config."""

    __slots__ = ("_dialect",)

    def __init__(self, dialect: "Dialect") -> None:
        self._dialect = dialect

    def __getattr__(self, name: str) -> Callable[..., Any]:
        F = type(self._dialect).F  # pylint: disable=invalid-name
        if name in F:
            return F[name]
        raise AttributeError(name)


class Dialect(BaseModel, ABC):
    """Base for database dialects; subclasses implement connect() for a given URL."""

    model_config = {"arbitrary_types_allowed": True}

    SUPPORTED_SCHEMA: ClassVar[tuple[str, ...]] = ()
    """URL schemes this dialect handles (e.g. ('sqlite',), ('postgresql', 'postgres'))."""

    F: ClassVar[dict[str, Callable[..., Any]]] = {}
    """Dialect-specific SQL helpers (e.g. year). Access via dialect.f.year(column)."""

    PARAMSTYLE: ClassVar[str] = "qmark"
    """DB-API paramstyle of the driver; queries are always compiled with ``?``."""

    SUPPORTS_RETURNING: ClassVar[bool] = False
    """True if ``INSERT ... RETURNING pk`` can be used to read back generated keys."""

    AUTOINCREMENT_PRIMARY_KEY: ClassVar[str] = "{name} INTEGER PRIMARY KEY"
    """DDL fragment for an auto-incrementing integer primary key."""

    ALTER_ADD_FOREIGN_KEY: ClassVar[bool] = True
    """True if foreign keys on added columns go in a separate ``ALTER TABLE ... ADD FOREIGN KEY``;
    False if they must be declared inline on the added column."""

    COLUMN_TYPES: ClassVar[dict[str, str]] = {
        "string": "VARCHAR({length})",
        "text": "TEXT",
        "integer": "INTEGER",
        "big_integer": "BIGINT",
        "boolean": "BOOLEAN",
        "float": "REAL",
        "decimal": "DECIMAL({precision}, {scale})",
        "date": "DATE",
        "datetime": "TIMESTAMP",
        "timestamp": "TIMESTAMP",
        "json": "JSON",
    }
    """Abstract column types used by the schema builder -> SQL type templates."""

    @property
    def f(self) -> _DialectF:
        """Access dialect-specific helpers by name (e.g. self.f.year(column))."""
        return _DialectF(self)

    @abstractmethod
    def connect(self, url: str) -> Any:
        """Return a new raw driver connection for the given URL.

        The return value is engine-specific (e.g. sqlite3.Connection, pymysql.Connection).
        """
        ...  # pylint: disable=unnecessary-ellipsis

    @abstractmethod
    def integrity_error_types(self) -> tuple[type[BaseException], ...]:
        """Driver exception types that signal a constraint violation."""
        ...  # pylint: disable=unnecessary-ellipsis

    def constraint_column(self, error: BaseException) -> Optional[str]:
        """Best-effort extraction of the offending column from a driver integrity error."""
        return None

    def convert_placeholders(self, sql: str) -> str:
        """Rewrite ``?`` placeholders into the driver's paramstyle."""
        if self.PARAMSTYLE == "qmark":
            return sql
        if self.PARAMSTYLE == "format":
            return sql.replace("%", "%%").replace("?", "%s")
        raise NotImplementedError(f"Unsupported paramstyle: {self.PARAMSTYLE}")

    def begin(self, raw: Any) -> None:
        """Open a transaction explicitly when the driver does not do it implicitly."""

    def column_type(self, kind: str, **options: Any) -> str:
        """Render an abstract column type (see COLUMN_TYPES) for this engine."""
        try:
            template = type(self).COLUMN_TYPES[kind]
        except KeyError as error:
            raise ValueError(f"Unknown column type: {kind}") from error
        return template.format(**options)

    def limit_offset_sql(self, limit: Optional[int], offset: Optional[int]) -> str:
        """LIMIT/OFFSET suffix (leading space included), or "" when neither is set."""
        sql = ""
        if limit is not None:
            sql += f" LIMIT {int(limit)}"
        if offset is not None:
            sql += f" OFFSET {int(offset)}"
        return sql

    def table_exists_sql(self) -> str:
        """SQL taking one binding (table name) that returns a row iff the table exists."""
        return (
            "SELECT table_name FROM information_schema.tables "
            "WHERE table_name = ?"
        )

    def column_names_sql(self) -> str:
        """SQL taking one binding (table name) that returns one row per column name."""
        return (
            "SELECT column_name FROM information_schema.columns "
            "WHERE table_name = ?"
        )

    @staticmethod
    def _last_identifier(name: str) -> str:
        """``users.email`` -> ``email``; strips quoting."""
        return name.strip("`\"' ").rsplit(".", 1)[-1]

    @staticmethod
    def _search(patterns: tuple[str, ...], message: str) -> Optional[str]:
        for pattern in patterns:
            match = re.search(pattern, message)
            if match:
                return match.group(1)
        return None
