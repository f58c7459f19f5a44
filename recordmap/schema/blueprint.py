"""Table blueprint: column definitions and index commands compiled to DDL per dialect."""

from __future__ import annotations

import datetime
import decimal
from typing import Any, Optional

from pydantic import BaseModel, Field

from ..dialects import Dialect
from ..errors import ValidationError
from ..expressions import RawExpression
from ..utils.naming import is_identifier, pluralize

ON_DELETE_ACTIONS = ("CASCADE", "SET NULL", "RESTRICT", "NO ACTION", "SET DEFAULT")


def _check_name(name: str) -> str:
    if not isinstance(name, str) or "." in name or name == "*" or not is_identifier(name):
        raise ValidationError(f"Invalid identifier: {name!r}", column=str(name))
    return name


def default_sql(value: Any) -> str:
    """Render a DEFAULT literal (DDL takes no bindings)."""
    if isinstance(value, RawExpression):
        return value.sql
    if value is None:
        return "NULL"
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, (int, float, decimal.Decimal)):
        return str(value)
    if isinstance(value, datetime.datetime):
        value = value.isoformat(sep=" ")
    elif isinstance(value, datetime.date):
        value = value.isoformat()
    return "'" + str(value).replace("'", "''") + "'"


class ColumnDefinition(BaseModel):
    """One column of a blueprint; modifiers mutate it and return it for chaining."""

    model_config = {"arbitrary_types_allowed": True}

    name: str
    kind: str
    options: dict[str, Any] = Field(default_factory=dict)
    is_nullable: bool = False
    has_default: bool = False
    default_value: Any = None
    is_unique: bool = False
    is_primary: bool = False
    auto_increment: bool = False
    references_column: Optional[str] = None
    references_table: Optional[str] = None
    on_delete_action: Optional[str] = None
    on_update_action: Optional[str] = None

    def nullable(self, value: bool = True) -> ColumnDefinition:
        self.is_nullable = value
        return self

    def default(self, value: Any) -> ColumnDefinition:
        self.has_default = True
        self.default_value = value
        return self

    def use_current(self) -> ColumnDefinition:
        """DEFAULT CURRENT_TIMESTAMP."""
        return self.default(RawExpression(text="CURRENT_TIMESTAMP"))

    def unique(self) -> ColumnDefinition:
        self.is_unique = True
        return self

    def primary(self) -> ColumnDefinition:
        self.is_primary = True
        return self

    def references(self, column: str) -> ColumnDefinition:
        self.references_column = _check_name(column)
        return self

    def on(self, table: str) -> ColumnDefinition:
        self.references_table = _check_name(table)
        return self

    def constrained(self, table: Optional[str] = None, column: str = "id") -> ColumnDefinition:
        """Reference ``table.column``; the table defaults to the plural of ``<name>`` minus ``_id``."""
        if table is None:
            table = pluralize(self.name[:-3] if self.name.endswith("_id") else self.name)
        return self.references(column).on(table)

    def _action(self, action: str) -> str:
        normalized = " ".join(action.upper().split())
        if normalized not in ON_DELETE_ACTIONS:
            raise ValidationError(f"Unsupported referential action: {action!r}")
        return normalized

    def on_delete(self, action: str) -> ColumnDefinition:
        self.on_delete_action = self._action(action)
        return self

    def on_update(self, action: str) -> ColumnDefinition:
        self.on_update_action = self._action(action)
        return self

    def cascade_on_delete(self) -> ColumnDefinition:
        return self.on_delete("CASCADE")

    def null_on_delete(self) -> ColumnDefinition:
        return self.on_delete("SET NULL")

    @property
    def has_foreign_key(self) -> bool:
        return self.references_table is not None

    def sql(self, dialect: Dialect, inline_foreign_key: bool = False) -> str:
        """Column definition fragment (``name TYPE [NOT NULL] [DEFAULT x] ...``)."""
        if self.auto_increment:
            return dialect.AUTOINCREMENT_PRIMARY_KEY.format(name=self.name)
        sql = f"{self.name} {dialect.column_type(self.kind, **self.options)}"
        if self.is_primary:
            sql += " PRIMARY KEY"
        if not self.is_nullable and not self.is_primary:
            sql += " NOT NULL"
        if self.has_default:
            sql += f" DEFAULT {default_sql(self.default_value)}"
        if self.is_unique:
            sql += " UNIQUE"
        if inline_foreign_key and self.has_foreign_key:
            sql += " " + self.foreign_key_target_sql()
        return sql

    def foreign_key_target_sql(self) -> str:
        sql = f"REFERENCES {self.references_table}({self.references_column or 'id'})"
        if self.on_delete_action:
            sql += f" ON DELETE {self.on_delete_action}"
        if self.on_update_action:
            sql += f" ON UPDATE {self.on_update_action}"
        return sql

    def foreign_key_sql(self) -> str:
        """Table-level constraint (``FOREIGN KEY (col) REFERENCES table(id) ...``)."""
        return f"FOREIGN KEY ({self.name}) " + self.foreign_key_target_sql()


class Blueprint:
    """Collects the columns and commands of one table, then compiles them.

        def up(schema):
            def users(table):
                table.id()
                table.string("email").unique()
                table.boolean("is_active").default(True)
                table.timestamps()
            schema.create("users", users)
    """

    def __init__(self, table: str):
        self.table = _check_name(table)
        self.columns: list[ColumnDefinition] = []
        self.dropped_columns: list[str] = []
        self.renamed_columns: list[tuple[str, str]] = []
        self.primary_key: Optional[tuple[str, ...]] = None
        self.indexes: list[tuple[str, tuple[str, ...], bool]] = []

    def add_column(self, kind: str, name: str, **options: Any) -> ColumnDefinition:
        column = ColumnDefinition(name=_check_name(name), kind=kind, options=options)
        self.columns.append(column)
        return column

    # --- column types ---

    def id(self, name: str = "id") -> ColumnDefinition:
        """Auto-increment integer primary key."""
        column = self.add_column("integer", name)
        column.auto_increment = True
        column.is_primary = True
        return column

    def increments(self, name: str = "id") -> ColumnDefinition:
        return self.id(name)

    def string(self, name: str, length: int = 255) -> ColumnDefinition:
        return self.add_column("string", name, length=length)

    def text(self, name: str) -> ColumnDefinition:
        return self.add_column("text", name)

    def integer(self, name: str) -> ColumnDefinition:
        return self.add_column("integer", name)

    def big_integer(self, name: str) -> ColumnDefinition:
        return self.add_column("big_integer", name)

    def boolean(self, name: str) -> ColumnDefinition:
        return self.add_column("boolean", name)

    def float(self, name: str) -> ColumnDefinition:
        return self.add_column("float", name)

    def decimal(self, name: str, precision: int = 8, scale: int = 2) -> ColumnDefinition:
        return self.add_column("decimal", name, precision=precision, scale=scale)

    def date(self, name: str) -> ColumnDefinition:
        return self.add_column("date", name)

    def datetime(self, name: str) -> ColumnDefinition:
        return self.add_column("datetime", name)

    def timestamp(self, name: str) -> ColumnDefinition:
        return self.add_column("timestamp", name)

    def json(self, name: str) -> ColumnDefinition:
        return self.add_column("json", name)

    def timestamps(self) -> None:
        """Nullable ``created_at`` and ``updated_at``."""
        self.timestamp("created_at").nullable()
        self.timestamp("updated_at").nullable()

    def soft_deletes(self, column: str = "deleted_at") -> ColumnDefinition:
        """Nullable soft-delete marker."""
        return self.timestamp(column).nullable()

    def foreign_id(self, column: str) -> ColumnDefinition:
        """Integer column meant to reference another table's ``id``."""
        return self.integer(column)

    # --- commands ---

    def drop_column(self, *names: str) -> None:
        self.dropped_columns.extend(_check_name(name) for name in names)

    def rename_column(self, old: str, new: str) -> None:
        self.renamed_columns.append((_check_name(old), _check_name(new)))

    def primary(self, *columns: str) -> None:
        """Composite primary key."""
        self.primary_key = tuple(_check_name(column) for column in columns)

    def unique(self, *columns: str) -> None:
        self.indexes.append(("unique", tuple(_check_name(column) for column in columns), True))

    def index(self, *columns: str) -> None:
        self.indexes.append(("index", tuple(_check_name(column) for column in columns), False))

    # --- compilation ---

    def _index_statements(self) -> list[str]:
        statements = []
        for suffix, columns, unique in self.indexes:
            name = f"{self.table}_{'_'.join(columns)}_{suffix}"
            statements.append(
                f"CREATE {'UNIQUE ' if unique else ''}INDEX {name} "
                f"ON {self.table} ({', '.join(columns)})"
            )
        return statements

    def to_create_sql(self, dialect: Dialect, if_not_exists: bool = False) -> list[str]:
        """CREATE TABLE followed by the index statements."""
        if not self.columns:
            raise ValidationError(f"Table `{self.table}` needs at least one column")
        definitions = [column.sql(dialect) for column in self.columns]
        if self.primary_key:
            definitions.append(f"PRIMARY KEY ({', '.join(self.primary_key)})")
        definitions.extend(column.foreign_key_sql() for column in self.columns if column.has_foreign_key)
        create = "CREATE TABLE " + ("IF NOT EXISTS " if if_not_exists else "") + self.table
        return [f"{create} ({', '.join(definitions)})"] + self._index_statements()

    def to_alter_sql(self, dialect: Dialect) -> list[str]:
        """ALTER TABLE statements for added, renamed and dropped columns, then indexes."""
        statements = []
        for column in self.columns:
            inline = column.has_foreign_key and not dialect.ALTER_ADD_FOREIGN_KEY
            statements.append(
                f"ALTER TABLE {self.table} ADD COLUMN {column.sql(dialect, inline_foreign_key=inline)}"
            )
            if column.has_foreign_key and dialect.ALTER_ADD_FOREIGN_KEY:
                statements.append(f"ALTER TABLE {self.table} ADD {column.foreign_key_sql()}")
        for old, new in self.renamed_columns:
            statements.append(f"ALTER TABLE {self.table} RENAME COLUMN {old} TO {new}")
        for name in self.dropped_columns:
            statements.append(f"ALTER TABLE {self.table} DROP COLUMN {name}")
        return statements + self._index_statements()


__all__ = ["Blueprint", "ColumnDefinition", "default_sql"]
