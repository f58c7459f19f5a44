"""Query builder and execution for tables and Record models.

This module provides a fluent Query API accumulating predicates, joins,
grouping, ordering and limits, compiled into one SQL string with ``?``
placeholders plus the ordered list of bindings. Builder methods append to the
query in place and return it, so a chain reads left to right; ``clone()``
gives an independent copy. Terminal methods (``get``, ``first``, aggregates,
``paginate``...) run the compiled statement on the query's connection and
hydrate rows into records when the query targets a Record class.
"""

from __future__ import annotations

import datetime
import decimal
import logging
from typing import Any, Callable, Iterator, Literal, Optional

from pydantic import BaseModel, Field

from .column import find_column
from .errors import NotFoundError, ValidationError
from .expressions import (
    ColumnExpression,
    ConditionsExpression,
    Expression,
    FunctionExpression,
    JoinExpression,
    OrderExpression,
    RawExpression,
)
from .utils.naming import is_identifier
from .utils.now import utcnow

logger = logging.getLogger("recordmap")

OPERATORS = frozenset({"=", "!=", "<>", "<", "<=", ">", ">=", "LIKE", "NOT LIKE"})
"""Comparison operators accepted by where/having/join; anything else is rejected."""

_MISSING = object()

TrashedMode = Literal["exclude", "include", "only"]


def normalize_operator(operator: Any) -> str:
    """Return the canonical (upper-case, single-spaced) operator, or raise ValidationError."""
    if isinstance(operator, str):
        normalized = " ".join(operator.upper().split())
        if normalized in OPERATORS:
            return normalized
    raise ValidationError(f"Unsupported operator: {operator!r}")


def _check_int(name: str, value: Any, minimum: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < minimum:
        raise ValidationError(f"{name} must be an integer >= {minimum}, got {value!r}")
    return value


def _sql_literal(value: Any) -> str:
    """Render a binding as an SQL literal (diagnostics only, never executed)."""
    if value is None:
        return "NULL"
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, (int, float, decimal.Decimal)):
        return str(value)
    if isinstance(value, datetime.datetime):
        value = value.isoformat(sep=" ")
    elif isinstance(value, datetime.date):
        value = value.isoformat()
    return "'" + str(value).replace("'", "''") + "'"


def _check_boolean(boolean: Any) -> str:
    """Canonical ``AND``/``OR`` connector, or raise ValidationError."""
    normalized = boolean.upper() if isinstance(boolean, str) else boolean
    if normalized not in ("AND", "OR"):
        raise ValidationError(f"Unsupported boolean connector: {boolean!r}")
    return normalized


def _column(column: Any) -> Expression:
    """Coerce a column argument to an expression (strings are validated identifiers)."""
    if isinstance(column, Expression):
        return column
    return ColumnExpression(column)


class Query(BaseModel):
    """Fluent query builder for a table (rows as dicts) or a Record class (rows as records).

    State is expression-only: select, join, where, group by, having and order by
    expressions, plus limit/offset and the soft-delete mode.
    """

    model_config = {"arbitrary_types_allowed": True}

    connection: Any
    """The Connection statements run on."""
    table: Optional[str] = None
    """Target table; derived from ``record`` when omitted."""
    record: Any = None
    """Record class rows are hydrated into, or None for plain table queries."""
    select_expressions: list[Expression] = Field(default_factory=list)
    distinct_value: bool = False
    join_expressions: list[JoinExpression] = Field(default_factory=list)
    where_conditions: ConditionsExpression = Field(default_factory=ConditionsExpression)
    group_by_expressions: list[Expression] = Field(default_factory=list)
    having_conditions: ConditionsExpression = Field(default_factory=ConditionsExpression)
    order_by_expressions: list[OrderExpression] = Field(default_factory=list)
    unions: list[tuple[Any, bool]] = Field(default_factory=list)
    """Queries combined with ``UNION`` (flag True for ``UNION ALL``), in call order."""
    limit_value: Optional[int] = None
    """Optional LIMIT (stored to avoid shadowing the limit() method)."""
    offset_value: Optional[int] = None
    """Optional OFFSET (stored to avoid shadowing the offset() method)."""
    trashed: TrashedMode = "exclude"
    """Soft-delete mode; only meaningful for records declared with soft_delete=True."""

    def __init__(self, **data: Any):
        super().__init__(**data)
        if self.table is None:
            if self.record is None:
                raise ValueError("Query needs a table or a record class")
            self.table = self.record._table_name
        if not is_identifier(self.table) or "." in self.table:
            raise ValidationError(f"Invalid table name: {self.table!r}")

    # --- plumbing ---

    @property
    def dialect(self):
        """Dialect of this query's connection."""
        return self.connection.dialect

    @property
    def soft_deletes(self) -> bool:
        """True if the target record class uses soft delete."""
        return self.record is not None and self.record._soft_delete

    @property
    def primary_key(self) -> str:
        return self.record._primary_key if self.record is not None else "id"

    def execute(self, sql: str, parameters=(), rows_as_dicts: bool = False) -> list:
        """Run raw SQL on this query's connection and return rows (low-level)."""
        return self.connection.execute(sql, parameters, rows_as_dicts=rows_as_dicts)

    def clone(self) -> Query:
        """Return an independent copy of this query."""
        return self.model_copy(
            update={
                "select_expressions": list(self.select_expressions),
                "join_expressions": list(self.join_expressions),
                "group_by_expressions": list(self.group_by_expressions),
                "order_by_expressions": list(self.order_by_expressions),
                "unions": list(self.unions),
            }
        )

    def new_query(self) -> Query:
        """A fresh query on the same connection and target, with no clauses."""
        return type(self)(connection=self.connection, table=self.table, record=self.record)

    # --- predicates ---

    def _predicate(self, column: Any, operator: Any, value: Any) -> Expression:
        if value is _MISSING:
            operator, value = "=", operator
        operator = normalize_operator(operator)
        return _column(column).compare(operator, value)

    def _add_where(self, expression: Expression, boolean: str = "AND") -> Query:
        self.where_conditions = self.where_conditions.append(_check_boolean(boolean), expression)
        return self

    def where(self, column: Any, operator: Any = _MISSING, value: Any = _MISSING, boolean: str = "AND") -> Query:
        """Add a predicate, AND-connected by default.

        Examples:
            where("email", "a@b.c")            # equality
            where("age", ">", 18)
            where("deleted_at", None)           # IS NULL
            where({"is_active": 1, "age": 30})  # several equalities
            where(lambda q: q.where(...).or_where(...))  # nested group
            where(ColumnExpression("age").between(18, 65))
        """
        if isinstance(column, Expression) and operator is _MISSING:
            return self._add_where(column, boolean)
        if isinstance(column, dict):
            for name, item in column.items():
                self._add_where(self._predicate(name, "=", item), boolean)
            return self
        if callable(column) and not isinstance(column, str):
            return self.where_group(column, boolean)
        if operator is _MISSING:
            raise ValidationError("where() needs a value")
        return self._add_where(self._predicate(column, operator, value), boolean)

    def or_where(self, column: Any, operator: Any = _MISSING, value: Any = _MISSING) -> Query:
        """Same as where(), OR-connected."""
        return self.where(column, operator, value, boolean="OR")

    def where_group(self, callback: Callable[[Query], Any], boolean: str = "AND") -> Query:
        """Add a parenthesised group of predicates built by ``callback`` on a fresh builder."""
        nested = self.new_query()
        callback(nested)
        if nested.where_conditions:
            self._add_where(nested.where_conditions.model_copy(update={"grouped": True}), boolean)
        return self

    def where_in(self, column: Any, values, boolean: str = "AND") -> Query:
        """``column IN (?, ...)``; an empty list matches no row."""
        return self._add_where(_column(column).in_(values), boolean)

    def where_not_in(self, column: Any, values, boolean: str = "AND") -> Query:
        """``column NOT IN (?, ...)``; an empty list matches every row."""
        return self._add_where(_column(column).not_in(values), boolean)

    def where_null(self, column: Any, boolean: str = "AND") -> Query:
        return self._add_where(_column(column).is_null(), boolean)

    def where_not_null(self, column: Any, boolean: str = "AND") -> Query:
        return self._add_where(_column(column).is_not_null(), boolean)

    def where_like(self, column: Any, pattern: str, boolean: str = "AND") -> Query:
        """``column LIKE ?``; wildcards in ``pattern`` are the caller's."""
        return self._add_where(_column(column).like(pattern), boolean)

    def where_not_like(self, column: Any, pattern: str, boolean: str = "AND") -> Query:
        return self._add_where(_column(column).not_like(pattern), boolean)

    def where_between(self, column: Any, low: Any, high: Any, boolean: str = "AND") -> Query:
        return self._add_where(_column(column).between(low, high), boolean)

    def where_not_between(self, column: Any, low: Any, high: Any, boolean: str = "AND") -> Query:
        return self._add_where(_column(column).not_between(low, high), boolean)

    def _where_date_part(self, part: str, column: Any, operator: Any, value: Any) -> Query:
        if value is _MISSING:
            operator, value = "=", operator
        operator = normalize_operator(operator)
        expression = getattr(self.dialect.f, part)(_column(column))
        return self._add_where(expression.compare(operator, value))

    def where_date(self, column: Any, operator: Any, value: Any = _MISSING) -> Query:
        """Compare the date part of a datetime column (``where_date("created_at", ">=", date)``)."""
        return self._where_date_part("date", column, operator, value)

    def where_year(self, column: Any, operator: Any, value: Any = _MISSING) -> Query:
        return self._where_date_part("year", column, operator, value)

    def where_month(self, column: Any, operator: Any, value: Any = _MISSING) -> Query:
        return self._where_date_part("month", column, operator, value)

    def where_day(self, column: Any, operator: Any, value: Any = _MISSING) -> Query:
        return self._where_date_part("day", column, operator, value)

    def where_raw(self, sql: str, bindings=(), boolean: str = "AND") -> Query:
        """Add a verbatim SQL predicate; its ``?`` placeholders take ``bindings`` in order."""
        return self._add_where(RawExpression(text=f"({sql})", bindings=tuple(bindings)), boolean)

    def _where_subquery(self, keyword: str, query: Query, boolean: str) -> Query:
        if not isinstance(query, Query):
            raise ValidationError(f"{keyword} needs a Query, got {type(query).__name__}")
        return self._add_where(RawExpression(text=f"({keyword} ({query.sql}))", bindings=query.values), boolean)

    def where_exists(self, query: Query, boolean: str = "AND") -> Query:
        """``EXISTS (subquery)``; the subquery's bindings take their place among the where bindings."""
        return self._where_subquery("EXISTS", query, boolean)

    def where_not_exists(self, query: Query, boolean: str = "AND") -> Query:
        return self._where_subquery("NOT EXISTS", query, boolean)

    # --- soft-delete mode ---

    def _set_trashed(self, mode: TrashedMode) -> Query:
        if not self.soft_deletes:
            raise ValidationError(f"Table `{self.table}` does not use soft delete")
        self.trashed = mode
        return self

    def with_trashed(self) -> Query:
        """Include soft-deleted rows."""
        return self._set_trashed("include")

    def only_trashed(self) -> Query:
        """Select soft-deleted rows only."""
        return self._set_trashed("only")

    def without_trashed(self) -> Query:
        """Back to the default: exclude soft-deleted rows."""
        return self._set_trashed("exclude")

    # --- shaping ---

    def select(self, *columns: Any) -> Query:
        """Restrict the selected columns (default ``*``)."""
        self.select_expressions.extend(_column(column) for column in columns)
        return self

    def select_raw(self, sql: str, bindings=()) -> Query:
        """Add a verbatim select item (e.g. ``COUNT(*) AS total``)."""
        self.select_expressions.append(RawExpression(text=sql, bindings=tuple(bindings)))
        return self

    def distinct(self) -> Query:
        self.distinct_value = True
        return self

    def _join(self, kind: str, table: str, first: str, operator: str, second: Any) -> Query:
        if second is _MISSING:
            operator, second = "=", operator
        self.join_expressions.append(
            JoinExpression(
                kind=kind,
                table=ColumnExpression(table),
                first=ColumnExpression(first),
                operator=normalize_operator(operator),
                second=ColumnExpression(second),
            )
        )
        return self

    def join(self, table: str, first: str, operator: str, second: Any = _MISSING) -> Query:
        """``INNER JOIN table ON first operator second`` (2-column form implies ``=``)."""
        return self._join("INNER", table, first, operator, second)

    def left_join(self, table: str, first: str, operator: str, second: Any = _MISSING) -> Query:
        return self._join("LEFT", table, first, operator, second)

    def right_join(self, table: str, first: str, operator: str, second: Any = _MISSING) -> Query:
        return self._join("RIGHT", table, first, operator, second)

    def union(self, query: Query, all: bool = False) -> Query:  # pylint: disable=redefined-builtin
        """Append ``UNION [ALL] (other query)``; ORDER BY and LIMIT then apply to the combined rows."""
        if not isinstance(query, Query):
            raise ValidationError(f"union() needs a Query, got {type(query).__name__}")
        self.unions.append((query, bool(all)))
        return self

    def union_all(self, query: Query) -> Query:
        return self.union(query, all=True)

    def order_by(self, column: Any, direction: str = "asc") -> Query:
        """Append a sort column; ``direction`` is ``asc`` or ``desc`` (case-insensitive)."""
        if isinstance(column, OrderExpression):
            self.order_by_expressions.append(column)
            return self
        if not isinstance(direction, str) or direction.lower() not in ("asc", "desc"):
            raise ValidationError(f"Order direction must be 'asc' or 'desc', got {direction!r}")
        self.order_by_expressions.append(
            OrderExpression(column_expression=ColumnExpression(column), desc=direction.lower() == "desc")
        )
        return self

    def order_by_desc(self, column: str) -> Query:
        return self.order_by(column, "desc")

    def latest(self, column: str = "created_at") -> Query:
        """Newest first."""
        return self.order_by(column, "desc")

    def oldest(self, column: str = "created_at") -> Query:
        """Oldest first."""
        return self.order_by(column, "asc")

    def group_by(self, *columns: Any) -> Query:
        self.group_by_expressions.extend(_column(column) for column in columns)
        return self

    def having(self, column: Any, operator: Any = _MISSING, value: Any = _MISSING, boolean: str = "AND") -> Query:
        """Add a HAVING predicate; ``column`` may be an alias or an expression."""
        if value is _MISSING:
            operator, value = "=", operator
        expression = _column(column).compare(normalize_operator(operator), value)
        self.having_conditions = self.having_conditions.append(_check_boolean(boolean), expression)
        return self

    def having_raw(self, sql: str, bindings=(), boolean: str = "AND") -> Query:
        self.having_conditions = self.having_conditions.append(
            _check_boolean(boolean), RawExpression(text=f"({sql})", bindings=tuple(bindings))
        )
        return self

    def limit(self, limit: int) -> Query:
        """Set LIMIT to the given non-negative integer."""
        self.limit_value = _check_int("limit", limit, 0)
        return self

    def offset(self, offset: int) -> Query:
        """Set OFFSET to the given non-negative integer."""
        self.offset_value = _check_int("offset", offset, 0)
        return self

    def take(self, limit: int) -> Query:
        """Alias for limit()."""
        return self.limit(limit)

    def skip(self, offset: int) -> Query:
        """Alias for offset()."""
        return self.offset(offset)

    # --- scopes ---

    def scope(self, name: str, *args: Any, **kwargs: Any) -> Query:
        """Apply a scope registered on the record class with ``@scope``."""
        scopes = getattr(self.record, "_scopes", {})
        if name not in scopes:
            owner = self.record.__name__ if self.record is not None else self.table
            raise ValidationError(f"Unknown scope `{name}` on {owner}")
        return self.apply(scopes[name], *args, **kwargs)

    def apply(self, function: Callable[..., Any], *args: Any, **kwargs: Any) -> Query:
        """Apply any query-modifier ``function(query, *args)``; it may return the query or None."""
        result = function(self, *args, **kwargs)
        return self if result is None else result

    # --- SQL generation (sql_*) ---

    def _trashed_condition(self) -> Optional[Expression]:
        if not self.soft_deletes or self.trashed == "include":
            return None
        column = ColumnExpression(f"{self.table}.{self.record._soft_delete_column}")
        return column.is_null() if self.trashed == "exclude" else column.is_not_null()

    def sql_where_expression(self) -> ConditionsExpression:
        """Caller predicates, preceded by the soft-delete condition of the current mode."""
        trashed = self._trashed_condition()
        if trashed is None:
            return self.where_conditions
        if not self.where_conditions:
            return ConditionsExpression(conditions=(("AND", trashed),))
        user = self.where_conditions
        if len(user) > 1:
            user = user.model_copy(update={"grouped": True})
        return ConditionsExpression(conditions=(("AND", trashed), ("AND", user)))

    @property
    def sql_where(self) -> str:
        """`` WHERE ...`` clause (leading space) or empty string if no conditions."""
        where = self.sql_where_expression()
        return f" WHERE {where.sql}" if where else ""

    def sql_select_list(self) -> str:
        if self.select_expressions:
            return ", ".join(expression.sql for expression in self.select_expressions)
        if self.join_expressions:
            return f"{self.table}.*"
        return "*"

    def _sql_from(self) -> str:
        sql = f" FROM {self.table}"
        for join in self.join_expressions:
            sql += " " + join.sql
        return sql

    def _sql_grouping(self) -> str:
        sql = ""
        if self.group_by_expressions:
            sql += " GROUP BY " + ", ".join(expression.sql for expression in self.group_by_expressions)
        if self.having_conditions:
            sql += " HAVING " + self.having_conditions.sql
        return sql

    @property
    def sql(self) -> str:
        """Return the compiled SELECT for this query."""
        sql = "SELECT " + ("DISTINCT " if self.distinct_value else "") + self.sql_select_list()
        sql += self._sql_from()
        sql += self.sql_where
        sql += self._sql_grouping()
        for query, all_rows in self.unions:
            sql += (" UNION ALL " if all_rows else " UNION ") + query.sql
        if self.order_by_expressions:
            sql += " ORDER BY " + ", ".join(order.sql for order in self.order_by_expressions)
        sql += self.dialect.limit_offset_sql(self.limit_value, self.offset_value)
        return sql

    @property
    def values(self) -> tuple[Any, ...]:
        """Bindings for ``sql``, in placeholder order: select, where, having, unions."""
        values: tuple[Any, ...] = ()
        for expression in self.select_expressions:
            values += expression.values
        values += self.sql_where_expression().values
        values += self.having_conditions.values
        for query, _ in self.unions:
            values += query.values
        return values

    def to_sql(self) -> str:
        """Compiled SQL with ``?`` placeholders."""
        return self.sql

    def get_bindings(self) -> list[Any]:
        """Bindings in the exact order of the placeholders in ``to_sql()``."""
        return list(self.values)

    def to_sql_with_bindings(self) -> str:
        """Compiled SQL with bindings inlined as literals, for diagnostics only."""
        bindings = iter(self.values)
        parts = self.sql.split("?")
        sql = parts[0]
        for part in parts[1:]:
            sql += _sql_literal(next(bindings)) + part
        return sql

    # --- reading ---

    def _hydrate(self, rows: list[dict]) -> list:
        if self.record is None:
            return rows
        return [self.record._hydrate(self.connection, row) for row in rows]

    def get(self) -> list:
        """Run the SELECT; records for record queries, dicts for table queries. Never None."""
        rows = self.execute(self.sql, self.values, rows_as_dicts=True)
        return self._hydrate(rows)

    def __iter__(self) -> Iterator:
        yield from self.get()

    def first(self) -> Any:
        """First matching row, or None; the builder itself keeps its limit."""
        rows = self.clone().limit(1).get()
        return rows[0] if rows else None

    def first_or_fail(self) -> Any:
        """Like first(), but raise NotFoundError when nothing matches."""
        found = self.first()
        if found is None:
            raise NotFoundError(f"No row in `{self.table}` matches the query")
        return found

    def find(self, key: Any) -> Any:
        """Row whose primary key equals ``key``, or None."""
        return self.clone().where(f"{self.table}.{self.primary_key}", key).first()

    def _aggregate(self, function: str, column: str = "*") -> Any:
        query = self.clone()
        query.order_by_expressions = []
        query.limit_value = None
        query.offset_value = None
        argument = _column(column)
        if query.unions:
            outer = column if column == "*" else ColumnExpression(column.rsplit(".", 1)[-1]).sql
            sql = f"SELECT {function}({outer}) AS aggregate FROM ({query.sql}) AS unioned"
        elif query.group_by_expressions or query.distinct_value:
            query.select_expressions = (
                query.select_expressions or list(query.group_by_expressions) or [argument]
            )
            sql = f"SELECT {function}(*) AS aggregate FROM ({query.sql}) AS aggregated"
        else:
            query.select_expressions = [FunctionExpression(symbol=function, arguments=(argument,))]
            sql = query.sql
        rows = self.execute(sql, query.values)
        return rows[0][0] if rows else None

    def count(self, column: str = "*") -> int:
        """Number of matching rows; ORDER BY, LIMIT and OFFSET are ignored."""
        return int(self._aggregate("COUNT", column) or 0)

    def _parse_aggregate(self, column: str, value: Any) -> Any:
        if value is None or self.record is None:
            return value
        meta = find_column(self.record._columns, column)
        return meta.parse(value) if meta is not None else value

    def max(self, column: str) -> Any:
        return self._parse_aggregate(column, self._aggregate("MAX", column))

    def min(self, column: str) -> Any:
        return self._parse_aggregate(column, self._aggregate("MIN", column))

    def avg(self, column: str) -> Optional[float]:
        value = self._aggregate("AVG", column)
        return None if value is None else float(value)

    def sum(self, column: str) -> Any:
        value = self._aggregate("SUM", column)
        return 0 if value is None else value

    def exists(self) -> bool:
        query = self.clone()
        if not query.unions:
            query.select_expressions = [RawExpression(text="1")]
        query.order_by_expressions = []
        query.limit(1)
        return bool(self.execute(query.sql, query.values))

    def doesnt_exist(self) -> bool:
        return not self.exists()

    def paginate(self, per_page: int = 15, page: int = 1) -> list:
        """One page of results (1-indexed); the builder itself is left unchanged."""
        _check_int("per_page", per_page, 1)
        _check_int("page", page, 1)
        return self.clone().limit(per_page).offset((page - 1) * per_page).get()

    def chunk(self, size: int) -> Iterator[list]:
        """Yield successive pages of ``size`` rows until the result set is exhausted."""
        _check_int("size", size, 1)
        page = 1
        while True:
            rows = self.paginate(size, page)
            if not rows:
                return
            yield rows
            if len(rows) < size:
                return
            page += 1

    def pluck(self, column: str) -> list:
        """Values of one column for every matching row."""
        if self.unions:
            name = ColumnExpression(column).name.rsplit(".", 1)[-1]
            values = [row[name] for row in self.execute(self.sql, self.values, rows_as_dicts=True)]
        else:
            query = self.clone()
            query.select_expressions = [ColumnExpression(column)]
            values = [row[0] for row in self.execute(query.sql, query.values)]
        return [self._parse_aggregate(column, value) for value in values]

    # --- writing ---

    def insert(self, values: dict[str, Any], returning: bool = True) -> Any:
        """Insert one row and return its generated primary key.

        Pass ``returning=False`` for tables without an auto-increment key
        (e.g. pivot tables); the result is then None.
        """
        for name in values:
            ColumnExpression(name)
        primary_key = self.primary_key
        if values:
            sql = (
                f"INSERT INTO {self.table} ({', '.join(values)}) "
                f"VALUES ({', '.join('?' for _ in values)})"
            )
        else:
            sql = f"INSERT INTO {self.table} DEFAULT VALUES"
        if not returning:
            self.execute(sql, tuple(values.values()))
            return None
        if self.dialect.SUPPORTS_RETURNING and primary_key not in values:
            rows = self.execute(sql + f" RETURNING {primary_key}", tuple(values.values()))
            return rows[0][0] if rows else None
        self.execute(sql, tuple(values.values()))
        return values.get(primary_key, self.connection.last_row_id)

    def update(self, values: dict[str, Any]) -> int:
        """Update every matching row; returns the affected row count."""
        if not values:
            return 0
        values = dict(values)
        if self.record is not None and self.record._timestamps and "updated_at" not in values:
            values["updated_at"] = utcnow()
        for name in values:
            ColumnExpression(name)
        where = self.sql_where_expression()
        sql = f"UPDATE {self.table} SET " + ", ".join(f"{name} = ?" for name in values)
        if where:
            sql += f" WHERE {where.sql}"
        self.execute(sql, tuple(values.values()) + where.values)
        return self.connection.row_count

    def delete(self) -> int:
        """Delete every matching row (marks them instead for soft-delete records)."""
        if self.soft_deletes:
            return self.update({self.record._soft_delete_column: utcnow()})
        return self.force_delete()

    def force_delete(self) -> int:
        """Physically delete every matching row, soft delete or not."""
        where = self.sql_where_expression()
        sql = f"DELETE FROM {self.table}"
        if where:
            sql += f" WHERE {where.sql}"
        self.execute(sql, where.values)
        return self.connection.row_count

    def restore(self) -> int:
        """Clear the soft-delete marker on every matching trashed row."""
        if not self.soft_deletes:
            raise ValidationError(f"Table `{self.table}` does not use soft delete")
        query = self.clone().only_trashed()
        return query.update({self.record._soft_delete_column: None})


__all__ = ["Query", "OPERATORS", "normalize_operator"]
