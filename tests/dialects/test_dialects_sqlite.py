"""Tests for recordmap.dialects.sqlite: F helpers, connect, constraint parsing."""

import sqlite3

from recordmap.dialects import SqliteDialect
from recordmap.expressions import ColumnExpression, FunctionExpression


def test_sqlite_f_date_parts():
    d = SqliteDialect()
    column = ColumnExpression("created_at")
    assert isinstance(d.f.date(column), FunctionExpression)
    assert d.f.date(column).sql == "DATE(created_at)"
    assert d.f.month(column).sql == "CAST(strftime('%m', created_at) AS INTEGER)"


def test_sqlite_f_escape_for_like():
    d = SqliteDialect()
    assert d.f.escape_for_like("hello") == "hello"
    assert d.f.escape_for_like("50%") == "50\\%"
    assert d.f.escape_for_like("a_b") == "a\\_b"
    assert d.f.escape_for_like("x%_\\y") == "x\\%\\_\\\\y"


def test_sqlite_connect_creates_connection_with_foreign_keys(tmp_path):
    d = SqliteDialect()
    conn = d.connect(f"sqlite:///{tmp_path / 'test.db'}")
    assert conn.execute("PRAGMA foreign_keys").fetchone()[0] == 1
    conn.close()
    assert (tmp_path / "test.db").exists()


def test_sqlite_connect_memory():
    conn = SqliteDialect().connect("sqlite://")
    assert conn.execute("SELECT 1").fetchone() == (1,)
    conn.close()


def test_sqlite_constraint_column():
    d = SqliteDialect()
    error = sqlite3.IntegrityError("UNIQUE constraint failed: users.email")
    assert d.constraint_column(error) == "email"
    assert d.constraint_column(sqlite3.IntegrityError("FOREIGN KEY constraint failed")) is None
    assert d.integrity_error_types() == (sqlite3.IntegrityError,)


def test_sqlite_offset_without_limit():
    assert SqliteDialect().limit_offset_sql(None, 3) == " LIMIT -1 OFFSET 3"


def test_sqlite_autoincrement_and_alter():
    d = SqliteDialect()
    assert d.AUTOINCREMENT_PRIMARY_KEY.format(name="id") == "id INTEGER PRIMARY KEY AUTOINCREMENT"
    assert d.ALTER_ADD_FOREIGN_KEY is False
