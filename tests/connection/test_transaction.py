"""Tests for recordmap.transaction: commit, rollback and savepoint nesting."""

import pytest

from recordmap.errors import TransactionError
from recordmap.transaction import transaction


@pytest.fixture
def notes(connection):
    connection.execute("CREATE TABLE notes (id INTEGER PRIMARY KEY, body TEXT)")
    connection.commit()
    return connection


def _bodies(connection):
    return [row[0] for row in connection.execute("SELECT body FROM notes ORDER BY id")]


def test_commit_on_success(notes):
    with transaction(notes) as t:
        assert t.level == 1
        t.execute("INSERT INTO notes (body) VALUES (?)", ["a"])
    assert not t.active
    assert notes.transaction_level == 0
    notes.rollback()
    assert _bodies(notes) == ["a"]


def test_rollback_on_error(notes):
    with pytest.raises(RuntimeError):
        with notes.transaction() as t:
            t.execute("INSERT INTO notes (body) VALUES (?)", ["a"])
            raise RuntimeError("boom")
    assert notes.transaction_level == 0
    assert _bodies(notes) == []


def test_nested_rollback_keeps_outer_work(notes):
    with transaction(notes) as outer:
        outer.execute("INSERT INTO notes (body) VALUES (?)", ["outer"])
        with pytest.raises(RuntimeError):
            with transaction(notes) as inner:
                assert inner.level == 2
                inner.execute("INSERT INTO notes (body) VALUES (?)", ["inner"])
                raise RuntimeError("boom")
        with transaction(notes) as inner:
            inner.execute("INSERT INTO notes (body) VALUES (?)", ["second"])
    assert _bodies(notes) == ["outer", "second"]


def test_outer_handle_unusable_inside_nested(notes):
    with transaction(notes) as outer:
        with transaction(notes):
            with pytest.raises(TransactionError, match="level 1 from level 2"):
                outer.execute("SELECT 1")
        assert outer.execute("SELECT 1") == [(1,)]


def test_handle_unusable_after_exit(notes):
    with transaction(notes) as t:
        pass
    with pytest.raises(TransactionError, match="no longer active"):
        t.execute("SELECT 1")
