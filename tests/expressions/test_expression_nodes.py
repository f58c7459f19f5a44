"""Tests for recordmap.expressions: SQL fragments and their bound values."""

import pytest

from recordmap.errors import ValidationError
from recordmap.expressions import (
    ColumnExpression,
    ConditionsExpression,
    FunctionExpression,
    JoinExpression,
    NaryOperatorExpression,
    RawExpression,
)


def c(name):
    return ColumnExpression(name)


class TestColumn:
    """Column references are validated identifiers without bindings."""

    @pytest.mark.parametrize("name", ["email", "users.email", "users.*", "*", "_private"])
    def test_valid_names(self, name):
        assert c(name).sql == name
        assert c(name).values == ()

    @pytest.mark.parametrize("name", ["", "1st", "a b", "users.email; --", "a.b.c", 42])
    def test_invalid_names(self, name):
        with pytest.raises(ValidationError):
            ColumnExpression(name)

    def test_order(self):
        assert c("name").asc.sql == "name ASC"
        assert c("name").desc.sql == "name DESC"


class TestOperators:
    """Operators render parenthesised with ``?`` for literals."""

    def test_compare(self):
        expression = c("age").compare(">=", 18)
        assert expression.sql == "(age >= ?)"
        assert expression.values == (18,)

    def test_compare_with_none(self):
        assert c("email").compare("=", None).sql == "(email IS NULL)"
        assert c("email").compare("!=", None).sql == "(email IS NOT NULL)"

    def test_in(self):
        expression = c("id").in_([1, 2, 3])
        assert expression.sql == "(id IN (?, ?, ?))"
        assert expression.values == (1, 2, 3)
        assert c("id").not_in((4,)).sql == "(id NOT IN (?))"

    def test_empty_in(self):
        assert c("id").in_([]).sql == "(1 = 0)"
        assert c("id").not_in([]).sql == "(1 = 1)"
        assert c("id").in_([]).values == ()

    def test_between_and_like(self):
        between = c("age").between(20, 30)
        assert between.sql == "(age BETWEEN ? AND ?)"
        assert between.values == (20, 30)
        assert c("age").not_between(1, 2).sql == "(age NOT BETWEEN ? AND ?)"
        assert c("name").like("A%").sql == "(name LIKE ?)"
        assert c("name").not_like("A%").values == ("A%",)

    def test_boolean_combinations(self):
        expression = (c("a").compare("=", 1) & c("b").compare("=", 2)) | ~c("c").is_null()
        assert expression.sql == "(((a = ?) AND (b = ?)) OR (NOT (c IS NULL)))"
        assert expression.values == (1, 2)

    def test_functions(self):
        assert c("name").lower().sql == "LOWER(name)"
        count = FunctionExpression(symbol="COUNT", arguments=(c("email"),), distinct=True)
        assert count.sql == "COUNT(DISTINCT email)"

    def test_nary_without_arguments(self):
        with pytest.raises(ValueError):
            _ = NaryOperatorExpression(symbol="AND").sql


class TestConditions:
    """WHERE lists keep call order and connectors."""

    def test_render_in_order(self):
        conditions = ConditionsExpression()
        assert not conditions
        conditions = conditions.append("AND", c("a").compare("=", 1))
        conditions = conditions.append("OR", RawExpression(text="b > ?", bindings=(2,)))
        assert len(conditions) == 2
        assert conditions.sql == "(a = ?) OR b > ?"
        assert conditions.values == (1, 2)
        assert conditions.model_copy(update={"grouped": True}).sql == "((a = ?) OR b > ?)"

    def test_append_returns_new_list(self):
        empty = ConditionsExpression()
        empty.append("AND", c("a").is_null())
        assert len(empty) == 0


def test_join():
    join = JoinExpression(kind="LEFT", table=c("posts"), first=c("users.id"), second=c("posts.user_id"))
    assert join.sql == "LEFT JOIN posts ON users.id = posts.user_id"
    assert join.values == ()
