"""Parenthesised list of bound values, as used by IN."""

from typing import Any, Tuple

from ._bases import ArgumentedExpression, Expression


class ValueListExpression(Expression):
    """``(?, ?, ?)`` with one placeholder per item."""

    items: Tuple[Any, ...]

    @property
    def sql(self) -> str:
        return "(" + ", ".join(map(ArgumentedExpression._argument_to_sql, self.items)) + ")"

    @property
    def values(self) -> tuple[Any, ...]:
        return sum(map(ArgumentedExpression._argument_to_values, self.items), ())
