"""Base expression types for SQL expression trees."""

from __future__ import annotations
from typing import Any, Tuple

from pydantic import BaseModel, Field as PydanticField


class Expression(BaseModel):
    """Base type for all SQL expression nodes.

    Subclasses must implement the ``sql`` property. The default ``values``
    is an empty tuple; expression types that contain literals override it
    to return the bound values in the same order as ``?`` placeholders in ``sql``.
    """

    model_config = {"arbitrary_types_allowed": True}

    @property
    def sql(self) -> str:
        """SQL fragment for this expression, with ``?`` for bound parameters."""
        raise NotImplementedError("Subclasses must implement `sql` property")

    @property
    def values(self) -> tuple[Any, ...]:
        """Bound values for placeholders in ``sql``, in order."""
        return ()

    def compare(self, operator: str, other: Any):
        """Build a binary comparison (``=``, ``<``, ``LIKE``...); ``= None`` becomes ``IS NULL``."""
        from .nary_operator import NaryOperatorExpression
        if other is None and operator in ("=", "!=", "<>"):
            return self.is_null() if operator == "=" else self.is_not_null()
        return NaryOperatorExpression(symbol=operator, arguments=(self, other))

    def in_(self, values: Any):
        """Build an IN expression with one placeholder per value (e.g. ``id IN (?, ?, ?)``)."""
        from .raw import RawExpression
        from .nary_operator import NaryOperatorExpression
        from .value_list import ValueListExpression
        values = tuple(values)
        if not values:
            return RawExpression(text="(1 = 0)")
        return NaryOperatorExpression(symbol="IN", arguments=(self, ValueListExpression(items=values)))

    def not_in(self, values: Any):
        """Build a NOT IN expression; an empty list matches every row."""
        from .raw import RawExpression
        from .nary_operator import NaryOperatorExpression
        from .value_list import ValueListExpression
        values = tuple(values)
        if not values:
            return RawExpression(text="(1 = 1)")
        return NaryOperatorExpression(symbol="NOT IN", arguments=(self, ValueListExpression(items=values)))

    def is_null(self):
        """Build an IS NULL expression."""
        from .unary_operator import UnaryOperatorExpression
        return UnaryOperatorExpression(symbol="IS NULL", arguments=(self,), postfix=True)

    def is_not_null(self):
        """Build an IS NOT NULL expression."""
        from .unary_operator import UnaryOperatorExpression
        return UnaryOperatorExpression(symbol="IS NOT NULL", arguments=(self,), postfix=True)

    def like(self, pattern: str):
        """Build a LIKE expression; the pattern is bound as-is."""
        return self.compare("LIKE", pattern)

    def not_like(self, pattern: str):
        """Build a NOT LIKE expression; the pattern is bound as-is."""
        return self.compare("NOT LIKE", pattern)

    def between(self, low: Any, high: Any):
        """Inclusive range: ``(expr BETWEEN ? AND ?)``."""
        from .between import BetweenExpression
        return BetweenExpression(symbol="BETWEEN", arguments=(self, low, high))

    def not_between(self, low: Any, high: Any):
        """Complement of ``between``."""
        from .between import BetweenExpression
        return BetweenExpression(symbol="NOT BETWEEN", arguments=(self, low, high))

    def __invert__(self):
        """Build a NOT expression."""
        from .unary_operator import UnaryOperatorExpression
        return UnaryOperatorExpression(symbol="NOT", arguments=(self,))

    def __and__(self, other: Any):
        from .nary_operator import NaryOperatorExpression
        return NaryOperatorExpression(symbol="AND", arguments=(self, other))

    def __or__(self, other: Any):
        from .nary_operator import NaryOperatorExpression
        return NaryOperatorExpression(symbol="OR", arguments=(self, other))

    def lower(self):
        """Build a LOWER function call."""
        from .function import FunctionExpression
        return FunctionExpression(symbol="LOWER", arguments=(self,))

    def upper(self):
        """Build a UPPER function call."""
        from .function import FunctionExpression
        return FunctionExpression(symbol="UPPER", arguments=(self,))


class ArgumentedExpression(Expression):
    """Base for expressions that have a symbol and a tuple of arguments.

    Used by function calls (e.g. ``COUNT(x)``) and operators (e.g. ``=``, ``AND``).
    ``values`` is the concatenation of literal argument values; nested expressions
    are recursed into.
    """

    symbol: str
    arguments: Tuple[Any, ...] = PydanticField(default_factory=tuple)

    @staticmethod
    def _argument_to_sql(argument: Any) -> str:
        """Render one argument as SQL: expression's ``sql`` or ``?`` for literals."""
        if isinstance(argument, Expression):
            return argument.sql
        return "?"

    @staticmethod
    def _argument_to_values(argument: Any) -> tuple[Any, ...]:
        """Collect values for one argument: recurse into expressions, else ``(argument,)``."""
        if isinstance(argument, Expression):
            return argument.values
        # Record instance: bind its primary key value, not the instance
        if not isinstance(argument, type) and hasattr(argument, "_table_name") and hasattr(argument, "key"):
            return (argument.key,)
        return (argument,)

    @property
    def values(self) -> tuple[Any, ...]:
        """All literal values from arguments, in order (recursing into nested expressions)."""
        return sum(map(self._argument_to_values, self.arguments), ())
