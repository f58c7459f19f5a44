"""SQL expression types for query building.

Each expression has a ``.sql`` property (SQL fragment with ``?`` placeholders)
and ``.values`` (tuple of bound values in the same order). The query builder
composes them into WHERE, HAVING and ORDER BY clauses; literals are never
interpolated into the SQL text.
"""

from ._bases import ArgumentedExpression, Expression
from .between import BetweenExpression
from .column import ColumnExpression
from .conditions import ConditionsExpression
from .function import FunctionExpression
from .join import JoinExpression
from .nary_operator import NaryOperatorExpression
from .order import OrderExpression
from .raw import RawExpression
from .unary_operator import UnaryOperatorExpression
from .value_list import ValueListExpression

__all__ = [
    "ArgumentedExpression",
    "BetweenExpression",
    "ColumnExpression",
    "ConditionsExpression",
    "Expression",
    "FunctionExpression",
    "JoinExpression",
    "NaryOperatorExpression",
    "OrderExpression",
    "RawExpression",
    "UnaryOperatorExpression",
    "ValueListExpression",
]
