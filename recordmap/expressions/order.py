"""ORDER BY expression."""

from ._bases import Expression
from .column import ColumnExpression


class OrderExpression(Expression):
    """ORDER BY term: one column and ascending or descending."""

    desc: bool = False
    column_expression: ColumnExpression

    @property
    def sql(self) -> str:
        """Column with ``DESC`` or ``ASC`` suffix."""
        return f"{self.column_expression.sql} {'DESC' if self.desc else 'ASC'}"
