"""JOIN clause expression."""

from typing import Literal

from ._bases import Expression
from .column import ColumnExpression


class JoinExpression(Expression):
    """``<kind> JOIN table ON first operator second``; both sides are column references."""

    kind: Literal["INNER", "LEFT", "RIGHT", "CROSS"] = "INNER"
    table: ColumnExpression
    first: ColumnExpression
    operator: str = "="
    second: ColumnExpression

    @property
    def sql(self) -> str:
        return (
            f"{self.kind} JOIN {self.table.sql} "
            f"ON {self.first.sql} {self.operator} {self.second.sql}"
        )
