"""BETWEEN expression."""

from ._bases import ArgumentedExpression


class BetweenExpression(ArgumentedExpression):
    """``(expr BETWEEN low AND high)``; symbol is ``BETWEEN`` or ``NOT BETWEEN``."""

    @property
    def sql(self) -> str:
        if len(self.arguments) != 3:
            raise ValueError("BetweenExpression must have three arguments")
        subject, low, high = map(self._argument_to_sql, self.arguments)
        return f"({subject} {self.symbol} {low} AND {high})"
