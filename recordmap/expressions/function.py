"""SQL function call expression."""

from ._bases import ArgumentedExpression


class FunctionExpression(ArgumentedExpression):
    """SQL function call: ``symbol(args...)`` (e.g. ``COUNT(*)``, ``DATE(created_at)``)."""

    distinct: bool = False
    """If True, render ``symbol(DISTINCT args...)``."""

    @property
    def sql(self) -> str:
        if not self.symbol:
            raise ValueError("FunctionExpression must have a symbol")
        prefix = "DISTINCT " if self.distinct else ""
        return self.symbol + "(" + prefix + ", ".join(map(self._argument_to_sql, self.arguments)) + ")"
