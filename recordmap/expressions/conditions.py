"""Ordered list of predicates joined by AND/OR connectors."""

from typing import Any, Literal, Tuple

from pydantic import Field as PydanticField

from ._bases import Expression

Connector = Literal["AND", "OR"]


class ConditionsExpression(Expression):
    """Predicates rendered in call order, each preceded by its connector.

    The connector of the first condition is not rendered. Used for WHERE,
    HAVING and nested ``where_group`` groups (``grouped=True`` wraps the
    whole list in parentheses).
    """

    conditions: Tuple[Tuple[Connector, Expression], ...] = PydanticField(default_factory=tuple)
    grouped: bool = False

    def append(self, connector: Connector, expression: Expression) -> "ConditionsExpression":
        """Return a new list with one more condition at the end."""
        return self.model_copy(update={"conditions": self.conditions + ((connector, expression),)})

    def __bool__(self) -> bool:
        return bool(self.conditions)

    def __len__(self) -> int:
        return len(self.conditions)

    @property
    def sql(self) -> str:
        parts = []
        for index, (connector, expression) in enumerate(self.conditions):
            if index:
                parts.append(connector)
            parts.append(expression.sql)
        sql = " ".join(parts)
        return f"({sql})" if self.grouped else sql

    @property
    def values(self) -> tuple[Any, ...]:
        return sum((expression.values for _, expression in self.conditions), ())
