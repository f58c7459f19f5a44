"""Column expression: a validated reference to one column."""

from ..errors import ValidationError
from ..utils.naming import is_identifier
from ._bases import Expression


class ColumnExpression(Expression):
    """Reference to a column, optionally qualified (``email``, ``users.email``, ``users.*``, ``*``).

    Has no placeholders, so ``values`` is ``()``. Names that are not plain SQL
    identifiers are rejected before any SQL is built.
    """

    name: str

    def __init__(self, name: str, **data):
        if not isinstance(name, str) or not is_identifier(name):
            raise ValidationError(f"Invalid column name: {name!r}", column=str(name))
        super().__init__(name=name, **data)

    @property
    def sql(self) -> str:
        return self.name

    @property
    def asc(self):
        """Order by this column ascending."""
        from .order import OrderExpression
        return OrderExpression(column_expression=self, desc=False)

    @property
    def desc(self):
        """Order by this column descending."""
        from .order import OrderExpression
        return OrderExpression(column_expression=self, desc=True)
