"""Raw SQL fragment with its own positional bindings."""

from typing import Any, Tuple

from pydantic import Field as PydanticField

from ._bases import Expression


class RawExpression(Expression):
    """Verbatim SQL (e.g. ``where_raw`` or a dialect date function).

    ``bindings`` must match the ``?`` placeholders in ``text``, in order.
    """

    text: str
    bindings: Tuple[Any, ...] = PydanticField(default_factory=tuple)

    @property
    def sql(self) -> str:
        return self.text

    @property
    def values(self) -> tuple[Any, ...]:
        return tuple(self.bindings)
