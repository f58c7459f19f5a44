"""Column metadata for Record models.

After a Record subclass is created, each model attribute is represented by a
Column instance stored in RecordSubClass._columns: dict[str, Column]. Column
holds the python type, the required flag, and converts values both ways:
``parse`` for what the driver returns, ``serialize`` for bindings.
"""

from __future__ import annotations

import datetime
import decimal
import enum
import inspect
import json
import types
import typing
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict
from pydantic.fields import FieldInfo as PydanticFieldInfo
from pydantic_core import PydanticUndefined

from .utils.serialize import serialize


def _unwrap_optional(annotation: Any) -> tuple[Any, bool]:
    """``int | None`` -> ``(int, True)``; ``int`` -> ``(int, False)``."""
    origin = typing.get_origin(annotation)
    if origin in (Union, types.UnionType):
        arguments = typing.get_args(annotation)
        non_none = [argument for argument in arguments if argument is not type(None)]
        nullable = len(non_none) < len(arguments)
        if len(non_none) == 1:
            return non_none[0], nullable
        return Any, nullable
    return annotation, False


class Column(BaseModel):
    """Metadata for a single record attribute.

    Stored in MyRecord._columns["name"].
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str
    base_type: Any
    full_type: Any
    default: Any = None
    is_required: bool = False
    nullable: bool = True

    @classmethod
    def from_pydantic_info(cls, name: str, info: PydanticFieldInfo) -> Column:
        """Build a Column from Pydantic field info for the given attribute name."""
        inner, nullable = _unwrap_optional(info.annotation)
        base_type = typing.get_origin(inner) or inner
        default = None if info.default is PydanticUndefined else info.default
        if info.default_factory:
            default = info.default_factory()
        return cls(
            name=name,
            base_type=base_type,
            full_type=info.annotation,
            default=default,
            is_required=info.is_required(),
            nullable=nullable,
        )

    def serialize(self, value: Any) -> Any:
        """Convert a Python value to a database-ready form."""
        return serialize(value)

    def parse(self, value: Any) -> Any:
        """Convert a database value back to the column's Python type."""
        if value is None:
            return None
        base_type = self.base_type
        if not inspect.isclass(base_type):
            return value
        if isinstance(value, base_type) and base_type not in (int, datetime.date):
            return value
        if issubclass(base_type, enum.Enum):
            return base_type[value] if isinstance(value, str) and value in base_type.__members__ else base_type(value)
        if base_type is bool:
            if isinstance(value, str):
                return value.strip().lower() in ("1", "true", "t", "yes")
            return bool(value)
        if base_type is int:
            return value if type(value) is int else int(value)
        if base_type in (float, str):
            return base_type(value)
        if base_type is decimal.Decimal:
            return decimal.Decimal(str(value))
        if base_type is datetime.datetime:
            if isinstance(value, str):
                return datetime.datetime.fromisoformat(value)
            raise ValueError(f"Cannot parse `{value!r}` as datetime for column `{self.name}`")
        if base_type is datetime.date:
            if isinstance(value, datetime.datetime):
                return value.date()
            if isinstance(value, datetime.date):
                return value
            return datetime.date.fromisoformat(str(value)[:10])
        if base_type in (dict, list, tuple, set):
            loaded = json.loads(value) if isinstance(value, (str, bytes)) else value
            return base_type(loaded) if base_type in (tuple, set) else loaded
        if issubclass(base_type, BaseModel):
            if isinstance(value, (str, bytes)):
                return base_type.model_validate_json(value)
            return base_type.model_validate(value)
        return value


def find_column(columns: dict[str, Column], name: str) -> Optional[Column]:
    """Return the column matching name (possibly qualified with a table), or None."""
    return columns.get(name.rsplit(".", 1)[-1])


__all__ = ["Column", "find_column"]
