"""Conversion of Python values into driver-bindable scalars."""

import datetime
import decimal
import enum
import json
from typing import Any

from pydantic import BaseModel


def serialize(value: Any) -> Any:
    """Convert a value to a form every supported driver can bind.

    Scalars pass through; datetimes become ISO strings (``YYYY-MM-DD HH:MM:SS``),
    enums their member name, containers and pydantic models JSON text.
    """
    if value is None or isinstance(value, (bool, int, float, str, bytes)):
        return value
    if isinstance(value, enum.Enum):
        return value.name
    if isinstance(value, datetime.datetime):
        return value.isoformat(sep=" ")
    if isinstance(value, (datetime.date, datetime.time)):
        return value.isoformat()
    if isinstance(value, decimal.Decimal):
        return str(value)
    if isinstance(value, BaseModel):
        return json.dumps(value.model_dump(mode="json"), ensure_ascii=False)
    if isinstance(value, (dict, list, tuple, set)):
        if isinstance(value, set):
            value = sorted(value)
        return json.dumps(value, ensure_ascii=False, default=str)
    raise ValueError(f"Cannot bind value of type {type(value).__name__}: {value!r}")


__all__ = ["serialize"]
