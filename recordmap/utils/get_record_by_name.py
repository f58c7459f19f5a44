"""Resolve record classes by name (relation targets given as strings)."""

from typing import Iterable

from .find_subclass import _get_subclasses, find_subclass


def get_all_records() -> Iterable[type["Record"]]:
    """Yield all Record subclasses in the application."""
    from ..record import Record
    yield from _get_subclasses(Record)


def get_record_by_name(name: str) -> type["Record"]:
    """Return the Record subclass whose __name__ or table name equals name.

    Raises:
        LookupError: If no such class is defined.
    """
    from ..record import Record
    found = find_subclass(Record, name)
    if found is not None:
        return found
    for cls in get_all_records():
        if cls._table_name == name:
            return cls
    raise LookupError(f"No record class named `{name}`")


__all__ = ["get_all_records", "get_record_by_name"]
