"""Discover subclasses by name for lazy target resolution."""

from typing import Iterable, Optional


def _get_subclasses(base: type) -> Iterable[type]:
    """Recursively yield all subclasses of base, most recently defined first."""
    for subclass in base.__subclasses__()[::-1]:
        yield subclass
        yield from _get_subclasses(subclass)


def find_subclass(base: type, name: str) -> Optional[type]:
    """Return the subclass of base with __name__ == name, or None.

    When several classes share the name (e.g. redefined in a test), the most
    recently defined one wins.
    """
    for subclass in _get_subclasses(base):
        if subclass.__name__ == name:
            return subclass
    return None


__all__ = ["find_subclass"]
