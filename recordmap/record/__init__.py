from .base import Record
from .meta import RecordMeta
from .scopes import scope

__all__ = ["Record", "RecordMeta", "scope"]
