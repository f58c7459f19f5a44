"""Schema builder used by migration units."""

from .blueprint import Blueprint, ColumnDefinition
from .builder import Schema

__all__ = ["Blueprint", "ColumnDefinition", "Schema"]
