"""Relationship descriptors: has_one, has_many, belongs_to, belongs_to_many."""

from .base import BoundRelation, Relation
from .belongs_to import BelongsTo, belongs_to
from .belongs_to_many import BelongsToMany, belongs_to_many
from .has_one_or_many import HasMany, HasOne, has_many, has_one

__all__ = [
    "Relation",
    "BoundRelation",
    "HasOne",
    "HasMany",
    "BelongsTo",
    "BelongsToMany",
    "has_one",
    "has_many",
    "belongs_to",
    "belongs_to_many",
]
