"""has_one / has_many: the target table holds a foreign key to the owner."""

from typing import Any, Optional

from ..query import Query
from ..utils.naming import foreign_key_for
from .base import BoundRelation, Relation, RecordTarget


class _HasRelation(Relation):

    def __init__(self, target: RecordTarget, foreign_key: Optional[str] = None, local_key: Optional[str] = None):
        super().__init__(target)
        self._foreign_key = foreign_key
        self._local_key = local_key

    @property
    def foreign_key(self) -> str:
        """Column on the target table pointing at the owner (default ``<owner>_id``)."""
        return self._foreign_key or foreign_key_for(self.owner.__name__)

    @property
    def local_key(self) -> str:
        """Owner column the foreign key refers to (default: the owner's primary key)."""
        return self._local_key or self.owner._primary_key


class _BoundHasRelation(BoundRelation):

    def _local_value(self) -> Any:
        return self.owner.__dict__.get(self.relation.local_key)

    def query(self) -> Query:
        query = self.target.q(self.connection)
        value = self._local_value()
        if value is None:
            return query.where_in(self.relation.foreign_key, [])
        return query.where(f"{self.target._table_name}.{self.relation.foreign_key}", value)

    def _attach(self, record: Any) -> Any:
        self._require_owner_key()
        setattr(record, self.relation.foreign_key, self._local_value())
        record.save(self.connection)
        return record

    def create(self, **attributes: Any) -> Any:
        """Create a target record linked to the owner."""
        self._require_owner_key()
        record = self.target.new(self.connection, **attributes)
        return self._attach(record)

    def save(self, record: Any) -> Any:
        """Link an existing (or new) target record to the owner and save it."""
        return self._attach(record)


class BoundHasOne(_BoundHasRelation):

    def __call__(self) -> Optional[Any]:
        """The related record, or None; an owner without key resolves to None without SQL."""
        if self._local_value() is None:
            return None
        return self.query().first()


class BoundHasMany(_BoundHasRelation):

    def __call__(self) -> list:
        """Related records; an owner without key resolves to [] without SQL."""
        if self._local_value() is None:
            return []
        return self.query().get()

    def create_many(self, items: list[dict[str, Any]]) -> list:
        return [self.create(**attributes) for attributes in items]


class HasOne(_HasRelation):
    kind = "has_one"
    bound_class = BoundHasOne


class HasMany(_HasRelation):
    kind = "has_many"
    bound_class = BoundHasMany


def has_one(target: RecordTarget, foreign_key: Optional[str] = None, local_key: Optional[str] = None) -> HasOne:
    """One target record whose ``foreign_key`` equals the owner's ``local_key``."""
    return HasOne(target, foreign_key=foreign_key, local_key=local_key)


def has_many(target: RecordTarget, foreign_key: Optional[str] = None, local_key: Optional[str] = None) -> HasMany:
    """All target records whose ``foreign_key`` equals the owner's ``local_key``."""
    return HasMany(target, foreign_key=foreign_key, local_key=local_key)
