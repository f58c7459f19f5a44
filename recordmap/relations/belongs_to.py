"""belongs_to: the owner holds a foreign key to the target."""

from typing import Any, Optional

from ..query import Query
from ..utils.naming import foreign_key_for
from .base import BoundRelation, Relation, RecordTarget, related_key


class BoundBelongsTo(BoundRelation):

    def _foreign_value(self) -> Any:
        return self.owner.__dict__.get(self.relation.foreign_key)

    def query(self) -> Query:
        query = self.target.q(self.connection)
        value = self._foreign_value()
        if value is None:
            return query.where_in(self.relation.owner_key, [])
        return query.where(f"{self.target._table_name}.{self.relation.owner_key}", value)

    def __call__(self) -> Optional[Any]:
        """The parent record, or None; a null foreign key resolves to None without SQL."""
        if self._foreign_value() is None:
            return None
        return self.query().first()

    def associate(self, record: Any) -> Any:
        """Point the owner's foreign key at ``record`` (or a key); the owner is not saved."""
        if hasattr(record, "_table_name") and self.relation.owner_key != record._primary_key:
            value = getattr(record, self.relation.owner_key)
        else:
            value = related_key(record)
        setattr(self.owner, self.relation.foreign_key, value)
        return self.owner

    def dissociate(self) -> Any:
        """Clear the owner's foreign key; the owner is not saved."""
        setattr(self.owner, self.relation.foreign_key, None)
        return self.owner


class BelongsTo(Relation):
    kind = "belongs_to"
    bound_class = BoundBelongsTo

    def __init__(self, target: RecordTarget, foreign_key: Optional[str] = None, owner_key: Optional[str] = None):
        super().__init__(target)
        self._foreign_key = foreign_key
        self._owner_key = owner_key

    @property
    def foreign_key(self) -> str:
        """Owner column pointing at the target (default ``<target>_id``)."""
        return self._foreign_key or foreign_key_for(self.target.__name__)

    @property
    def owner_key(self) -> str:
        """Target column the foreign key refers to (default: the target's primary key)."""
        return self._owner_key or self.target._primary_key


def belongs_to(target: RecordTarget, foreign_key: Optional[str] = None, owner_key: Optional[str] = None) -> BelongsTo:
    """The target record whose ``owner_key`` equals the owner's ``foreign_key``."""
    return BelongsTo(target, foreign_key=foreign_key, owner_key=owner_key)
