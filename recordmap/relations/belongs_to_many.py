"""belongs_to_many: both sides linked through a pivot table."""

from typing import Any, Optional

from ..query import Query
from ..utils.naming import foreign_key_for, pivot_table_for
from .base import BoundRelation, Relation, RecordTarget, related_keys


class BoundBelongsToMany(BoundRelation):

    def _pivot(self) -> Query:
        """Table query on the pivot rows of the owner (never hydrated into records)."""
        return Query(connection=self.connection, table=self.relation.pivot_table).where(
            self.relation.foreign_pivot_key, self.owner.key
        )

    def related_keys(self) -> list:
        """Keys of the related records, read from the pivot table."""
        if self.owner.key is None:
            return []
        return self._pivot().pluck(self.relation.related_pivot_key)

    def query(self) -> Query:
        """Target query restricted to the related keys (the pivot is read now)."""
        keys = self.related_keys()
        return self.target.q(self.connection).where_in(
            f"{self.target._table_name}.{self.target._primary_key}", keys
        )

    def __call__(self) -> list:
        """Related records; no pivot rows resolves to [] after the pivot read only."""
        keys = self.related_keys()
        if not keys:
            return []
        return self.target.q(self.connection).where_in(
            f"{self.target._table_name}.{self.target._primary_key}", keys
        ).get()

    def attach(self, ids: Any) -> list:
        """Insert pivot rows for the given keys/records that are not attached yet."""
        owner_key = self._require_owner_key()
        current = set(self.related_keys())
        attached = []
        for key in related_keys(ids):
            if key in current or key in attached:
                continue
            Query(connection=self.connection, table=self.relation.pivot_table).insert(
                {self.relation.foreign_pivot_key: owner_key, self.relation.related_pivot_key: key},
                returning=False,
            )
            attached.append(key)
        return attached

    def detach(self, ids: Any = None) -> int:
        """Delete pivot rows for the given keys (all of the owner's rows when ids is None)."""
        self._require_owner_key()
        query = self._pivot()
        if ids is not None:
            query.where_in(self.relation.related_pivot_key, related_keys(ids))
        return query.force_delete()

    def sync(self, ids: Any, detaching: bool = True) -> dict[str, list]:
        """Make the attached set equal to ``ids``; returns what was attached and detached."""
        wanted = related_keys(ids)
        current = self.related_keys()
        detached = [key for key in current if key not in wanted] if detaching else []
        if detached:
            self.detach(detached)
        attached = self.attach([key for key in wanted if key not in current])
        return {"attached": attached, "detached": detached}

    def toggle(self, ids: Any) -> dict[str, list]:
        """Attach the keys that are not attached and detach those that are."""
        current = set(self.related_keys())
        keys = related_keys(ids)
        detached = [key for key in keys if key in current]
        if detached:
            self.detach(detached)
        attached = self.attach([key for key in keys if key not in current])
        return {"attached": attached, "detached": detached}


class BelongsToMany(Relation):
    kind = "belongs_to_many"
    bound_class = BoundBelongsToMany

    def __init__(
        self,
        target: RecordTarget,
        pivot_table: Optional[str] = None,
        foreign_pivot_key: Optional[str] = None,
        related_pivot_key: Optional[str] = None,
    ):
        super().__init__(target)
        self._pivot_table = pivot_table
        self._foreign_pivot_key = foreign_pivot_key
        self._related_pivot_key = related_pivot_key

    @property
    def pivot_table(self) -> str:
        """Pivot table (default: both singular snake names, sorted, joined by ``_``)."""
        return self._pivot_table or pivot_table_for(self.owner.__name__, self.target.__name__)

    @property
    def foreign_pivot_key(self) -> str:
        """Pivot column pointing at the owner (default ``<owner>_id``)."""
        return self._foreign_pivot_key or foreign_key_for(self.owner.__name__)

    @property
    def related_pivot_key(self) -> str:
        """Pivot column pointing at the target (default ``<target>_id``)."""
        return self._related_pivot_key or foreign_key_for(self.target.__name__)


def belongs_to_many(
    target: RecordTarget,
    pivot_table: Optional[str] = None,
    foreign_pivot_key: Optional[str] = None,
    related_pivot_key: Optional[str] = None,
) -> BelongsToMany:
    """Target records linked to the owner through ``pivot_table``."""
    return BelongsToMany(
        target,
        pivot_table=pivot_table,
        foreign_pivot_key=foreign_pivot_key,
        related_pivot_key=related_pivot_key,
    )
