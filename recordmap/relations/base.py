"""Relation descriptors declared in a Record body.

Accessing ``record.posts`` returns a bound relation; calling it runs the
lookup again every time (nothing is cached on the owner):

    user.posts()                         # list of Post
    user.posts.query().latest().first()  # further chaining
    user.posts.create(title="Hello")     # write helper
"""

from typing import Any, ClassVar, Optional, Union

from ..errors import ValidationError
from ..query import Query
from ..utils.get_record_by_name import get_record_by_name

RecordTarget = Union[str, type]


class Relation:
    """Relationship metadata (kind, target, key columns) plus descriptor behaviour."""

    kind: ClassVar[str] = ""
    bound_class: ClassVar[type] = None

    def __init__(self, target: RecordTarget):
        self._target = target
        self.name: Optional[str] = None
        self.owner: Optional[type] = None

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name
        self.owner = owner

    def __get__(self, instance: Any, owner: type):
        if instance is None:
            return self
        return self.bound_class(self, instance)

    def __repr__(self) -> str:
        target = self._target if isinstance(self._target, str) else self._target.__name__
        return f"<{type(self).__name__} {self.name} -> {target}>"

    @property
    def target(self) -> type:
        """Target record class, resolved by name on first use when given as a string."""
        if isinstance(self._target, str):
            self._target = get_record_by_name(self._target)
        return self._target


class BoundRelation:
    """A relation attached to one owner record."""

    def __init__(self, relation: Relation, owner: Any):
        self.relation = relation
        self.owner = owner

    @property
    def connection(self):
        return self.owner._require_connection()

    @property
    def target(self) -> type:
        return self.relation.target

    def query(self) -> Query:
        """Seeded query on the target (for further chaining)."""
        raise NotImplementedError

    def __call__(self):
        """Resolve the relation against the database."""
        raise NotImplementedError

    def _require_owner_key(self) -> Any:
        key = self.owner.key
        if key is None:
            raise ValidationError(
                f"{type(self.owner).__name__} must be saved before writing through `{self.relation.name}`"
            )
        return key


def related_key(value: Any) -> Any:
    """Primary key of a record, or the value itself."""
    if hasattr(value, "_table_name") and hasattr(value, "key") and not isinstance(value, type):
        return value.key
    return value


def related_keys(values: Any) -> list:
    """Normalize a key, a record, or an iterable of either into a list of keys."""
    if values is None:
        return []
    if isinstance(values, (list, tuple, set, frozenset)):
        return [related_key(value) for value in values]
    return [related_key(values)]
