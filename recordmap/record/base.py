"""Record model base: attribute tracking, persistence lifecycle and class-level finders."""

import logging
from typing import Any, ClassVar, Iterable, Optional

from pydantic import BaseModel, ConfigDict, PrivateAttr, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from ..errors import NotFoundError, ValidationError
from ..query import Query
from ..relations.base import Relation
from ..utils.now import utcnow
from .meta import RecordMeta
from .mixins import MANAGED_COLUMNS

logger = logging.getLogger("recordmap")

_ATTRIBUTES_ADAPTER = TypeAdapter(dict[str, Any])


class Record(BaseModel, metaclass=RecordMeta):
    """Base class for entities mapped to one table row.

    Declare attributes as pydantic fields; class keywords (see RecordMeta)
    choose the table, the primary key, soft delete and timestamps:

        class User(Record, with_timestamps=True):
            FILLABLE = ("name", "email")
            name: str
            email: str
            is_active: bool = True
            posts = has_many("Post")

    A record is bound to the Connection it was created with or loaded from;
    class-level operations take the connection explicitly.
    """

    model_config = ConfigDict(
        validate_assignment=True,
        arbitrary_types_allowed=True,
        ignored_types=(Relation,),
        extra="forbid",
    )

    FILLABLE: ClassVar[tuple[str, ...]] = ()
    """Mass-assignable attribute names; empty means every attribute except the key and managed timestamps."""

    _table_name: ClassVar[str] = ""
    _primary_key: ClassVar[str] = "id"
    _soft_delete: ClassVar[bool] = False
    _soft_delete_column: ClassVar[str] = "deleted_at"
    _timestamps: ClassVar[bool] = False
    _columns: ClassVar[dict] = {}
    _relations: ClassVar[dict] = {}
    _scopes: ClassVar[dict] = {}

    _connection: Any = PrivateAttr(default=None)
    _dirty: set = PrivateAttr(default_factory=set)
    _exists: bool = PrivateAttr(default=False)

    def __init__(self, **data: Any):
        try:
            super().__init__(**data)
        except PydanticValidationError as error:
            raise ValidationError(str(error)) from error
        self._dirty = set(data)

    def __setattr__(self, name: str, value: Any) -> None:
        """Validate and set an attribute, marking it dirty."""
        if name.startswith("_"):
            super().__setattr__(name, value)
            return
        if name not in type(self).model_fields:
            raise ValidationError(f"Unknown attribute `{name}` on {type(self).__name__}", column=name)
        try:
            super().__setattr__(name, value)
        except PydanticValidationError as error:
            raise ValidationError(f"Invalid value for `{name}`: {error}", column=name) from error
        self._dirty.add(name)

    def __eq__(self, other: Any) -> bool:
        """Same class and same primary key (unsaved records only equal themselves)."""
        if not isinstance(other, Record):
            return NotImplemented
        if type(self) is not type(other):
            return False
        if self.key is None or other.key is None:
            return self is other
        return self.key == other.key

    def __hash__(self) -> int:
        return hash((type(self), self.key)) if self.key is not None else id(self)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self._primary_key}={self.key!r}>"

    # --- state ---

    @property
    def key(self) -> Any:
        """Primary key value, or None before the first insert."""
        return self.__dict__.get(self._primary_key)

    @property
    def exists(self) -> bool:
        """True once the record has been inserted or loaded (and not physically deleted)."""
        return self._exists

    @property
    def connection(self):
        return self._connection

    @property
    def trashed(self) -> bool:
        """True if the soft-delete marker is set."""
        return self._soft_delete and self.__dict__.get(self._soft_delete_column) is not None

    def is_dirty(self, name: Optional[str] = None) -> bool:
        """True if any attribute (or the named one) changed since the last load/save."""
        if name is None:
            return bool(self._dirty)
        return name in self._dirty

    def get_dirty(self) -> dict[str, Any]:
        """Changed attributes and their current values."""
        return {name: self.__dict__.get(name) for name in self._dirty}

    def to_dict(self) -> dict[str, Any]:
        """Attributes that currently hold a value, keyed by name."""
        return {name: self.__dict__[name] for name in type(self).model_fields if name in self.__dict__}

    def to_json(self) -> str:
        """``to_dict()`` as JSON text (datetimes in ISO 8601)."""
        return _ATTRIBUTES_ADAPTER.dump_json(self.to_dict()).decode()

    def bind(self, connection) -> "Record":
        """Attach the record to a connection."""
        self._connection = connection
        return self

    def _require_connection(self):
        if self._connection is None:
            raise ValidationError(f"{type(self).__name__} is not bound to a connection")
        return self._connection

    def _set_clean(self, values: dict[str, Any]) -> None:
        """Store values that already match the database, without marking them dirty."""
        for name, value in values.items():
            self.__dict__[name] = value
            self._dirty.discard(name)

    # --- mass assignment ---

    @classmethod
    def fillable(cls) -> tuple[str, ...]:
        if cls.FILLABLE:
            return tuple(cls.FILLABLE)
        return tuple(
            name for name in cls.model_fields
            if name != cls._primary_key and name not in MANAGED_COLUMNS
        )

    def fill(self, **attributes: Any) -> "Record":
        """Mass-assign attributes: unknown names raise, known but non-fillable ones are ignored."""
        allowed = self.fillable()
        for name, value in attributes.items():
            if name not in type(self).model_fields:
                raise ValidationError(f"Unknown attribute `{name}` on {type(self).__name__}", column=name)
            if name in allowed:
                setattr(self, name, value)
        return self

    # --- lifecycle hooks ---

    def on_before_create(self) -> None:
        """Called before the INSERT of a new record."""

    def on_after_create(self) -> None:
        """Called after the INSERT, once the key is known."""

    def on_before_update(self) -> None:
        """Called before the UPDATE of a dirty record."""

    def on_after_update(self) -> None:
        """Called after the UPDATE."""

    def on_before_delete(self) -> None:
        """Called before a delete (soft or physical)."""

    def on_after_delete(self) -> None:
        """Called after a delete (soft or physical)."""

    # --- persistence ---

    def _key_query(self) -> Query:
        """Query matching this row, soft-deleted or not."""
        cls = type(self)
        if self.key is None:
            raise ValidationError(
                f"{cls.__name__} has no `{cls._primary_key}` value to address its row",
                column=cls._primary_key,
            )
        query = cls.q(self._require_connection()).where(f"{cls._table_name}.{cls._primary_key}", self.key)
        if cls._soft_delete:
            query.with_trashed()
        return query

    def save(self, connection=None, force_insert: bool = False) -> bool:
        """INSERT a record without a primary key value, UPDATE the dirty attributes otherwise.

        A record with a key and no changes issues no SQL. Pass
        ``force_insert=True`` to INSERT a new row whose key is chosen by the caller.

        Raises:
            ValidationError: A required attribute has no value, or the record
                was loaded without its primary key column.
            ConstraintViolation: The database rejected the write.
        """
        if connection is not None:
            self._connection = connection
        self._require_connection()
        if force_insert:
            return self._perform_insert()
        if self.key is None:
            if self._exists:
                raise ValidationError(
                    f"{type(self).__name__} was loaded without `{self._primary_key}` and cannot be saved",
                    column=self._primary_key,
                )
            return self._perform_insert()
        return self._perform_update()

    def _perform_insert(self) -> bool:
        cls = type(self)
        self.on_before_create()
        for name, info in cls.model_fields.items():
            if info.is_required() and name not in self.__dict__:
                raise ValidationError(
                    f"Missing required attribute `{name}` on {cls.__name__}", column=name
                )
        values = {
            name: self.__dict__[name]
            for name, column in cls._columns.items()
            if name in self._dirty or (column.default is not None and name in self.__dict__)
        }
        if cls._timestamps:
            now = utcnow()
            values.setdefault("created_at", self.__dict__.get("created_at") or now)
            values.setdefault("updated_at", self.__dict__.get("updated_at") or now)
        serialized = {name: cls._columns[name].serialize(value) for name, value in values.items()}
        key = cls.q(self._connection).insert(serialized)
        if key is not None and self.key is None:
            values[cls._primary_key] = cls._columns[cls._primary_key].parse(key)
        self._set_clean(values)
        self._dirty.clear()
        self._exists = True
        logger.debug("Inserted %s", self)
        self.on_after_create()
        return True

    def _perform_update(self) -> bool:
        cls = type(self)
        if not self._dirty:
            return True
        self.on_before_update()
        values = {name: self.__dict__.get(name) for name in self._dirty}
        if cls._timestamps and "updated_at" not in values:
            values["updated_at"] = utcnow()
        serialized = {name: cls._columns[name].serialize(value) for name, value in values.items()}
        self._key_query().update(serialized)
        self._set_clean(values)
        self._dirty.clear()
        self._exists = True
        self.on_after_update()
        return True

    def update(self, **attributes: Any) -> bool:
        """Mass-assign then save."""
        return self.fill(**attributes).save()

    def delete(self) -> bool:
        """Soft-delete (mark) or physically delete the row.

        Marking an already marked record, or deleting a record that was
        never persisted, is a no-op returning False.
        """
        cls = type(self)
        if not self._exists:
            return False
        if cls._soft_delete and self.trashed:
            return False
        self.on_before_delete()
        if cls._soft_delete:
            values = {cls._soft_delete_column: utcnow()}
            if cls._timestamps:
                values["updated_at"] = values[cls._soft_delete_column]
            self._key_query().update(
                {name: cls._columns[name].serialize(value) for name, value in values.items()}
            )
            self._set_clean(values)
        else:
            self._key_query().force_delete()
            self._exists = False
        self.on_after_delete()
        return True

    def force_delete(self) -> bool:
        """Physically delete the row, soft delete or not."""
        if not self._exists:
            return False
        self.on_before_delete()
        self._key_query().force_delete()
        self._exists = False
        self.on_after_delete()
        return True

    def restore(self) -> bool:
        """Clear the soft-delete marker; returns False when the record was not marked.

        Raises:
            ValidationError: The record class does not use soft delete.
        """
        cls = type(self)
        if not cls._soft_delete:
            raise ValidationError(f"{cls.__name__} does not use soft delete")
        if not self._exists or not self.trashed:
            return False
        values = {cls._soft_delete_column: None}
        if cls._timestamps:
            values["updated_at"] = utcnow()
        self._key_query().update(
            {name: cls._columns[name].serialize(value) for name, value in values.items()}
        )
        self._set_clean(values)
        return True

    def refresh(self) -> "Record":
        """Reload every attribute from the database; a vanished row marks the record as not existing."""
        fresh = self._key_query().first()
        if fresh is None:
            self._exists = False
            return self
        self._set_clean(fresh.to_dict())
        self._dirty.clear()
        return self

    # --- hydration ---

    @classmethod
    def _hydrate(cls, connection, row: dict[str, Any]) -> "Record":
        """Build a persisted, clean instance from a row mapping column name to value."""
        data = {
            name: column.parse(row[name])
            for name, column in cls._columns.items()
            if name in row
        }
        instance = cls.model_construct(**data)
        instance._connection = connection
        instance._exists = True
        instance._dirty = set()
        return instance

    # --- class-level operations ---

    @classmethod
    def q(cls, connection) -> Query:
        """New query on this record's table."""
        return Query(connection=connection, record=cls)

    @classmethod
    def new(cls, connection, **attributes: Any) -> "Record":
        """Unsaved instance bound to ``connection``, mass-assigned from ``attributes``."""
        instance = cls.model_construct()
        instance._connection = connection
        instance._dirty = set()
        return instance.fill(**attributes)

    @classmethod
    def create(cls, connection, **attributes: Any) -> "Record":
        """Mass-assign and insert."""
        instance = cls.new(connection, **attributes)
        instance.save()
        return instance

    @classmethod
    def find(cls, connection, key: Any) -> Optional["Record"]:
        """Record with this primary key, or None (soft-deleted rows are not found)."""
        if key is None:
            return None
        return cls.q(connection).find(key)

    @classmethod
    def find_or_fail(cls, connection, key: Any) -> "Record":
        """Like find(), but raise NotFoundError when nothing matches."""
        found = cls.find(connection, key)
        if found is None:
            raise NotFoundError(f"{cls.__name__} with {cls._primary_key}={key!r} not found")
        return found

    @classmethod
    def first_or_fail(cls, connection, search: Optional[dict[str, Any]] = None) -> "Record":
        """First record matching ``search`` (every record when omitted), or raise NotFoundError."""
        query = cls.q(connection)
        if search:
            query.where(search)
        return query.first_or_fail()

    @classmethod
    def find_many(cls, connection, keys: Iterable[Any]) -> list["Record"]:
        return cls.q(connection).where_in(f"{cls._table_name}.{cls._primary_key}", list(keys)).get()

    @classmethod
    def all(cls, connection) -> list["Record"]:
        return cls.q(connection).get()

    @classmethod
    def first_or_create(cls, connection, search: dict[str, Any], values: Optional[dict[str, Any]] = None) -> "Record":
        """First record matching ``search``, or a new one created from ``search`` and ``values``."""
        found = cls.q(connection).where(search).first()
        if found is not None:
            return found
        return cls.create(connection, **{**search, **(values or {})})

    @classmethod
    def update_or_create(cls, connection, search: dict[str, Any], values: Optional[dict[str, Any]] = None) -> "Record":
        """Update the first record matching ``search`` with ``values``, or create it."""
        found = cls.q(connection).where(search).first()
        if found is None:
            return cls.create(connection, **{**search, **(values or {})})
        found.update(**(values or {}))
        return found

    @classmethod
    def destroy(cls, connection, *keys: Any) -> int:
        """Delete the records with these keys (running hooks); returns how many were deleted."""
        if len(keys) == 1 and isinstance(keys[0], (list, tuple, set)):
            keys = tuple(keys[0])
        count = 0
        for record in cls.find_many(connection, keys):
            if record.delete():
                count += 1
        return count

    @classmethod
    def with_trashed(cls, connection) -> Query:
        return cls.q(connection).with_trashed()

    @classmethod
    def only_trashed(cls, connection) -> Query:
        return cls.q(connection).only_trashed()
