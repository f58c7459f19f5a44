"""Metaclass for Record: injects mixins and collects columns, relations and scopes."""

from pydantic._internal._model_construction import ModelMetaclass

from ..column import Column
from ..utils.naming import table_name_for
from .mixins import _WithPrimaryKey, _WithSoftDelete, _WithTimestamps


def _inherited(bases, attribute, default):
    for base in bases:
        if hasattr(base, attribute):
            return getattr(base, attribute)
    return default


class RecordMeta(ModelMetaclass):
    """Metaclass for Record: injects mixins and attaches metadata to the class.

    Class keywords:
        table_name: defaults to the snake_case plural of the class name.
        primary_key: primary key column, ``id`` by default (then injected).
        soft_delete: add ``deleted_at`` and filter marked rows by default.
        with_timestamps: add ``created_at``/``updated_at``.

    After Pydantic builds the model, each model_fields entry becomes a Column
    in RecordSubClass._columns; relation descriptors and ``@scope`` functions
    found along the MRO are collected into ``_relations`` and ``_scopes``.
    """

    def __new__(mcs, name, bases, namespace,
                table_name: str = None,
                primary_key: str = None,
                soft_delete: bool = None,
                with_timestamps: bool = None,
                **kwargs):
        is_root = not any(isinstance(base, RecordMeta) for base in bases)
        if is_root:
            return super().__new__(mcs, name, bases, namespace, **kwargs)
        # inherited behaviors
        if primary_key is None:
            primary_key = _inherited(bases, "_primary_key", "id")
        if soft_delete is None:
            soft_delete = _inherited(bases, "_soft_delete", False)
        if with_timestamps is None:
            with_timestamps = _inherited(bases, "_timestamps", False)
        declared = set(namespace.get("__annotations__", {}))
        default_bases = tuple()
        if primary_key == "id" and "id" not in declared:
            default_bases += (_WithPrimaryKey,)
        if soft_delete:
            default_bases += (_WithSoftDelete,)
        if with_timestamps:
            default_bases += (_WithTimestamps,)
        default_bases = tuple(
            mixin for mixin in default_bases
            if not any(issubclass(base, mixin) for base in bases)
        )
        # start building result
        result = super().__new__(
            mcs, name, bases + default_bases, namespace, **kwargs
        )
        result._table_name = table_name or table_name_for(name)
        result._primary_key = primary_key
        result._soft_delete = bool(soft_delete)
        result._timestamps = bool(with_timestamps)
        if primary_key not in result.model_fields:
            raise TypeError(f"{name}: primary key `{primary_key}` is not a declared attribute")
        result._columns = {
            fname: Column.from_pydantic_info(fname, info)
            for fname, info in result.model_fields.items()
        }
        # relations and scopes, most derived definition wins
        from ..relations.base import Relation
        from .scopes import is_scope, unwrap_scope
        relations, scopes = {}, {}
        for klass in reversed(result.__mro__):
            for attribute, value in vars(klass).items():
                if isinstance(value, Relation):
                    relations[attribute] = value
                elif is_scope(value):
                    scopes[attribute] = unwrap_scope(value)
        result._relations = relations
        result._scopes = scopes
        return result
