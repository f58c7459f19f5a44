"""Naming conventions: snake_case, plural table names, default key names."""

import re

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.([A-Za-z_][A-Za-z0-9_]*|\*))?$")

_IRREGULAR_PLURALS = {
    "person": "people",
    "child": "children",
    "man": "men",
    "woman": "women",
}


def snake_case(name: str) -> str:
    """``PostComment`` -> ``post_comment``."""
    name = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", name)
    name = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", name)
    return name.lower()


def pluralize(word: str) -> str:
    """Naive English plural of the last snake_case segment (``category`` -> ``categories``)."""
    head, _, last = word.rpartition("_")
    prefix = head + "_" if head else ""
    if last in _IRREGULAR_PLURALS:
        return prefix + _IRREGULAR_PLURALS[last]
    if re.search(r"[^aeiou]y$", last):
        return prefix + last[:-1] + "ies"
    if re.search(r"(s|x|z|ch|sh)$", last):
        return prefix + last + "es"
    return prefix + last + "s"


def table_name_for(class_name: str) -> str:
    """Default table name for a record class: snake_case plural of the class name."""
    return pluralize(snake_case(class_name))


def foreign_key_for(class_name: str) -> str:
    """Default foreign key column pointing at a record class (``User`` -> ``user_id``)."""
    return snake_case(class_name) + "_id"


def pivot_table_for(first_class_name: str, second_class_name: str) -> str:
    """Default pivot table: both singular snake names, sorted, joined by ``_``."""
    return "_".join(sorted((snake_case(first_class_name), snake_case(second_class_name))))


def is_identifier(name: str) -> bool:
    """True for ``column``, ``table.column``, ``table.*`` and ``*``."""
    return name == "*" or bool(_IDENTIFIER.match(name))


__all__ = [
    "snake_case",
    "pluralize",
    "table_name_for",
    "foreign_key_for",
    "pivot_table_for",
    "is_identifier",
]
