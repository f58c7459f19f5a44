"""Named query scopes declared in a Record body.

    class Post(Record):
        @scope
        def published(query):
            return query.where("is_published", True)

    Post.q(connection).scope("published").get()
"""

from typing import Any, Callable

_SCOPE_MARKER = "__recordmap_scope__"


def scope(function: Callable[..., Any]) -> staticmethod:
    """Register ``function(query, *args)`` as a scope of the enclosing Record."""
    setattr(function, _SCOPE_MARKER, True)
    return staticmethod(function)


def is_scope(value: Any) -> bool:
    if isinstance(value, staticmethod):
        value = value.__func__
    return callable(value) and getattr(value, _SCOPE_MARKER, False)


def unwrap_scope(value: Any) -> Callable[..., Any]:
    return value.__func__ if isinstance(value, staticmethod) else value
