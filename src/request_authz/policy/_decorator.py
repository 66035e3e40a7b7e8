"""@policy decorator — register policy classes on a MapResolver."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, TypeVar

if TYPE_CHECKING:
    from request_authz.resolver._map import MapResolver

__all__ = ["policy"]

C = TypeVar("C", bound=type)


def policy(
    resource_type: type,
    *,
    resolver: MapResolver | None = None,
) -> Callable[[C], C]:
    """Class decorator that maps *resource_type* to the decorated policy.

    The class is instantiated once, on first lookup.

    Args:
        resource_type: The resource class this policy decides for.
        resolver: Optional custom ``MapResolver``. Defaults to the global one.

    Returns:
        A decorator that registers the class and returns it unchanged.

    Example::

        @policy(Article)
        class ArticlePolicy(BasePolicy):
            def can_edit(self, identity, article):
                return article.author_id == identity.id
    """
    from request_authz.resolver._map import get_default_resolver

    def decorator(cls: C) -> C:
        target = resolver if resolver is not None else get_default_resolver()
        target.map(resource_type, cls)
        return cls

    return decorator
