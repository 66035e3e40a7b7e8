"""Shared protocols and type aliases for request-authz."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from request_authz.policy._base import Result

__all__ = [
    "IdentityLike",
    "Policy",
    "PolicyResolver",
    "ScopePolicy",
    "UrlFor",
]

# Routing collaborator: resolves a named route (plus params) to a URL path.
UrlFor = Callable[..., str]


@runtime_checkable
class Policy(Protocol):
    """Structural type for authorization policies.

    Any object with a ``can(identity, action, resource)`` method
    satisfies this protocol.  It may return a plain ``bool`` or a
    :class:`~request_authz.policy.Result` carrying a reason.

    Example::

        class ArticlePolicy:
            def can(self, identity, action, article):
                return article.author_id == identity.id
    """

    def can(self, identity: Any, action: str, resource: Any) -> bool | Result: ...


@runtime_checkable
class ScopePolicy(Protocol):
    """A policy that can also narrow a resource (query, collection)."""

    def apply_scope(self, identity: Any, action: str, resource: Any) -> Any: ...


@runtime_checkable
class PolicyResolver(Protocol):
    """Locates the policy responsible for a resource.

    Implementations raise :class:`~request_authz.exceptions.PolicyNotFoundError`
    when nothing matches.
    """

    def get_policy(self, resource: Any) -> Any: ...


@runtime_checkable
class IdentityLike(Protocol):
    """An identity that can make authorization decisions by itself.

    :class:`~request_authz.identity.IdentityDecorator` satisfies this
    protocol, as can application identity types that implement the
    three methods directly.
    """

    def can(self, action: str, resource: Any) -> bool: ...

    def apply_scope(self, action: str, resource: Any) -> Any: ...

    def get_original_data(self) -> Any: ...
