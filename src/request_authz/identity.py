"""IdentityDecorator — bind an identity to the request's AuthorizationService."""

from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING, Any

from request_authz._types import IdentityLike
from request_authz.policy._base import Result

if TYPE_CHECKING:
    from request_authz._service import AuthorizationService

__all__ = ["IdentityDecorator", "IdentityLike", "decorate_identity"]


class IdentityDecorator:
    """Proxy adding ``can`` / ``apply_scope`` to an application identity.

    Attribute reads and writes the decorator does not define itself are
    forwarded to the wrapped identity, as are item lookups, equality,
    hashing, ``str()``, truthiness and container protocols, so code
    written against the raw identity keeps working.
    ``get_original_data()`` returns the wrapped object itself.

    Example::

        identity = IdentityDecorator(service, user)
        identity.id                      # user.id
        identity.can("edit", article)    # service.can(user, "edit", article)
        identity.get_original_data() is user
    """

    __slots__ = ("_authorization", "_identity")

    def __init__(self, service: AuthorizationService, identity: Any) -> None:
        self._authorization = service
        self._identity = identity

    @property
    def authorization(self) -> AuthorizationService:
        return self._authorization

    def can(self, action: str, resource: Any) -> bool:
        return self._authorization.can(self._identity, action, resource)

    def can_result(self, action: str, resource: Any) -> Result:
        return self._authorization.can_result(self._identity, action, resource)

    def apply_scope(self, action: str, resource: Any) -> Any:
        return self._authorization.apply_scope(self._identity, action, resource)

    def authorize(self, action: str, resource: Any) -> None:
        self._authorization.authorize(self._identity, action, resource)

    def get_original_data(self) -> Any:
        return self._identity

    def __getattr__(self, name: str) -> Any:
        # Only called for names not found on the decorator.
        if name in IdentityDecorator.__slots__:
            raise AttributeError(name)
        return getattr(self._identity, name)

    def __setattr__(self, name: str, value: Any) -> None:
        if name in IdentityDecorator.__slots__:
            object.__setattr__(self, name, value)
        else:
            setattr(self._identity, name, value)

    def __getitem__(self, key: Any) -> Any:
        return self._identity[key]

    # Special methods bypass __getattr__, so the ones identities commonly
    # rely on are forwarded explicitly.

    def __eq__(self, other: object) -> bool:
        if isinstance(other, IdentityDecorator):
            other = other.get_original_data()
        return bool(self._identity == other)

    def __hash__(self) -> int:
        return hash(self._identity)

    def __str__(self) -> str:
        return str(self._identity)

    def __bool__(self) -> bool:
        return bool(self._identity)

    def __len__(self) -> int:
        return len(self._identity)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._identity)

    def __contains__(self, item: object) -> bool:
        return item in self._identity

    def __repr__(self) -> str:
        return f"IdentityDecorator({self._identity!r})"


def decorate_identity(service: AuthorizationService, identity: Any) -> Any:
    """Default ``identity_decorator``: bind *service* to *identity*.

    Identities that already implement :class:`IdentityLike` and expose
    ``set_authorization(service)`` are bound in place and returned as-is.
    Everything else is wrapped in an :class:`IdentityDecorator`.
    """
    set_authorization = getattr(identity, "set_authorization", None)
    if isinstance(identity, IdentityLike) and callable(set_authorization):
        set_authorization(service)
        return identity
    return IdentityDecorator(service, identity)
