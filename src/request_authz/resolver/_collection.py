"""ResolverCollection — chain resolvers, first match wins."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Any

from request_authz._types import PolicyResolver
from request_authz.exceptions import PolicyNotFoundError

__all__ = ["ResolverCollection"]


class ResolverCollection:
    """Composite resolver trying each sub-resolver in order.

    Only :class:`PolicyNotFoundError` moves on to the next resolver;
    any other error propagates immediately.  When every resolver fails
    the last ``PolicyNotFoundError`` is re-raised.

    Example::

        resolver = ResolverCollection([MapResolver({Tag: TagPolicy}), OrmResolver()])
    """

    def __init__(self, resolvers: Iterable[PolicyResolver] = ()) -> None:
        self._resolvers: list[PolicyResolver] = list(resolvers)

    def add(self, resolver: PolicyResolver) -> ResolverCollection:
        self._resolvers.append(resolver)
        return self

    def get_policy(self, resource: Any) -> Any:
        last_error: PolicyNotFoundError | None = None
        for resolver in self._resolvers:
            try:
                return resolver.get_policy(resource)
            except PolicyNotFoundError as exc:
                last_error = exc
        if last_error is not None:
            raise last_error
        raise PolicyNotFoundError(
            resource=resource,
            message="No resolvers are configured in the ResolverCollection",
        )

    def __iter__(self) -> Iterator[PolicyResolver]:
        return iter(self._resolvers)

    def __len__(self) -> int:
        return len(self._resolvers)
