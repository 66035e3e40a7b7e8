"""MapResolver — explicit resource type to policy mapping."""

from __future__ import annotations

import threading
from collections.abc import Mapping
from typing import Any

from request_authz._types import Policy
from request_authz.exceptions import PolicyNotFoundError

__all__ = ["MapResolver", "get_default_resolver"]


class MapResolver:
    """Resolver backed by a ``{resource_type: policy}`` map.

    A policy may be registered as an instance, as a class (instantiated
    once, on first lookup) or as a zero-argument factory (called once).
    Lookups walk the resource type's MRO, so a policy mapped to a base
    class also covers its subclasses.

    Thread-safe for reads after startup.

    Example::

        resolver = MapResolver({Article: ArticlePolicy})
        resolver.map(Comment, CommentPolicy())
        policy = resolver.get_policy(article)
    """

    def __init__(self, mapping: Mapping[type, Any] | None = None) -> None:
        self._map: dict[type, Any] = {}
        self._instances: dict[type, Any] = {}
        self._lock = threading.Lock()
        if mapping is not None:
            for resource_type, policy in mapping.items():
                self.map(resource_type, policy)

    def map(self, resource_type: type, policy: Any, *, overwrite: bool = False) -> None:
        """Map *resource_type* to *policy*.

        Args:
            resource_type: The resource class.
            policy: A policy instance, policy class or zero-argument factory.
            overwrite: Replace an existing mapping instead of raising.

        Raises:
            TypeError: If *resource_type* is not a class or *policy* is not
                usable as a policy.
            ValueError: If *resource_type* is already mapped and
                ``overwrite`` is false.
        """
        if not isinstance(resource_type, type):
            raise TypeError(f"resource_type must be a class, got {resource_type!r}")
        if not (isinstance(policy, (type, Policy)) or callable(policy)):
            raise TypeError(
                f"policy for {resource_type.__name__} must be a policy instance, "
                f"class or factory, got {policy!r}"
            )
        with self._lock:
            if resource_type in self._map and not overwrite:
                raise ValueError(f"A policy for {resource_type.__name__} is already mapped")
            self._map[resource_type] = policy
            self._instances.pop(resource_type, None)

    def get_policy(self, resource: Any) -> Any:
        """Return the policy for *resource* (an instance or a class).

        Raises:
            PolicyNotFoundError: If no class in the resource's MRO is mapped.
        """
        resource_type = resource if isinstance(resource, type) else type(resource)
        for klass in resource_type.__mro__:
            if klass in self._map:
                return self._instance_for(klass)
        raise PolicyNotFoundError(resource=resource)

    def has_policy(self, resource_type: type) -> bool:
        return any(klass in self._map for klass in resource_type.__mro__)

    def clear(self) -> None:
        """Remove all mappings.  Primarily useful in test teardown."""
        with self._lock:
            self._map.clear()
            self._instances.clear()

    def _instance_for(self, klass: type) -> Any:
        instance = self._instances.get(klass)
        if instance is not None:
            return instance
        with self._lock:
            instance = self._instances.get(klass)
            if instance is None:
                policy = self._map[klass]
                if isinstance(policy, type):
                    instance = policy()
                elif isinstance(policy, Policy):
                    instance = policy
                else:
                    instance = policy()
                self._instances[klass] = instance
        return instance


# Module-level default resolver (singleton).
_default_resolver = MapResolver()


def get_default_resolver() -> MapResolver:
    """Return the global default ``MapResolver`` used by ``@policy``.

    Example::

        get_default_resolver().clear()  # reset between tests
    """
    return _default_resolver
