"""ConventionResolver — locate policies by module and class naming."""

from __future__ import annotations

import importlib
import threading
from types import ModuleType
from typing import Any

from request_authz.exceptions import PolicyNotFoundError

__all__ = ["ConventionResolver"]


class ConventionResolver:
    """Resolve ``<Resource><suffix>`` classes from a policy package.

    For a resource class ``Article`` defined in ``blog.models.article``
    the resolver looks for ``ArticlePolicy`` in, in order:

    1. ``blog.policies.article``
    2. ``blog.policies``

    ``app_namespace`` defaults to the top-level package of the resource's
    module.  Found policy classes are instantiated once and cached per
    resource type.

    Example::

        resolver = ConventionResolver("blog")
        policy = resolver.get_policy(article)  # blog.policies.article.ArticlePolicy()
    """

    def __init__(
        self,
        app_namespace: str | None = None,
        *,
        policy_namespace: str = "policies",
        suffix: str = "Policy",
    ) -> None:
        self._app_namespace = app_namespace
        self._policy_namespace = policy_namespace
        self._suffix = suffix
        self._cache: dict[type, Any] = {}
        self._lock = threading.Lock()

    def get_policy(self, resource: Any) -> Any:
        resource_type = resource if isinstance(resource, type) else type(resource)
        cached = self._cache.get(resource_type)
        if cached is not None:
            return cached

        policy_cls = self._find_policy_class(resource_type)
        if policy_cls is None:
            raise PolicyNotFoundError(resource=resource)

        with self._lock:
            cached = self._cache.get(resource_type)
            if cached is None:
                cached = policy_cls()
                self._cache[resource_type] = cached
        return cached

    def candidate_modules(self, resource_type: type) -> list[str]:
        """Module names searched for *resource_type*'s policy, in order."""
        module = resource_type.__module__
        namespace = self._app_namespace or module.split(".")[0]
        base = f"{namespace}.{self._policy_namespace}"
        leaf = module.rsplit(".", 1)[-1]
        if leaf == namespace:
            return [base]
        return [f"{base}.{leaf}", base]

    def _find_policy_class(self, resource_type: type) -> type | None:
        class_name = f"{resource_type.__name__}{self._suffix}"
        for module_name in self.candidate_modules(resource_type):
            module = _import_optional(module_name)
            if module is None:
                continue
            policy_cls = getattr(module, class_name, None)
            if isinstance(policy_cls, type):
                return policy_cls
        return None


def _import_optional(module_name: str) -> ModuleType | None:
    """Import *module_name*, returning ``None`` only if it does not exist.

    Import errors raised from inside an existing module propagate.
    """
    try:
        return importlib.import_module(module_name)
    except ModuleNotFoundError as exc:
        if exc.name is not None and (
            module_name == exc.name or module_name.startswith(f"{exc.name}.")
        ):
            return None
        raise
