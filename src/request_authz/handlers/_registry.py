"""HandlerRegistry — unauthorized handlers by name."""

from __future__ import annotations

from collections.abc import Callable
from typing import TypeVar

from request_authz.handlers._base import UnauthorizedHandler
from request_authz.handlers._exception import ExceptionHandler
from request_authz.handlers._redirect import RedirectHandler, RouteRedirectHandler

__all__ = ["HandlerRegistry", "get_default_handler_registry", "register_handler"]

HandlerFactory = Callable[[], UnauthorizedHandler]
H = TypeVar("H", bound=type)


class HandlerRegistry:
    """Maps handler names to zero-argument handler factories.

    The built-in handlers are registered as ``"exception"``,
    ``"redirect"`` and ``"route_redirect"``.

    Example::

        registry = HandlerRegistry()
        registry.register("json_forbidden", JsonForbiddenHandler)
        handler = registry.get("json_forbidden")
    """

    def __init__(self, *, include_builtins: bool = True) -> None:
        self._factories: dict[str, HandlerFactory] = {}
        if include_builtins:
            self.register(ExceptionHandler.name, ExceptionHandler)
            self.register(RedirectHandler.name, RedirectHandler)
            self.register(RouteRedirectHandler.name, RouteRedirectHandler)

    def register(self, name: str, factory: HandlerFactory, *, overwrite: bool = False) -> None:
        """Register *factory* under *name*.

        Raises:
            ValueError: If *name* is taken and ``overwrite`` is false.
        """
        if name in self._factories and not overwrite:
            raise ValueError(f"An unauthorized handler named {name!r} is already registered")
        self._factories[name] = factory

    def get(self, name: str) -> UnauthorizedHandler:
        """Build the handler registered under *name*.

        Raises:
            ValueError: If no handler is registered under *name*.
        """
        try:
            factory = self._factories[name]
        except KeyError:
            raise ValueError(
                f"Unknown unauthorized handler {name!r}; registered: {sorted(self._factories)}"
            ) from None
        handler = factory()
        if not isinstance(handler, UnauthorizedHandler):
            raise TypeError(f"Handler {name!r} does not implement handle(error, context, config)")
        return handler

    def names(self) -> list[str]:
        return sorted(self._factories)


# Module-level default registry (singleton).
_default_registry = HandlerRegistry()


def get_default_handler_registry() -> HandlerRegistry:
    """Return the global registry used when a middleware gets none."""
    return _default_registry


def register_handler(
    name: str,
    *,
    registry: HandlerRegistry | None = None,
    overwrite: bool = False,
) -> Callable[[H], H]:
    """Class decorator registering a custom unauthorized handler.

    Example::

        @register_handler("json_forbidden")
        class JsonForbiddenHandler:
            def handle(self, error, context, config):
                ...
    """

    def decorator(cls: H) -> H:
        target = registry if registry is not None else get_default_handler_registry()
        target.register(name, cls, overwrite=overwrite)
        return cls

    return decorator
