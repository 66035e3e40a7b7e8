"""Construction-time configuration for request-authz."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from request_authz.exceptions import AuthzError, MissingIdentityError
from request_authz.identity import decorate_identity

__all__ = [
    "HandlerConfig",
    "MiddlewareConfig",
    "configure",
    "get_global_config",
    "_reset_global_config",
    "_set_global_config",
]


@dataclass(frozen=True, slots=True)
class HandlerConfig:
    """Selects an unauthorized handler and configures it.

    Attributes:
        name: Registered handler name (``"exception"``, ``"redirect"``,
            ``"route_redirect"`` or a custom one).
        url: Redirect target.  A literal path for ``"redirect"``; a route
            name or ``(route_name, params)`` pair for ``"route_redirect"``.
        exceptions: Error classes a redirect handler claims.  Everything
            else is re-raised.
        query_param: Name of the query parameter carrying the originally
            requested URL, or ``None`` to omit it.
        status_code: HTTP status of the redirect (3xx).

    Example::

        HandlerConfig(
            name="redirect",
            url="/login",
            exceptions=(MissingIdentityError, ForbiddenError),
        )
    """

    name: str = "exception"
    url: Any = "/login"
    exceptions: tuple[type[AuthzError], ...] = (MissingIdentityError,)
    query_param: str | None = "redirect"
    status_code: int = 302

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("handler name must be a non-empty string")
        # Accept any iterable of classes; store as a tuple for isinstance().
        exceptions = tuple(self.exceptions)
        for exc_type in exceptions:
            if not (isinstance(exc_type, type) and issubclass(exc_type, AuthzError)):
                raise ValueError(
                    f"exceptions must be AuthzError subclasses, got {exc_type!r}"
                )
        object.__setattr__(self, "exceptions", exceptions)
        if not 300 <= self.status_code < 400:
            raise ValueError(f"status_code must be a 3xx redirect, got {self.status_code!r}")


@dataclass(frozen=True, slots=True)
class MiddlewareConfig:
    """Options recognised by :class:`AuthorizationMiddleware`.

    Attributes:
        identity_decorator: ``(service, identity) -> identity`` binding the
            request's service to its identity.  Defaults to wrapping in an
            ``IdentityDecorator``.
        require_authorization_check: Raise ``AuthorizationRequiredError``
            when a request with an identity makes no decision.
        unauthorized_handler: Handler selection.  A bare string is
            shorthand for ``HandlerConfig(name=...)``.
        identity_attribute: Request-context key holding the identity.
        log_decisions: Log every policy decision (see ``request_authz._audit``).

    Example::

        config = MiddlewareConfig(unauthorized_handler="redirect")
        relaxed = config.merge(require_authorization_check=False)
    """

    identity_decorator: Callable[[Any, Any], Any] = decorate_identity
    require_authorization_check: bool = True
    unauthorized_handler: HandlerConfig = field(default_factory=HandlerConfig)
    identity_attribute: str = "identity"
    log_decisions: bool = False

    def __post_init__(self) -> None:
        if isinstance(self.unauthorized_handler, str):
            object.__setattr__(
                self, "unauthorized_handler", HandlerConfig(name=self.unauthorized_handler)
            )
        elif not isinstance(self.unauthorized_handler, HandlerConfig):
            raise ValueError(
                "unauthorized_handler must be a handler name or HandlerConfig, "
                f"got {self.unauthorized_handler!r}"
            )
        if not callable(self.identity_decorator):
            raise ValueError("identity_decorator must be callable")
        if not self.identity_attribute:
            raise ValueError("identity_attribute must be a non-empty string")

    def merge(
        self,
        *,
        identity_decorator: Callable[[Any, Any], Any] | None = None,
        require_authorization_check: bool | None = None,
        unauthorized_handler: HandlerConfig | str | None = None,
        identity_attribute: str | None = None,
        log_decisions: bool | None = None,
    ) -> MiddlewareConfig:
        """Return a new config with non-None overrides applied.

        Example::

            base = MiddlewareConfig()
            cfg = base.merge(unauthorized_handler="redirect")
        """
        return MiddlewareConfig(
            identity_decorator=(
                identity_decorator if identity_decorator is not None else self.identity_decorator
            ),
            require_authorization_check=(
                require_authorization_check
                if require_authorization_check is not None
                else self.require_authorization_check
            ),
            unauthorized_handler=(
                unauthorized_handler
                if unauthorized_handler is not None
                else self.unauthorized_handler
            ),  # type: ignore[arg-type]
            identity_attribute=(
                identity_attribute if identity_attribute is not None else self.identity_attribute
            ),
            log_decisions=(log_decisions if log_decisions is not None else self.log_decisions),
        )


# ---------------------------------------------------------------------------
# Global configuration singleton
# ---------------------------------------------------------------------------

_global_config = MiddlewareConfig()


def get_global_config() -> MiddlewareConfig:
    """Return the configuration used when none is passed explicitly.

    Example::

        config = get_global_config()
        print(config.require_authorization_check)  # True
    """
    return _global_config


def configure(
    *,
    identity_decorator: Callable[[Any, Any], Any] | None = None,
    require_authorization_check: bool | None = None,
    unauthorized_handler: HandlerConfig | str | None = None,
    identity_attribute: str | None = None,
    log_decisions: bool | None = None,
) -> MiddlewareConfig:
    """Update the global configuration by merging overrides.

    Only non-None values are applied.  Middleware instances snapshot the
    global config when they are constructed, so call this at startup.

    Returns:
        The updated global ``MiddlewareConfig``.

    Example::

        configure(require_authorization_check=False)
    """
    global _global_config
    _global_config = _global_config.merge(
        identity_decorator=identity_decorator,
        require_authorization_check=require_authorization_check,
        unauthorized_handler=unauthorized_handler,
        identity_attribute=identity_attribute,
        log_decisions=log_decisions,
    )
    return _global_config


def _set_global_config(cfg: MiddlewareConfig) -> None:
    """Replace global config with an exact snapshot. For testing only."""
    global _global_config
    _global_config = cfg


def _reset_global_config() -> None:
    """Reset global config to defaults. For testing only."""
    global _global_config
    _global_config = MiddlewareConfig()
