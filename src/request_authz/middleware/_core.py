"""AuthorizationMiddleware — attach, run downstream, enforce, recover."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any

from request_authz._audit import log_missing_check
from request_authz._service import AuthorizationService
from request_authz.config._config import MiddlewareConfig, get_global_config
from request_authz.exceptions import AuthorizationRequiredError, AuthzError
from request_authz.handlers._registry import HandlerRegistry, get_default_handler_registry
from request_authz.middleware._context import AUTHORIZATION_ATTRIBUTE, RequestContext

__all__ = ["AuthorizationMiddleware"]

ServiceFactory = Callable[[RequestContext], AuthorizationService]


class AuthorizationMiddleware:
    """Framework-neutral request pipeline step for authorization.

    For every request it:

    1. builds an ``AuthorizationService`` with *service_factory*;
    2. binds the service to the identity found under
       ``config.identity_attribute`` (if any) and threads a new
       :class:`RequestContext` carrying both to the downstream handler;
    3. sends any ``AuthzError`` raised downstream to the configured
       unauthorized handler, leaving other errors alone;
    4. raises ``AuthorizationRequiredError`` through the same handler when
       a request with an identity made no decision and
       ``require_authorization_check`` is on.

    The check in step 4 runs after the downstream handler completed.  It
    is a development aid that reports unchecked endpoints, not a barrier
    in front of them.

    Args:
        service_factory: ``(context) -> AuthorizationService``, called once
            per request.
        config: Middleware options.  Defaults to the global config at
            construction time.
        handler_registry: Where ``config.unauthorized_handler.name`` is
            looked up.  Defaults to the global handler registry.

    Example::

        middleware = AuthorizationMiddleware(
            lambda ctx: AuthorizationService(resolver),
            MiddlewareConfig(unauthorized_handler="redirect"),
        )
        response = middleware.process(ctx, controller)
    """

    def __init__(
        self,
        service_factory: ServiceFactory,
        config: MiddlewareConfig | None = None,
        *,
        handler_registry: HandlerRegistry | None = None,
    ) -> None:
        self._service_factory = service_factory
        self._config = config if config is not None else get_global_config()
        registry = (
            handler_registry if handler_registry is not None else get_default_handler_registry()
        )
        self._handler = registry.get(self._config.unauthorized_handler.name)

    @property
    def config(self) -> MiddlewareConfig:
        return self._config

    def process(
        self,
        context: RequestContext,
        call_next: Callable[[RequestContext], Any],
    ) -> Any:
        """Run *call_next* with authorization attached and enforced."""
        service, context, has_identity = self._attach(context)
        try:
            response = call_next(context)
        except AuthzError as exc:
            return self._unauthorized(exc, context)
        return self._enforce(service, context, has_identity, response)

    async def process_async(
        self,
        context: RequestContext,
        call_next: Callable[[RequestContext], Awaitable[Any]],
    ) -> Any:
        """Async variant of :meth:`process` for ASGI integrations."""
        service, context, has_identity = self._attach(context)
        try:
            response = await call_next(context)
        except AuthzError as exc:
            return self._unauthorized(exc, context)
        return self._enforce(service, context, has_identity, response)

    def _attach(self, context: RequestContext) -> tuple[AuthorizationService, RequestContext, bool]:
        service = self._service_factory(context)
        context = context.with_attribute(AUTHORIZATION_ATTRIBUTE, service)

        identity_attribute = self._config.identity_attribute
        identity = context.get(identity_attribute)
        if identity is None:
            return service, context, False

        decorated = self._config.identity_decorator(service, identity)
        return service, context.with_attribute(identity_attribute, decorated), True

    def _enforce(
        self,
        service: AuthorizationService,
        context: RequestContext,
        has_identity: bool,
        response: Any,
    ) -> Any:
        if (
            has_identity
            and self._config.require_authorization_check
            and not service.authorization_checked()
        ):
            log_missing_check(url=context.url, identity=context.get(self._config.identity_attribute))
            return self._unauthorized(AuthorizationRequiredError(url=context.url), context)
        return response

    def _unauthorized(self, error: AuthzError, context: RequestContext) -> Any:
        return self._handler.handle(error, context, self._config.unauthorized_handler)
