"""Starlette/FastAPI middleware wrapping the core AuthorizationMiddleware."""

from __future__ import annotations

from collections.abc import Callable

from fastapi import Request, Response
from fastapi.responses import RedirectResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.types import ASGIApp

from request_authz._service import AuthorizationService
from request_authz.config._config import MiddlewareConfig
from request_authz.exceptions import MissingIdentityError
from request_authz.handlers._base import Redirect
from request_authz.handlers._registry import HandlerRegistry
from request_authz.identity import IdentityDecorator
from request_authz.middleware._context import AUTHORIZATION_ATTRIBUTE, RequestContext
from request_authz.middleware._core import AuthorizationMiddleware as _CoreMiddleware

__all__ = [
    "IDENTITY_ATTRIBUTE_KEY",
    "AuthorizationMiddleware",
    "RequestAuthorizationMiddleware",
    "request_context",
]

# request.state key remembering which attribute holds the identity.
IDENTITY_ATTRIBUTE_KEY = "authz_identity_attribute"


def request_context(request: Request, identity_attribute: str = "identity") -> RequestContext:
    """Build a :class:`RequestContext` from a Starlette request.

    The identity is read from ``request.state.<identity_attribute>``;
    named routes resolve through ``app.url_path_for``.
    """

    def url_for(name: str, **params: object) -> str:
        return str(request.app.url_path_for(name, **params))

    attributes = {}
    identity = getattr(request.state, identity_attribute, None)
    if identity is not None:
        attributes[identity_attribute] = identity
    return RequestContext(
        method=request.method,
        path=request.url.path,
        query_string=request.url.query,
        attributes=attributes,
        url_for=url_for,
        request=request,
    )


class AuthorizationMiddleware(BaseHTTPMiddleware):
    """Attach an ``AuthorizationService`` to each request and enforce checks.

    After this middleware runs, ``request.state.authorization`` holds the
    request's service and ``request.state.identity`` (or the configured
    attribute) the decorated identity.  An upstream authentication
    middleware must set the bare identity on ``request.state`` first.

    Unauthorized handlers returning a ``Redirect`` produce a
    ``RedirectResponse``; errors they do not claim propagate to the app's
    error handling.

    Args:
        app: The wrapped ASGI app.
        service_factory: ``(request) -> AuthorizationService``, called once
            per request.
        config: Middleware options. Defaults to the global config.
        handler_registry: Registry for custom unauthorized handlers.

    Example::

        app = FastAPI()
        app.add_middleware(
            AuthorizationMiddleware,
            service_factory=lambda request: AuthorizationService(resolver),
            config=MiddlewareConfig(unauthorized_handler="redirect"),
        )
        app.add_middleware(AuthenticationMiddleware, ...)  # runs first
    """

    def __init__(
        self,
        app: ASGIApp,
        *,
        service_factory: Callable[[Request], AuthorizationService],
        config: MiddlewareConfig | None = None,
        handler_registry: HandlerRegistry | None = None,
    ) -> None:
        super().__init__(app)
        self._core = _CoreMiddleware(
            lambda context: service_factory(context.request),
            config,
            handler_registry=handler_registry,
        )

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        identity_attribute = self._core.config.identity_attribute
        setattr(request.state, IDENTITY_ATTRIBUTE_KEY, identity_attribute)

        async def downstream(context: RequestContext) -> Response:
            setattr(request.state, AUTHORIZATION_ATTRIBUTE, context.get(AUTHORIZATION_ATTRIBUTE))
            identity = context.get(identity_attribute)
            if identity is not None:
                setattr(request.state, identity_attribute, identity)
            return await call_next(request)

        outcome = await self._core.process_async(
            request_context(request, identity_attribute), downstream
        )
        if isinstance(outcome, Redirect):
            return RedirectResponse(outcome.location, status_code=outcome.status_code)
        return outcome


class RequestAuthorizationMiddleware(BaseHTTPMiddleware):
    """Authorize the request itself before it reaches the endpoint.

    Calls ``service.authorize(identity, action, request)``, so a policy
    must be resolvable for the ``Request`` class (e.g. a ``MapResolver``
    entry ``{Request: RequestPolicy}``).  Must be installed *inside*
    :class:`AuthorizationMiddleware` (added before it).

    Example::

        class RequestPolicy:
            def can(self, identity, action, request):
                return not request.url.path.startswith("/admin") or identity.is_admin

        app.add_middleware(RequestAuthorizationMiddleware)
        app.add_middleware(AuthorizationMiddleware, service_factory=factory)
    """

    def __init__(self, app: ASGIApp, *, action: str = "access") -> None:
        super().__init__(app)
        self._action = action

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        service = getattr(request.state, AUTHORIZATION_ATTRIBUTE, None)
        if service is None:
            raise RuntimeError(
                "RequestAuthorizationMiddleware requires AuthorizationMiddleware to run first"
            )
        identity_attribute = getattr(request.state, IDENTITY_ATTRIBUTE_KEY, "identity")
        identity = getattr(request.state, identity_attribute, None)
        if identity is None:
            raise MissingIdentityError()
        if isinstance(identity, IdentityDecorator):
            identity = identity.get_original_data()
        service.authorize(identity, self._action, request)
        return await call_next(request)
