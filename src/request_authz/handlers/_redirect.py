"""Redirect handlers — send the client elsewhere for selected errors."""

from __future__ import annotations

from typing import TYPE_CHECKING
from urllib.parse import urlencode

from request_authz._audit import log_unauthorized
from request_authz.handlers._base import Redirect

if TYPE_CHECKING:
    from request_authz.config._config import HandlerConfig
    from request_authz.exceptions import AuthzError
    from request_authz.middleware._context import RequestContext

__all__ = ["RedirectHandler", "RouteRedirectHandler"]

# The originally requested URL is only appended for safe methods.
_RETURNABLE_METHODS = frozenset({"GET", "HEAD"})


class RedirectHandler:
    """Redirect to ``config.url`` when the error is one of ``config.exceptions``.

    Errors of any other kind are re-raised.  For ``GET``/``HEAD`` requests
    the requested path and query string are appended as
    ``config.query_param`` so the login page can send the user back.

    Example::

        handler = RedirectHandler()
        config = HandlerConfig(name="redirect", url="/login")
        handler.handle(MissingIdentityError(), ctx, config)
        # Redirect(location="/login?redirect=%2Fsecret%3Fx%3D1", status_code=302)
    """

    name = "redirect"

    def handle(
        self,
        error: AuthzError,
        context: RequestContext,
        config: HandlerConfig,
    ) -> Redirect:
        if not isinstance(error, config.exceptions):
            log_unauthorized(handler=self.name, error=error, outcome="rethrow")
            raise error

        location = self.redirect_url(context, config)
        log_unauthorized(handler=self.name, error=error, outcome="redirect")
        return Redirect(location=location, status_code=config.status_code)

    def redirect_url(self, context: RequestContext, config: HandlerConfig) -> str:
        url = self.target_url(context, config)
        if config.query_param is None or context.method.upper() not in _RETURNABLE_METHODS:
            return url
        separator = "&" if "?" in url else "?"
        return f"{url}{separator}{urlencode({config.query_param: context.url})}"

    def target_url(self, context: RequestContext, config: HandlerConfig) -> str:
        if not isinstance(config.url, str):
            raise ValueError(
                f"{type(self).__name__} needs a literal url, got {config.url!r}; "
                "use the 'route_redirect' handler for named routes"
            )
        return config.url


class RouteRedirectHandler(RedirectHandler):
    """Like :class:`RedirectHandler` but ``config.url`` names a route.

    ``config.url`` is either a route name or a ``(route_name, params)``
    pair, resolved through the request context's ``url_for``.

    Example::

        HandlerConfig(name="route_redirect", url=("login", {"tenant": "acme"}))
    """

    name = "route_redirect"

    def target_url(self, context: RequestContext, config: HandlerConfig) -> str:
        if context.url_for is None:
            raise RuntimeError(
                "The route_redirect handler needs a request context with url_for"
            )
        if isinstance(config.url, str):
            return str(context.url_for(config.url))
        route_name, params = config.url
        return str(context.url_for(route_name, **params))
