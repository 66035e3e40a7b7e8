"""Request pipeline — AuthorizationMiddleware and its RequestContext."""

from request_authz.middleware._context import AUTHORIZATION_ATTRIBUTE, RequestContext
from request_authz.middleware._core import AuthorizationMiddleware

__all__ = ["AUTHORIZATION_ATTRIBUTE", "AuthorizationMiddleware", "RequestContext"]
