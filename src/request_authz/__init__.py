"""request-authz — request-scoped authorization with check enforcement.

Attaches an ``AuthorizationService`` to each request, lets application
code ask policies whether an identity may act on a resource, and reports
requests that finish without asking at all.

Example::

    from request_authz import AuthorizationService, BasePolicy, MapResolver

    class ArticlePolicy(BasePolicy):
        def can_edit(self, identity, article):
            return article.author_id == identity.id

    service = AuthorizationService(MapResolver({Article: ArticlePolicy}))
    service.authorize(current_user, "edit", article)
    assert service.authorization_checked()
"""

from importlib.metadata import PackageNotFoundError, version

from request_authz._service import AuthorizationService
from request_authz._types import IdentityLike, Policy, PolicyResolver, ScopePolicy
from request_authz.config._config import HandlerConfig, MiddlewareConfig, configure
from request_authz.exceptions import (
    AuthorizationRequiredError,
    AuthzError,
    ForbiddenError,
    MissingIdentityError,
    MissingMethodError,
    PolicyNotFoundError,
)
from request_authz.handlers._base import Redirect
from request_authz.handlers._registry import HandlerRegistry, register_handler
from request_authz.identity import IdentityDecorator, decorate_identity
from request_authz.middleware._context import RequestContext
from request_authz.middleware._core import AuthorizationMiddleware
from request_authz.policy._base import BasePolicy, Result
from request_authz.policy._decorator import policy
from request_authz.resolver._collection import ResolverCollection
from request_authz.resolver._convention import ConventionResolver
from request_authz.resolver._map import MapResolver
from request_authz.resolver._orm import OrmResolver

try:
    __version__ = version("request-authz")
except PackageNotFoundError:
    __version__ = "dev"

__all__ = [
    "__version__",
    "AuthorizationMiddleware",
    "AuthorizationRequiredError",
    "AuthorizationService",
    "AuthzError",
    "BasePolicy",
    "ConventionResolver",
    "ForbiddenError",
    "HandlerConfig",
    "HandlerRegistry",
    "IdentityDecorator",
    "IdentityLike",
    "MapResolver",
    "MiddlewareConfig",
    "MissingIdentityError",
    "MissingMethodError",
    "OrmResolver",
    "Policy",
    "PolicyNotFoundError",
    "PolicyResolver",
    "Redirect",
    "RequestContext",
    "ResolverCollection",
    "Result",
    "ScopePolicy",
    "configure",
    "decorate_identity",
    "policy",
    "register_handler",
]
