"""Policy resolvers — map resources to the policies deciding for them."""

from request_authz._types import PolicyResolver
from request_authz.resolver._collection import ResolverCollection
from request_authz.resolver._convention import ConventionResolver
from request_authz.resolver._map import MapResolver, get_default_resolver
from request_authz.resolver._orm import OrmResolver, entity_for

__all__ = [
    "ConventionResolver",
    "MapResolver",
    "OrmResolver",
    "PolicyResolver",
    "ResolverCollection",
    "entity_for",
    "get_default_resolver",
]
