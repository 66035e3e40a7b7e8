"""OrmResolver — resolve policies for SQLAlchemy entities and statements."""

from __future__ import annotations

from typing import Any

from sqlalchemy import Select
from sqlalchemy import inspect as sa_inspect

from request_authz._types import PolicyResolver
from request_authz.exceptions import PolicyNotFoundError
from request_authz.resolver._convention import ConventionResolver

__all__ = ["OrmResolver", "entity_for"]


def entity_for(resource: Any) -> type | None:
    """Return the mapped class behind *resource*, or ``None``.

    Handles mapped instances, mapped classes, ``aliased()`` entities and
    ``Select`` statements (the first selected entity wins).

    Example::

        entity_for(select(Article).where(Article.id == 1))  # Article
        entity_for(article)  # Article
    """
    if isinstance(resource, Select):
        for description in resource.column_descriptions:
            entity = description.get("entity")
            if entity is not None:
                # Aliased entities are reported as AliasedClass; normalize.
                return entity_for(entity)
        return None

    insp = sa_inspect(resource, raiseerr=False)
    mapper = getattr(insp, "mapper", None)
    if mapper is None:
        return None
    return mapper.class_


class OrmResolver:
    """Resolver for SQLAlchemy ORM resources.

    Maps the resource to its entity class with :func:`entity_for` and
    delegates the lookup for that class to *resolver*, a
    :class:`ConventionResolver` by default.  The policy's ``can`` and
    ``apply_scope`` still receive the original resource, so a scope
    method gets the ``Select`` it has to narrow.

    Example::

        resolver = OrmResolver(MapResolver({Article: ArticlePolicy}))
        stmt = service.apply_scope(user, "index", select(Article))
    """

    def __init__(
        self,
        resolver: PolicyResolver | None = None,
        *,
        policy_namespace: str = "policies",
        suffix: str = "Policy",
    ) -> None:
        if resolver is None:
            resolver = ConventionResolver(policy_namespace=policy_namespace, suffix=suffix)
        self._resolver = resolver

    def get_policy(self, resource: Any) -> Any:
        entity = entity_for(resource)
        if entity is None:
            raise PolicyNotFoundError(
                resource=resource,
                message=f"{type(resource).__name__} is not a SQLAlchemy mapped resource",
            )
        return self._resolver.get_policy(entity)
