"""Result dataclass and BasePolicy — per-action method dispatch."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from request_authz.exceptions import MissingMethodError

__all__ = ["BasePolicy", "Result", "to_result"]


@dataclass(frozen=True, slots=True)
class Result:
    """Outcome of a single policy decision.

    Truthiness follows ``status`` so a ``Result`` can be returned anywhere
    a plain ``bool`` is expected.

    Attributes:
        status: ``True`` if the action is allowed.
        reason: Optional explanation, surfaced in ``ForbiddenError`` messages.

    Example::

        def can_edit(self, identity, article):
            if article.locked:
                return Result(False, "article is locked")
            return Result(article.author_id == identity.id)
    """

    status: bool
    reason: str | None = None

    def __bool__(self) -> bool:
        return self.status


def to_result(decision: bool | Result) -> Result:
    """Coerce a policy return value into a :class:`Result`."""
    if isinstance(decision, Result):
        return decision
    return Result(bool(decision))


class BasePolicy:
    """Convenience base class mapping actions onto methods.

    ``can(identity, "edit", article)`` calls ``self.can_edit(identity, article)``
    and ``apply_scope(identity, "index", stmt)`` calls
    ``self.scope_index(identity, stmt)``.  Subclasses may define
    ``before(identity, resource, action)``; a non-``None`` return value
    becomes the decision and the per-action method is not called.

    Example::

        class ArticlePolicy(BasePolicy):
            def before(self, identity, resource, action):
                if identity.role == "admin":
                    return True
                return None

            def can_edit(self, identity, article):
                return article.author_id == identity.id

            def scope_index(self, identity, stmt):
                return stmt.where(Article.author_id == identity.id)
    """

    def before(self, identity: Any, resource: Any, action: str) -> bool | Result | None:
        return None

    def can(self, identity: Any, action: str, resource: Any) -> bool | Result:
        decision = self.before(identity, resource, action)
        if decision is not None:
            return decision
        return self._action_method("can", action)(identity, resource)

    def apply_scope(self, identity: Any, action: str, resource: Any) -> Any:
        return self._action_method("scope", action)(identity, resource)

    def _action_method(self, prefix: str, action: str) -> Any:
        name = f"{prefix}_{action}"
        method = getattr(self, name, None)
        if method is None or not callable(method):
            raise MissingMethodError(policy=self, method=name, action=action)
        return method
