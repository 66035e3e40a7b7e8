"""AuthorizationService — request-scoped policy decisions."""

from __future__ import annotations

from typing import Any

from request_authz._audit import log_decision
from request_authz._types import PolicyResolver
from request_authz.exceptions import ForbiddenError, MissingMethodError
from request_authz.policy._base import Result, to_result

__all__ = ["AuthorizationService"]


class AuthorizationService:
    """Resolve policies, make decisions and remember that one was made.

    One service is created per request (see ``AuthorizationMiddleware``).
    The resolver is shared and treated as read-only; the ``checked`` flag
    is per request and only ever goes from ``False`` to ``True``.

    Every decision method sets the flag *before* resolving the policy, so
    a denied decision, a missing policy or an error raised by the policy
    still count as a check.

    Args:
        resolver: The resolver used to find policies.
        log_decisions: Log each decision.  ``None`` uses the global config.

    Example::

        service = AuthorizationService(MapResolver({Article: ArticlePolicy}))
        if service.can(user, "edit", article):
            ...
        service.authorize(user, "delete", article)  # raises ForbiddenError
    """

    def __init__(self, resolver: PolicyResolver, *, log_decisions: bool | None = None) -> None:
        if log_decisions is None:
            from request_authz.config._config import get_global_config

            log_decisions = get_global_config().log_decisions
        self._resolver = resolver
        self._log_decisions = log_decisions
        self._checked = False

    @property
    def resolver(self) -> PolicyResolver:
        return self._resolver

    def can(self, identity: Any, action: str, resource: Any) -> bool:
        """Return whether *identity* may perform *action* on *resource*.

        Raises:
            PolicyNotFoundError: If no policy resolves for *resource*.
        """
        return self.can_result(identity, action, resource).status

    def can_result(self, identity: Any, action: str, resource: Any) -> Result:
        """Like :meth:`can` but return the full :class:`Result` with its reason."""
        self._checked = True
        policy = self._resolver.get_policy(resource)
        result = to_result(policy.can(identity, action, resource))
        if self._log_decisions:
            log_decision(
                identity=identity,
                action=action,
                resource=resource,
                policy=policy,
                result=result,
            )
        return result

    def apply_scope(self, identity: Any, action: str, resource: Any) -> Any:
        """Return *resource* narrowed to what *identity* may see for *action*.

        Raises:
            PolicyNotFoundError: If no policy resolves for *resource*.
            MissingMethodError: If the policy has no ``apply_scope`` method.

        Example::

            stmt = service.apply_scope(user, "index", select(Article))
        """
        self._checked = True
        policy = self._resolver.get_policy(resource)
        scope = getattr(policy, "apply_scope", None)
        if scope is None or not callable(scope):
            raise MissingMethodError(policy=policy, method="apply_scope", action=action)
        return scope(identity, action, resource)

    def authorize(
        self,
        identity: Any,
        action: str,
        resource: Any,
        *,
        message: str | None = None,
    ) -> None:
        """Assert that *identity* may perform *action* on *resource*.

        Raises:
            ForbiddenError: If the policy denies the action.
        """
        result = self.can_result(identity, action, resource)
        if not result.status:
            raise ForbiddenError(
                identity=identity,
                action=action,
                resource=resource,
                result=result,
                message=message,
            )

    def skip_authorization(self) -> None:
        """Mark the request as checked without making a decision.

        Use for endpoints that are public even when an identity is present.
        """
        self._checked = True

    def authorization_checked(self) -> bool:
        return self._checked
