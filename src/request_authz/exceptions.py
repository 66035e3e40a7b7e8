"""Exception hierarchy for request-authz."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from request_authz.policy._base import Result

__all__ = [
    "AuthorizationRequiredError",
    "AuthzError",
    "ForbiddenError",
    "MissingIdentityError",
    "MissingMethodError",
    "PolicyNotFoundError",
]


def _type_name(resource: object) -> str:
    if isinstance(resource, type):
        return resource.__name__
    return type(resource).__name__


class AuthzError(Exception):
    """Base exception for all request-authz errors.

    Only instances of this class are offered to the unauthorized
    handler chain by the middleware.  Anything else propagates
    unchanged.
    """


class PolicyNotFoundError(AuthzError):
    """No policy could be resolved for a resource.

    Attributes:
        resource: The resource (instance, class or statement) that was looked up.
        resource_type: Name of the resource's type.

    Example::

        try:
            resolver.get_policy(article)
        except PolicyNotFoundError as exc:
            print(f"no policy for {exc.resource_type}")
    """

    def __init__(self, *, resource: object, message: str | None = None) -> None:
        self.resource = resource
        self.resource_type = _type_name(resource)
        if message is None:
            message = f"Policy for {self.resource_type} has not been defined"
        super().__init__(message)


class MissingMethodError(AuthzError):
    """The resolved policy lacks a capability the call needs.

    Raised by :meth:`AuthorizationService.apply_scope` when the policy has
    no ``apply_scope`` method, and by :class:`BasePolicy` when no
    ``can_<action>`` / ``scope_<action>`` method exists.

    Attributes:
        policy: The policy object.
        method: The missing method name.
        action: The action being decided.
    """

    def __init__(self, *, policy: object, method: str, action: str) -> None:
        self.policy = policy
        self.method = method
        self.action = action
        super().__init__(
            f"Method {method}() for action {action!r} is not defined "
            f"on {type(policy).__name__}"
        )


class ForbiddenError(AuthzError):
    """A decision explicitly denied the action.

    Attributes:
        identity: The identity that was denied.
        action: The action that was attempted.
        resource_type: Name of the resource type involved.
        result: The :class:`~request_authz.policy.Result` that denied, if any.

    Example::

        try:
            service.authorize(user, "delete", article)
        except ForbiddenError as exc:
            print(exc.result.reason if exc.result else "denied")
    """

    def __init__(
        self,
        *,
        identity: object,
        action: str,
        resource: object,
        result: Result | None = None,
        message: str | None = None,
    ) -> None:
        self.identity = identity
        self.action = action
        self.resource_type = _type_name(resource)
        self.result = result
        if message is None:
            message = (
                f"Identity {identity!r} is not authorized to {action} {self.resource_type}"
            )
            if result is not None and result.reason:
                message = f"{message}: {result.reason}"
        super().__init__(message)


class MissingIdentityError(AuthzError):
    """An operation required an identity but none was present."""

    def __init__(self, message: str = "An identity is required for this request") -> None:
        super().__init__(message)


class AuthorizationRequiredError(AuthzError):
    """A request with an identity completed without any authorization check.

    Raised only by the middleware after the downstream handler returned.

    Attributes:
        url: The path (and query string) of the offending request.
    """

    def __init__(self, *, url: str) -> None:
        self.url = url
        super().__init__(
            f"The request to {url} did not apply any authorization checks. "
            "Call can(), apply_scope() or skip_authorization() while handling it."
        )
