"""Redirect outcome and the UnauthorizedHandler protocol."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from request_authz.config._config import HandlerConfig
    from request_authz.exceptions import AuthzError
    from request_authz.middleware._context import RequestContext

__all__ = ["Redirect", "UnauthorizedHandler"]


@dataclass(frozen=True, slots=True)
class Redirect:
    """HTTP redirect produced by an unauthorized handler.

    Framework integrations turn this into their own response type.

    Attributes:
        location: Value for the ``Location`` header.
        status_code: A 3xx status.
    """

    location: str
    status_code: int = 302


@runtime_checkable
class UnauthorizedHandler(Protocol):
    """Turns a caught authorization error into an HTTP outcome.

    ``handle`` either returns a response (usually a :class:`Redirect`)
    or re-raises *error* when it does not claim it.
    """

    def handle(
        self,
        error: AuthzError,
        context: RequestContext,
        config: HandlerConfig,
    ) -> object: ...
