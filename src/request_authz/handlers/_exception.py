"""ExceptionHandler — the default: re-raise everything."""

from __future__ import annotations

from typing import TYPE_CHECKING, NoReturn

from request_authz._audit import log_unauthorized

if TYPE_CHECKING:
    from request_authz.config._config import HandlerConfig
    from request_authz.exceptions import AuthzError
    from request_authz.middleware._context import RequestContext

__all__ = ["ExceptionHandler"]


class ExceptionHandler:
    """Re-raise the original error so the host's error rendering applies."""

    name = "exception"

    def handle(
        self,
        error: AuthzError,
        context: RequestContext,
        config: HandlerConfig,
    ) -> NoReturn:
        log_unauthorized(handler=self.name, error=error, outcome="rethrow")
        raise error
