"""Exception handlers for FastAPI integration."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from request_authz.exceptions import (
    ForbiddenError,
    MissingIdentityError,
    MissingMethodError,
    PolicyNotFoundError,
)

__all__ = ["install_error_handlers"]

_STATUS_CODES: dict[type[Exception], int] = {
    ForbiddenError: 403,
    MissingIdentityError: 401,
    PolicyNotFoundError: 500,
    MissingMethodError: 500,
}


def install_error_handlers(app: FastAPI) -> None:
    """Install exception handlers for request-authz errors on a FastAPI app.

    Converts authorization exceptions into HTTP responses:

    - ``ForbiddenError`` -> 403 Forbidden
    - ``MissingIdentityError`` -> 401 Unauthorized
    - ``PolicyNotFoundError``, ``MissingMethodError`` -> 500 Internal Server Error

    These handlers run inside the app, before ``AuthorizationMiddleware``
    sees the error, so errors they cover no longer reach a redirect
    handler.  ``AuthorizationRequiredError`` is raised by the middleware
    itself, outside the app, and is left to the server error middleware.

    Args:
        app: The FastAPI application instance.

    Example::

        app = FastAPI()
        install_error_handlers(app)
    """

    async def authz_error_handler(request: object, exc: Exception) -> JSONResponse:
        status_code = next(
            (code for exc_type, code in _STATUS_CODES.items() if isinstance(exc, exc_type)),
            500,
        )
        return JSONResponse(
            status_code=status_code,
            content={"detail": str(exc)},
        )

    for exc_type in _STATUS_CODES:
        app.add_exception_handler(exc_type, authz_error_handler)  # type: ignore[arg-type]
