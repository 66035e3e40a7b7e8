"""FastAPI integration for request-authz."""

from __future__ import annotations

try:
    import fastapi as _fastapi_check  # noqa: F401  # pyright: ignore[reportUnusedImport]

    del _fastapi_check
except ImportError as exc:
    raise ImportError(
        "FastAPI integration requires fastapi. Install it with: pip install request-authz[fastapi]"
    ) from exc

from request_authz.integrations.fastapi._dependencies import (
    Authorization,
    CurrentIdentity,
    get_authorization,
    get_identity,
)
from request_authz.integrations.fastapi._errors import install_error_handlers
from request_authz.integrations.fastapi._middleware import (
    AuthorizationMiddleware,
    RequestAuthorizationMiddleware,
    request_context,
)

__all__ = [
    "Authorization",
    "AuthorizationMiddleware",
    "CurrentIdentity",
    "RequestAuthorizationMiddleware",
    "get_authorization",
    "get_identity",
    "install_error_handlers",
    "request_context",
]
