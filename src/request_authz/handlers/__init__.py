"""Unauthorized handlers — turn authorization errors into HTTP outcomes."""

from request_authz.handlers._base import Redirect, UnauthorizedHandler
from request_authz.handlers._exception import ExceptionHandler
from request_authz.handlers._redirect import RedirectHandler, RouteRedirectHandler
from request_authz.handlers._registry import (
    HandlerRegistry,
    get_default_handler_registry,
    register_handler,
)

__all__ = [
    "ExceptionHandler",
    "HandlerRegistry",
    "Redirect",
    "RedirectHandler",
    "RouteRedirectHandler",
    "UnauthorizedHandler",
    "get_default_handler_registry",
    "register_handler",
]
