"""Configuration module for request-authz."""

from __future__ import annotations

from request_authz.config._config import (
    HandlerConfig,
    MiddlewareConfig,
    configure,
    get_global_config,
)

__all__ = ["HandlerConfig", "MiddlewareConfig", "configure", "get_global_config"]
