"""Audit logging for authorization decisions and enforcement."""

from __future__ import annotations

import logging

from request_authz.policy._base import Result

__all__ = ["log_decision", "log_missing_check", "log_unauthorized"]

logger = logging.getLogger("request_authz")


def log_decision(
    *,
    identity: object,
    action: str,
    resource: object,
    policy: object,
    result: Result,
) -> None:
    """Log a single policy decision.

    Logging levels:
    - INFO: Summary (resource type, action, allowed/denied)
    - DEBUG: Detailed (policy class, identity, reason)

    Example::

        log_decision(
            identity=user,
            action="edit",
            resource=article,
            policy=ArticlePolicy(),
            result=Result(False, "locked"),
        )
    """
    resource_name = resource.__name__ if isinstance(resource, type) else type(resource).__name__
    outcome = "allowed" if result.status else "denied"

    logger.info("Authorization decision: %s.%s %s", resource_name, action, outcome)

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "Decision detail for %s.%s: policy=%s identity=%r reason=%s",
            resource_name,
            action,
            type(policy).__name__,
            identity,
            result.reason or "-",
        )


def log_missing_check(*, url: str, identity: object) -> None:
    """Warn that a request with an identity finished without a check."""
    logger.warning(
        "UNCHECKED request %s for identity %r: no authorization decision was made",
        url,
        identity,
    )


def log_unauthorized(*, handler: str, error: BaseException, outcome: str) -> None:
    """Log how an unauthorized handler dealt with an authorization error.

    Each handler gets its own logger under ``request_authz.handler.<name>``
    so operators can enable/disable granularly.

    Args:
        handler: Registered name of the handler.
        error: The authorization error offered to the handler.
        outcome: ``"redirect"`` or ``"rethrow"``.
    """
    handler_logger = logging.getLogger(f"request_authz.handler.{handler}")
    handler_logger.info("%s: %s -> %s", type(error).__name__, error, outcome)
