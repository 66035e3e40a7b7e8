"""Policy contract — base class, decision results and registration."""

from request_authz._types import Policy, ScopePolicy
from request_authz.policy._base import BasePolicy, Result, to_result
from request_authz.policy._decorator import policy

__all__ = [
    "BasePolicy",
    "Policy",
    "Result",
    "ScopePolicy",
    "policy",
    "to_result",
]
