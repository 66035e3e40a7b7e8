"""request-authz testing utilities — identities, policies, assertions, fixtures.

- **MockIdentity / factories**: Lightweight identities for tests.
- **StaticPolicy**: A policy with a fixed decision that records its calls.
- **Assertion helpers**: ``assert_authorization_checked``,
  ``assert_not_checked``, ``assert_allowed``, ``assert_denied``.
- **Fixtures**: ``authz_resolver``, ``authz_service``, ``isolated_authz_state``.

Example::

    from request_authz.testing import StaticPolicy, assert_authorization_checked

    def test_show_checks(authz_resolver, authz_service):
        authz_resolver.map(Article, StaticPolicy(True))
        show_article(authz_service, article)
        assert_authorization_checked(authz_service)
"""

from request_authz.testing._actors import MockIdentity, StaticPolicy, make_admin, make_identity
from request_authz.testing._assertions import (
    assert_allowed,
    assert_authorization_checked,
    assert_denied,
    assert_not_checked,
)
from request_authz.testing._fixtures import authz_resolver, authz_service, isolated_authz_state
from request_authz.testing._isolation import isolated_authz

__all__ = [
    "MockIdentity",
    "StaticPolicy",
    "assert_allowed",
    "assert_authorization_checked",
    "assert_denied",
    "assert_not_checked",
    "authz_resolver",
    "authz_service",
    "isolated_authz",
    "isolated_authz_state",
    "make_admin",
    "make_identity",
]
