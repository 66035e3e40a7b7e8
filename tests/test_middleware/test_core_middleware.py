"""Tests for middleware/_core.py — the framework-neutral AuthorizationMiddleware."""

from __future__ import annotations

import asyncio

import pytest

from request_authz import AuthorizationService, IdentityDecorator, MapResolver
from request_authz.config import HandlerConfig, MiddlewareConfig
from request_authz.exceptions import (
    AuthorizationRequiredError,
    ForbiddenError,
    MissingIdentityError,
    PolicyNotFoundError,
)
from request_authz.handlers import HandlerRegistry, Redirect
from request_authz.middleware import AUTHORIZATION_ATTRIBUTE, AuthorizationMiddleware, RequestContext
from request_authz.testing import StaticPolicy
from tests.conftest import Article, Comment, MockIdentity

OK = "200 OK"


@pytest.fixture()
def services() -> list[AuthorizationService]:
    return []


@pytest.fixture()
def factory(services):
    resolver = MapResolver({Article: StaticPolicy(True), Comment: StaticPolicy(False)})

    def build(context: RequestContext) -> AuthorizationService:
        service = AuthorizationService(resolver)
        services.append(service)
        return service

    return build


def _context(identity=None, **kwargs) -> RequestContext:
    attributes = {"identity": identity} if identity is not None else {}
    return RequestContext(attributes=attributes, **kwargs)


def _checking(action="view", resource=Article):
    def controller(ctx: RequestContext) -> str:
        ctx.get("identity").can(action, resource)
        return OK

    return controller


def _not_checking(ctx: RequestContext) -> str:
    return OK


class TestAttach:
    def test_one_service_per_request(self, factory, services):
        middleware = AuthorizationMiddleware(factory, MiddlewareConfig())
        middleware.process(_context(MockIdentity(id=1)), _checking())
        middleware.process(_context(MockIdentity(id=1)), _checking())
        assert len(services) == 2
        assert services[0] is not services[1]

    def test_threads_service_and_decorated_identity(self, factory, services):
        user = MockIdentity(id=1)
        seen: dict[str, object] = {}

        def controller(ctx: RequestContext) -> str:
            seen["service"] = ctx.get(AUTHORIZATION_ATTRIBUTE)
            seen["identity"] = ctx.get("identity")
            ctx.get(AUTHORIZATION_ATTRIBUTE).skip_authorization()
            return OK

        original = _context(user)
        AuthorizationMiddleware(factory, MiddlewareConfig()).process(original, controller)

        assert seen["service"] is services[0]
        assert isinstance(seen["identity"], IdentityDecorator)
        assert seen["identity"].get_original_data() is user
        # The incoming context is left untouched.
        assert original.get("identity") is user
        assert original.get(AUTHORIZATION_ATTRIBUTE) is None

    def test_service_attached_without_identity(self, factory):
        seen = []
        middleware = AuthorizationMiddleware(factory, MiddlewareConfig())
        middleware.process(_context(), lambda ctx: seen.append(ctx.get(AUTHORIZATION_ATTRIBUTE)))
        assert isinstance(seen[0], AuthorizationService)

    def test_custom_identity_attribute(self, factory):
        config = MiddlewareConfig(identity_attribute="user")
        context = RequestContext(attributes={"user": MockIdentity(id=1)})

        def controller(ctx: RequestContext) -> str:
            ctx.get("user").can("view", Article)
            return OK

        assert AuthorizationMiddleware(factory, config).process(context, controller) == OK

    def test_custom_identity_decorator(self, factory):
        bound = []

        def bind(service, identity):
            bound.append((service, identity))
            return identity

        user = MockIdentity(id=1)
        config = MiddlewareConfig(identity_decorator=bind, require_authorization_check=False)
        AuthorizationMiddleware(factory, config).process(_context(user), _not_checking)
        assert bound[0][1] is user

    def test_factory_errors_propagate(self):
        def broken(context):
            raise LookupError("no service")

        middleware = AuthorizationMiddleware(broken, MiddlewareConfig())
        with pytest.raises(LookupError):
            middleware.process(_context(MockIdentity(id=1)), _not_checking)

    def test_unknown_handler_fails_at_construction(self, factory):
        with pytest.raises(ValueError, match="Unknown unauthorized handler"):
            AuthorizationMiddleware(factory, MiddlewareConfig(unauthorized_handler="nope"))


class TestEnforcement:
    def test_checked_request_passes_through(self, factory):
        middleware = AuthorizationMiddleware(factory, MiddlewareConfig())
        assert middleware.process(_context(MockIdentity(id=1)), _checking()) == OK

    def test_denied_check_still_counts(self, factory):
        middleware = AuthorizationMiddleware(factory, MiddlewareConfig())
        controller = _checking(resource=Comment)
        assert middleware.process(_context(MockIdentity(id=1)), controller) == OK

    def test_apply_scope_counts(self, factory):
        def controller(ctx: RequestContext) -> str:
            ctx.get("identity").apply_scope("index", Article)
            return OK

        middleware = AuthorizationMiddleware(factory, MiddlewareConfig())
        assert middleware.process(_context(MockIdentity(id=1)), controller) == OK

    def test_skip_counts(self, factory):
        def controller(ctx: RequestContext) -> str:
            ctx.get(AUTHORIZATION_ATTRIBUTE).skip_authorization()
            return OK

        middleware = AuthorizationMiddleware(factory, MiddlewareConfig())
        assert middleware.process(_context(MockIdentity(id=1)), controller) == OK

    def test_unchecked_request_raises(self, factory):
        middleware = AuthorizationMiddleware(factory, MiddlewareConfig())
        context = _context(MockIdentity(id=1), path="/articles", query_string="page=2")
        with pytest.raises(AuthorizationRequiredError) as exc_info:
            middleware.process(context, _not_checking)
        assert exc_info.value.url == "/articles?page=2"

    def test_unchecked_request_allowed_when_disabled(self, factory):
        config = MiddlewareConfig(require_authorization_check=False)
        middleware = AuthorizationMiddleware(factory, config)
        assert middleware.process(_context(MockIdentity(id=1)), _not_checking) == OK

    def test_no_identity_never_requires_check(self, factory):
        middleware = AuthorizationMiddleware(factory, MiddlewareConfig())
        assert middleware.process(_context(), _not_checking) == OK

    def test_unchecked_request_is_logged(self, factory, caplog):
        middleware = AuthorizationMiddleware(factory, MiddlewareConfig())
        with pytest.raises(AuthorizationRequiredError):
            middleware.process(_context(MockIdentity(id=1), path="/x"), _not_checking)
        assert any("UNCHECKED request /x" in r.getMessage() for r in caplog.records)


class TestRecovery:
    def test_authz_errors_rethrown_by_default(self, factory):
        def controller(ctx: RequestContext) -> str:
            ctx.get("identity").authorize("edit", Comment)
            return OK

        middleware = AuthorizationMiddleware(factory, MiddlewareConfig())
        with pytest.raises(ForbiddenError):
            middleware.process(_context(MockIdentity(id=1)), controller)

    def test_other_errors_bypass_handlers(self, factory):
        calls = []
        registry = HandlerRegistry()

        class Recorder:
            def handle(self, error, context, config):
                calls.append(error)
                return Redirect("/x")

        registry.register("recorder", Recorder)
        middleware = AuthorizationMiddleware(
            factory, MiddlewareConfig(unauthorized_handler="recorder"), handler_registry=registry
        )

        def controller(ctx: RequestContext) -> str:
            raise KeyError("boom")

        with pytest.raises(KeyError):
            middleware.process(_context(MockIdentity(id=1)), controller)
        assert calls == []

    def test_redirect_for_missing_identity(self, factory):
        config = MiddlewareConfig(
            unauthorized_handler=HandlerConfig(name="redirect", url="/login")
        )

        def controller(ctx: RequestContext) -> str:
            if ctx.get("identity") is None:
                raise MissingIdentityError()
            return OK

        outcome = AuthorizationMiddleware(factory, config).process(
            _context(path="/secret", query_string="x=1"), controller
        )
        assert outcome == Redirect("/login?redirect=%2Fsecret%3Fx%3D1", 302)

    def test_redirect_does_not_claim_forbidden(self, factory):
        config = MiddlewareConfig(unauthorized_handler=HandlerConfig(name="redirect"))

        def controller(ctx: RequestContext) -> str:
            ctx.get("identity").authorize("edit", Comment)
            return OK

        with pytest.raises(ForbiddenError):
            AuthorizationMiddleware(factory, config).process(
                _context(MockIdentity(id=1)), controller
            )

    def test_required_check_can_be_redirected(self, factory):
        config = MiddlewareConfig(
            unauthorized_handler=HandlerConfig(
                name="redirect",
                url="/unchecked",
                exceptions=(AuthorizationRequiredError,),
                query_param=None,
            )
        )
        outcome = AuthorizationMiddleware(factory, config).process(
            _context(MockIdentity(id=1)), _not_checking
        )
        assert outcome == Redirect("/unchecked", 302)

    def test_required_check_not_redirected_by_default_list(self, factory):
        config = MiddlewareConfig(unauthorized_handler=HandlerConfig(name="redirect"))
        with pytest.raises(AuthorizationRequiredError):
            AuthorizationMiddleware(factory, config).process(
                _context(MockIdentity(id=1)), _not_checking
            )

    def test_policy_errors_reach_handler(self, factory):
        config = MiddlewareConfig(
            unauthorized_handler=HandlerConfig(
                name="redirect", url="/oops", exceptions=(PolicyNotFoundError,), query_param=None
            )
        )

        def controller(ctx: RequestContext) -> str:
            ctx.get("identity").can("view", MockIdentity)
            return OK

        outcome = AuthorizationMiddleware(factory, config).process(
            _context(MockIdentity(id=1)), controller
        )
        assert outcome == Redirect("/oops", 302)


class TestProcessAsync:
    def test_checked(self, factory):
        async def controller(ctx: RequestContext) -> str:
            ctx.get("identity").can("view", Article)
            return OK

        middleware = AuthorizationMiddleware(factory, MiddlewareConfig())
        assert asyncio.run(middleware.process_async(_context(MockIdentity(id=1)), controller)) == OK

    def test_unchecked(self, factory):
        async def controller(ctx: RequestContext) -> str:
            return OK

        middleware = AuthorizationMiddleware(factory, MiddlewareConfig())
        with pytest.raises(AuthorizationRequiredError):
            asyncio.run(middleware.process_async(_context(MockIdentity(id=1)), controller))

    def test_errors_routed_to_handler(self, factory):
        config = MiddlewareConfig(unauthorized_handler=HandlerConfig(name="redirect"))

        async def controller(ctx: RequestContext) -> str:
            raise MissingIdentityError()

        outcome = asyncio.run(
            AuthorizationMiddleware(factory, config).process_async(_context(), controller)
        )
        assert isinstance(outcome, Redirect)
