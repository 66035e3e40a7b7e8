"""Tests for middleware/_context.py — RequestContext."""

from __future__ import annotations

import pytest

from request_authz.middleware import RequestContext


class TestRequestContext:
    def test_defaults(self):
        ctx = RequestContext()
        assert ctx.method == "GET"
        assert ctx.path == "/"
        assert ctx.url == "/"
        assert dict(ctx.attributes) == {}

    def test_url_includes_query(self):
        assert RequestContext(path="/a", query_string="b=1").url == "/a?b=1"

    def test_with_attribute_returns_new_context(self):
        ctx = RequestContext(attributes={"identity": "alice"})
        derived = ctx.with_attribute("authorization", "service")
        assert derived is not ctx
        assert derived.get("authorization") == "service"
        assert derived.get("identity") == "alice"
        assert ctx.get("authorization") is None

    def test_attributes_read_only(self):
        ctx = RequestContext(attributes={"identity": "alice"})
        with pytest.raises(TypeError):
            ctx.attributes["identity"] = "mallory"  # type: ignore[index]

    def test_caller_dict_not_shared(self):
        attributes = {"identity": "alice"}
        ctx = RequestContext(attributes=attributes)
        attributes["identity"] = "mallory"
        assert ctx.get("identity") == "alice"

    def test_frozen(self):
        with pytest.raises(AttributeError):
            RequestContext().path = "/other"  # type: ignore[misc]

    def test_get_default(self):
        assert RequestContext().get("missing", 1) == 1
