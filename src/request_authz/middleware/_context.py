"""RequestContext — the request view threaded through the middleware."""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from request_authz._types import UrlFor

__all__ = ["AUTHORIZATION_ATTRIBUTE", "RequestContext"]

# Context key holding the request's AuthorizationService.
AUTHORIZATION_ATTRIBUTE = "authorization"


@dataclass(frozen=True, slots=True)
class RequestContext:
    """Immutable view of a request passed explicitly down the pipeline.

    The middleware never mutates a context; it derives a new one with
    :meth:`with_attribute` and hands that to the downstream handler.

    Attributes:
        method: HTTP method.
        path: Request path.
        query_string: Raw query string without the leading ``?``.
        attributes: Request attributes (identity, authorization service, ...).
        url_for: Routing collaborator resolving a route name to a path.
        request: The underlying framework request, if any.

    Example::

        ctx = RequestContext(path="/articles", attributes={"identity": user})
        ctx = ctx.with_attribute("authorization", service)
    """

    method: str = "GET"
    path: str = "/"
    query_string: str = ""
    attributes: Mapping[str, Any] = field(default_factory=dict)
    url_for: UrlFor | None = None
    request: Any = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "attributes", MappingProxyType(dict(self.attributes)))

    @property
    def url(self) -> str:
        """Path plus query string, as originally requested."""
        if self.query_string:
            return f"{self.path}?{self.query_string}"
        return self.path

    def get(self, key: str, default: Any = None) -> Any:
        return self.attributes.get(key, default)

    def with_attribute(self, key: str, value: Any) -> RequestContext:
        attributes = dict(self.attributes)
        attributes[key] = value
        return dataclasses.replace(self, attributes=attributes)
