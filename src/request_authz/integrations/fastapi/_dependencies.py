"""FastAPI dependencies exposing the request's authorization objects."""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import Depends, Request

from request_authz._service import AuthorizationService
from request_authz.exceptions import MissingIdentityError
from request_authz.integrations.fastapi._middleware import IDENTITY_ATTRIBUTE_KEY
from request_authz.middleware._context import AUTHORIZATION_ATTRIBUTE

__all__ = ["Authorization", "CurrentIdentity", "get_authorization", "get_identity"]


def get_authorization(request: Request) -> AuthorizationService:
    """Return the ``AuthorizationService`` attached to *request*.

    Raises ``RuntimeError`` if ``AuthorizationMiddleware`` is not installed.

    Example::

        @app.get("/articles")
        def list_articles(authz: AuthorizationService = Depends(get_authorization)):
            authz.skip_authorization()
    """
    service = getattr(request.state, AUTHORIZATION_ATTRIBUTE, None)
    if service is None:
        raise RuntimeError(
            "No AuthorizationService on request.state; install AuthorizationMiddleware"
        )
    return service


def get_identity(request: Request) -> Any:
    """Return the decorated identity of *request*.

    Raises:
        MissingIdentityError: If the request carries no identity.

    Example::

        @app.get("/articles/{article_id}")
        def show(article_id: int, identity=Depends(get_identity)):
            article = load(article_id)
            if not identity.can("view", article):
                ...
    """
    identity_attribute = getattr(request.state, IDENTITY_ATTRIBUTE_KEY, "identity")
    identity = getattr(request.state, identity_attribute, None)
    if identity is None:
        raise MissingIdentityError()
    return identity


Authorization = Annotated[AuthorizationService, Depends(get_authorization)]
CurrentIdentity = Annotated[Any, Depends(get_identity)]
