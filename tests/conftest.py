"""Shared test fixtures for request-authz tests."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import pytest
from sqlalchemy import Boolean, ForeignKey, Integer, Select, String, create_engine
from sqlalchemy.orm import (
    DeclarativeBase,
    Mapped,
    Session,
    mapped_column,
    relationship,
    sessionmaker,
)

from request_authz import AuthorizationService, BasePolicy, MapResolver, Result

# ---------------------------------------------------------------------------
# Test models
# ---------------------------------------------------------------------------


class Base(DeclarativeBase):
    pass


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(100))
    role: Mapped[str] = mapped_column(String(50), default="viewer")

    articles: Mapped[list[Article]] = relationship("Article", back_populates="author")


class Article(Base):
    __tablename__ = "articles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    title: Mapped[str] = mapped_column(String(200))
    is_published: Mapped[bool] = mapped_column(Boolean, default=False)
    is_locked: Mapped[bool] = mapped_column(Boolean, default=False)
    author_id: Mapped[int] = mapped_column(ForeignKey("users.id"))

    author: Mapped[User] = relationship("User", back_populates="articles")


class Comment(Base):
    __tablename__ = "comments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    body: Mapped[str] = mapped_column(String(500))
    article_id: Mapped[int] = mapped_column(ForeignKey("articles.id"))


# ---------------------------------------------------------------------------
# MockIdentity and policies
# ---------------------------------------------------------------------------


@dataclass
class MockIdentity:
    """Test identity with an id and a role."""

    id: int | str
    role: str = "viewer"

    def greeting(self) -> str:
        return f"hello {self.id}"


class ArticlePolicy(BasePolicy):
    """Admins may do anything; authors may edit unlocked articles."""

    def before(self, identity: Any, resource: Any, action: str) -> bool | None:
        if identity is not None and identity.role == "admin":
            return True
        return None

    def can_view(self, identity: Any, article: Article) -> bool:
        if article.is_published:
            return True
        return identity is not None and article.author_id == identity.id

    def can_edit(self, identity: Any, article: Article) -> Result:
        if article.is_locked:
            return Result(False, "article is locked")
        return Result(identity is not None and article.author_id == identity.id)

    def scope_index(self, identity: Any, stmt: Select[Any]) -> Select[Any]:
        return stmt.where(
            (Article.is_published == True)  # noqa: E712
            | (Article.author_id == identity.id)
        )


class ExplodingPolicy:
    """Policy whose decision always fails."""

    def can(self, identity: Any, action: str, resource: Any) -> bool:
        raise RuntimeError("policy exploded")


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def resolver() -> MapResolver:
    return MapResolver({Article: ArticlePolicy})


@pytest.fixture()
def service(resolver: MapResolver) -> AuthorizationService:
    return AuthorizationService(resolver)


@pytest.fixture()
def engine():
    """Create an in-memory SQLite engine with all tables."""
    eng = create_engine("sqlite:///:memory:", echo=False)
    Base.metadata.create_all(eng)
    return eng


@pytest.fixture()
def session(engine):
    """Provide a transactional session that rolls back after each test."""
    factory = sessionmaker(bind=engine)
    sess = factory()
    try:
        yield sess
    finally:
        sess.rollback()
        sess.close()


@pytest.fixture()
def sample_data(session: Session) -> dict[str, list]:
    """Seed the database with sample data for testing."""
    alice = User(id=1, name="Alice", role="admin")
    bob = User(id=2, name="Bob", role="editor")
    session.add_all([alice, bob])

    published = Article(id=1, title="Published", is_published=True, author_id=1)
    draft = Article(id=2, title="Alice's Draft", is_published=False, author_id=1)
    bobs_draft = Article(id=3, title="Bob's Draft", is_published=False, author_id=2)
    locked = Article(id=4, title="Locked", is_published=True, is_locked=True, author_id=2)
    session.add_all([published, draft, bobs_draft, locked])

    session.add(Comment(id=1, body="Nice", article_id=1))

    session.flush()
    return {
        "users": [alice, bob],
        "articles": [published, draft, bobs_draft, locked],
    }
