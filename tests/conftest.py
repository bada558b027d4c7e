# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Generator, Iterator
from dataclasses import dataclass

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("RATE_LIMIT_BACKEND", "memory")

from threadline.core.security import create_access_token
from threadline.db.session import Base, enable_sqlite_savepoints
from threadline.db.session import get_db as app_get_session
from threadline.main import app as fastapi_app
from threadline.models import Category, CategoryModerator, Post, Thread, User, UserRole
from threadline.schemas.auth import AuthSession, SessionUser
from threadline.services.rate_limit import (
    InMemoryRateLimitStore,
    RateLimiter,
    set_rate_limiter,
)

TEST_DB_URL = "sqlite://"


@dataclass
class FakeClock:
    """Millisecond clock that only moves when a test advances it."""

    now: int = 1_700_000_000_000

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


@pytest.fixture()
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_savepoints(engine)
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    SessionLocal = sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture(autouse=True)
def rate_limiter(clock: FakeClock) -> Iterator[RateLimiter]:
    """Give every test a fresh limiter so counters never leak between tests."""
    limiter = RateLimiter(InMemoryRateLimitStore(clock=clock), clock=clock)
    set_rate_limiter(limiter)
    try:
        yield limiter
    finally:
        set_rate_limiter(None)


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture()
def client(app: FastAPI, db_session: Session) -> Iterator[TestClient]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        with TestClient(app, base_url="http://test") as test_client:
            yield test_client
    finally:
        app.dependency_overrides.pop(app_get_session, None)


def make_user(db: Session, name: str, role: UserRole = UserRole.user) -> User:
    user = User(name=name, role=role)
    db.add(user)
    db.commit()
    return user


def session_for(user: User) -> AuthSession:
    """Build the session the auth provider would hand over for ``user``."""
    return AuthSession(user=SessionUser(id=user.id, role=user.role, name=user.name))


def auth_headers(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture()
def admin(db_session: Session) -> User:
    return make_user(db_session, "Ada Admin", UserRole.admin)


@pytest.fixture()
def moderator(db_session: Session, category: Category) -> User:
    """Site moderator linked to ``category``."""
    user = make_user(db_session, "Max Moderator", UserRole.moderator)
    db_session.add(CategoryModerator(category_id=category.id, user_id=user.id))
    db_session.commit()
    return user


@pytest.fixture()
def alice(db_session: Session) -> User:
    return make_user(db_session, "Alice")


@pytest.fixture()
def bob(db_session: Session) -> User:
    return make_user(db_session, "Bob")


@pytest.fixture()
def category(db_session: Session) -> Category:
    category = Category(slug="general", name="General", description="Anything goes")
    db_session.add(category)
    db_session.commit()
    return category


@pytest.fixture()
def other_category(db_session: Session) -> Category:
    category = Category(slug="off-topic", name="Off Topic")
    db_session.add(category)
    db_session.commit()
    return category


def make_thread(
    db: Session,
    author: User,
    category: Category,
    title: str = "How do I configure the widget?",
) -> Thread:
    """Persist a thread with its opening post, bypassing the actions."""
    thread = Thread(
        title=title,
        slug=title.lower().replace(" ", "-").strip("?"),
        author_id=author.id,
        category_id=category.id,
    )
    db.add(thread)
    db.flush()
    db.add(Post(thread_id=thread.id, author_id=author.id, content="Opening post body"))
    db.commit()
    return thread


def make_post(db: Session, author: User, thread: Thread, parent: Post | None = None) -> Post:
    post = Post(
        thread_id=thread.id,
        author_id=author.id,
        parent_id=parent.id if parent else None,
        content="A reply",
    )
    db.add(post)
    db.commit()
    return post


@pytest.fixture()
def thread(db_session: Session, bob: User, category: Category) -> Thread:
    """Thread opened by Bob in the moderated category."""
    return make_thread(db_session, bob, category)
