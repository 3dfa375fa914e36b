# tests/conftest.py
from __future__ import annotations

from collections.abc import Callable, Generator, Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from momlink.api.v1.dependencies import create_access_token
from momlink.db.session import Base, configure_sqlite
from momlink.db.session import get_db as app_get_session
from momlink.main import app as fastapi_app
from momlink.models import Kid, Profile, UserInterest
from momlink.services.realtime import reset_change_feed

TEST_DB_URL = "sqlite://"


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    configure_sqlite(engine)
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def session_factory(engine: Engine) -> sessionmaker[Session]:
    """Session factory bound to the test engine, as used by live watchers."""
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


@pytest.fixture()
def db_session(engine: Engine, session_factory: sessionmaker[Session]) -> Iterator[Session]:
    session = session_factory()
    try:
        yield session
    finally:
        session.rollback()
        session.close()

        # Services commit for real; wipe every table so each test starts clean.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture(autouse=True)
def fresh_change_feed() -> Iterator[None]:
    reset_change_feed()
    yield
    reset_change_feed()


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def make_profile(db_session: Session) -> Callable[..., Profile]:
    """Return a factory that persists a profile with optional kids and interests."""

    def _make_profile(
        user_id: str,
        *,
        name: str | None = None,
        city: str | None = "Austin",
        kids: list[int] | None = None,
        interests: list[str] | None = None,
        visibility: str = "public",
        photo: str | None = None,
    ) -> Profile:
        profile = Profile(
            id=user_id,
            email=f"{user_id}@example.com",
            user_type="mom",
            name=name or user_id.capitalize(),
            city=city,
            profile_visibility=visibility,
            profile_photo_url=photo,
            onboarding_completed=True,
        )
        db_session.add(profile)
        db_session.flush()
        db_session.add_all(Kid(user_id=user_id, age=age) for age in kids or [])
        db_session.add_all(UserInterest(user_id=user_id, interest=tag) for tag in interests or [])
        db_session.commit()
        return profile

    return _make_profile


@pytest.fixture()
def alice(make_profile: Callable[..., Profile]) -> Profile:
    """Primary test member."""
    return make_profile(
        "alice",
        kids=[2, 5],
        interests=["hiking", "reading", "yoga"],
        photo="https://cdn.example.com/alice.jpg",
    )


@pytest.fixture()
def bob(make_profile: Callable[..., Profile]) -> Profile:
    """Secondary test member in the same city."""
    return make_profile("bob", kids=[3], interests=["reading", "cooking"])


def _auth_headers_for(user_id: str, email: str | None = None) -> dict[str, str]:
    claims = {"email": email} if email else None
    return {"Authorization": f"Bearer {create_access_token(user_id, extra_claims=claims)}"}


@pytest.fixture()
def auth_headers() -> Callable[..., dict[str, str]]:
    """Return a helper building bearer headers for any account id."""
    return _auth_headers_for


@pytest.fixture()
def auth_token(alice: Profile) -> dict[str, str]:
    """Authorization headers for ``alice``."""
    return _auth_headers_for(alice.id)


@pytest.fixture()
def other_auth_token(bob: Profile) -> dict[str, str]:
    """Authorization headers for ``bob``."""
    return _auth_headers_for(bob.id)
