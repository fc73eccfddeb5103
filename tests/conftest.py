"""
Pytest fixtures for testing
"""
import pytest
from datetime import datetime, timedelta, timezone
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from app.infrastructure.db.session import Base
from app.infrastructure.db.models import User, ROLE_ADMIN, ROLE_USER
from app.auth import hash_password
from app.application.tokens import sign_access


PASSWORD = "Secret123"


@pytest.fixture
def db_engine():
    """In-memory SQLite engine shared across threads (TestClient runs sync routes in a pool)"""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(db_engine) -> Session:
    """Create database session for tests"""
    SessionLocal = sessionmaker(bind=db_engine, autoflush=False)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def client(db_session):
    """Test client with get_db pointed at the test session"""
    from app.main import app
    from app.api.deps import get_db

    def _override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_get_db
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()


def _make_user(db, email, role=ROLE_USER, is_active=False, expires_at=None):
    user = User(
        name=email.split("@")[0].title(),
        email=email,
        password_hash=hash_password(PASSWORD),
        role=role,
        is_active=is_active,
        activated_at=datetime.now(timezone.utc) if is_active else None,
        expires_at=expires_at,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def make_user(db_session):
    """Factory: make_user(email, role=..., is_active=..., expires_at=...)"""
    def _factory(email, **kwargs):
        return _make_user(db_session, email, **kwargs)
    return _factory


@pytest.fixture
def inactive_user(make_user):
    return make_user("inactive@test.com")


@pytest.fixture
def active_user(make_user):
    return make_user(
        "active@test.com",
        is_active=True,
        expires_at=datetime.now(timezone.utc) + timedelta(days=1),
    )


@pytest.fixture
def expired_user(make_user):
    return make_user(
        "expired@test.com",
        is_active=True,
        expires_at=datetime.now(timezone.utc) - timedelta(days=1),
    )


@pytest.fixture
def admin_user(make_user):
    return make_user("admin@test.com", role=ROLE_ADMIN, is_active=True)


def auth_cookies(user) -> dict:
    """Cookie jar contents for a signed-in user"""
    return {"accessToken": sign_access(user.id, user.role)}


@pytest.fixture
def login_as(client):
    """Put an access token for the given user into the client's cookie jar"""
    def _login(user):
        client.cookies.clear()
        for name, value in auth_cookies(user).items():
            client.cookies.set(name, value)
        return client
    return _login
