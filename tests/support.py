"""Shared fixtures: in-memory SQLite app and token helpers."""

from collections.abc import Generator

from fastapi import FastAPI
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.config import Settings
from app.core.database import build_engine, build_session_factory, create_tables, get_db
from app.core.tokens import TokenService, TokenSettings
from app.main import create_app
from app.models.user import User

TEST_SECRET = "test-secret-for-hs512-signing-needs-at-least-sixty-four-bytes-of-key-material"
OTHER_SECRET = "another-secret-for-hs512-signing-also-at-least-sixty-four-bytes-of-key-material"

STRONG_PASSWORD = "Password123"


def make_token_service(secret: str = TEST_SECRET, **kwargs) -> TokenService:
    return TokenService(TokenSettings(secret=secret), **kwargs)


def make_user(
    username: str = "johndoe",
    email: str = "john@example.com",
    role: str = "USER",
    user_id: str = "5f0c7d1e-3a55-4b8f-9d0e-2c1b7a6e9f10",
) -> User:
    user = User.create(username=username, email=email, password_hash="not-a-real-hash")
    user.id = user_id
    user.role = role
    return user


def build_test_app(**settings_overrides: object) -> tuple[FastAPI, sessionmaker[Session]]:
    """App wired to a fresh in-memory database shared by requests and the auth middleware."""
    engine = build_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        pool_pre_ping=False,
    )
    create_tables(engine)
    session_factory = build_session_factory(engine)
    values: dict[str, object] = {"JWT_SECRET": TEST_SECRET, "MAX_IMAGE_BYTES": 1024}
    values.update(settings_overrides)
    settings = Settings(**values)
    app = create_app(settings=settings, session_factory=session_factory)

    def override_get_db() -> Generator[Session, None, None]:
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    return app, session_factory


def register_payload(**overrides: str) -> dict[str, str]:
    payload = {
        "username": "johndoe",
        "email": "john@example.com",
        "password": STRONG_PASSWORD,
        "firstName": "John",
        "lastName": "Doe",
    }
    payload.update(overrides)
    return payload


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
