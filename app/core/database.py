"""Database engine, session factory and the per-request session dependency."""

from collections.abc import Generator
from typing import Any

from sqlalchemy import Engine, create_engine, text
from sqlalchemy.orm import Session, sessionmaker

from app.core.config import settings


def build_engine(url: str, **kwargs: Any) -> Engine:
    """Create an engine with the application's pool defaults."""
    kwargs.setdefault("pool_pre_ping", True)
    kwargs.setdefault("echo", False)
    return create_engine(url, **kwargs)


def build_session_factory(bind: Engine) -> sessionmaker[Session]:
    """Session factory bound to an engine; used by get_db and the auth middleware."""
    return sessionmaker(autocommit=False, autoflush=False, bind=bind)


engine = build_engine(settings.DATABASE_URL, echo=settings.DEBUG)

SessionLocal = build_session_factory(engine)


def get_db() -> Generator[Session, None, None]:
    """Dependency that yields a DB session and closes it when done."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def check_db_connected(db: Session) -> bool:
    """Run a trivial query to verify the database is reachable."""
    try:
        db.execute(text("SELECT 1"))
        return True
    except Exception:
        return False


def create_tables(bind: Engine) -> None:
    """Create every mapped table (tests and throwaway databases; production uses Alembic)."""
    from app.models import Base

    Base.metadata.create_all(bind=bind)
