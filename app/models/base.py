"""SQLAlchemy declarative Base and shared column defaults."""

import uuid
from datetime import UTC, datetime

from sqlalchemy.orm import DeclarativeBase

# Opaque string ids (uuid4) are stored in columns of this length.
ID_LENGTH = 36


def utcnow() -> datetime:
    """Timezone-aware current time; used for created/updated timestamps."""
    return datetime.now(UTC)


def new_id() -> str:
    return str(uuid.uuid4())


class Base(DeclarativeBase):
    """Declarative base for all ORM models."""

    pass
