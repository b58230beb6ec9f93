"""ORM model for application users (auth and RBAC)."""

from enum import Enum

from sqlalchemy import Column, DateTime, String

from app.models.base import ID_LENGTH, Base, new_id, utcnow


class UserRole(str, Enum):
    """Coarse permission tier carried in tokens as the `role` claim."""

    USER = "USER"
    ADMIN = "ADMIN"


class User(Base):
    """
    User account for JWT authentication and role-based access control.

    role: 'USER' or 'ADMIN'. New accounts are always 'USER'; the only way up is
    promote_to_admin(). password_hash holds a bcrypt hash and is never returned
    by the API.
    """

    __tablename__ = "users"

    id = Column(String(ID_LENGTH), primary_key=True, default=new_id)
    username = Column(String(50), nullable=False, unique=True, index=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    first_name = Column(String(50), nullable=True)
    last_name = Column(String(50), nullable=True)
    role = Column(String(16), nullable=False, default=UserRole.USER.value)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    last_login_at = Column(DateTime(timezone=True), nullable=True)

    @classmethod
    def create(
        cls,
        username: str,
        email: str,
        password_hash: str,
        first_name: str | None = None,
        last_name: str | None = None,
    ) -> "User":
        """New, not yet persisted account with role USER."""
        now = utcnow()
        return cls(
            id=new_id(),
            username=username,
            email=email,
            password_hash=password_hash,
            first_name=first_name,
            last_name=last_name,
            role=UserRole.USER.value,
            created_at=now,
            updated_at=now,
            last_login_at=None,
        )

    def record_login(self) -> "User":
        self.last_login_at = utcnow()
        return self

    def promote_to_admin(self) -> "User":
        self.role = UserRole.ADMIN.value
        self.updated_at = utcnow()
        return self

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value

    def __repr__(self) -> str:
        return f"User(id={self.id!r}, username={self.username!r}, role={self.role!r})"
