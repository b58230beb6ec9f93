"""User store: lookups and saves for User rows."""

from sqlalchemy.orm import Session

from app.models.user import User


class UserRepository:
    """Thin repository over a session; one instance per request/session."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def save(self, user: User) -> User:
        """Insert or update the user and return it with database defaults loaded."""
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user

    def find_by_id(self, user_id: str) -> User | None:
        return self.db.get(User, user_id)

    def find_by_username(self, username: str) -> User | None:
        return self.db.query(User).filter(User.username == username).first()

    def find_by_email(self, email: str) -> User | None:
        return self.db.query(User).filter(User.email == email).first()

    def exists_by_username(self, username: str) -> bool:
        return self.db.query(User.id).filter(User.username == username).first() is not None

    def exists_by_email(self, email: str) -> bool:
        return self.db.query(User.id).filter(User.email == email).first() is not None

    def find_all(self) -> list[User]:
        return self.db.query(User).order_by(User.created_at, User.username).all()

    def delete_by_id(self, user_id: str) -> bool:
        deleted = self.db.query(User).filter(User.id == user_id).delete(synchronize_session=False)
        self.db.commit()
        return deleted > 0
