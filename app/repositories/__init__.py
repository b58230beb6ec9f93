"""Persistence collaborators wrapping the SQLAlchemy session."""

from app.repositories.items import ItemRepository
from app.repositories.users import UserRepository

__all__ = ["ItemRepository", "UserRepository"]
