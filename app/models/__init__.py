"""SQLAlchemy ORM models."""

from app.models.base import Base
from app.models.image import StoredImage
from app.models.item import Item, ItemCategory, ItemRoom
from app.models.user import User, UserRole

__all__ = ["Base", "Item", "ItemCategory", "ItemRoom", "StoredImage", "User", "UserRole"]
