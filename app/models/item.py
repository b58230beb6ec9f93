"""ORM model for wardrobe items, each owned by a single user."""

from enum import Enum

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String

from app.models.base import ID_LENGTH, Base, new_id, utcnow


class ItemCategory(str, Enum):
    TOPS = "TOPS"
    BOTTOMS = "BOTTOMS"
    DRESSES = "DRESSES"
    OUTERWEAR = "OUTERWEAR"
    SHOES = "SHOES"
    ACCESSORIES = "ACCESSORIES"
    UNDERWEAR = "UNDERWEAR"
    SPORTSWEAR = "SPORTSWEAR"
    SLEEPWEAR = "SLEEPWEAR"
    FORMAL = "FORMAL"
    OTHER = "OTHER"

    @classmethod
    def parse(cls, value: "str | ItemCategory") -> "ItemCategory":
        """Case-insensitive lookup; raises ValueError for unknown names."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise ValueError(f"Unexpected category: {value}") from None


class ItemRoom(str, Enum):
    BEDROOM = "BEDROOM"
    WARDROBE = "WARDROBE"
    CLOSET = "CLOSET"
    BATHROOM = "BATHROOM"
    LAUNDRY_ROOM = "LAUNDRY_ROOM"
    HALLWAY = "HALLWAY"
    GARAGE = "GARAGE"
    STORAGE = "STORAGE"
    OTHER = "OTHER"

    @classmethod
    def parse(cls, value: "str | ItemRoom | None") -> "ItemRoom | None":
        """Case-insensitive lookup; None or blank means no room."""
        if value is None or isinstance(value, cls):
            return value
        if not str(value).strip():
            return None
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise ValueError(f"Unexpected room: {value}") from None


# Fields a client may set on create and replace on update.
MUTABLE_FIELDS = (
    "name",
    "description",
    "category",
    "room",
    "color",
    "brand",
    "size",
    "washing_temperature",
    "can_be_ironed",
    "can_be_tumble_dried",
    "can_be_dry_cleaned",
    "can_be_bleached",
    "image_id",
)


class Item(Base):
    """
    A piece of clothing in a user's wardrobe.

    category and room are stored as their enum names. image_id references a
    StoredImage row; it is an opaque id, not a foreign key, so the image store
    can be swapped independently.
    """

    __tablename__ = "items"

    id = Column(String(ID_LENGTH), primary_key=True, default=new_id)
    user_id = Column(
        String(ID_LENGTH),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name = Column(String(100), nullable=False)
    description = Column(String(500), nullable=True)
    category = Column(String(32), nullable=False, index=True)
    room = Column(String(32), nullable=True)
    color = Column(String(50), nullable=True)
    brand = Column(String(50), nullable=True)
    size = Column(String(20), nullable=True)
    washing_temperature = Column(Integer, nullable=True)
    can_be_ironed = Column(Boolean, nullable=True)
    can_be_tumble_dried = Column(Boolean, nullable=True)
    can_be_dry_cleaned = Column(Boolean, nullable=True)
    can_be_bleached = Column(Boolean, nullable=True)
    image_id = Column(String(ID_LENGTH), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    @classmethod
    def create(cls, user_id: str, **fields: object) -> "Item":
        now = utcnow()
        item = cls(id=new_id(), user_id=user_id, created_at=now, updated_at=now)
        item._assign(fields)
        return item

    def update(self, **fields: object) -> "Item":
        """Replace every mutable field (absent ones become None) and bump updated_at."""
        self._assign(fields)
        self.updated_at = utcnow()
        return self

    def _assign(self, fields: dict[str, object]) -> None:
        unknown = set(fields) - set(MUTABLE_FIELDS)
        if unknown:
            raise TypeError(f"Unknown item fields: {', '.join(sorted(unknown))}")
        for name in MUTABLE_FIELDS:
            setattr(self, name, fields.get(name))
        self.category = ItemCategory.parse(self.category).value
        room = ItemRoom.parse(self.room)
        self.room = room.value if room else None

    def is_owned_by(self, user_id: str) -> bool:
        return self.user_id == user_id
