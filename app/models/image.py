"""ORM model for uploaded item images (blob storage by opaque id)."""

from sqlalchemy import Column, DateTime, Integer, LargeBinary, String

from app.models.base import ID_LENGTH, Base, new_id, utcnow


class StoredImage(Base):
    """Binary image payload plus the metadata needed to serve it back."""

    __tablename__ = "stored_images"

    id = Column(String(ID_LENGTH), primary_key=True, default=new_id)
    filename = Column(String(512), nullable=False, default="")
    content_type = Column(String(64), nullable=False)
    size = Column(Integer, nullable=False)
    data = Column(LargeBinary, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
