"""Item image storage: validated binary blobs addressed by opaque id."""

import logging

from sqlalchemy.orm import Session

from app.core.errors import ImageNotFoundError, InvalidImageError
from app.models.image import StoredImage

logger = logging.getLogger(__name__)

DEFAULT_MAX_IMAGE_BYTES = 20 * 1024 * 1024
ALLOWED_CONTENT_TYPES = frozenset({"image/jpeg", "image/jpg", "image/png", "image/webp"})
FALLBACK_CONTENT_TYPE = "application/octet-stream"


class ImageStorageService:
    def __init__(self, db: Session, max_bytes: int = DEFAULT_MAX_IMAGE_BYTES) -> None:
        self.db = db
        self.max_bytes = max_bytes

    def store_image(self, filename: str | None, content_type: str | None, data: bytes) -> str:
        """Validate and persist an image; returns its id."""
        normalized_type = self._validate(content_type, data)
        image = StoredImage(
            filename=(filename or "")[:512],
            content_type=normalized_type,
            size=len(data),
            data=data,
        )
        self.db.add(image)
        self.db.commit()
        self.db.refresh(image)
        logger.info("Stored image with ID: %s", image.id)
        return image.id

    def get_image(self, image_id: str) -> bytes:
        return self._find(image_id).data

    def get_content_type(self, image_id: str) -> str:
        return self._find(image_id).content_type or FALLBACK_CONTENT_TYPE

    def delete_image(self, image_id: str | None) -> None:
        """Remove an image; blank or unknown ids are ignored."""
        if not image_id or not image_id.strip():
            return
        deleted = (
            self.db.query(StoredImage)
            .filter(StoredImage.id == image_id)
            .delete(synchronize_session=False)
        )
        self.db.commit()
        if deleted:
            logger.info("Deleted image with ID: %s", image_id)
        else:
            logger.warning("Delete skipped: no image with ID %s", image_id)

    def image_exists(self, image_id: str | None) -> bool:
        if not image_id or not image_id.strip():
            return False
        return self.db.get(StoredImage, image_id) is not None

    def _find(self, image_id: str) -> StoredImage:
        image = self.db.get(StoredImage, image_id) if image_id else None
        if image is None:
            raise ImageNotFoundError.with_id(image_id)
        return image

    def _validate(self, content_type: str | None, data: bytes) -> str:
        if not data:
            raise InvalidImageError("Image file is required")
        if len(data) > self.max_bytes:
            raise InvalidImageError.too_large(len(data), self.max_bytes)
        normalized = (content_type or "").split(";")[0].strip().lower()
        if normalized not in ALLOWED_CONTENT_TYPES:
            raise InvalidImageError.invalid_type(content_type)
        return normalized
