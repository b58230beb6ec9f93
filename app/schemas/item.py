"""Response schema for wardrobe items (requests arrive as multipart forms)."""

from datetime import datetime

from pydantic import ConfigDict
from pydantic.alias_generators import to_camel

from app.schemas.auth import CamelModel


class ItemResponse(CamelModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )

    id: str
    user_id: str
    name: str
    description: str | None = None
    category: str
    room: str | None = None
    color: str | None = None
    brand: str | None = None
    size: str | None = None
    washing_temperature: int | None = None
    can_be_ironed: bool | None = None
    can_be_tumble_dried: bool | None = None
    can_be_dry_cleaned: bool | None = None
    can_be_bleached: bool | None = None
    has_image: bool = False
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_item(cls, item: object) -> "ItemResponse":
        response = cls.model_validate(item)
        response.has_image = getattr(item, "image_id", None) is not None
        return response
