"""Wardrobe item endpoints: multipart create/update with optional image, read, delete."""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, Response, UploadFile, status
from sqlalchemy.orm import Session

from app.api.routes.auth import get_current_principal
from app.core.database import get_db
from app.core.gate import AuthenticatedPrincipal
from app.models.item import ItemCategory, ItemRoom
from app.repositories.items import ItemRepository
from app.schemas.item import ItemResponse
from app.services.images import ImageStorageService
from app.services.items import ItemService

logger = logging.getLogger(__name__)

router = APIRouter()


def get_item_service(db: Annotated[Session, Depends(get_db)]) -> ItemService:
    return ItemService(ItemRepository(db))


def get_image_storage(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
) -> ImageStorageService:
    return ImageStorageService(db, max_bytes=request.app.state.settings.MAX_IMAGE_BYTES)


def item_form(
    _principal: Annotated[AuthenticatedPrincipal, Depends(get_current_principal)],
    name: Annotated[str, Form(min_length=1, max_length=100)],
    category: Annotated[str, Form()],
    description: Annotated[str | None, Form(max_length=500)] = None,
    room: Annotated[str | None, Form()] = None,
    color: Annotated[str | None, Form(max_length=50)] = None,
    brand: Annotated[str | None, Form(max_length=50)] = None,
    size: Annotated[str | None, Form(max_length=20)] = None,
    washing_temperature: Annotated[
        int | None, Form(alias="washingTemperature", ge=0, le=95)
    ] = None,
    can_be_ironed: Annotated[bool | None, Form(alias="canBeIroned")] = None,
    can_be_tumble_dried: Annotated[bool | None, Form(alias="canBeTumbleDried")] = None,
    can_be_dry_cleaned: Annotated[bool | None, Form(alias="canBeDryCleaned")] = None,
    can_be_bleached: Annotated[bool | None, Form(alias="canBeBleached")] = None,
) -> dict[str, Any]:
    """
    Item fields from a multipart form.

    Anonymous requests get 401 before any field is looked at; category and room
    are checked before any image is stored.
    """
    if not name.strip():
        raise ValueError("Name is required")
    room_value = ItemRoom.parse(room)
    return {
        "name": name.strip(),
        "description": description,
        "category": ItemCategory.parse(category).value,
        "room": room_value.value if room_value else None,
        "color": color,
        "brand": brand,
        "size": size,
        "washing_temperature": washing_temperature,
        "can_be_ironed": can_be_ironed,
        "can_be_tumble_dried": can_be_tumble_dried,
        "can_be_dry_cleaned": can_be_dry_cleaned,
        "can_be_bleached": can_be_bleached,
    }


async def _read_image(image: UploadFile | None) -> tuple[str | None, str | None, bytes] | None:
    """(filename, content_type, data) of an uploaded image; None when no file was sent."""
    if image is None:
        return None
    data = await image.read()
    if not data:
        return None
    return image.filename, image.content_type, data


@router.post("", response_model=ItemResponse, status_code=status.HTTP_201_CREATED)
async def create_item(
    principal: Annotated[AuthenticatedPrincipal, Depends(get_current_principal)],
    fields: Annotated[dict[str, Any], Depends(item_form)],
    service: Annotated[ItemService, Depends(get_item_service)],
    images: Annotated[ImageStorageService, Depends(get_image_storage)],
    image: Annotated[UploadFile | None, File()] = None,
) -> ItemResponse:
    """
    Create a wardrobe item for the authenticated user.

    Send `multipart/form-data`; the optional `image` part must be JPEG, PNG or
    WebP and at most MAX_IMAGE_BYTES.
    """
    upload = await _read_image(image)
    image_id = images.store_image(*upload) if upload else None
    item = service.create_item(principal.user_id, image_id=image_id, **fields)
    return ItemResponse.from_item(item)


@router.get("", response_model=list[ItemResponse])
def list_items(
    principal: Annotated[AuthenticatedPrincipal, Depends(get_current_principal)],
    service: Annotated[ItemService, Depends(get_item_service)],
    category: str | None = None,
) -> list[ItemResponse]:
    """All items of the authenticated user, optionally filtered by category."""
    items = service.list_items(principal.user_id, category=category)
    logger.info("Retrieved %s items for user: %s", len(items), principal.username)
    return [ItemResponse.from_item(i) for i in items]


@router.get("/{item_id}", response_model=ItemResponse)
def get_item(
    item_id: str,
    principal: Annotated[AuthenticatedPrincipal, Depends(get_current_principal)],
    service: Annotated[ItemService, Depends(get_item_service)],
) -> ItemResponse:
    return ItemResponse.from_item(service.get_item(item_id, principal.user_id))


@router.put("/{item_id}", response_model=ItemResponse)
async def update_item(
    item_id: str,
    principal: Annotated[AuthenticatedPrincipal, Depends(get_current_principal)],
    fields: Annotated[dict[str, Any], Depends(item_form)],
    service: Annotated[ItemService, Depends(get_item_service)],
    images: Annotated[ImageStorageService, Depends(get_image_storage)],
    image: Annotated[UploadFile | None, File()] = None,
) -> ItemResponse:
    """
    Replace the fields of an item owned by the authenticated user.

    A new `image` replaces the stored one (the old image is deleted); without
    one the current image is kept.
    """
    existing = service.get_item(item_id, principal.user_id)
    old_image_id = existing.image_id
    image_id = old_image_id
    upload = await _read_image(image)
    if upload:
        image_id = images.store_image(*upload)
    item = service.update_item(item_id, principal.user_id, image_id=image_id, **fields)
    if upload and old_image_id:
        images.delete_image(old_image_id)
    return ItemResponse.from_item(item)


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_item(
    item_id: str,
    principal: Annotated[AuthenticatedPrincipal, Depends(get_current_principal)],
    service: Annotated[ItemService, Depends(get_item_service)],
    images: Annotated[ImageStorageService, Depends(get_image_storage)],
) -> Response:
    """Delete an item and its image."""
    image_id = service.delete_item(item_id, principal.user_id)
    images.delete_image(image_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{item_id}/image")
def get_item_image(
    item_id: str,
    principal: Annotated[AuthenticatedPrincipal, Depends(get_current_principal)],
    service: Annotated[ItemService, Depends(get_item_service)],
    images: Annotated[ImageStorageService, Depends(get_image_storage)],
) -> Response:
    """Image bytes of an item with the Content-Type they were uploaded with."""
    item = service.get_item(item_id, principal.user_id)
    if item.image_id is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Item has no image")
    return Response(
        content=images.get_image(item.image_id),
        media_type=images.get_content_type(item.image_id),
    )
