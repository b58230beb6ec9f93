"""Wardrobe item CRUD, scoped to the owning user."""

import logging
from typing import Any

from app.core.errors import ItemAccessDeniedError, ItemNotFoundError
from app.models.item import Item, ItemCategory
from app.repositories.items import ItemRepository

logger = logging.getLogger(__name__)


class ItemService:
    """Every read and write checks that the item belongs to the requesting user."""

    def __init__(self, items: ItemRepository) -> None:
        self.items = items

    def create_item(self, user_id: str, **fields: Any) -> Item:
        logger.info("Creating new item for user: %s", user_id)
        item = self.items.save(Item.create(user_id, **fields))
        logger.info("Item created successfully with id: %s", item.id)
        return item

    def update_item(self, item_id: str, user_id: str, **fields: Any) -> Item:
        logger.info("Updating item with id: %s", item_id)
        item = self._owned(item_id, user_id, action="Update")
        saved = self.items.save(item.update(**fields))
        logger.info("Item updated successfully: %s", item_id)
        return saved

    def delete_item(self, item_id: str, user_id: str) -> str | None:
        """Delete the item and return its image id so the caller can remove the image."""
        logger.info("Deleting item with id: %s", item_id)
        item = self._owned(item_id, user_id, action="Delete")
        image_id = item.image_id
        self.items.delete(item)
        logger.info("Item deleted successfully: %s", item_id)
        return image_id

    def get_item(self, item_id: str, user_id: str) -> Item:
        return self._owned(item_id, user_id, action="Get")

    def list_items(self, user_id: str, category: str | None = None) -> list[Item]:
        if category:
            parsed = ItemCategory.parse(category)
            logger.info("Fetching items for user %s with category: %s", user_id, parsed.value)
            return self.items.find_by_user_id_and_category(user_id, parsed)
        logger.info("Fetching all items for user: %s", user_id)
        return self.items.find_all_by_user_id(user_id)

    def _owned(self, item_id: str, user_id: str, action: str) -> Item:
        item = self.items.find_by_id(item_id)
        if item is None:
            logger.warning("%s failed: item not found - %s", action, item_id)
            raise ItemNotFoundError.with_id(item_id)
        if not item.is_owned_by(user_id):
            logger.warning(
                "%s failed: access denied to item %s for user %s", action, item_id, user_id
            )
            raise ItemAccessDeniedError.with_id(item_id)
        return item
