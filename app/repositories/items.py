"""Item store: per-owner queries for wardrobe items."""

from sqlalchemy.orm import Session

from app.models.item import Item, ItemCategory


class ItemRepository:
    def __init__(self, db: Session) -> None:
        self.db = db

    def save(self, item: Item) -> Item:
        self.db.add(item)
        self.db.commit()
        self.db.refresh(item)
        return item

    def find_by_id(self, item_id: str) -> Item | None:
        return self.db.get(Item, item_id)

    def find_all_by_user_id(self, user_id: str) -> list[Item]:
        return (
            self.db.query(Item)
            .filter(Item.user_id == user_id)
            .order_by(Item.created_at, Item.id)
            .all()
        )

    def find_by_user_id_and_category(self, user_id: str, category: ItemCategory) -> list[Item]:
        return (
            self.db.query(Item)
            .filter(Item.user_id == user_id, Item.category == category.value)
            .order_by(Item.created_at, Item.id)
            .all()
        )

    def delete(self, item: Item) -> None:
        self.db.delete(item)
        self.db.commit()
