# marketplace/repositories/wishlist_repo.py
import uuid

from marketplace.core.store import Join, Order, Store, parse_rows
from marketplace.models.wishlist import WishlistItemWithProduct

TABLE = "wishlist_items"


class WishlistRepository:
    def __init__(self, store: Store):
        self.store = store

    async def list_for_user(self, user_id: uuid.UUID) -> list[WishlistItemWithProduct]:
        rows = await self.store.select(
            TABLE,
            filters={"user_id": str(user_id)},
            order=Order("created_at", desc=True),
            joins=[Join(alias="product", table="products", on="product_id")],
        )
        return parse_rows(WishlistItemWithProduct, rows, TABLE)

    async def create(self, user_id: uuid.UUID, product_id: uuid.UUID) -> None:
        await self.store.insert(
            TABLE,
            {"user_id": str(user_id), "product_id": str(product_id)},
        )

    async def delete(self, user_id: uuid.UUID, product_id: uuid.UUID) -> None:
        await self.store.delete(
            TABLE,
            {"user_id": str(user_id), "product_id": str(product_id)},
        )
