# marketplace/repositories/cart_repo.py
import uuid

from marketplace.core.store import Join, Order, Store, parse_rows
from marketplace.models.cart import CartItemWithProduct

TABLE = "cart_items"

PRODUCT_JOIN = Join(alias="product", table="products", on="product_id")


class CartRepository:
    """
    Data access for `cart_items`.

    - Pure remote-store operations, no notifications, no local state.
    - Errors from the store (RemoteFailure) propagate to the caller.
    """

    def __init__(self, store: Store):
        self.store = store

    async def list_for_user(self, user_id: uuid.UUID) -> list[CartItemWithProduct]:
        """Every entry of the user, newest first, joined with its product."""
        rows = await self.store.select(
            TABLE,
            filters={"user_id": str(user_id)},
            order=Order("created_at", desc=True),
            joins=[PRODUCT_JOIN],
        )
        return parse_rows(CartItemWithProduct, rows, TABLE)

    async def create(
        self,
        user_id: uuid.UUID,
        product_id: uuid.UUID,
        quantity: int,
    ) -> None:
        await self.store.insert(
            TABLE,
            {
                "user_id": str(user_id),
                "product_id": str(product_id),
                "quantity": quantity,
            },
        )

    async def update_quantity(
        self,
        user_id: uuid.UUID,
        product_id: uuid.UUID,
        quantity: int,
    ) -> None:
        await self.store.update(
            TABLE,
            {"user_id": str(user_id), "product_id": str(product_id)},
            {"quantity": quantity},
        )

    async def delete(self, user_id: uuid.UUID, product_id: uuid.UUID) -> None:
        await self.store.delete(
            TABLE,
            {"user_id": str(user_id), "product_id": str(product_id)},
        )

    async def clear_user_cart(self, user_id: uuid.UUID) -> None:
        await self.store.delete(TABLE, {"user_id": str(user_id)})
