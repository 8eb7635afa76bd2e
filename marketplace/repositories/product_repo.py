# marketplace/repositories/product_repo.py
import uuid

from marketplace.core.store import Join, Order, Store, parse_rows
from marketplace.models.product import Product, ProductWithSeller

TABLE = "products"

SELLER_JOIN = Join(alias="seller", table="profiles", on="user_id", columns="name, phone")


class ProductRepository:
    """
    Data access layer for products.

    - Pure remote-store operations (queries + insert).
    - No FastAPI, no notifications, no business logic.
    """

    def __init__(self, store: Store):
        self.store = store

    async def list_with_seller(self) -> list[ProductWithSeller]:
        """All listings, newest first, each with its seller's name/phone."""
        rows = await self.store.select(
            TABLE,
            order=Order("created_at", desc=True),
            joins=[SELLER_JOIN],
        )
        return parse_rows(ProductWithSeller, rows, TABLE)

    async def get_with_seller(self, product_id: uuid.UUID) -> ProductWithSeller | None:
        rows = await self.store.select(
            TABLE,
            filters={"id": str(product_id)},
            joins=[SELLER_JOIN],
        )
        if not rows:
            return None
        return parse_rows(ProductWithSeller, rows[:1], TABLE)[0]

    async def create(
        self,
        *,
        product_id: uuid.UUID,
        user_id: uuid.UUID,
        name: str,
        price: float,
        description: str,
        images: list[str],
    ) -> Product:
        row = await self.store.insert(
            TABLE,
            {
                "id": str(product_id),
                "user_id": str(user_id),
                "name": name,
                "price": price,
                "description": description,
                "images": images,
            },
        )
        return parse_rows(Product, [row], TABLE)[0]
