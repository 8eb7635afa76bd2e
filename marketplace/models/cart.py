# marketplace/models/cart.py
import uuid
from datetime import datetime

from sqlmodel import SQLModel, Field

from marketplace.models.product import Product


class CartItem(SQLModel):
    """
    Shopping cart entry for a user (`cart_items` table).
    One user cannot have 2 rows for the same product.
    """

    id: uuid.UUID
    user_id: uuid.UUID
    product_id: uuid.UUID

    quantity: int = Field(
        ge=1,
        description="Must be >= 1",
    )

    created_at: datetime
    updated_at: datetime


class CartItemWithProduct(CartItem):
    """
    Cart entry enriched with its product for display.
    `product` is None when the listing was deleted meanwhile.
    """

    product: Product | None = None
