# marketplace/models/wishlist.py
import uuid
from datetime import datetime

from sqlmodel import SQLModel

from marketplace.models.product import Product


class WishlistItem(SQLModel):
    """
    Wishlist membership (`wishlist_items` table): presence only, no quantity.
    Unique per (user_id, product_id).
    """

    id: uuid.UUID
    user_id: uuid.UUID
    product_id: uuid.UUID
    created_at: datetime


class WishlistItemWithProduct(WishlistItem):
    product: Product | None = None
