# marketplace/schemas/wishlist.py
from sqlmodel import SQLModel

from marketplace.models.wishlist import WishlistItemWithProduct


class WishlistSummary(SQLModel):
    """
    Wishlist response model; count is the number of entries.
    """

    items: list[WishlistItemWithProduct]
    count: int
    loading: bool = False
