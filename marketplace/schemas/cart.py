# marketplace/schemas/cart.py
import uuid

from sqlmodel import SQLModel, Field

from marketplace.models.cart import CartItemWithProduct


class CartItemCreate(SQLModel):
    """
    Payload for adding to cart.
    """

    product_id: uuid.UUID
    quantity: int = Field(default=1, ge=1)


class CartItemUpdate(SQLModel):
    """
    Payload for setting the quantity of a cart item.

    Not bounded here: values below 1 are accepted and ignored by the
    cart (quantity floor).
    """

    quantity: int


class CartSummary(SQLModel):
    """
    Full cart response model.

    - items: newest first
    - count: total units (sum of quantities)
    - loading: a reload is in progress (render skeletons)
    """

    items: list[CartItemWithProduct]
    count: int
    loading: bool = False


class Presence(SQLModel):
    product_id: uuid.UUID
    present: bool
