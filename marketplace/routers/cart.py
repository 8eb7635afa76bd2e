# marketplace/routers/cart.py
import uuid

from fastapi import APIRouter, Depends

from marketplace.dependencies import get_cart_service
from marketplace.schemas.cart import CartItemCreate, CartItemUpdate, CartSummary, Presence
from marketplace.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["Cart"])


@router.get("", response_model=CartSummary)
async def get_my_cart(service: CartService = Depends(get_cart_service)):
    """
    Get the current cart.

    Waits for a pending identity-change reload first, so the answer is
    never another user's cart.
    """
    await service.wait_until_ready()
    return service.summary()


@router.post("", response_model=CartSummary)
async def add_to_cart(
    payload: CartItemCreate,
    service: CartService = Depends(get_cart_service),
):
    """
    Add product to the cart (repeated adds accumulate).

    Returns the updated cart; problems show up in /notifications.
    """
    await service.add(payload.product_id, payload.quantity)
    return service.summary()


@router.get("/{product_id}", response_model=Presence)
async def is_in_cart(
    product_id: uuid.UUID,
    service: CartService = Depends(get_cart_service),
):
    await service.wait_until_ready()
    return Presence(product_id=product_id, present=service.is_present(product_id))


@router.patch("/{product_id}", response_model=CartSummary)
async def update_cart_item(
    product_id: uuid.UUID,
    payload: CartItemUpdate,
    service: CartService = Depends(get_cart_service),
):
    """
    Set quantity of a product in the cart.

    Quantities below 1 are ignored.
    """
    await service.set_quantity(product_id, payload.quantity)
    return service.summary()


@router.delete("/{product_id}", response_model=CartSummary)
async def remove_cart_item(
    product_id: uuid.UUID,
    service: CartService = Depends(get_cart_service),
):
    await service.remove(product_id)
    return service.summary()


@router.delete("", response_model=CartSummary)
async def clear_cart(service: CartService = Depends(get_cart_service)):
    """
    Clear the entire cart.
    """
    await service.clear()
    return service.summary()
