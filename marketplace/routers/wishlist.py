# marketplace/routers/wishlist.py
import uuid

from fastapi import APIRouter, Depends

from marketplace.dependencies import get_wishlist_service
from marketplace.schemas.cart import Presence
from marketplace.schemas.wishlist import WishlistSummary
from marketplace.services.wishlist_service import WishlistService

router = APIRouter(prefix="/wishlist", tags=["Wishlist"])


@router.get("", response_model=WishlistSummary)
async def get_my_wishlist(service: WishlistService = Depends(get_wishlist_service)):
    await service.wait_until_ready()
    return service.summary()


@router.post("/{product_id}/toggle", response_model=WishlistSummary)
async def toggle_wishlist(
    product_id: uuid.UUID,
    service: WishlistService = Depends(get_wishlist_service),
):
    """
    Add the product if absent, remove it if present.
    """
    await service.toggle(product_id)
    return service.summary()


@router.get("/{product_id}", response_model=Presence)
async def is_in_wishlist(
    product_id: uuid.UUID,
    service: WishlistService = Depends(get_wishlist_service),
):
    await service.wait_until_ready()
    return Presence(product_id=product_id, present=service.is_present(product_id))
