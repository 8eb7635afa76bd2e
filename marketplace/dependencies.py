from fastapi import Request

from marketplace.core.container import Marketplace
from marketplace.core.notifications import Notifier
from marketplace.services.auth_service import AuthService
from marketplace.services.cart_service import CartService
from marketplace.services.product_service import ProductService
from marketplace.services.wishlist_service import WishlistService


def get_marketplace(request: Request) -> Marketplace:
    """
    FastAPI dependency returning the Marketplace built in the lifespan.

    Usage:

        from fastapi import Depends

        @router.get("/example")
        def example_endpoint(marketplace: Marketplace = Depends(get_marketplace)):
            ...
    """
    return request.app.state.marketplace


def get_cart_service(request: Request) -> CartService:
    return get_marketplace(request).cart


def get_wishlist_service(request: Request) -> WishlistService:
    return get_marketplace(request).wishlist


def get_product_service(request: Request) -> ProductService:
    return get_marketplace(request).products


def get_auth_service(request: Request) -> AuthService:
    return get_marketplace(request).auth


def get_notifier(request: Request) -> Notifier:
    return get_marketplace(request).notifier
