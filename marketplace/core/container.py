from dataclasses import dataclass
from typing import Any

from marketplace.core.config import Settings
from marketplace.core.notifications import Notifier
from marketplace.core.session import SessionProvider
from marketplace.core.storage_utils import ObjectStorage, SupabaseStorage
from marketplace.core.store import Store, SupabaseStore
from marketplace.core.supabase_client import supabase_public
from marketplace.repositories.cart_repo import CartRepository
from marketplace.repositories.product_repo import ProductRepository
from marketplace.repositories.profile_repo import ProfileRepository
from marketplace.repositories.wishlist_repo import WishlistRepository
from marketplace.services.auth_service import AuthService
from marketplace.services.cart_service import CartService
from marketplace.services.product_service import ProductService
from marketplace.services.wishlist_service import WishlistService


@dataclass
class Marketplace:
    """
    Everything one storefront session needs, wired explicitly.

    Built once per process (one process = one signed-in user) and handed
    to the routers through app.state.
    """

    settings: Settings
    notifier: Notifier
    session: SessionProvider
    cart: CartService
    wishlist: WishlistService
    products: ProductService
    auth: AuthService

    async def start(self) -> None:
        """
        Subscribe the cart and wishlist to identity changes, then let the
        session publish the current identity (which triggers their load).
        """
        self.session.on_identity_change(self.cart.handle_identity_change)
        self.session.on_identity_change(self.wishlist.handle_identity_change)
        await self.session.start()

    async def close(self) -> None:
        await self.session.close()


def build_marketplace(
    settings: Settings,
    *,
    store: Store,
    storage: ObjectStorage,
    auth: Any,
) -> Marketplace:
    notifier = Notifier(backlog=settings.NOTIFICATION_BACKLOG)
    session = SessionProvider(auth)

    return Marketplace(
        settings=settings,
        notifier=notifier,
        session=session,
        cart=CartService(CartRepository(store), notifier),
        wishlist=WishlistService(WishlistRepository(store), notifier),
        products=ProductService(
            ProductRepository(store), storage, session, notifier, settings
        ),
        auth=AuthService(auth, session, ProfileRepository(store), notifier),
    )


async def connect(settings: Settings) -> Marketplace:
    """Build a Marketplace backed by the Supabase project in `settings`."""
    client = await supabase_public(settings)
    return build_marketplace(
        settings,
        store=SupabaseStore(client),
        storage=SupabaseStorage(client, settings.PRODUCT_IMAGES_BUCKET),
        auth=client.auth,
    )
