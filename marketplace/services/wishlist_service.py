# marketplace/services/wishlist_service.py
import uuid

from marketplace.core.errors import RemoteFailure
from marketplace.core.notifications import Notifier
from marketplace.models.user import Identity
from marketplace.models.wishlist import WishlistItemWithProduct
from marketplace.repositories.wishlist_repo import WishlistRepository
from marketplace.schemas.wishlist import WishlistSummary
from marketplace.services.synchronizer import Synchronizer


class WishlistService(Synchronizer[WishlistItemWithProduct]):
    """
    Keeps the signed-in user's wishlist in sync with `wishlist_items`.

    Presence only: toggle() is the single mutator.
    """

    kind = "wishlist"

    def __init__(self, wishlist_repo: WishlistRepository, notifier: Notifier):
        super().__init__(notifier)
        self.wishlist_repo = wishlist_repo

    async def _fetch(self, identity: Identity) -> list[WishlistItemWithProduct]:
        return await self.wishlist_repo.list_for_user(identity.id)

    def count(self) -> int:
        return len(self._items)

    def is_present(self, product_id: uuid.UUID) -> bool:
        return any(item.product_id == product_id for item in self._items)

    def summary(self) -> WishlistSummary:
        return WishlistSummary(items=self.items, count=self.count(), loading=self.loading)

    async def toggle(self, product_id: uuid.UUID) -> None:
        """
        Flip membership of a product.

        - present => delete remotely, then drop it locally
        - absent  => insert remotely, then reload the whole wishlist
        """
        generation = await self._settled_generation()
        async with self._lock:
            if not self._is_current(generation):
                self._session_changed()
                return

            identity = self._identity
            if identity is None:
                self.notifier.notify(
                    "Please login",
                    "You need to be logged in to use wishlist",
                    "destructive",
                )
                return

            try:
                if self.is_present(product_id):
                    await self.wishlist_repo.delete(identity.id, product_id)
                    if self._is_current(generation):
                        self._items = [
                            item
                            for item in self._items
                            if item.product_id != product_id
                        ]
                    self.notifier.notify(
                        "Removed from wishlist",
                        "Item removed from your wishlist",
                        "info",
                    )
                else:
                    await self.wishlist_repo.create(identity.id, product_id)
                    if self._is_current(generation):
                        await self._load(identity)
                    self.notifier.notify(
                        "Added to wishlist",
                        "Item added to your wishlist",
                        "success",
                    )
            except RemoteFailure as e:
                self._failed("Error toggling wishlist", e, "Failed to update wishlist")
