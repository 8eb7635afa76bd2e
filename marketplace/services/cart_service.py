# marketplace/services/cart_service.py
import uuid

from marketplace.core.errors import RemoteFailure
from marketplace.core.notifications import Notifier
from marketplace.models.cart import CartItemWithProduct
from marketplace.models.user import Identity
from marketplace.repositories.cart_repo import CartRepository
from marketplace.schemas.cart import CartSummary
from marketplace.services.synchronizer import Synchronizer


class CartService(Synchronizer[CartItemWithProduct]):
    """
    Keeps the signed-in user's cart in sync with `cart_items`.

    Responsibilities:
      - one entry per product: repeated adds accumulate quantity
      - quantity floor of 1 (lower values are ignored, never removed)
      - remote first: local state only changes after the store confirmed
      - new entries are re-read from the store (server id/timestamps)
      - failures become notifications, never exceptions
    """

    kind = "cart"

    def __init__(self, cart_repo: CartRepository, notifier: Notifier):
        super().__init__(notifier)
        self.cart_repo = cart_repo

    async def _fetch(self, identity: Identity) -> list[CartItemWithProduct]:
        return await self.cart_repo.list_for_user(identity.id)

    # ---- derived ----

    def count(self) -> int:
        """Total number of units in the cart."""
        return sum(item.quantity for item in self._items)

    def is_present(self, product_id: uuid.UUID) -> bool:
        return any(item.product_id == product_id for item in self._items)

    def get_item(self, product_id: uuid.UUID) -> CartItemWithProduct | None:
        for item in self._items:
            if item.product_id == product_id:
                return item
        return None

    def summary(self) -> CartSummary:
        return CartSummary(items=self.items, count=self.count(), loading=self.loading)

    # ---- mutations ----

    async def add(self, product_id: uuid.UUID, quantity: int = 1) -> None:
        """
        Add `quantity` units of a product.

        Rules:
          - quantity below 1 is ignored (same floor as set_quantity)
          - signed out => "Please login" prompt, nothing written
          - product already in cart => quantity += quantity
          - otherwise insert, then reload the whole cart
        """
        if quantity < 1:
            return

        generation = await self._settled_generation()
        async with self._lock:
            if not self._is_current(generation):
                self._session_changed()
                return

            identity = self._identity
            if identity is None:
                self.notifier.notify(
                    "Please login",
                    "You need to be logged in to add items to cart",
                    "destructive",
                )
                return

            existing = self.get_item(product_id)
            if existing is not None:
                if await self._set_quantity(
                    identity, generation, product_id, existing.quantity + quantity
                ):
                    self.notifier.notify(
                        "Cart updated",
                        "Item quantity updated in cart",
                        "success",
                    )
                return

            try:
                await self.cart_repo.create(identity.id, product_id, quantity)
            except RemoteFailure as e:
                self._failed("Error adding to cart", e, "Failed to add item to cart")
                return

            if self._is_current(generation):
                await self._load(identity)
            self.notifier.notify(
                "Added to cart",
                "Item added to your shopping cart",
                "success",
            )

    async def remove(self, product_id: uuid.UUID) -> None:
        generation = await self._settled_generation()
        async with self._lock:
            if not self._is_current(generation):
                self._session_changed()
                return

            identity = self._identity
            if identity is None:
                return

            try:
                await self.cart_repo.delete(identity.id, product_id)
            except RemoteFailure as e:
                self._failed(
                    "Error removing from cart", e, "Failed to remove item from cart"
                )
                return

            if self._is_current(generation):
                self._items = [
                    item for item in self._items if item.product_id != product_id
                ]
            self.notifier.notify(
                "Removed from cart",
                "Item removed from your shopping cart",
                "info",
            )

    async def set_quantity(self, product_id: uuid.UUID, quantity: int) -> None:
        """
        Set the quantity of a cart entry.

        Values below 1 are ignored: decrementing past 1 does not remove the
        entry, use remove() for that.
        """
        if quantity < 1:
            return

        generation = await self._settled_generation()
        async with self._lock:
            if not self._is_current(generation):
                self._session_changed()
                return

            identity = self._identity
            if identity is None:
                return
            await self._set_quantity(identity, generation, product_id, quantity)

    async def _set_quantity(
        self,
        identity: Identity,
        generation: int,
        product_id: uuid.UUID,
        quantity: int,
    ) -> bool:
        if quantity < 1:
            return False

        try:
            await self.cart_repo.update_quantity(identity.id, product_id, quantity)
        except RemoteFailure as e:
            self._failed("Error updating quantity", e, "Failed to update quantity")
            return False

        if self._is_current(generation):
            self._items = [
                item.model_copy(update={"quantity": quantity})
                if item.product_id == product_id
                else item
                for item in self._items
            ]
        return True

    async def clear(self) -> None:
        generation = await self._settled_generation()
        async with self._lock:
            if not self._is_current(generation):
                self._session_changed()
                return

            identity = self._identity
            if identity is None:
                return

            try:
                await self.cart_repo.clear_user_cart(identity.id)
            except RemoteFailure as e:
                self._failed("Error clearing cart", e, "Failed to clear cart")
                return

            if self._is_current(generation):
                self._items = []
            self.notifier.notify(
                "Cart cleared",
                "All items removed from your cart",
                "info",
            )
