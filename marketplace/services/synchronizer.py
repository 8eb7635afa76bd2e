# marketplace/services/synchronizer.py
import asyncio
import logging
from typing import Any, Generic, TypeVar

from marketplace.core.errors import RemoteFailure
from marketplace.core.notifications import Notifier
from marketplace.models.user import Identity

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Marks "no identity handled yet" (distinct from the signed-out None).
_UNSET: Any = object()


class Synchronizer(Generic[T]):
    """
    Local, ordered mirror of one user's rows in a remote table.

    Identity scoping:
      - handle_identity_change() drops the local rows at once and schedules
        a reload for the new identity.
      - mutations wait for that reload before they run, so nothing is ever
        written for (or shown to) the wrong user.
      - a mutation that was issued under the previous identity and has not
        started yet is dropped; one already in flight finishes remotely but
        its result is not mirrored (the reload picks it up).

    Mutations and reloads are serialized by one asyncio.Lock per instance.
    A generation counter, bumped on every identity change, tells a running
    coroutine whether its identity is still the active one.

    Subclasses implement `_fetch(identity)`.
    """

    kind = "items"

    def __init__(self, notifier: Notifier):
        self.notifier = notifier
        self._items: list[T] = []
        self._loading = True
        self._identity: Identity | None = None
        self._seen: Any = _UNSET
        self._generation = 0
        self._lock = asyncio.Lock()
        self._reload: asyncio.Future | None = None

    # ---- read-only state ----

    @property
    def items(self) -> list[T]:
        return list(self._items)

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def identity(self) -> Identity | None:
        return self._identity

    # ---- identity scoping ----

    @staticmethod
    def _key(identity: Identity | None) -> Any:
        return identity.id if identity is not None else None

    def handle_identity_change(self, identity: Identity | None) -> None:
        """
        Session Provider callback.

        Must run inside the event loop (it schedules the reload task).
        """
        key = self._key(identity)
        if self._seen is not _UNSET and key == self._seen:
            self._identity = identity
            return

        self._seen = key
        self._identity = identity
        self._generation += 1
        self._items = []
        self._loading = identity is not None
        self._reload = asyncio.ensure_future(
            self._reload_for(self._generation, identity)
        )

    async def _reload_for(self, generation: int, identity: Identity | None) -> None:
        async with self._lock:
            if generation != self._generation:
                return  # superseded by a newer identity change
            await self._load(identity)

    async def wait_until_ready(self) -> None:
        """Wait until no identity-change reload is pending."""
        while self._reload is not None and not self._reload.done():
            await asyncio.shield(self._reload)

    async def load(self, identity: Identity | None) -> None:
        """
        Replace local state with the remote rows of `identity`.

        - identity None => empty, not loading.
        - a different identity than the active one is handled as an
          identity change.
        - remote errors are logged and leave an empty list.
        """
        if self._key(identity) != self._seen:
            self.handle_identity_change(identity)
            await self.wait_until_ready()
            return

        await self.wait_until_ready()
        async with self._lock:
            await self._load(identity)

    async def _load(self, identity: Identity | None) -> None:
        generation = self._generation
        if identity is None:
            self._items = []
            self._loading = False
            return

        self._loading = True
        try:
            items = await self._fetch(identity)
        except RemoteFailure as e:
            logger.error(f"Error fetching {self.kind}: {e}")
            items = []

        if generation != self._generation:
            return
        self._items = items
        self._loading = False

    async def _fetch(self, identity: Identity) -> list[T]:
        raise NotImplementedError

    # ---- helpers for mutations ----

    async def _settled_generation(self) -> int:
        await self.wait_until_ready()
        return self._generation

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation

    def _session_changed(self) -> None:
        self.notifier.notify(
            "Session changed",
            "Your account changed before this action ran. Please try again.",
            "destructive",
        )

    def _failed(self, log_message: str, error: Exception, description: str) -> None:
        logger.error(f"{log_message}: {error}")
        self.notifier.notify("Error", description, "destructive")
