import logging
from collections import deque
from datetime import datetime, timezone
from typing import Callable, Literal

from sqlmodel import SQLModel, Field

logger = logging.getLogger(__name__)

Variant = Literal["default", "success", "info", "destructive"]


class Notification(SQLModel):
    """
    A short, non-blocking message for the user (a "toast").

    Services emit these instead of raising, so the storefront stays
    interactive whatever the remote services do.
    """

    title: str
    description: str
    variant: Variant = "default"
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )


Listener = Callable[[Notification], None]


class Notifier:
    """
    Collects notifications until the presentation layer drains them and
    fans them out to live listeners.

    Only the newest `backlog` undelivered notifications are kept.
    """

    def __init__(self, backlog: int = 50):
        self._pending: deque[Notification] = deque(maxlen=backlog)
        self._listeners: list[Listener] = []

    def notify(
        self,
        title: str,
        description: str,
        variant: Variant = "default",
    ) -> Notification:
        notification = Notification(
            title=title,
            description=description,
            variant=variant,
        )

        if variant == "destructive":
            logger.warning(f"{title}: {description}")
        else:
            logger.info(f"{title}: {description}")

        self._pending.append(notification)
        for listener in list(self._listeners):
            listener(notification)
        return notification

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a listener; returns a callable that removes it again.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def drain(self) -> list[Notification]:
        """Return and forget every pending notification, oldest first."""
        drained = list(self._pending)
        self._pending.clear()
        return drained

    def pending(self) -> list[Notification]:
        return list(self._pending)
