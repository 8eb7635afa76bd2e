import logging
from typing import Any, Callable

import httpx
from supabase import AuthError

from marketplace.models.user import Identity

logger = logging.getLogger(__name__)

IdentityListener = Callable[[Identity | None], None]


def identity_from_session(session: Any) -> Identity | None:
    """
    Map a Supabase auth session to our Identity.

    No session (or a session without user) means "signed out".
    """
    user = getattr(session, "user", None) if session is not None else None
    if user is None:
        return None
    return Identity(id=user.id, email=user.email)


class SessionProvider:
    """
    Tracks who is signed in and tells subscribers whenever that changes.

    Wraps the Supabase auth client:
      - start(): read the persisted session, subscribe to auth events,
        publish the initial identity once.
      - every auth event republishes the identity carried by its session.

    Listeners are called synchronously on every publish, also when the
    identity did not actually change (e.g. TOKEN_REFRESHED); deciding
    whether to reload is the listener's job.
    """

    def __init__(self, auth: Any):
        self.auth = auth
        self._identity: Identity | None = None
        self._listeners: list[IdentityListener] = []
        self._subscription: Any = None

    def current_identity(self) -> Identity | None:
        return self._identity

    def on_identity_change(self, callback: IdentityListener) -> Callable[[], None]:
        """
        Subscribe to identity changes; returns an unsubscribe callable.
        """
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    async def start(self) -> None:
        try:
            session = await self.auth.get_session()
        except (AuthError, httpx.HTTPError) as e:
            logger.error(f"Error reading persisted session: {e}")
            session = None

        self._subscription = self.auth.on_auth_state_change(self._on_auth_event)
        self._publish(identity_from_session(session))

    async def close(self) -> None:
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None
        self._listeners.clear()

    def _on_auth_event(self, event: Any, session: Any) -> None:
        logger.debug(f"Auth event: {event}")
        self._publish(identity_from_session(session))

    def _publish(self, identity: Identity | None) -> None:
        self._identity = identity
        for listener in list(self._listeners):
            listener(identity)
