# marketplace/services/auth_service.py
import logging
from typing import Any

import httpx
from supabase import AuthError

from marketplace.core.errors import RemoteFailure
from marketplace.core.notifications import Notifier
from marketplace.core.session import SessionProvider
from marketplace.models.user import Profile
from marketplace.repositories.profile_repo import ProfileRepository
from marketplace.schemas.auth import LoginPayload, SignUpPayload

logger = logging.getLogger(__name__)


class AuthService:
    """
    Sign-up / sign-in / sign-out against Supabase Auth.

    Identity changes that follow from these calls reach the cart and
    wishlist through the SessionProvider's auth-state subscription, not
    from here.
    """

    def __init__(
        self,
        auth: Any,
        session: SessionProvider,
        profile_repo: ProfileRepository,
        notifier: Notifier,
    ):
        self.auth = auth
        self.session = session
        self.profile_repo = profile_repo
        self.notifier = notifier

    def _failed(self, action: str, error: Exception, fallback: str) -> RemoteFailure:
        logger.error(f"Error during {action}: {error}")
        message = getattr(error, "message", None) or str(error) or fallback
        self.notifier.notify("Error", message, "destructive")
        return RemoteFailure(message)

    async def sign_up(self, payload: SignUpPayload) -> None:
        """
        Create the auth user. Name and phone travel as user metadata; a
        database trigger turns them into the `profiles` row.
        """
        try:
            response = await self.auth.sign_up(
                {
                    "email": payload.email,
                    "password": payload.password,
                    "options": {
                        "data": {"name": payload.name, "phone": payload.phone},
                    },
                }
            )
        except (AuthError, httpx.HTTPError) as e:
            raise self._failed("sign up", e, "Failed to create account") from e

        if getattr(response, "user", None) is None:
            raise self._failed(
                "sign up", RemoteFailure("User creation failed"), "Failed to create account"
            )

        self.notifier.notify("Success!", "Account created successfully", "success")

    async def sign_in(self, payload: LoginPayload) -> None:
        try:
            await self.auth.sign_in_with_password(
                {"email": payload.email, "password": payload.password}
            )
        except (AuthError, httpx.HTTPError) as e:
            raise self._failed("sign in", e, "Failed to sign in") from e

        self.notifier.notify("Welcome back!", "Signed in successfully", "success")

    async def sign_out(self) -> None:
        try:
            await self.auth.sign_out()
        except (AuthError, httpx.HTTPError) as e:
            raise self._failed("sign out", e, "Failed to sign out") from e

        self.notifier.notify("Signed out", "You have been signed out successfully")

    async def get_profile(self) -> Profile | None:
        """
        Profile of the signed-in user; None for guests or when it cannot
        be read (logged).
        """
        identity = self.session.current_identity()
        if identity is None:
            return None
        try:
            return await self.profile_repo.get_by_id(identity.id)
        except RemoteFailure as e:
            logger.error(f"Error fetching profile: {e}")
            return None
