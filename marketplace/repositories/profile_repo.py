# marketplace/repositories/profile_repo.py
import uuid

from marketplace.core.store import Store, parse_rows
from marketplace.models.user import Profile

TABLE = "profiles"


class ProfileRepository:
    """
    Read access to `profiles`.

    Rows are written by the sign-up trigger in the database, never by us.
    """

    def __init__(self, store: Store):
        self.store = store

    async def get_by_id(self, user_id: uuid.UUID) -> Profile | None:
        """Return the profile for a user id, or None if not found."""
        rows = await self.store.select(TABLE, filters={"id": str(user_id)})
        if not rows:
            return None
        return parse_rows(Profile, rows[:1], TABLE)[0]
