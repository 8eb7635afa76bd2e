# marketplace/models/user.py
import uuid
from datetime import datetime

from sqlmodel import SQLModel, Field


class Identity(SQLModel):
    """
    The authenticated user reference every cart/wishlist row is scoped to.

    Identity:
      - id: Supabase auth.users.id (the JWT "sub")

    Two identities are the same user iff their ids match.
    """

    id: uuid.UUID
    email: str | None = None


class Profile(SQLModel):
    """
    Public profile row (`profiles` table).

    Created by a database trigger from the metadata passed at sign-up;
    the storefront only reads it. Sellers' name and phone come from here.
    """

    id: uuid.UUID = Field(description="Matches Supabase auth.users.id")
    name: str
    phone: str
    email: str
    created_at: datetime
    updated_at: datetime
