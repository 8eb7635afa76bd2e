# marketplace/models/product.py
import uuid
from datetime import datetime

from sqlmodel import SQLModel, Field


class Product(SQLModel):
    """
    Marketplace listing (`products` table).

    Owned by the user who listed it; `user_id` never changes after
    creation. `images` holds 1-5 public Storage URLs, first one is the
    cover.
    """

    id: uuid.UUID
    user_id: uuid.UUID = Field(description="Seller; FK to profiles.id")
    name: str
    price: float = Field(gt=0)
    description: str
    images: list[str] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class Seller(SQLModel):
    """Seller's public profile fields, joined from `profiles`."""

    name: str
    phone: str = ""


class ProductWithSeller(Product):
    """
    Product joined with its seller (read-time only).
    """

    seller: Seller | None = None
