# marketplace/schemas/product.py
from urllib.parse import quote

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field

from marketplace.models.product import ProductWithSeller


class ProductCreate(SQLModel):
    """
    Payload for listing a new product (images travel separately).

    Validation rules:
      - name: at least 3 characters
      - price: at least 0.01
      - description: at least 10 characters
    """

    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=3, max_length=255)
    price: float = Field(ge=0.01)
    description: str = Field(min_length=10)

    @field_validator("name", "description")
    @classmethod
    def not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v


class ImageUpload(SQLModel):
    """One selected image file: name, declared content type and bytes."""

    filename: str | None = None
    content_type: str
    data: bytes


class SellerContact(SQLModel):
    """
    Ways to reach the seller from the buy-now dialog.
    Links are None when the seller has no phone on file.
    """

    name: str
    phone: str
    tel_link: str | None = None
    whatsapp_link: str | None = None


class ProductRead(ProductWithSeller):
    contact: SellerContact | None = None


def seller_contact(product: ProductWithSeller) -> SellerContact | None:
    """
    Build call / WhatsApp links for a product's seller.

    WhatsApp wants the number as digits only; the message names the
    product.
    """
    if product.seller is None:
        return None

    phone = product.seller.phone
    digits = "".join(ch for ch in phone if ch.isdigit())
    text = (
        f'Hi, I\'m interested in your product "{product.name}" '
        "listed on Mini-Marketplace."
    )

    return SellerContact(
        name=product.seller.name or "Unknown Seller",
        phone=phone,
        tel_link=f"tel:{phone}" if phone else None,
        whatsapp_link=f"https://wa.me/{digits}?text={quote(text)}" if digits else None,
    )


def to_product_read(product: ProductWithSeller) -> ProductRead:
    return ProductRead(**product.model_dump(), contact=seller_contact(product))
