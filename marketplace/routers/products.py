# marketplace/routers/products.py
import uuid

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from pydantic import ValidationError

from marketplace.core.errors import ValidationFailure
from marketplace.dependencies import get_product_service
from marketplace.models.product import Product
from marketplace.schemas.product import (
    ImageUpload,
    ProductCreate,
    ProductRead,
    to_product_read,
)
from marketplace.services.product_service import ProductService

router = APIRouter(prefix="/products", tags=["Products"])


@router.get("", response_model=list[ProductRead])
async def list_products(service: ProductService = Depends(get_product_service)):
    """
    List all products, newest first, with seller contact details.

    - Public endpoint.
    """
    return [to_product_read(p) for p in await service.list_products()]


@router.get("/{product_id}", response_model=ProductRead)
async def get_product(
    product_id: uuid.UUID,
    service: ProductService = Depends(get_product_service),
):
    return to_product_read(await service.get_product(product_id))


@router.post(
    "",
    response_model=Product,
    status_code=status.HTTP_201_CREATED,
    summary="List a new product with 1-5 images",
)
async def create_product(
    name: str = Form(...),
    price: float = Form(...),
    description: str = Form(...),
    images: list[UploadFile] = File(...),
    service: ProductService = Depends(get_product_service),
):
    """
    Create a listing for the signed-in user.

    - Accepts JPEG, PNG, WEBP up to 5MB each.
    - Images are uploaded first; the product row is written last.
    """
    try:
        payload = ProductCreate(name=name, price=price, description=description)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ()))
        raise ValidationFailure(f"{field}: {first['msg']}" if field else first["msg"])

    uploads = [
        ImageUpload(
            filename=f.filename,
            content_type=f.content_type or "",
            data=await f.read(),
        )
        for f in images
    ]
    return await service.create_product(payload, uploads)
