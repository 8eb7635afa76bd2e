# marketplace/services/product_service.py
import logging
import uuid
from typing import Sequence

from marketplace.core.config import Settings
from marketplace.core.errors import (
    MarketplaceError,
    ProductNotFound,
    RemoteFailure,
    Unauthenticated,
    ValidationFailure,
)
from marketplace.core.notifications import Notifier
from marketplace.core.session import SessionProvider
from marketplace.core.storage_utils import (
    CONTENT_TYPE_EXTENSIONS,
    ObjectStorage,
    extract_path_from_public_url,
    file_extension,
    generate_filename,
)
from marketplace.models.product import Product, ProductWithSeller
from marketplace.repositories.product_repo import ProductRepository
from marketplace.schemas.product import ImageUpload, ProductCreate

logger = logging.getLogger(__name__)


class ProductService:
    """
    Business logic for listings.

    Responsibilities:
      - listing/browsing products with their seller
      - image validation (type, size, count)
      - the upload-then-insert flow for new listings
    """

    def __init__(
        self,
        repo: ProductRepository,
        storage: ObjectStorage,
        session: SessionProvider,
        notifier: Notifier,
        settings: Settings,
    ):
        self.repo = repo
        self.storage = storage
        self.session = session
        self.notifier = notifier
        self.settings = settings

    # ----- Helpers -----

    def _validate_images(self, images: Sequence[ImageUpload]) -> None:
        if not images:
            raise ValidationFailure("At least one image is required")

        if len(images) > self.settings.MAX_PRODUCT_IMAGES:
            raise ValidationFailure(
                f"Maximum {self.settings.MAX_PRODUCT_IMAGES} images allowed"
            )

        for image in images:
            label = image.filename or "image"
            if image.content_type not in CONTENT_TYPE_EXTENSIONS:
                raise ValidationFailure(f"{label} is not a valid image file")
            if len(image.data) > self.settings.MAX_IMAGE_BYTES:
                limit_mb = self.settings.MAX_IMAGE_BYTES // (1024 * 1024)
                raise ValidationFailure(f"{label} exceeds {limit_mb}MB limit")

    async def _discard_uploads(self, urls: list[str]) -> None:
        """
        Best-effort cleanup of images whose product row never got written.
        """
        paths = [
            path
            for path in (
                extract_path_from_public_url(url, self.settings.PRODUCT_IMAGES_BUCKET)
                for url in urls
            )
            if path
        ]
        if not paths:
            return
        try:
            await self.storage.remove(paths)
        except RemoteFailure as e:
            logger.warning(f"Could not remove orphaned uploads {paths}: {e}")

    # ----- Products -----

    async def list_products(self) -> list[ProductWithSeller]:
        return await self.repo.list_with_seller()

    async def get_product(self, product_id: uuid.UUID) -> ProductWithSeller:
        product = await self.repo.get_with_seller(product_id)
        if product is None:
            raise ProductNotFound("Product not found")
        return product

    async def create_product(
        self,
        payload: ProductCreate,
        images: Sequence[ImageUpload],
    ) -> Product:
        """
        List a new product.

        Steps:
          1. Require a signed-in user.
          2. Validate the images (1-5, JPEG/PNG/WEBP, <= 5MB each).
          3. Generate the product id.
          4. Upload each image to <user_id>/<product_id>/<ms>-<i>.<ext>.
          5. Insert the products row with the public URLs, in order.

        Notifies success or failure, and re-raises failures so the caller
        can keep the form open.

        Raises:
            Unauthenticated: nobody is signed in.
            ValidationFailure: bad image selection.
            RemoteFailure: upload or insert failed.
        """
        identity = self.session.current_identity()
        try:
            if identity is None:
                raise Unauthenticated("You must be logged in to create a product")

            self._validate_images(images)

            product_id = uuid.uuid4()
            image_urls: list[str] = []

            try:
                for index, image in enumerate(images):
                    ext = file_extension(image.filename, image.content_type)
                    path = f"{identity.id}/{product_id}/{generate_filename(index, ext)}"
                    url = await self.storage.upload(path, image.data, image.content_type)
                    image_urls.append(url)

                product = await self.repo.create(
                    product_id=product_id,
                    user_id=identity.id,
                    name=payload.name,
                    price=payload.price,
                    description=payload.description,
                    images=image_urls,
                )
            except RemoteFailure:
                await self._discard_uploads(image_urls)
                raise
        except MarketplaceError as e:
            logger.error(f"Error creating product: {e}")
            self.notifier.notify(
                "Error",
                e.message or "Failed to create product",
                "destructive",
            )
            raise

        self.notifier.notify(
            "Success!",
            "Product listed successfully",
            "success",
        )
        return product
