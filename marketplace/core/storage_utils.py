import logging
import time
from typing import Protocol, Sequence

import httpx
from supabase import AsyncClient, StorageException

from marketplace.core.errors import RemoteFailure

logger = logging.getLogger(__name__)

CONTENT_TYPE_EXTENSIONS: dict[str, str] = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
}


class ObjectStorage(Protocol):
    async def upload(self, path: str, data: bytes, content_type: str) -> str: ...

    async def remove(self, paths: Sequence[str]) -> None: ...


class SupabaseStorage:
    """
    Object storage on a Supabase Storage bucket.

    Uploads never overwrite (`upsert: false`): every listing photo gets a
    fresh path, so a clash means something is wrong.
    """

    def __init__(self, client: AsyncClient, bucket: str):
        self.client = client
        self.bucket = bucket

    async def upload(self, path: str, data: bytes, content_type: str) -> str:
        """
        Upload raw bytes and return the object's public URL.

        Raises:
            RemoteFailure: if Storage rejects the upload.
        """
        bucket = self.client.storage.from_(self.bucket)
        try:
            await bucket.upload(
                path,
                data,
                {
                    "content-type": content_type,
                    "cache-control": "3600",
                    "upsert": "false",
                },
            )
            return await bucket.get_public_url(path)
        except (StorageException, httpx.HTTPError) as e:
            logger.error(f"Upload of {path} to {self.bucket} failed: {e}")
            raise RemoteFailure(f"Failed to upload file: {e}") from e

    async def remove(self, paths: Sequence[str]) -> None:
        # Storage expects a list of object paths relative to the bucket.
        try:
            await self.client.storage.from_(self.bucket).remove(list(paths))
        except (StorageException, httpx.HTTPError) as e:
            logger.error(f"Removing {len(paths)} object(s) from {self.bucket} failed: {e}")
            raise RemoteFailure(f"Failed to delete file: {e}") from e


def extract_path_from_public_url(url: str, bucket: str) -> str | None:
    """
    Given a public URL, extract the object path relative to the bucket.

    Example:
        https://<proj>.supabase.co/storage/v1/object/public/product-images/u/p/1-0.png
        -> 'u/p/1-0.png'
    """
    marker = f"/storage/v1/object/public/{bucket}/"
    idx = url.find(marker)
    if idx == -1:
        return None
    return url[idx + len(marker) :]


def file_extension(filename: str | None, content_type: str) -> str:
    """
    Extension for an uploaded file: taken from its name when it has one,
    otherwise derived from the content type.
    """
    if filename and "." in filename:
        ext = filename.rsplit(".", 1)[1].strip().lower()
        if ext:
            return ext
    return CONTENT_TYPE_EXTENSIONS.get(content_type, "bin")


def generate_filename(index: int, ext: str) -> str:
    """
    Filename for the index-th image of one upload batch.

    Returns:
        A filename like "1700000000000-0.png" (epoch milliseconds + index).
    """
    return f"{int(time.time() * 1000)}-{index}.{ext}"
