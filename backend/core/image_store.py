"""
Image Store: put(path, blob) -> publicly fetchable URL.

Paths look like `images/<epoch-millis>_<filename>`; the upload time prefix keeps
repeated uploads of the same filename apart.
"""

import asyncio
import logging
import posixpath
import time
from abc import ABC, abstractmethod
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from core.errors import ImageUploadError
from db.image import Image

logger = logging.getLogger(__name__)

IMAGE_FOLDER = "images"

EXT_TO_CONTENT_TYPE = {
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "gif": "image/gif",
    "webp": "image/webp",
    "heic": "image/heic",
    "heif": "image/heif",
    "svg": "image/svg+xml",
}


def unique_image_path(filename: str, now: Optional[float] = None) -> str:
    # keep only the basename so a client cannot write outside the folder
    base = posixpath.basename((filename or "").replace("\\", "/")) or "image"
    millis = int((time.time() if now is None else now) * 1000)
    return f"{IMAGE_FOLDER}/{millis}_{base}"


def guess_content_type(filename: str, content_type: Optional[str] = None) -> str:
    content_type = (content_type or "").strip().lower()
    if content_type and content_type != "application/octet-stream":
        return content_type
    ext = posixpath.splitext(filename or "")[1].lower().lstrip(".")
    return EXT_TO_CONTENT_TYPE.get(ext, "image/jpeg")


class ImageStore(ABC):
    @abstractmethod
    async def put(self, path: str, data: bytes, content_type: Optional[str] = None) -> str:
        ...


class DatabaseImageStore(ImageStore):
    """Keeps the blob in the images table; served back by GET /images/serve/{path}."""

    def __init__(self, db: AsyncSession, base_url: str = ""):
        self.db = db
        self.base_url = base_url.rstrip("/")

    async def put(self, path: str, data: bytes, content_type: Optional[str] = None) -> str:
        try:
            self.db.add(Image(path=path, data=data, content_type=guess_content_type(path, content_type)))
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise ImageUploadError(f"Failed to store image {path}: {e}") from e
        return f"{self.base_url}/images/serve/{path}"


class ImageKitImageStore(ImageStore):
    async def put(self, path: str, data: bytes, content_type: Optional[str] = None) -> str:
        from core.imagekit_client import upload_image_to_imagekit

        folder, filename = posixpath.split(path)
        try:
            # the SDK is blocking
            upload = await asyncio.to_thread(upload_image_to_imagekit, data, filename, folder or IMAGE_FOLDER)
        except Exception as e:
            raise ImageUploadError(f"Failed to upload image to ImageKit: {e}") from e
        return upload["url"]


def build_image_store(db: AsyncSession) -> ImageStore:
    if settings.image_store == "imagekit":
        return ImageKitImageStore()
    if settings.image_store != "database":
        logger.warning("Unknown IMAGE_STORE %r, using database", settings.image_store)
    return DatabaseImageStore(db, base_url=settings.public_base_url)
