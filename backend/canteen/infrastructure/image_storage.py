"""Image Storage — Cloudinary uploads for canteen and menu images.

Invariants:
    - Only jpeg/jpg/png/webp accepted, checked by extension AND content type
    - Files above max_bytes rejected before any upload
    - SDK calls run in a worker thread; failures surface as ImageStorageError
    - Images stored under <root_folder>/<ImageFolder>
"""

import asyncio
import logging
import os
from dataclasses import dataclass
from typing import Protocol

import cloudinary
import cloudinary.uploader
from fastapi import UploadFile

from canteen.core.domain_types import ImageFolder
from canteen.core.errors import ImageStorageError, RequestValidationFailed

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = frozenset({".jpeg", ".jpg", ".png", ".webp"})
ALLOWED_CONTENT_TYPES = frozenset({
    "image/jpeg", "image/jpg", "image/png", "image/webp",
})


@dataclass(frozen=True)
class StoredImage:
    url: str
    public_id: str


class ImageStorage(Protocol):
    async def upload(self, upload: UploadFile, folder: ImageFolder) -> StoredImage: ...

    async def delete(self, public_id: str) -> None: ...


def validate_image(filename: str | None, content_type: str | None, size: int, max_bytes: int):
    """Raise RequestValidationFailed for disallowed or oversized images."""
    ext = os.path.splitext(filename or "")[1].lower()
    if ext not in ALLOWED_EXTENSIONS or (content_type or "").lower() not in ALLOWED_CONTENT_TYPES:
        raise RequestValidationFailed(
            "Only image files (jpeg, jpg, png, webp) are allowed!", field="image",
        )
    if size > max_bytes:
        raise RequestValidationFailed(
            f"Image exceeds the {max_bytes // 1_000_000} MB limit", field="image",
            details={"size": size, "maxBytes": max_bytes},
        )


async def read_validated(upload: UploadFile, max_bytes: int) -> bytes:
    data = await upload.read()
    validate_image(upload.filename, upload.content_type, len(data), max_bytes)
    return data


class CloudinaryImageStorage:
    """ImageStorage backed by the Cloudinary SDK."""

    def __init__(
        self, cloud_name: str, api_key: str, api_secret: str,
        root_folder: str, max_bytes: int,
    ):
        cloudinary.config(
            cloud_name=cloud_name, api_key=api_key, api_secret=api_secret,
            secure=True,
        )
        self.root_folder = root_folder
        self.max_bytes = max_bytes

    async def upload(self, upload: UploadFile, folder: ImageFolder) -> StoredImage:
        data = await read_validated(upload, self.max_bytes)
        target = f"{self.root_folder}/{folder.value}"
        try:
            result = await asyncio.to_thread(
                cloudinary.uploader.upload, data,
                folder=target, resource_type="image",
            )
        except Exception as e:
            logger.error(f"Cloudinary upload to {target} failed: {e}")
            raise ImageStorageError(str(e), "upload")
        return StoredImage(url=result["secure_url"], public_id=result["public_id"])

    async def delete(self, public_id: str) -> None:
        try:
            await asyncio.to_thread(cloudinary.uploader.destroy, public_id)
        except Exception as e:
            logger.error(f"Cloudinary delete of {public_id} failed: {e}")
            raise ImageStorageError(str(e), "delete")
