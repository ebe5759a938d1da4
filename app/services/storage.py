"""Asset storage facade: validates images and routes them to the configured backend."""

import logging
from typing import Optional, Tuple

from fastapi import UploadFile

from app.config import settings
from app.services.cloudinary_service import cloudinary_service
from app.utils.file_handler import (
    delete_local_file,
    get_file_url,
    save_local_file,
    validate_image_upload,
)

logger = logging.getLogger(__name__)

LOCAL_BACKEND = "local"
CLOUDINARY_BACKEND = "cloudinary"


def _backend() -> str:
    backend = settings.STORAGE_BACKEND.lower()
    if backend not in (LOCAL_BACKEND, CLOUDINARY_BACKEND):
        raise ValueError(f"Unsupported STORAGE_BACKEND: {settings.STORAGE_BACKEND}")
    return backend


def prepare_image(upload_file: Optional[UploadFile], kind: str) -> Tuple[bytes, str]:
    """Validate an upload without storing it. Returns (content, extension)."""
    return validate_image_upload(upload_file, kind)


def put_image(file_content: bytes, file_ext: str, kind: str) -> str:
    """Store already validated image bytes and return the public URL."""
    if _backend() == CLOUDINARY_BACKEND:
        return cloudinary_service.upload(file_content)
    return get_file_url(save_local_file(file_content, file_ext, kind))


def store_image(upload_file: Optional[UploadFile], kind: str) -> str:
    """
    Validate and store an uploaded image.

    Args:
        upload_file: The uploaded file
        kind: "avatar" or "thumbnail"

    Returns:
        str: Public URL of the stored image
    """
    file_content, file_ext = prepare_image(upload_file, kind)
    return put_image(file_content, file_ext, kind)


def replace_image(upload_file: Optional[UploadFile], kind: str, old_url: Optional[str]) -> str:
    """
    Swap a stored image for a new upload.

    The upload is validated first, then the old asset is deleted, then the new
    one is stored. Returns the new public URL.
    """
    file_content, file_ext = prepare_image(upload_file, kind)

    if old_url:
        delete_image(old_url)

    return put_image(file_content, file_ext, kind)


def delete_image(url: Optional[str]) -> bool:
    """
    Delete a stored image by its URL.

    Failures are logged and reported as False; they never abort the caller.
    """
    if not url:
        return False

    try:
        if _backend() == CLOUDINARY_BACKEND:
            return cloudinary_service.destroy(url)
        return delete_local_file(url)
    except Exception as e:
        logger.error(f"Error deleting asset {url}: {e}")
        return False
