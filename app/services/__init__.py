"""Services package for the blog API."""

from .cloudinary_service import cloudinary_service, CloudinaryService
from .storage import prepare_image, put_image, store_image, replace_image, delete_image

__all__ = [
    "cloudinary_service",
    "CloudinaryService",
    "prepare_image",
    "put_image",
    "store_image",
    "replace_image",
    "delete_image",
]
