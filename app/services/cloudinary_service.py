"""Cloudinary asset storage service for post thumbnails and user avatars."""

import logging
from typing import Optional
from urllib.parse import urlparse

import cloudinary
import cloudinary.uploader

from app.config import settings

logger = logging.getLogger(__name__)


class CloudinaryService:
    """
    Service for storing images in Cloudinary.

    Handles SDK configuration from settings and provides upload and destroy
    operations. Assets live in the configured folder, so the public id of a
    stored image is always `<folder>/<basename without extension>`.
    """

    def __init__(self):
        self._initialized: bool = False

    def initialize(self) -> bool:
        """
        Configure the Cloudinary SDK with credentials from config.

        Returns:
            bool: True if configuration succeeded, False otherwise.
        """
        if self._initialized:
            logger.debug("Cloudinary already configured, skipping.")
            return True

        if not (
            settings.CLOUDINARY_CLOUD_NAME
            and settings.CLOUDINARY_API_KEY
            and settings.CLOUDINARY_API_SECRET
        ):
            logger.error("Cloudinary credentials are not configured.")
            return False

        cloudinary.config(
            cloud_name=settings.CLOUDINARY_CLOUD_NAME,
            api_key=settings.CLOUDINARY_API_KEY,
            api_secret=settings.CLOUDINARY_API_SECRET,
            secure=True,
        )
        self._initialized = True
        logger.info(f"Cloudinary configured for cloud: {settings.CLOUDINARY_CLOUD_NAME}")
        return True

    def _require_initialized(self) -> None:
        if not self.initialize():
            raise RuntimeError("Cloudinary storage is not configured")

    @staticmethod
    def public_id_from_url(url: str, folder: Optional[str] = None) -> Optional[str]:
        """Derive the public id of an asset from its delivery URL."""
        if not url:
            return None
        basename = urlparse(url).path.rstrip("/").split("/")[-1]
        stem = basename.rsplit(".", 1)[0]
        if not stem:
            return None
        return f"{folder or settings.CLOUDINARY_FOLDER}/{stem}"

    def upload(self, file_content: bytes) -> str:
        """
        Upload image bytes into the configured folder.

        Returns:
            str: HTTPS delivery URL of the stored asset
        """
        self._require_initialized()
        result = cloudinary.uploader.upload(
            file_content,
            folder=settings.CLOUDINARY_FOLDER,
            resource_type="image",
            allowed_formats=["png", "jpg", "jpeg"],
        )
        logger.info(f"Uploaded asset to Cloudinary: {result.get('public_id')}")
        return result["secure_url"]

    def destroy(self, url: str) -> bool:
        """
        Delete the asset behind a delivery URL.

        Returns:
            bool: True if Cloudinary reported the asset as deleted.
        """
        public_id = self.public_id_from_url(url)
        if not public_id:
            return False

        self._require_initialized()
        result = cloudinary.uploader.destroy(public_id)
        deleted = result.get("result") == "ok"
        if deleted:
            logger.info(f"Deleted Cloudinary asset: {public_id}")
        else:
            logger.warning(f"Cloudinary did not delete {public_id}: {result}")
        return deleted


# Singleton instance
cloudinary_service = CloudinaryService()
