"""Image upload handling for local disk storage with security best practices"""
import logging
import uuid
from pathlib import Path
from typing import Dict, Optional, Set, Tuple

from fastapi import UploadFile, HTTPException, status

from app.config import settings
from app.core.exceptions import UnprocessableException

# Setup logging
logger = logging.getLogger(__name__)

# ============================================
# FILE TYPE DEFINITIONS WITH MIME VALIDATION
# ============================================

# Magic bytes signatures for file type validation
MAGIC_BYTES = {
    # JPEG: FFD8FF
    "jpeg": [b"\xff\xd8\xff"],
    # PNG: 89504E47
    "png": [b"\x89PNG\r\n\x1a\n"],
}

# Extension to magic type mapping
EXTENSION_TO_TYPE = {
    ".jpg": "jpeg",
    ".jpeg": "jpeg",
    ".png": "png",
}

ALLOWED_IMAGES: Set[str] = {".png", ".jpg", ".jpeg"}

# Upload paths mapping (relative to UPLOAD_DIR)
UPLOAD_PATHS = {
    "avatar": "avatars",
    "thumbnail": "thumbnails",
}


def max_size_for(kind: str) -> int:
    """Size limit in bytes for an upload kind."""
    limits: Dict[str, int] = {
        "avatar": settings.MAX_AVATAR_SIZE,
        "thumbnail": settings.MAX_UPLOAD_SIZE,
    }
    return limits[kind]


# ============================================
# SECURITY VALIDATION FUNCTIONS
# ============================================

def validate_magic_bytes(file_content: bytes, expected_type: str) -> bool:
    """
    Validate file content by checking magic bytes (file signature).
    This prevents uploads of other files renamed to an image extension.

    Args:
        file_content: First few bytes of the file
        expected_type: Expected file type (jpeg, png)

    Returns:
        True if magic bytes match expected type
    """
    if expected_type not in MAGIC_BYTES:
        return False

    return any(file_content.startswith(signature) for signature in MAGIC_BYTES[expected_type])


def sanitize_filename(filename: str) -> str:
    """
    Sanitize filename to prevent path traversal and other attacks.

    Args:
        filename: Original filename from upload

    Returns:
        Sanitized filename (only alphanumeric, dash, underscore, and dot)
    """
    if not filename:
        return "unnamed"

    # Get only the basename (remove any path components)
    basename = Path(filename).name

    safe_chars = set("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789-_.")
    sanitized = "".join(c if c in safe_chars else "_" for c in basename)

    # Ensure it doesn't start with a dot (hidden file)
    sanitized = sanitized.lstrip(".")

    return sanitized if sanitized else "unnamed"


def validate_path_safety(file_path: str) -> bool:
    """
    Validate that file path doesn't contain path traversal attempts.

    Args:
        file_path: File path to validate

    Returns:
        True if path is safe
    """
    if not file_path:
        return False

    dangerous_patterns = ["..", "~", "//", "\\"]
    for pattern in dangerous_patterns:
        if pattern in file_path:
            logger.warning(f"Path traversal attempt detected: {file_path}")
            return False

    if file_path.startswith("/") and not file_path.startswith("/uploads"):
        return False

    return True


def get_file_extension(filename: str) -> str:
    """Safely get file extension in lowercase."""
    if not filename:
        return ""
    return Path(filename).suffix.lower()


# ============================================
# MAIN VALIDATION FUNCTION
# ============================================

def validate_image_upload(upload_file: Optional[UploadFile], kind: str) -> Tuple[bytes, str]:
    """
    Image validation shared by every storage backend.

    Args:
        upload_file: FastAPI UploadFile object
        kind: Upload kind ("avatar" or "thumbnail")

    Returns:
        Tuple of (file_content, file_extension)

    Raises:
        HTTPException: 422 for a missing, empty, mistyped or oversize avatar,
            413 for an oversize thumbnail
    """
    if kind not in UPLOAD_PATHS:
        raise ValueError(f"Unknown upload kind: {kind}")

    if not upload_file or not upload_file.filename:
        raise UnprocessableException(_missing_message(kind))

    file_ext = get_file_extension(sanitize_filename(upload_file.filename))
    if file_ext not in ALLOWED_IMAGES:
        raise UnprocessableException(
            f"Invalid image type. Allowed formats: {', '.join(sorted(ALLOWED_IMAGES))}"
        )

    upload_file.file.seek(0)
    file_content = upload_file.file.read()
    upload_file.file.seek(0)  # Reset for potential re-read

    if len(file_content) == 0:
        raise UnprocessableException(_missing_message(kind))

    max_size = max_size_for(kind)
    if len(file_content) > max_size:
        if kind == "avatar":
            raise UnprocessableException(_missing_message(kind))
        size_mb = max_size / (1024 * 1024)
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"File too large. Maximum: {size_mb:.1f}MB"
        )

    expected_type = EXTENSION_TO_TYPE.get(file_ext)
    if expected_type and not validate_magic_bytes(file_content, expected_type):
        logger.warning(
            f"Magic bytes mismatch - filename: {upload_file.filename}, "
            f"expected_type: {expected_type}"
        )
        raise UnprocessableException("File content does not match its extension.")

    logger.info(f"Image validated: kind={kind}, size={len(file_content)} bytes")
    return file_content, file_ext


def _missing_message(kind: str) -> str:
    if kind == "avatar":
        return "Please choose an image less than 500KB"
    return "Please choose a thumbnail"


# ============================================
# LOCAL STORAGE FUNCTIONS
# ============================================

def save_local_file(file_content: bytes, file_ext: str, kind: str) -> str:
    """
    Save validated image bytes under UPLOAD_DIR.

    Returns:
        str: Relative URL path (e.g., /uploads/thumbnails/uuid.png)
    """
    subfolder = UPLOAD_PATHS[kind]
    upload_path = Path(settings.UPLOAD_DIR) / subfolder
    upload_path.mkdir(parents=True, exist_ok=True)

    unique_filename = f"{uuid.uuid4()}{file_ext}"
    file_path = upload_path / unique_filename

    try:
        with open(file_path, "wb") as f:
            f.write(file_content)
    except IOError as e:
        logger.error(f"Failed to save file: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to store the file. Please try again."
        )

    logger.info(f"File saved: {file_path}")
    return f"/uploads/{subfolder}/{unique_filename}"


def to_relative_path(file_url: str) -> str:
    """Strip PUBLIC_BASE_URL from a stored URL, leaving /uploads/..."""
    base = settings.PUBLIC_BASE_URL.rstrip("/")
    if file_url.startswith(base):
        return file_url[len(base):]
    return file_url


def delete_local_file(file_url: str) -> bool:
    """
    Safely delete a file from UPLOAD_DIR with path traversal protection.

    Args:
        file_url: Public URL or relative path (e.g., /uploads/avatars/...)

    Returns:
        True if file was deleted, False otherwise
    """
    if not file_url:
        return False

    file_path = to_relative_path(file_url)
    if not validate_path_safety(file_path):
        logger.warning(f"Unsafe file path rejected: {file_path}")
        return False

    clean_path = file_path.lstrip("/")
    if clean_path.startswith("uploads/"):
        clean_path = clean_path[len("uploads/"):]

    upload_dir_resolved = Path(settings.UPLOAD_DIR).resolve()
    resolved_path = (upload_dir_resolved / clean_path).resolve()

    if upload_dir_resolved not in resolved_path.parents:
        logger.warning(f"Path traversal blocked: {file_path} -> {resolved_path}")
        return False

    if resolved_path.is_file():
        resolved_path.unlink()
        logger.info(f"File deleted: {resolved_path}")
        return True

    return False


def get_file_url(file_path: str) -> Optional[str]:
    """
    Get public URL for a stored file.

    Args:
        file_path: Relative path like /uploads/thumbnails/...

    Returns:
        Full URL like http://localhost:8000/uploads/thumbnails/...
    """
    if not file_path:
        return None

    if not file_path.startswith("/uploads"):
        file_path = f"/uploads/{file_path.lstrip('/')}"

    return f"{settings.PUBLIC_BASE_URL.rstrip('/')}{file_path}"


def ensure_upload_dir(subdir: str = "") -> Path:
    """Ensure upload directory exists and return the path."""
    dir_path = Path(settings.UPLOAD_DIR) / subdir if subdir else Path(settings.UPLOAD_DIR)
    dir_path.mkdir(parents=True, exist_ok=True)
    return dir_path
