"""Global constants used throughout the application.

This module centralizes all magic numbers, string literals, and configuration
values that are used across multiple modules. Using constants prevents hardcoding
values and makes it easy to change them globally.
"""

from typing import Final

# ============================================================================
# Error Codes
# ============================================================================


# Validation Errors
ERROR_CODE_VALIDATION_FAILED = "VALIDATION_FAILED"
ERROR_CODE_UNSUPPORTED_MEDIA_TYPE = "UNSUPPORTED_MEDIA_TYPE"
ERROR_CODE_PAYLOAD_TOO_LARGE = "PAYLOAD_TOO_LARGE"

# Processing Errors
ERROR_CODE_THUMBNAIL_GENERATION_FAILED = "THUMBNAIL_GENERATION_FAILED"

# Access Errors
ERROR_CODE_FORBIDDEN = "FORBIDDEN"
ERROR_CODE_RESOURCE_NOT_FOUND = "NOT_FOUND"

# Storage Errors
ERROR_CODE_BACKEND_WRITE_FAILED = "BACKEND_WRITE_FAILED"
ERROR_CODE_BACKEND_READ_FAILED = "BACKEND_READ_FAILED"

# Startup / Internal
ERROR_CODE_CONFIGURATION = "CONFIGURATION_ERROR"
ERROR_CODE_INTERNAL_ERROR = "INTERNAL_ERROR"


# ============================================================================
# File Upload Constraints
# ============================================================================

DEFAULT_MAX_FILE_SIZE = 5 * 1024 * 1024  # 5MB in bytes

# First extension is the one used for generated file names.
MIME_TYPE_EXTENSION_MAP: Final[dict[str, tuple[str, ...]]] = {
    "image/jpeg": ("jpeg", "jpg"),
    "image/png": ("png",),
    "image/webp": ("webp",),
    "image/gif": ("gif",),
    "image/avif": ("avif",),
}

ALLOWED_MIME_TYPES: Final[frozenset[str]] = frozenset(MIME_TYPE_EXTENSION_MAP.keys())

# Pillow format names used when re-encoding thumbnails.
PILLOW_FORMAT_MAP: Final[dict[str, str]] = {
    "image/jpeg": "JPEG",
    "image/png": "PNG",
    "image/webp": "WEBP",
    "image/gif": "GIF",
    "image/avif": "AVIF",
}


# ============================================================================
# Naming / Thumbnails
# ============================================================================

THUMBNAIL_MARKER = "_thumb"
THUMBNAIL_MAX_WIDTH = 1024
THUMBNAIL_MAX_HEIGHT = 1024
FILE_NAME_PATTERN = r"^[A-Za-z0-9][A-Za-z0-9._-]*$"
MAX_FILE_NAME_LENGTH = 255


# ============================================================================
# Storage Layout
# ============================================================================

STORAGE_LOCAL = "local"
STORAGE_S3 = "s3"
SUPPORTED_STORAGE_BACKENDS: Final[frozenset[str]] = frozenset({STORAGE_LOCAL, STORAGE_S3})

DEFAULT_UPLOAD_DIR = "uploads"
THUMBNAIL_DIR_NAME = "thumbs"
DEFAULT_PUBLIC_MOUNT = "/uploads"
S3_KEY_PREFIX = "images/"
S3_OBJECT_ACL = "public-read"


# ============================================================================
# API Gateway Configuration
# ============================================================================

CORS_ORIGIN = "*"
CORS_METHODS = "GET,POST,DELETE,OPTIONS"
CORS_HEADERS = "Content-Type,Authorization,X-Api-Key"
EXPOSE_HEADERS = "Content-Type,Content-Length"
DEFAULT_CONTENT_TYPE = "application/json"

METRICS_NAMESPACE = "ImageIngest"
SERVICE_NAME = "image-ingest"

# ============================================================================
# Environment Variable Names
# ============================================================================

ENV_STORAGE = "STORAGE"
ENV_MAX_FILE_SIZE_BYTES = "MAX_FILE_SIZE_BYTES"
ENV_ADMIN_KEY = "ADMIN_KEY"
ENV_BASE_URL = "BASE_URL"
ENV_UPLOAD_DIR = "UPLOAD_DIR"
ENV_PUBLIC_MOUNT = "PUBLIC_MOUNT"
ENV_VERIFY_THUMBNAILS = "VERIFY_THUMBNAILS"
ENV_AWS_BUCKET = "AWS_BUCKET"
ENV_AWS_REGION = "AWS_REGION"
ENV_AWS_ENDPOINT_URL = "AWS_ENDPOINT_URL"
DEFAULT_AWS_REGION = "us-east-1"

# ============================================================================
# Helper Functions
# ============================================================================


def format_file_size(size_bytes: int) -> str:
    """Format file size in human-readable format.

    Args:
        size_bytes: Size in bytes

    Returns:
        Formatted file size string
    """
    size: float = float(size_bytes)

    for unit in ("B", "KB", "MB", "GB"):
        if size < 1024.0:
            return f"{size:.1f} {unit}"
        size /= 1024.0

    return f"{size:.1f} TB"
