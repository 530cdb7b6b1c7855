"""Global constants used throughout the application.

This module centralizes all magic numbers, string literals, and configuration
values that are used across multiple modules. Using constants prevents hardcoding
values and makes it easy to change them globally.
"""

from typing import Final

# ============================================================================
# Error Codes
# ============================================================================

# Key Errors
ERROR_CODE_INVALID_STORAGE_KEY = "INVALID_STORAGE_KEY"

# Storage Errors
ERROR_CODE_STORAGE_UNWRITABLE = "STORAGE_UNWRITABLE"
ERROR_CODE_STORAGE_NOT_FOUND = "STORAGE_NOT_FOUND"
ERROR_CODE_STORAGE_UNAVAILABLE = "STORAGE_UNAVAILABLE"

# Transformation Errors
ERROR_CODE_TRANSFORMATION_INVALID_PARAMS = "TRANSFORMATION_INVALID_PARAMS"
ERROR_CODE_TRANSFORMATION_BACKEND_FAILURE = "TRANSFORMATION_BACKEND_FAILURE"

# Pipeline Errors
ERROR_CODE_UNKNOWN_TRANSFORMATION = "UNKNOWN_TRANSFORMATION"
ERROR_CODE_PIPELINE_STEP_FAILED = "PIPELINE_STEP_FAILED"


# ============================================================================
# Storage Key Constraints
# ============================================================================

KEY_MIN_LENGTH = 3
KEY_PATTERN = r"^[a-zA-Z0-9_-]+$"

# Number of leading characters that get their own directory level
PATH_FANOUT_DEPTH = 3

DEFAULT_DIRECTORY_MODE = 0o775
DEFAULT_FILE_MODE = 0o664
DEFAULT_S3_KEY_PREFIX = "images"
DEFAULT_AWS_REGION = "us-east-1"


# ============================================================================
# Image Formats
# ============================================================================

DEFAULT_MIME_TYPE = "application/octet-stream"

MIME_TYPE_FORMAT_MAP: Final[dict[str, str]] = {
    "image/jpeg": "JPEG",
    "image/png": "PNG",
    "image/gif": "GIF",
    "image/webp": "WEBP",
}

FORMAT_MIME_TYPE_MAP: Final[dict[str, str]] = {
    image_format: mime for mime, image_format in MIME_TYPE_FORMAT_MAP.items()
}

# Formats the image backend can write with an interlaced/progressive scheme,
# mapped to the save option that enables it.
INTERLACE_SAVE_OPTIONS: Final[dict[str, str]] = {
    "JPEG": "progressive",
    "GIF": "interlace",
}

JPEG_QUALITY = 90


# ============================================================================
# Environment Variable Names
# ============================================================================

ENV_IMAGE_STORAGE_BACKEND = "IMAGE_STORAGE_BACKEND"
ENV_IMAGE_STORAGE_ROOT = "IMAGE_STORAGE_ROOT"
ENV_IMAGE_S3_BUCKET_NAME = "IMAGE_S3_BUCKET_NAME"
ENV_IMAGE_S3_KEY_PREFIX = "IMAGE_S3_KEY_PREFIX"
ENV_AWS_ENDPOINT_URL = "AWS_ENDPOINT_URL"
ENV_AWS_REGION = "AWS_REGION"

STORAGE_BACKEND_FILESYSTEM = "filesystem"
STORAGE_BACKEND_S3 = "s3"
