"""Select the active storage driver from configuration."""

import os
from collections.abc import Mapping

from aws_lambda_powertools import Logger

from image_engine.infrastructure.aws.s3_image_storage import S3ImageStorage
from image_engine.infrastructure.config import (
    FilesystemStorageConfig,
    ObjectStoreConfig,
    StorageConfig,
)
from image_engine.infrastructure.filesystem.filesystem_image_storage import (
    FilesystemImageStorage,
)
from image_engine.repositories.storage_repository import StorageDriver
from image_engine.utils.constants import (
    DEFAULT_AWS_REGION,
    DEFAULT_S3_KEY_PREFIX,
    ENV_AWS_ENDPOINT_URL,
    ENV_AWS_REGION,
    ENV_IMAGE_S3_BUCKET_NAME,
    ENV_IMAGE_S3_KEY_PREFIX,
    ENV_IMAGE_STORAGE_BACKEND,
    ENV_IMAGE_STORAGE_ROOT,
    STORAGE_BACKEND_FILESYSTEM,
    STORAGE_BACKEND_S3,
)

logger = Logger(UTC=True)


def load_storage_config(environ: Mapping[str, str] | None = None) -> StorageConfig:
    """Build the storage configuration from environment variables.

    Raises:
        RuntimeError: If a required variable is not set or the backend is unknown
        pydantic.ValidationError: If a value is invalid
    """
    env = os.environ if environ is None else environ
    backend = env.get(ENV_IMAGE_STORAGE_BACKEND, STORAGE_BACKEND_FILESYSTEM).strip().lower()

    if backend == STORAGE_BACKEND_FILESYSTEM:
        root = env.get(ENV_IMAGE_STORAGE_ROOT)
        if not root:
            raise RuntimeError(f"{ENV_IMAGE_STORAGE_ROOT} environment variable is not set")
        return FilesystemStorageConfig(root_directory=root)

    if backend == STORAGE_BACKEND_S3:
        bucket_name = env.get(ENV_IMAGE_S3_BUCKET_NAME)
        if not bucket_name:
            raise RuntimeError(f"{ENV_IMAGE_S3_BUCKET_NAME} environment variable is not set")
        return ObjectStoreConfig(
            connection_target=env.get(ENV_AWS_ENDPOINT_URL),
            collection_name=bucket_name,
            region_name=env.get(ENV_AWS_REGION) or DEFAULT_AWS_REGION,
            key_prefix=env.get(ENV_IMAGE_S3_KEY_PREFIX, DEFAULT_S3_KEY_PREFIX),
        )

    raise RuntimeError(
        f"Unsupported {ENV_IMAGE_STORAGE_BACKEND} '{backend}'. "
        f"Expected '{STORAGE_BACKEND_FILESYSTEM}' or '{STORAGE_BACKEND_S3}'"
    )


def create_storage_driver(config: StorageConfig | None = None) -> StorageDriver:
    """Return the storage driver for `config` (or the environment)."""
    config = config or load_storage_config()

    if isinstance(config, FilesystemStorageConfig):
        logger.info(
            "Using filesystem storage",
            extra={"root": str(config.root_directory)},
        )
        return FilesystemImageStorage(config)

    logger.info(
        "Using S3 storage",
        extra={"bucket": config.collection_name, "endpoint": config.connection_target},
    )
    return S3ImageStorage(config)
