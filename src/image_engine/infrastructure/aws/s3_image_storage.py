"""S3-backed implementation of StorageDriver."""

from collections.abc import Mapping
from typing import Any

from aws_lambda_powertools import Logger
from botocore.exceptions import ClientError

from image_engine.infrastructure.adapters.s3_adapter import S3Adapter, S3AdapterProtocol
from image_engine.infrastructure.config import ObjectStoreConfig
from image_engine.models.errors import (
    StorageNotFoundError,
    StorageUnavailableError,
    StorageUnwritableError,
)
from image_engine.models.image import ImageBlob, StorageKey
from image_engine.repositories.storage_repository import StorageDriver
from image_engine.utils.constants import DEFAULT_MIME_TYPE
from image_engine.utils.paths import PathScheme
from image_engine.utils.time import utc_now_iso

logger = Logger(UTC=True)

_NOT_FOUND_CODES = frozenset({"NoSuchKey", "NotFound", "404"})
_UNWRITABLE_CODES = frozenset(
    {"NoSuchBucket", "NotFound", "404", "AccessDenied", "Forbidden", "403"}
)
# The object seen by head_object is gone or was replaced before the delete
_DELETE_LOST_CODES = _NOT_FOUND_CODES | {"PreconditionFailed", "412"}


def _error_code(exc: ClientError) -> str:
    return str(exc.response.get("Error", {}).get("Code", ""))


class S3ImageStorage(StorageDriver):
    """Image storage implementation backed by Amazon S3.

    Each storage key maps to exactly one object,
    ``{key_prefix}/{owner_key}/{image_identifier}``, whose user metadata
    repeats the key so objects can be traced back without parsing the path.
    """

    def __init__(
        self,
        config: ObjectStoreConfig,
        adapter: S3AdapterProtocol | None = None,
    ) -> None:
        """Create storage using the provided S3 adapter."""
        self._config = config
        self._s3: S3AdapterProtocol = adapter or S3Adapter(config)

    def object_key(self, key: StorageKey) -> str:
        return PathScheme.object_key(self._config.key_prefix, key)

    def store(self, key: StorageKey, blob: ImageBlob) -> None:
        """Upload image bytes to S3, replacing any existing object."""
        if not blob.data:
            raise ValueError("Image content cannot be empty")

        object_key = self.object_key(key)

        logger.debug(
            "Storing image",
            extra={"key": object_key, "size": blob.size},
        )

        self._ensure_writable(object_key)

        try:
            self._s3.put_object(
                key=object_key,
                body=blob.data,
                content_type=blob.mime_type,
                metadata={
                    "owner_key": key.owner_key,
                    "image_identifier": key.image_identifier,
                    "width": str(blob.width),
                    "height": str(blob.height),
                    "stored_at": utc_now_iso(),
                },
            )
            logger.info("Image stored successfully", extra={"key": object_key})

        except ClientError as exc:
            logger.error("S3 upload failed", extra={"key": object_key})

            if _error_code(exc) in _UNWRITABLE_CODES:
                raise StorageUnwritableError(
                    message="Could not store image",
                    details={"key": object_key},
                ) from exc

            raise StorageUnavailableError(
                message="Unable to store image at this time",
                details={"key": object_key},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error storing image")
            raise StorageUnavailableError(
                message="Unable to store image at this time",
                details={"key": object_key},
            ) from exc

    def load(self, key: StorageKey) -> ImageBlob:
        """Download image bytes from S3."""
        object_key = self.object_key(key)
        logger.debug("Loading image", extra={"key": object_key})

        try:
            response = self._s3.get_object(key=object_key)
            body = response["Body"].read()
            content_type = response.get("ContentType", DEFAULT_MIME_TYPE)

        except ClientError as exc:
            if _error_code(exc) in _NOT_FOUND_CODES:
                logger.info("Image not found", extra={"key": object_key})
                raise StorageNotFoundError(
                    message="Image not found",
                    details={"key": object_key},
                ) from exc

            logger.error("S3 download failed", extra={"key": object_key})
            raise StorageUnavailableError(
                message="Unable to load image at this time",
                details={"key": object_key},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error loading image")
            raise StorageUnavailableError(
                message="Unable to load image at this time",
                details={"key": object_key},
            ) from exc

        blob = ImageBlob.from_bytes(body)
        if blob.mime_type == DEFAULT_MIME_TYPE:
            blob.mime_type = content_type

        logger.info(
            "Image loaded successfully",
            extra={"key": object_key, "size": blob.size},
        )
        return blob

    def delete(self, key: StorageKey) -> None:
        """Delete an image object from S3.

        S3 deletes are silent for missing keys, so the object is looked up
        first to report NOT_FOUND like every other driver. The delete is
        conditional on the ETag seen by that lookup; of two concurrent
        deletes only one can match, the other reports NOT_FOUND.
        """
        object_key = self.object_key(key)
        logger.debug("Deleting image", extra={"key": object_key})

        head = self._head(object_key)
        if head is None:
            raise StorageNotFoundError(
                message="Image not found",
                details={"key": object_key},
            )

        try:
            self._s3.delete_object(key=object_key, if_match=head.get("ETag"))
            logger.info("Image deleted successfully", extra={"key": object_key})

        except ClientError as exc:
            if _error_code(exc) in _DELETE_LOST_CODES:
                logger.info("Image deleted concurrently", extra={"key": object_key})
                raise StorageNotFoundError(
                    message="Image not found",
                    details={"key": object_key},
                ) from exc

            logger.error("S3 deletion failed", extra={"key": object_key})
            raise StorageUnavailableError(
                message="Unable to delete image at this time",
                details={"key": object_key},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error deleting image")
            raise StorageUnavailableError(
                message="Unable to delete image at this time",
                details={"key": object_key},
            ) from exc

    def exists(self, key: StorageKey) -> bool:
        return self._head(self.object_key(key)) is not None

    def _head(self, object_key: str) -> Mapping[str, Any] | None:
        """Object headers, or None when there is no object under `object_key`."""
        try:
            return self._s3.head_object(key=object_key)

        except ClientError as exc:
            if _error_code(exc) in _NOT_FOUND_CODES:
                return None

            logger.error("S3 head_object failed", extra={"key": object_key})
            raise StorageUnavailableError(
                message="Unable to look up image at this time",
                details={"key": object_key},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error looking up image")
            raise StorageUnavailableError(
                message="Unable to look up image at this time",
                details={"key": object_key},
            ) from exc

    def _ensure_writable(self, object_key: str) -> None:
        """Fail before writing when the bucket is missing or not accessible."""
        try:
            self._s3.head_bucket()

        except ClientError as exc:
            logger.error(
                "S3 bucket is not writable",
                extra={"key": object_key, "bucket": self._s3.bucket},
            )

            if _error_code(exc) in _UNWRITABLE_CODES:
                raise StorageUnwritableError(
                    message="Could not store image",
                    details={"key": object_key, "bucket": self._s3.bucket},
                ) from exc

            raise StorageUnavailableError(
                message="Unable to store image at this time",
                details={"key": object_key},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error checking bucket")
            raise StorageUnavailableError(
                message="Unable to store image at this time",
                details={"key": object_key},
            ) from exc
