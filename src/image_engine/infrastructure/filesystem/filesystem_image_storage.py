"""Local filesystem implementation of StorageDriver."""

import os
import tempfile
from pathlib import Path

from aws_lambda_powertools import Logger

from image_engine.infrastructure.config import FilesystemStorageConfig
from image_engine.models.errors import (
    StorageNotFoundError,
    StorageUnavailableError,
    StorageUnwritableError,
)
from image_engine.models.image import ImageBlob, StorageKey
from image_engine.repositories.storage_repository import StorageDriver
from image_engine.utils.constants import DEFAULT_FILE_MODE
from image_engine.utils.paths import PathScheme

logger = Logger(UTC=True)


class FilesystemImageStorage(StorageDriver):
    """Filesystem storage implementation.

    Images are written below the configured root directory using the
    hierarchical layout from `PathScheme`. The root itself is never created
    by the driver; it must exist and be writable.
    """

    def __init__(self, config: FilesystemStorageConfig) -> None:
        self._root = config.root_directory
        self._mode = config.directory_mode

    @property
    def root(self) -> Path:
        return self._root

    def image_path(self, key: StorageKey) -> Path:
        return PathScheme.resolve(self._root, key)

    def store(self, key: StorageKey, blob: ImageBlob) -> None:
        """Write image bytes, replacing any existing file atomically."""
        if not blob.data:
            raise ValueError("Image content cannot be empty")

        if not self._root.is_dir() or not os.access(self._root, os.W_OK):
            logger.error("Storage root is not writable", extra={"root": str(self._root)})
            raise StorageUnwritableError(
                message="Could not store image",
                details={"root": str(self._root)},
            )

        image_dir = self._make_image_dir(key)
        image_path = image_dir / key.image_identifier

        logger.debug(
            "Storing image",
            extra={"path": str(image_path), "size": blob.size},
        )

        try:
            self._write_atomic(image_path, blob.data)
        except (PermissionError, IsADirectoryError) as exc:
            logger.error("Image path is not writable", extra={"path": str(image_path)})
            raise StorageUnwritableError(
                message="Could not store image",
                details={"key": str(key)},
            ) from exc
        except OSError as exc:
            logger.exception("Failed to write image")
            raise StorageUnavailableError(
                message="Unable to store image at this time",
                details={"key": str(key)},
            ) from exc

        logger.info("Image stored successfully", extra={"path": str(image_path)})

    def load(self, key: StorageKey) -> ImageBlob:
        path = self.image_path(key)

        if not path.is_file():
            raise StorageNotFoundError(
                message="Image not found",
                details={"key": str(key)},
            )

        try:
            data = path.read_bytes()
        except FileNotFoundError as exc:
            # deleted between the check and the read
            raise StorageNotFoundError(
                message="Image not found",
                details={"key": str(key)},
            ) from exc
        except OSError as exc:
            logger.exception("Failed to read image")
            raise StorageUnavailableError(
                message="Unable to load image at this time",
                details={"key": str(key)},
            ) from exc

        logger.debug("Loaded image", extra={"path": str(path), "size": len(data)})
        return ImageBlob.from_bytes(data)

    def delete(self, key: StorageKey) -> None:
        path = self.image_path(key)

        if not path.is_file():
            raise StorageNotFoundError(
                message="Image not found",
                details={"key": str(key)},
            )

        try:
            path.unlink()
        except FileNotFoundError as exc:
            raise StorageNotFoundError(
                message="Image not found",
                details={"key": str(key)},
            ) from exc
        except OSError as exc:
            logger.exception("Failed to delete image")
            raise StorageUnavailableError(
                message="Unable to delete image at this time",
                details={"key": str(key)},
            ) from exc

        logger.info("Image deleted successfully", extra={"path": str(path)})

    def exists(self, key: StorageKey) -> bool:
        return self.image_path(key).is_file()

    def _make_image_dir(self, key: StorageKey) -> Path:
        """Create the directory chain for `key` one level at a time.

        Another writer creating the same directory concurrently is fine; only
        ending up without a directory is an error.
        """
        current = self._root
        for segment in PathScheme.locate(key.owner_key, key.image_identifier, include_leaf=False):
            current = current / segment
            try:
                current.mkdir()
                # mkdir honours the umask; apply the configured mode explicitly
                os.chmod(current, self._mode)
            except FileExistsError:
                pass
            except OSError as exc:
                logger.error("Could not create image directory", extra={"path": str(current)})
                raise StorageUnwritableError(
                    message="Could not store image",
                    details={"key": str(key)},
                ) from exc

            if not current.is_dir():
                raise StorageUnwritableError(
                    message="Could not store image",
                    details={"key": str(key), "path": str(current)},
                )

        return current

    @staticmethod
    def _write_atomic(path: Path, data: bytes) -> None:
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.")
        try:
            os.fchmod(fd, DEFAULT_FILE_MODE)
            with os.fdopen(fd, "wb") as handle:
                handle.write(data)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
