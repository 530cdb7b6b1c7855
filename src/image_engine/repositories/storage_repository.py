"""Abstract contract for image storage."""

from abc import ABC, abstractmethod

from image_engine.models.image import ImageBlob, StorageKey


class StorageDriver(ABC):
    """Contract for storing and retrieving images by storage key.

    Implementations could be S3, local disk, etc.
    Callers depend on this interface, not the implementation, and must see
    the same error kinds from every backend.
    """

    @abstractmethod
    def store(self, key: StorageKey, blob: ImageBlob) -> None:
        """Persist the blob bytes under `key`, replacing any existing image.

        Args:
            key: Storage key addressing the image
            blob: Image to persist; its bytes must not be empty

        Raises:
            ValueError: If the blob is empty
            StorageUnwritableError: If the storage target is not writable
            StorageUnavailableError: If the backend fails
        """

    @abstractmethod
    def load(self, key: StorageKey) -> ImageBlob:
        """Load the image stored under `key`.

        Raises:
            StorageNotFoundError: If no image is stored under `key`
            StorageUnavailableError: If the backend fails
        """

    @abstractmethod
    def delete(self, key: StorageKey) -> None:
        """Delete the image stored under `key`.

        Deleting twice fails the second time.

        Raises:
            StorageNotFoundError: If no image is stored under `key`
            StorageUnavailableError: If the backend fails
        """

    @abstractmethod
    def exists(self, key: StorageKey) -> bool:
        """Return whether an image is stored under `key`."""
