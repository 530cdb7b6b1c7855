"""
Hierarchical storage paths for stored images.

An image owned by ``abcdef`` with identifier ``0123456789`` lives at::

    a/b/c/abcdef/0/1/2/0123456789

One directory level per leading character keeps the fan-out of any single
directory bounded (16 entries per level for hex identifiers) no matter how many
images are stored.
"""

from pathlib import Path

from image_engine.models.errors import InvalidKeyError
from image_engine.models.image import StorageKey
from image_engine.utils.constants import KEY_MIN_LENGTH, PATH_FANOUT_DEPTH


class PathScheme:
    """Deterministic mapping from a storage key to path segments."""

    @staticmethod
    def locate(
        owner_key: str,
        image_identifier: str,
        include_leaf: bool = True,
    ) -> tuple[str, ...]:
        """Return the path segments for an image.

        Args:
            owner_key: Owner of the image
            image_identifier: Image identifier
            include_leaf: Whether to append the image identifier itself as the
                final segment (the file name)

        Raises:
            InvalidKeyError: If either component is shorter than three characters
        """
        for field_name, value in (
            ("owner_key", owner_key),
            ("image_identifier", image_identifier),
        ):
            if not isinstance(value, str) or len(value) < KEY_MIN_LENGTH:
                raise InvalidKeyError(
                    message=f"{field_name} must be at least {KEY_MIN_LENGTH} characters long",
                    details={"field": field_name},
                )

        segments = (
            *owner_key[:PATH_FANOUT_DEPTH],
            owner_key,
            *image_identifier[:PATH_FANOUT_DEPTH],
        )

        if include_leaf:
            segments = (*segments, image_identifier)

        return segments

    @classmethod
    def resolve(cls, root: Path, key: StorageKey, include_leaf: bool = True) -> Path:
        """Join the segments for `key` under `root`."""
        return root.joinpath(*cls.locate(key.owner_key, key.image_identifier, include_leaf))

    @staticmethod
    def object_key(prefix: str, key: StorageKey) -> str:
        """Flat object-store key; object stores have no directory fan-out."""
        parts = [prefix.strip("/"), key.owner_key, key.image_identifier]
        return "/".join(part for part in parts if part)
