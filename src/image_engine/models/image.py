"""In-memory image and storage identity models."""

import re
from dataclasses import dataclass, replace

from image_engine.models.errors import InvalidKeyError
from image_engine.utils.constants import DEFAULT_MIME_TYPE, KEY_MIN_LENGTH, KEY_PATTERN
from image_engine.utils.mime import describe_image

_KEY_RE = re.compile(KEY_PATTERN)


def validate_key_component(value: str, *, field_name: str) -> str:
    """Validate one half of a storage key.

    Raises:
        InvalidKeyError: If the value is not a string of at least three
            characters from the allowed alphabet
    """
    if not isinstance(value, str) or len(value) < KEY_MIN_LENGTH:
        raise InvalidKeyError(
            message=f"{field_name} must be at least {KEY_MIN_LENGTH} characters long",
            details={"field": field_name},
        )

    if not _KEY_RE.match(value):
        raise InvalidKeyError(
            message=f"{field_name} may only contain letters, digits, underscores and hyphens",
            details={"field": field_name},
        )

    return value


@dataclass(frozen=True)
class StorageKey:
    """Durable identity of a stored image within one storage backend."""

    owner_key: str
    image_identifier: str

    def __post_init__(self) -> None:
        validate_key_component(self.owner_key, field_name="owner_key")
        validate_key_component(self.image_identifier, field_name="image_identifier")

    def __str__(self) -> str:
        return f"{self.owner_key}/{self.image_identifier}"


@dataclass
class ImageBlob:
    """Image bytes plus the metadata derived from them.

    A blob has a single owner at a time. Transformations mutate it in place
    and flip `transformed` once they succeed; it never goes back to False.
    """

    data: bytes
    width: int = 0
    height: int = 0
    mime_type: str = DEFAULT_MIME_TYPE
    transformed: bool = False
    interlaced: bool = False

    @classmethod
    def from_bytes(cls, data: bytes) -> "ImageBlob":
        """Build a blob from raw bytes, probing dimensions, MIME type and interlacing."""
        info = describe_image(data)
        return cls(
            data=data,
            width=info.width,
            height=info.height,
            mime_type=info.mime_type,
            interlaced=info.interlaced,
        )

    @property
    def size(self) -> int:
        return len(self.data)

    def copy(self) -> "ImageBlob":
        return replace(self)

    def update(
        self,
        *,
        data: bytes,
        width: int,
        height: int,
        interlaced: bool | None = None,
    ) -> None:
        """Replace the encoded image after a successful transformation."""
        self.data = data
        self.width = width
        self.height = height
        if interlaced is not None:
            self.interlaced = interlaced
        self.transformed = True

    def assign(self, other: "ImageBlob") -> None:
        """Take over the complete state of another blob."""
        self.data = other.data
        self.width = other.width
        self.height = other.height
        self.mime_type = other.mime_type
        self.interlaced = other.interlaced
        self.transformed = self.transformed or other.transformed
