"""Storage driver configuration.

Each backend takes a typed configuration object that is validated when it is
built, so a misconfigured deployment fails at startup rather than on the first
stored image.
"""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from image_engine.utils.constants import (
    DEFAULT_AWS_REGION,
    DEFAULT_DIRECTORY_MODE,
    DEFAULT_S3_KEY_PREFIX,
)


class FilesystemStorageConfig(BaseModel):
    """Configuration for the local filesystem driver."""

    model_config = ConfigDict(frozen=True)

    root_directory: Path = Field(
        ..., description="Base directory images are stored under"
    )
    directory_mode: int = Field(
        DEFAULT_DIRECTORY_MODE,
        ge=0,
        le=0o7777,
        description="Permission bits for created directories",
    )

    @field_validator("root_directory", mode="before")
    @classmethod
    def resolve_root_directory(cls, v: str | Path) -> Path:
        """Ensure the storage root is an absolute Path."""
        if isinstance(v, str):
            if not v.strip():
                raise ValueError("root_directory must not be empty")
            v = Path(v)
        return v.expanduser().absolute()


class ObjectStoreConfig(BaseModel):
    """Configuration for the S3 object-store driver."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    connection_target: str | None = Field(
        None, description="Endpoint URL; None uses the default AWS endpoint"
    )
    collection_name: str = Field(
        ..., min_length=3, max_length=63, description="Bucket holding the images"
    )
    region_name: str = Field(DEFAULT_AWS_REGION, min_length=1)
    key_prefix: str = Field(
        DEFAULT_S3_KEY_PREFIX, description="Prefix prepended to every object key"
    )

    @field_validator("connection_target")
    @classmethod
    def empty_target_is_default(cls, v: str | None) -> str | None:
        return v or None


StorageConfig = FilesystemStorageConfig | ObjectStoreConfig
