"""Abstract contract for image transformations."""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, ClassVar, cast

from aws_lambda_powertools import Logger
from PIL import Image
from pydantic import BaseModel, ConfigDict

from image_engine.infrastructure.adapters.pillow_adapter import (
    ImageProcessorProtocol,
    PillowAdapter,
)
from image_engine.models.errors import InvalidParamsError, TransformationBackendError
from image_engine.models.image import ImageBlob
from image_engine.utils.constants import (
    DEFAULT_MIME_TYPE,
    FORMAT_MIME_TYPE_MAP,
    MIME_TYPE_FORMAT_MAP,
)
from image_engine.utils.validators import validate_params

logger = Logger(UTC=True)


def reject_bool(value: Any) -> Any:
    """Before-validator for numeric params; lax int and float accept True/False."""
    if isinstance(value, bool):
        raise ValueError("Must be a number")
    return value


class TransformationParams(BaseModel):
    """Base model for transformation parameters.

    Unknown keys are rejected, and so are NaN and infinite floats.
    """

    model_config = ConfigDict(extra="forbid", frozen=True, allow_inf_nan=False)


class NoParams(TransformationParams):
    """Parameters of transformations that take none."""


class Transformation(ABC):
    """A single named, parameterized mutation of an image blob.

    `apply` runs in three phases:

    1. Validate the raw parameters against `params_model` and check them
       against the current blob (`check_preconditions`).
    2. Decode, `transform` and re-encode through the image processor.
    3. Commit the new bytes and dimensions to the blob.

    Only phase 3 touches the blob, so a failure in phase 1 or 2 leaves it
    exactly as it was.
    """

    name: ClassVar[str]
    params_model: ClassVar[type[TransformationParams]] = NoParams

    def __init__(self, processor: ImageProcessorProtocol | None = None) -> None:
        self._processor: ImageProcessorProtocol = processor or PillowAdapter()

    def apply(self, blob: ImageBlob, params: Mapping[str, Any] | None = None) -> None:
        """Apply the transformation to `blob` in place.

        Raises:
            InvalidParamsError: If the parameters are missing, malformed or do
                not fit the blob
            TransformationBackendError: If the image processor rejects the
                operation; the original exception is kept as `cause`
        """
        parsed = self.validate(blob, params or {})

        logger.debug(
            "Applying transformation",
            extra={"transformation": self.name, "params": parsed.model_dump()},
        )

        interlaced = self.interlaced(blob)

        try:
            image = self._processor.decode(blob.data)
            image_format = image.format or MIME_TYPE_FORMAT_MAP.get(blob.mime_type, "")
            result = self.transform(image, parsed)
            data = self._processor.encode(
                result,
                image_format=image_format,
                interlaced=interlaced,
            )

        except Exception as exc:
            logger.error(
                "Image backend rejected transformation",
                extra={"transformation": self.name, "error": str(exc)},
            )
            raise TransformationBackendError(
                message=f"Unable to apply {self.name}: {exc}",
                transformation=self.name,
                cause=exc,
                details={"mime_type": blob.mime_type},
            ) from exc

        blob.update(
            data=data,
            width=result.width,
            height=result.height,
            interlaced=interlaced,
        )
        if blob.mime_type == DEFAULT_MIME_TYPE:
            blob.mime_type = FORMAT_MIME_TYPE_MAP.get(image_format, DEFAULT_MIME_TYPE)

        logger.info(
            "Transformation applied",
            extra={
                "transformation": self.name,
                "width": blob.width,
                "height": blob.height,
            },
        )

    def validate(self, blob: ImageBlob, params: Mapping[str, Any]) -> TransformationParams:
        """Validate `params` without touching the image backend.

        Raises:
            InvalidParamsError: If validation fails
        """
        ok, result = validate_params(self.params_model, params)

        if not ok:
            logger.warning(
                "Invalid transformation parameters",
                extra={"transformation": self.name, "errors": result},
            )
            raise InvalidParamsError(
                message=f"Invalid parameters for {self.name}",
                transformation=self.name,
                details={"errors": result},
            )

        parsed = cast(TransformationParams, result)
        self.check_preconditions(blob, parsed)
        return parsed

    def check_preconditions(self, blob: ImageBlob, params: Any) -> None:
        """Hook for checks that depend on the blob, e.g. its dimensions."""

    def interlaced(self, blob: ImageBlob) -> bool:
        """Whether the result should be encoded interlaced."""
        return blob.interlaced

    @abstractmethod
    def transform(self, image: Image.Image, params: Any) -> Image.Image:
        """Return the transformed image. Must not modify the blob."""
