"""Crop transformation."""

from PIL import Image
from pydantic import Field, field_validator

from image_engine.models.errors import InvalidParamsError
from image_engine.models.image import ImageBlob
from image_engine.transformations.base import (
    Transformation,
    TransformationParams,
    reject_bool,
)


class CropParams(TransformationParams):
    x: int = Field(..., ge=0, description="Left edge of the crop region")
    y: int = Field(..., ge=0, description="Top edge of the crop region")
    width: int = Field(..., gt=0, description="Width of the crop region")
    height: int = Field(..., gt=0, description="Height of the crop region")

    _numbers_only = field_validator("x", "y", "width", "height", mode="before")(reject_bool)


class Crop(Transformation):
    """Reduce the image to the rectangle at (x, y) of the given size."""

    name = "crop"
    params_model = CropParams

    def check_preconditions(self, blob: ImageBlob, params: CropParams) -> None:
        if params.x + params.width > blob.width or params.y + params.height > blob.height:
            raise InvalidParamsError(
                message="Crop region is outside the image",
                transformation=self.name,
                details={
                    "region": params.model_dump(),
                    "image": {"width": blob.width, "height": blob.height},
                },
            )

    def transform(self, image: Image.Image, params: CropParams) -> Image.Image:
        return self._processor.crop(
            image,
            x=params.x,
            y=params.y,
            width=params.width,
            height=params.height,
        )
