"""Resize transformation."""

from PIL import Image
from pydantic import Field, field_validator, model_validator

from image_engine.transformations.base import (
    Transformation,
    TransformationParams,
    reject_bool,
)


class ResizeParams(TransformationParams):
    width: int | None = Field(None, gt=0)
    height: int | None = Field(None, gt=0)

    _numbers_only = field_validator("width", "height", mode="before")(reject_bool)

    @model_validator(mode="after")
    def require_a_dimension(self) -> "ResizeParams":
        if self.width is None and self.height is None:
            raise ValueError("Missing both width and height. You need to specify at least one of them")
        return self


def scaled_size(
    source: tuple[int, int],
    width: int | None,
    height: int | None,
) -> tuple[int, int]:
    """Fill in a missing dimension so the aspect ratio of `source` is kept."""
    source_width, source_height = source

    if width is None and height is not None:
        width = max(1, round(source_width * height / source_height))
    elif height is None and width is not None:
        height = max(1, round(source_height * width / source_width))

    if width is None or height is None:
        raise ValueError("At least one of width and height is required")

    return width, height


class Resize(Transformation):
    """Resize to the given size; a missing dimension keeps the aspect ratio."""

    name = "resize"
    params_model = ResizeParams

    def transform(self, image: Image.Image, params: ResizeParams) -> Image.Image:
        width, height = scaled_size(image.size, params.width, params.height)
        return self._processor.resize(image, width=width, height=height)
