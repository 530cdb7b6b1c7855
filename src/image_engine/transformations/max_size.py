"""Max size transformation."""

from PIL import Image
from pydantic import Field, field_validator, model_validator

from image_engine.transformations.base import (
    Transformation,
    TransformationParams,
    reject_bool,
)


class MaxSizeParams(TransformationParams):
    width: int | None = Field(None, gt=0)
    height: int | None = Field(None, gt=0)

    _numbers_only = field_validator("width", "height", mode="before")(reject_bool)

    @model_validator(mode="after")
    def require_a_dimension(self) -> "MaxSizeParams":
        if self.width is None and self.height is None:
            raise ValueError("Missing both width and height. You need to specify at least one of them")
        return self


class MaxSize(Transformation):
    """Downscale so the image fits within the given bounds.

    Images already inside the bounds are re-encoded at their current size.
    """

    name = "max_size"
    params_model = MaxSizeParams

    def transform(self, image: Image.Image, params: MaxSizeParams) -> Image.Image:
        ratios = []
        if params.width is not None:
            ratios.append(params.width / image.width)
        if params.height is not None:
            ratios.append(params.height / image.height)

        ratio = min(ratios)
        if ratio >= 1:
            return image

        return self._processor.resize(
            image,
            width=max(1, round(image.width * ratio)),
            height=max(1, round(image.height * ratio)),
        )
