"""Rotate transformation."""

from PIL import Image
from pydantic import Field, field_validator

from image_engine.transformations.base import (
    Transformation,
    TransformationParams,
    reject_bool,
)


class RotateParams(TransformationParams):
    angle: float = Field(..., description="Clockwise rotation in degrees")
    bg: str = Field("000000", pattern=r"^([0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")

    _numbers_only = field_validator("angle", mode="before")(reject_bool)

    @field_validator("bg", mode="before")
    @classmethod
    def strip_hash(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().lstrip("#")
        return value


class Rotate(Transformation):
    """Rotate clockwise, growing the canvas and filling it with `bg`."""

    name = "rotate"
    params_model = RotateParams

    def transform(self, image: Image.Image, params: RotateParams) -> Image.Image:
        return self._processor.rotate(image, angle=params.angle, background=params.bg)
