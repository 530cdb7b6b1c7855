"""Desaturate transformation."""

from PIL import Image

from image_engine.transformations.base import NoParams, Transformation


class Desaturate(Transformation):
    """Convert the image to grayscale."""

    name = "desaturate"

    def transform(self, image: Image.Image, params: NoParams) -> Image.Image:
        return self._processor.grayscale(image)
