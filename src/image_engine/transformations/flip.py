"""Flip transformations."""

from PIL import Image

from image_engine.transformations.base import NoParams, Transformation


class FlipHorizontally(Transformation):
    name = "flip_horizontally"

    def transform(self, image: Image.Image, params: NoParams) -> Image.Image:
        return self._processor.flip_horizontally(image)


class FlipVertically(Transformation):
    name = "flip_vertically"

    def transform(self, image: Image.Image, params: NoParams) -> Image.Image:
        return self._processor.flip_vertically(image)
