"""Progressive image transformation."""

from PIL import Image

from image_engine.models.image import ImageBlob
from image_engine.transformations.base import NoParams, Transformation


class Progressive(Transformation):
    """Encode the image interlaced (progressive JPEG, interlaced GIF).

    Pixel dimensions are unchanged. Formats the image backend cannot write
    interlaced fail with a backend error.
    """

    name = "progressive"

    def interlaced(self, blob: ImageBlob) -> bool:
        return True

    def transform(self, image: Image.Image, params: NoParams) -> Image.Image:
        return image
