"""Thin adapter around Pillow, the image-processing backend."""

from io import BytesIO
from typing import Any, Protocol

from PIL import Image, ImageOps

from image_engine.utils.constants import INTERLACE_SAVE_OPTIONS, JPEG_QUALITY

# Modes JPEG can store without conversion
_JPEG_MODES = frozenset({"RGB", "L", "CMYK"})


class ImageProcessorProtocol(Protocol):
    """Primitive image operations transformations are built from."""

    def decode(self, data: bytes) -> Image.Image: ...

    def encode(
        self,
        image: Image.Image,
        *,
        image_format: str,
        interlaced: bool = False,
    ) -> bytes: ...

    def set_interlace_scheme(self, image_format: str) -> dict[str, Any]: ...

    def crop(
        self,
        image: Image.Image,
        *,
        x: int,
        y: int,
        width: int,
        height: int,
    ) -> Image.Image: ...

    def resize(self, image: Image.Image, *, width: int, height: int) -> Image.Image: ...

    def rotate(self, image: Image.Image, *, angle: float, background: str) -> Image.Image: ...

    def flip_horizontally(self, image: Image.Image) -> Image.Image: ...

    def flip_vertically(self, image: Image.Image) -> Image.Image: ...

    def grayscale(self, image: Image.Image) -> Image.Image: ...


class PillowAdapter:
    """Low-level Pillow operations (mechanical, no error handling).

    This adapter:
    - Wraps Pillow decode/encode and pixel operations
    - Does NOT handle errors (lets them bubble up)
    - Transformations catch and translate errors
    """

    def decode(self, data: bytes) -> Image.Image:
        """Decode image bytes fully.
        Raises Pillow exceptions - caught by the transformation.
        """
        image = Image.open(BytesIO(data))
        image.load()
        return image

    def encode(
        self,
        image: Image.Image,
        *,
        image_format: str,
        interlaced: bool = False,
    ) -> bytes:
        """Encode an image in the given Pillow format (e.g. 'JPEG').
        Raises Pillow exceptions - caught by the transformation.
        """
        options: dict[str, Any] = {}

        if image_format == "JPEG":
            options["quality"] = JPEG_QUALITY
            if image.mode not in _JPEG_MODES:
                image = image.convert("RGB")

        if interlaced:
            options.update(self.set_interlace_scheme(image_format))
        elif image_format in INTERLACE_SAVE_OPTIONS:
            # GIF is interlaced by default in Pillow
            options[INTERLACE_SAVE_OPTIONS[image_format]] = False

        buffer = BytesIO()
        image.save(buffer, format=image_format, **options)
        return buffer.getvalue()

    def set_interlace_scheme(self, image_format: str) -> dict[str, Any]:
        """Return the save options that write `image_format` interlaced.

        Raises:
            ValueError: If the format cannot be written interlaced
        """
        option = INTERLACE_SAVE_OPTIONS.get(image_format)
        if option is None:
            raise ValueError(f"Interlacing is not supported for {image_format or 'unknown'} images")
        return {option: True}

    def crop(
        self,
        image: Image.Image,
        *,
        x: int,
        y: int,
        width: int,
        height: int,
    ) -> Image.Image:
        return image.crop((x, y, x + width, y + height))

    def resize(self, image: Image.Image, *, width: int, height: int) -> Image.Image:
        return image.resize((width, height), Image.Resampling.LANCZOS)

    def rotate(self, image: Image.Image, *, angle: float, background: str) -> Image.Image:
        """Rotate clockwise by `angle` degrees, filling the corners with `background`."""
        if image.mode == "P":
            image = image.convert("RGBA")
        return image.rotate(-angle, expand=True, fillcolor=f"#{background}")

    def flip_horizontally(self, image: Image.Image) -> Image.Image:
        return ImageOps.mirror(image)

    def flip_vertically(self, image: Image.Image) -> Image.Image:
        return ImageOps.flip(image)

    def grayscale(self, image: Image.Image) -> Image.Image:
        return ImageOps.grayscale(image)
