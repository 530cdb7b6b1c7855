from collections.abc import Mapping
from io import BytesIO
from typing import NamedTuple

from PIL import Image

from image_engine.utils.constants import DEFAULT_MIME_TYPE

MAGIC_BYTES: Mapping[bytes, str] = {
    b"\xff\xd8\xff": "image/jpeg",
    b"\x89PNG\r\n\x1a\n": "image/png",
    b"GIF87a": "image/gif",
    b"GIF89a": "image/gif",
    b"RIFF": "image/webp",
}


class ImageInfo(NamedTuple):
    width: int
    height: int
    mime_type: str
    interlaced: bool = False


def detect_mime_type(file_data: bytes) -> str:
    for signature, mime in MAGIC_BYTES.items():
        if file_data.startswith(signature):
            return mime

    raise ValueError("Unsupported or unknown file type")


def is_interlaced(image: Image.Image) -> bool:
    """Whether an opened image was encoded progressive (JPEG) or interlaced (GIF)."""
    if image.format == "JPEG":
        return bool(image.info.get("progressive") or image.info.get("progression"))

    if image.format == "GIF" and image.tile:
        # GIF tile args are (bits, interlace, transparency)
        args = image.tile[0][3]
        return isinstance(args, tuple) and len(args) > 1 and bool(args[1])

    return False


def describe_image(file_data: bytes) -> ImageInfo:
    """Read dimensions and MIME type from an image header.

    Never raises: bytes the image backend cannot identify are reported as
    0x0 with whatever MIME type the magic bytes suggest.
    """
    try:
        with Image.open(BytesIO(file_data)) as image:
            width, height = image.size
            mime_type = Image.MIME.get(image.format or "", DEFAULT_MIME_TYPE)
            return ImageInfo(width, height, mime_type, is_interlaced(image))
    except (OSError, ValueError, Image.DecompressionBombError):
        pass

    try:
        mime_type = detect_mime_type(file_data)
    except ValueError:
        mime_type = DEFAULT_MIME_TYPE

    return ImageInfo(0, 0, mime_type)
