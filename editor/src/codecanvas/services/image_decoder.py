"""Decoding of uploaded overlay images."""

import io
import logging
from dataclasses import dataclass

from PIL import Image

from ..errors import ImageDecodeError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DecodedImage:
    """Fully loaded RGBA bitmap plus its natural pixel size."""
    bitmap: Image.Image
    natural_width: int
    natural_height: int

    @property
    def aspect_ratio(self):
        return self.natural_height / self.natural_width


def decode_image(data):
    """Decode image file bytes into an RGBA bitmap.

    Args:
        data: Raw file contents (PNG, JPEG, WEBP, ...)

    Returns:
        DecodedImage

    Raises:
        ImageDecodeError: If the bytes are not a readable, non-empty image
    """
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise ImageDecodeError(f"Expected image bytes, got {type(data).__name__}")

    try:
        with Image.open(io.BytesIO(bytes(data))) as img:
            img.load()
            bitmap = img.convert('RGBA')
    except (OSError, SyntaxError, ValueError, Image.DecompressionBombError) as e:
        raise ImageDecodeError(f"Cannot decode image: {e}") from e

    width, height = bitmap.size
    if width <= 0 or height <= 0:
        raise ImageDecodeError(f"Image has no pixels ({width}x{height})")

    logger.debug("Decoded %dx%d image", width, height)
    return DecodedImage(bitmap, width, height)
