"""Export encoding: rendered surfaces to image file bytes."""

import io
import logging

from PIL import Image

from ..errors import UnsupportedFormatError
from ..constants import (
    RASTER_EXPORT_FORMATS, VECTOR_EXPORT_FORMATS, JPEG_QUALITY, EXPORT_MATTE_COLOR
)

logger = logging.getLogger(__name__)


def normalize_format(fmt):
    """Lower-case a format name and strip a leading dot ('.PNG' -> 'png').

    Raises:
        UnsupportedFormatError: For formats that are neither raster nor vector
    """
    name = str(fmt).strip().lower().lstrip('.')
    if name not in RASTER_EXPORT_FORMATS and name not in VECTOR_EXPORT_FORMATS:
        supported = ', '.join(sorted(set(RASTER_EXPORT_FORMATS) | set(VECTOR_EXPORT_FORMATS)))
        raise UnsupportedFormatError(f"Unsupported export format '{fmt}' (supported: {supported})")
    return name


def is_vector_format(fmt):
    return normalize_format(fmt) in VECTOR_EXPORT_FORMATS


def export_scale(target_pixel_size, logical_size):
    """Scale factor that makes the logical width target_pixel_size pixels wide."""
    if target_pixel_size <= 0:
        raise ValueError(f"Export size must be positive, got {target_pixel_size}")
    return target_pixel_size / logical_size[0]


def encode_image(image, fmt, matte=EXPORT_MATTE_COLOR):
    """Encode an RGBA surface in a raster format.

    Formats without alpha (JPEG, BMP) are flattened onto the matte colour.

    Args:
        image: PIL RGBA image
        fmt: Raster format name ('png', 'jpeg', 'webp', 'bmp')
        matte: RGB background for formats without alpha

    Returns:
        bytes
    """
    name = normalize_format(fmt)
    pil_format = RASTER_EXPORT_FORMATS.get(name)
    if pil_format is None:
        raise UnsupportedFormatError(f"'{name}' is not a raster format")

    save_kwargs = {}
    if pil_format in ('JPEG', 'BMP'):
        flat = Image.new('RGB', image.size, tuple(matte))
        flat.paste(image, mask=image.getchannel('A'))
        image = flat
    if pil_format == 'JPEG':
        save_kwargs['quality'] = JPEG_QUALITY
    elif pil_format == 'WEBP':
        save_kwargs['lossless'] = True

    buffer = io.BytesIO()
    image.save(buffer, pil_format, **save_kwargs)
    data = buffer.getvalue()
    logger.debug("Encoded %dx%d %s (%d bytes)", image.size[0], image.size[1], name, len(data))
    return data
