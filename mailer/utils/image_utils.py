"""
Image Utilities

Shrinks captured photos before they are attached to an email.
"""

import io
import logging

from PIL import Image

from config.settings import ATTACHMENT_JPEG_QUALITY, ATTACHMENT_MAX_DIMENSION

logger = logging.getLogger(__name__)


def resize_to_max_dimension(image: Image.Image, max_dimension: int = ATTACHMENT_MAX_DIMENSION) -> Image.Image:
    """
    Scale an image so its longest edge is at most `max_dimension`.

    Aspect ratio is preserved. Images already within the limit are
    returned unchanged (never upscaled).

    Example:
        resized = resize_to_max_dimension(Image.new("RGB", (4000, 3000)))
        resized.size  # (1024, 768)
    """
    width, height = image.size
    longest = max(width, height)
    if longest <= max_dimension:
        return image

    scale = max_dimension / longest
    new_size = (max(1, round(width * scale)), max(1, round(height * scale)))
    return image.resize(new_size, Image.Resampling.LANCZOS)


def encode_jpeg(image: Image.Image, quality: int = ATTACHMENT_JPEG_QUALITY) -> bytes:
    """Encode as JPEG (converted to RGB, JPEG has no alpha)"""
    if image.mode != "RGB":
        image = image.convert("RGB")

    buffer = io.BytesIO()
    image.save(buffer, format="JPEG", quality=quality, optimize=True)
    return buffer.getvalue()


def prepare_attachment_image(
    data: bytes,
    max_dimension: int = ATTACHMENT_MAX_DIMENSION,
    quality: int = ATTACHMENT_JPEG_QUALITY,
) -> bytes:
    """
    Resize and recompress encoded image bytes for an email attachment.

    Args:
        data: Encoded image (any format Pillow reads)
        max_dimension: Longest edge after resizing
        quality: JPEG quality

    Returns:
        JPEG bytes

    Raises:
        PIL.UnidentifiedImageError: If data is not an image
    """
    with Image.open(io.BytesIO(data)) as image:
        image.load()
        resized = resize_to_max_dimension(image, max_dimension)
        encoded = encode_jpeg(resized, quality)

    logger.debug(f"Attachment prepared: {len(data)} -> {len(encoded)} bytes")
    return encoded
