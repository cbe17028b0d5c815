"""
Attachment Image Tests

Tests for resizing and recompressing photos before they are emailed.

To run:
    pytest tests/mailer/test_image_utils.py -v
"""

import io

import pytest
from PIL import Image, UnidentifiedImageError

from mailer.utils.image_utils import encode_jpeg, prepare_attachment_image, resize_to_max_dimension


@pytest.mark.unit
@pytest.mark.parametrize(
    "size, expected",
    [
        ((4000, 3000), (1024, 768)),
        ((1500, 3000), (512, 1024)),
        ((2048, 2048), (1024, 1024)),
    ],
)
def test_resize_limits_longest_edge(size, expected):
    resized = resize_to_max_dimension(Image.new("RGB", size), 1024)

    assert resized.size == expected


@pytest.mark.unit
def test_resize_never_upscales():
    image = Image.new("RGB", (640, 480))

    assert resize_to_max_dimension(image, 1024) is image


@pytest.mark.unit
def test_encode_jpeg_converts_alpha_images():
    data = encode_jpeg(Image.new("RGBA", (10, 10), (255, 0, 0, 128)), quality=60)

    with Image.open(io.BytesIO(data)) as decoded:
        assert decoded.format == "JPEG"
        assert decoded.mode == "RGB"


@pytest.mark.unit
def test_lower_quality_gives_smaller_file():
    image = Image.effect_noise((400, 300), 64).convert("RGB")

    assert len(encode_jpeg(image, quality=30)) < len(encode_jpeg(image, quality=90))


@pytest.mark.unit
def test_prepare_attachment_image_resizes_jpeg(jpeg_factory):
    prepared = prepare_attachment_image(jpeg_factory(2000, 1000), max_dimension=1024, quality=60)

    with Image.open(io.BytesIO(prepared)) as decoded:
        assert decoded.size == (1024, 512)
        assert decoded.format == "JPEG"


@pytest.mark.unit
def test_prepare_attachment_image_accepts_png():
    buffer = io.BytesIO()
    Image.new("RGBA", (50, 40)).save(buffer, format="PNG")

    prepared = prepare_attachment_image(buffer.getvalue())

    with Image.open(io.BytesIO(prepared)) as decoded:
        assert decoded.format == "JPEG"
        assert decoded.size == (50, 40)


@pytest.mark.unit
def test_prepare_attachment_image_rejects_garbage():
    with pytest.raises(UnidentifiedImageError):
        prepare_attachment_image(b"not an image")
