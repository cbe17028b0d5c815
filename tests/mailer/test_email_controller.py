"""
Email Controller Tests

Tests for EmailController with MockEmailTransport showing:
- Attachment naming, resizing and ordering
- Input checks before any request
- Passing transport failures through unchanged

To run:
    pytest tests/mailer/test_email_controller.py -v
"""

import io

import pytest
from PIL import Image

from camera.interfaces.camera_interface import PhotoAsset
from mailer.constants import SendStatus
from mailer.controllers.email_controller import EmailController
from mailer.factory import EmailFactory
from mailer.implementations.http_transport import HttpEmailTransport
from mailer.implementations.mock_transport import MockEmailTransport


@pytest.fixture
def photos(jpeg_factory):
    return [
        PhotoAsset(data=jpeg_factory(2000, 1500), width=2000, height=1500),
        PhotoAsset(data=jpeg_factory(800, 600), width=800, height=600),
        PhotoAsset(data=jpeg_factory(1200, 2400), width=1200, height=2400),
    ]


@pytest.mark.unit
async def test_send_photos_builds_one_message(email_controller, mock_transport, photos):
    result = await email_controller.send_photos("guest@example.com", photos)

    assert result.success is True
    assert len(mock_transport.send_history) == 1

    message = mock_transport.last_message
    assert message.to == "guest@example.com"
    assert message.subject == email_controller.subject
    assert message.text == email_controller.text
    assert [a.filename for a in message.attachments] == ["image1.jpg", "image2.jpg", "image3.jpg"]
    assert all(a.content_type == "image/jpeg" for a in message.attachments)


@pytest.mark.unit
async def test_attachments_are_resized(email_controller, mock_transport, photos):
    await email_controller.send_photos("guest@example.com", photos)

    sizes = []
    for attachment in mock_transport.last_message.attachments:
        with Image.open(io.BytesIO(attachment.data)) as image:
            sizes.append(image.size)

    assert sizes == [(1024, 768), (800, 600), (512, 1024)]


@pytest.mark.unit
async def test_raw_bytes_are_accepted(email_controller, mock_transport, jpeg_factory):
    await email_controller.send_photos("guest@example.com", [jpeg_factory(100, 100)])

    assert mock_transport.last_message.attachments[0].filename == "image1.jpg"


@pytest.mark.unit
async def test_unreadable_photo_is_skipped_keeping_positions(email_controller, mock_transport, jpeg_factory):
    images = [jpeg_factory(100, 100), b"corrupt", jpeg_factory(100, 100)]

    await email_controller.send_photos("guest@example.com", images)

    assert [a.filename for a in mock_transport.last_message.attachments] == ["image1.jpg", "image3.jpg"]


@pytest.mark.unit
async def test_all_photos_unreadable_sends_nothing(email_controller, mock_transport):
    images = [PhotoAsset(data=b"not a jpeg", width=10, height=10)] * 3

    result = await email_controller.send_photos("guest@example.com", images)

    assert result.success is False
    assert result.status is SendStatus.INVALID_INPUT
    assert result.error_message == "No email or images to send."
    assert mock_transport.send_history == []


@pytest.mark.unit
@pytest.mark.parametrize("recipient, use_images", [("", True), ("guest@example.com", False)])
async def test_missing_recipient_or_images_sends_nothing(
    email_controller, mock_transport, photos, recipient, use_images
):
    result = await email_controller.send_photos(recipient, photos if use_images else [])

    assert result.success is False
    assert result.status is SendStatus.INVALID_INPUT
    assert result.error_message == "No email or images to send."
    assert mock_transport.send_history == []


@pytest.mark.unit
async def test_transport_failure_is_returned(email_controller, mock_transport, photos):
    mock_transport.queue_unexpected_response()

    result = await email_controller.send_photos("guest@example.com", photos)

    assert result.success is False
    assert result.status is SendStatus.UNEXPECTED_RESPONSE
    assert result.error_message == "Unexpected API response."


@pytest.mark.unit
async def test_custom_wording_and_limits(mock_transport, jpeg_factory):
    controller = EmailController(
        transport=mock_transport,
        subject="Wedding photos",
        text="See you soon",
        max_dimension=200,
        jpeg_quality=50,
    )

    await controller.send_photos("guest@example.com", [jpeg_factory(1000, 500)])

    message = mock_transport.last_message
    assert message.subject == "Wedding photos"
    assert message.text == "See you soon"
    with Image.open(io.BytesIO(message.attachments[0].data)) as image:
        assert image.size == (200, 100)


@pytest.mark.unit
async def test_close_closes_transport(email_controller, mock_transport):
    await email_controller.close()

    assert mock_transport.closed is True


# =============================================================================
# FACTORY
# =============================================================================


@pytest.mark.unit
def test_factory_mock_mode():
    assert isinstance(EmailFactory.create_transport(mode="mock"), MockEmailTransport)


@pytest.mark.unit
def test_factory_auto_uses_http_when_configured():
    # EMAIL_API_URL has a default endpoint
    assert isinstance(EmailFactory.create_transport(mode="auto"), HttpEmailTransport)
