"""
Email Controller

High-level coordinator for emailing burst photos.
Simplifies sending for the capture session.

This follows the same pattern as the other controllers:
- Clean, simple API for the session
- Handles attachment preparation internally
- Proper error handling and logging
"""

import asyncio
import logging
import time
from typing import Optional, Sequence, Union

from PIL import UnidentifiedImageError

from camera.interfaces.camera_interface import PhotoAsset
from config.settings import (
    ATTACHMENT_FILENAME_PATTERN,
    ATTACHMENT_JPEG_QUALITY,
    ATTACHMENT_MAX_DIMENSION,
    EMAIL_SUBJECT,
    EMAIL_TEXT,
)
from mailer.constants import NO_RECIPIENT_OR_IMAGES_MESSAGE, SendStatus
from mailer.factory import create_transport
from mailer.interfaces.transport_interface import (
    Attachment,
    EmailMessage,
    EmailTransportInterface,
    SendResult,
)
from mailer.utils.image_utils import prepare_attachment_image

ImageLike = Union[PhotoAsset, bytes]


class EmailController:
    """
    High-level photo email controller.

    This class:
    - Resizes and recompresses each photo (longest edge 1024 px, JPEG q60)
    - Names attachments image1.jpg, image2.jpg, ... in burst order
    - Builds the message with the configured subject and body
    - Delegates delivery to the transport (one request per send)

    Usage:
        controller = EmailController()

        result = await controller.send_photos("guest@example.com", burst_images)
        if result.success:
            print("Sent!")
    """

    def __init__(
        self,
        transport: Optional[EmailTransportInterface] = None,
        subject: str = EMAIL_SUBJECT,
        text: str = EMAIL_TEXT,
        max_dimension: int = ATTACHMENT_MAX_DIMENSION,
        jpeg_quality: int = ATTACHMENT_JPEG_QUALITY,
    ):
        """
        Initialize email controller.

        Args:
            transport: EmailTransportInterface implementation, or None to auto-create
            subject: Subject line for every email
            text: Body for every email
            max_dimension: Longest attachment edge in pixels
            jpeg_quality: Attachment JPEG quality

        Example:
            # Custom transport (testing)
            controller = EmailController(transport=MockEmailTransport())
        """
        self.logger = logging.getLogger(__name__)

        self.transport = transport or create_transport()
        self.subject = subject
        self.text = text
        self.max_dimension = max_dimension
        self.jpeg_quality = jpeg_quality

        if not self.transport.is_available():
            self.logger.warning("Email transport initialized but not available")

        self.logger.info("Email Controller initialized")

    async def send_photos(self, recipient: str, images: Sequence[ImageLike]) -> SendResult:
        """
        Email the burst photos to a guest.

        Args:
            recipient: Validated email address
            images: PhotoAssets (or raw JPEG bytes) in capture order

        Returns:
            SendResult with success status and the user-facing error message
        """
        if not recipient or not images:
            self.logger.warning("No email recipient or captured images to send")
            return SendResult(
                success=False,
                status=SendStatus.INVALID_INPUT,
                error_message=NO_RECIPIENT_OR_IMAGES_MESSAGE,
            )

        start_time = time.time()
        message = await self.build_message(recipient, images)

        if not message.attachments:
            self.logger.warning("No readable photos to attach - email not sent")
            return SendResult(
                success=False,
                status=SendStatus.INVALID_INPUT,
                error_message=NO_RECIPIENT_OR_IMAGES_MESSAGE,
            )

        self.logger.info(
            f"Sending {len(message.attachments)} photo(s) to {recipient}",
        )

        result = await self.transport.send(message)

        if result.success:
            self.logger.info(
                f"✅ Email sent to {recipient} ({time.time() - start_time:.1f}s)",
            )
        else:
            self.logger.error(
                f"❌ Email failed: {result.error_message} (status: {result.status.value})",
            )

        return result

    async def build_message(self, recipient: str, images: Sequence[ImageLike]) -> EmailMessage:
        """Prepare attachments off the event loop and assemble the message"""
        attachments = await asyncio.to_thread(self._prepare_attachments, images)
        return EmailMessage(
            to=recipient,
            subject=self.subject,
            text=self.text,
            attachments=attachments,
        )

    def _prepare_attachments(self, images: Sequence[ImageLike]) -> list:
        attachments = []
        for index, image in enumerate(images, start=1):
            data = image.data if isinstance(image, PhotoAsset) else image
            try:
                encoded = prepare_attachment_image(data, self.max_dimension, self.jpeg_quality)
            except (UnidentifiedImageError, OSError) as e:
                # Unreadable photo is left out, the rest still go
                self.logger.warning(f"Skipping attachment {index}: {e}")
                continue

            attachments.append(
                Attachment(
                    filename=ATTACHMENT_FILENAME_PATTERN.format(index=index),
                    data=encoded,
                )
            )
        return attachments

    async def close(self) -> None:
        await self.transport.close()
