"""
Mock Email Transport Implementation

Simulated transport for testing without the email API.
"""

import asyncio
import logging
import time
from collections import deque
from typing import Deque, List, Optional

from mailer.constants import (
    HTTP_ERROR_MESSAGE,
    NETWORK_ERROR_MESSAGE,
    UNEXPECTED_RESPONSE_MESSAGE,
    SendStatus,
)
from mailer.interfaces.transport_interface import (
    EmailMessage,
    EmailTransportInterface,
    SendResult,
)


class MockEmailTransport(EmailTransportInterface):
    """
    Mock email transport for testing.

    Every message passed to send() is kept in `send_history`. Results can
    be queued to script a sequence (e.g. fail once, then succeed).

    Usage:
        transport = MockEmailTransport()
        transport.queue_http_error(500)
        result = await transport.send(message)  # fails with status 500
        result = await transport.send(message)  # succeeds
    """

    def __init__(self, send_delay: float = 0.0):
        """
        Args:
            send_delay: Simulated request duration in seconds
        """
        self.logger = logging.getLogger(__name__)
        self.send_delay = send_delay

        # Track sends for testing
        self.send_history: List[EmailMessage] = []
        self.closed = False

        self._queued_results: Deque[SendResult] = deque()

        self.logger.info(f"Mock Email Transport initialized (delay: {send_delay}s)")

    async def send(self, message: EmailMessage) -> SendResult:
        start_time = time.time()
        self.send_history.append(message)

        self.logger.info(
            f"[MOCK] Sending email to {message.to} "
            f"({len(message.attachments)} attachment(s))"
        )

        if self.send_delay:
            await asyncio.sleep(self.send_delay)

        if self._queued_results:
            result = self._queued_results.popleft()
        else:
            result = SendResult(success=True, status=SendStatus.SUCCESS, http_status=200)

        result.duration = time.time() - start_time
        if result.success:
            self.logger.info("[MOCK] ✅ Email sent")
        else:
            self.logger.error(f"[MOCK] Email failed: {result.error_message}")
        return result

    def is_available(self) -> bool:
        return True

    async def close(self) -> None:
        self.closed = True

    # =========================================================================
    # TESTING HELPER METHODS
    # =========================================================================

    def queue_result(self, result: SendResult) -> None:
        self._queued_results.append(result)

    def queue_http_error(self, status: int) -> None:
        self.queue_result(
            SendResult(
                success=False,
                status=SendStatus.HTTP_ERROR,
                error_message=HTTP_ERROR_MESSAGE.format(status=status),
                http_status=status,
            )
        )

    def queue_network_error(self, detail: str = "Connection refused") -> None:
        self.queue_result(
            SendResult(
                success=False,
                status=SendStatus.NETWORK_ERROR,
                error_message=NETWORK_ERROR_MESSAGE.format(error=detail),
            )
        )

    def queue_unexpected_response(self) -> None:
        self.queue_result(
            SendResult(
                success=False,
                status=SendStatus.UNEXPECTED_RESPONSE,
                error_message=UNEXPECTED_RESPONSE_MESSAGE,
                http_status=200,
            )
        )

    @property
    def last_message(self) -> Optional[EmailMessage]:
        return self.send_history[-1] if self.send_history else None
