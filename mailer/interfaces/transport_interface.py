"""
Email Transport Interface

Abstract interface for email delivery implementations.
Follows Dependency Inversion Principle - the email controller depends on
this abstraction, not on the HTTP API client.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional

from mailer.constants import JPEG_CONTENT_TYPE, SendStatus


@dataclass(frozen=True)
class Attachment:
    filename: str
    data: bytes = field(repr=False)
    content_type: str = JPEG_CONTENT_TYPE


@dataclass(frozen=True)
class EmailMessage:
    """
    One outgoing email.

    Attributes:
        to: Recipient address
        subject: Subject line
        text: Plain-text body
        attachments: Files in attachment order
    """

    to: str
    subject: str
    text: str
    attachments: List[Attachment] = field(default_factory=list)


@dataclass
class SendResult:
    """
    Result of a send operation.

    Attributes:
        success: True if the API confirmed delivery
        status: Send status code
        error_message: User-facing failure description (if failed)
        http_status: HTTP status code (if a response arrived)
        duration: Time taken to send in seconds
    """

    success: bool
    status: SendStatus = SendStatus.SUCCESS
    error_message: Optional[str] = None
    http_status: Optional[int] = None
    duration: float = 0.0


class EmailTransportInterface(ABC):
    """
    Abstract base class for email transports.

    Any transport implementation (HTTP API, SMTP, mock) must implement
    these methods. send() reports every failure through SendResult.
    """

    @abstractmethod
    async def send(self, message: EmailMessage) -> SendResult:
        """
        Deliver one message (exactly one request per call).

        Args:
            message: Email to send

        Returns:
            SendResult with success status and details
        """

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the transport is configured"""

    @abstractmethod
    async def close(self) -> None:
        """Release network resources (safe to call more than once)"""


class TransportError(Exception):
    """Exception raised for transport errors"""

    def __init__(
        self,
        message: str,
        status: SendStatus = SendStatus.NETWORK_ERROR,
        http_status: Optional[int] = None,
    ):
        super().__init__(message)
        self.status = status
        self.http_status = http_status
