"""
Mailer Module

Emails burst photos to guests through the serverless email API.

Public API:
    - EmailController: Main interface for sending photos
    - EmailFactory: Create transport implementations
    - SendResult: Send operation result
    - SendStatus: Send status codes
    - is_valid_email / validate_email: Address checks for the dialog

Usage:
    from mailer import EmailController

    controller = EmailController()
    result = await controller.send_photos("guest@example.com", images)
"""

from mailer.constants import SendStatus
from mailer.controllers.email_controller import EmailController
from mailer.factory import EmailFactory, create_transport
from mailer.interfaces.transport_interface import (
    EmailMessage,
    EmailTransportInterface,
    SendResult,
    TransportError,
)
from mailer.utils.validation_utils import is_valid_email, validate_email

__all__ = [
    "EmailController",
    "EmailFactory",
    "EmailMessage",
    "EmailTransportInterface",
    "SendResult",
    "SendStatus",
    "TransportError",
    "create_transport",
    "is_valid_email",
    "validate_email",
]
