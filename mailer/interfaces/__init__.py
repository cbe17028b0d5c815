"""
Interfaces Package

Abstract interfaces for email transport implementations.
"""

from mailer.interfaces.transport_interface import (
    Attachment,
    EmailMessage,
    EmailTransportInterface,
    SendResult,
    TransportError,
)

__all__ = [
    "Attachment",
    "EmailMessage",
    "EmailTransportInterface",
    "SendResult",
    "TransportError",
]
