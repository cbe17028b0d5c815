"""
Email Transport Implementations

Concrete transports (HTTP API and mock).
"""

from mailer.implementations.http_transport import HttpEmailTransport
from mailer.implementations.mock_transport import MockEmailTransport

__all__ = [
    "HttpEmailTransport",
    "MockEmailTransport",
]
