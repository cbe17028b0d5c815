"""
Email Transport Factory

Factory pattern for creating email transport implementations.
Same pattern as camera/factory.py and storage/factory.py.
"""

import logging
from typing import Literal

from mailer.implementations.http_transport import HttpEmailTransport
from mailer.implementations.mock_transport import MockEmailTransport
from mailer.interfaces.transport_interface import EmailTransportInterface

# Type alias for better type hints
TransportMode = Literal["auto", "real", "mock"]


class EmailFactory:
    """
    Factory for creating email transports.

    Usage:
        # Auto-detect (uses the HTTP API if an endpoint is configured)
        transport = EmailFactory.create_transport()

        # Force mock mode (useful for testing)
        transport = EmailFactory.create_transport(mode="mock")
    """

    _logger = logging.getLogger(__name__)

    @classmethod
    def create_transport(cls, mode: TransportMode = "auto") -> EmailTransportInterface:
        """
        Create an email transport instance.

        Args:
            mode: "auto" (detect), "real" (force HTTP), "mock" (force mock)

        Raises:
            RuntimeError: If mode="real" but no endpoint is configured
        """
        if mode == "mock":
            cls._logger.info("Creating Mock Email Transport (forced)")
            return MockEmailTransport()

        transport = HttpEmailTransport()

        if mode == "real":
            if not transport.is_available():
                raise RuntimeError("HTTP email transport requested but EMAIL_API_URL is empty")
            cls._logger.info("Creating HTTP Email Transport (forced)")
            return transport

        if transport.is_available():
            cls._logger.info("Creating HTTP Email Transport (auto-detected)")
            return transport

        cls._logger.warning("EMAIL_API_URL not configured, using Mock Email Transport")
        return MockEmailTransport()


def create_transport(force_mock: bool = False) -> EmailTransportInterface:
    """Quick transport creation"""
    return EmailFactory.create_transport(mode="mock" if force_mock else "auto")
