"""
HTTP Email Transport Implementation

Sends an email by POSTing a multipart form to the serverless email API.
One request per message: recipient, subject and body as form fields,
each photo as an `attachments` file part.

Response handling:
    200 + {"message": "Email sent successfully!"}  -> success
    200 + anything else (or unparsable body)       -> unexpected response
    non-200                                         -> HTTP error
    connection/timeout errors                       -> network error
"""

import asyncio
import logging
import time
from typing import Optional

import aiohttp

from config.settings import EMAIL_API_URL, EMAIL_SUCCESS_MESSAGE, HTTP_TIMEOUT
from mailer.constants import (
    FIELD_ATTACHMENTS,
    FIELD_SUBJECT,
    FIELD_TEXT,
    FIELD_TO,
    HTTP_ERROR_MESSAGE,
    NETWORK_ERROR_MESSAGE,
    RESPONSE_MESSAGE_KEY,
    UNEXPECTED_RESPONSE_MESSAGE,
    SendStatus,
)
from mailer.interfaces.transport_interface import (
    EmailMessage,
    EmailTransportInterface,
    SendResult,
    TransportError,
)


class HttpEmailTransport(EmailTransportInterface):
    """
    Email transport using the HTTP email API (aiohttp).

    The ClientSession is created on first send, inside the running loop,
    and reused until close().

    Usage:
        transport = HttpEmailTransport()
        result = await transport.send(message)
        await transport.close()
    """

    def __init__(
        self,
        api_url: str = EMAIL_API_URL,
        timeout: float = HTTP_TIMEOUT,
        success_message: str = EMAIL_SUCCESS_MESSAGE,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        """
        Initialize HTTP transport.

        Args:
            api_url: Endpoint receiving the multipart POST
            timeout: Total request timeout in seconds
            success_message: `message` value the API returns on success
            session: Existing ClientSession (not closed by this transport)
        """
        self.logger = logging.getLogger(__name__)
        self.api_url = api_url
        self.timeout = timeout
        self.success_message = success_message

        self._session = session
        self._owns_session = session is None

        self.logger.info(f"HTTP Email Transport initialized (endpoint: {api_url})")

    async def send(self, message: EmailMessage) -> SendResult:
        start_time = time.time()

        try:
            http_status = await self._post(message)
            return SendResult(
                success=True,
                status=SendStatus.SUCCESS,
                http_status=http_status,
                duration=time.time() - start_time,
            )

        except TransportError as e:
            self.logger.error(f"Email API request failed: {e}")
            return SendResult(
                success=False,
                status=e.status,
                error_message=str(e),
                http_status=e.http_status,
                duration=time.time() - start_time,
            )

    async def _post(self, message: EmailMessage) -> int:
        """
        POST the form and check the response.

        Returns:
            HTTP status (200)

        Raises:
            TransportError: With the user-facing message and status
        """
        form = self._build_form(message)
        session = self._get_session()

        try:
            async with session.post(self.api_url, data=form) as response:
                if response.status != 200:
                    raise TransportError(
                        HTTP_ERROR_MESSAGE.format(status=response.status),
                        status=SendStatus.HTTP_ERROR,
                        http_status=response.status,
                    )

                try:
                    body = await response.json(content_type=None)
                except ValueError:
                    body = None

        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            detail = str(e) or type(e).__name__
            raise TransportError(NETWORK_ERROR_MESSAGE.format(error=detail)) from e

        if not isinstance(body, dict) or body.get(RESPONSE_MESSAGE_KEY) != self.success_message:
            self.logger.warning(f"Unexpected API response body: {body!r}")
            raise TransportError(
                UNEXPECTED_RESPONSE_MESSAGE,
                status=SendStatus.UNEXPECTED_RESPONSE,
                http_status=200,
            )

        return 200

    def _build_form(self, message: EmailMessage) -> aiohttp.FormData:
        form = aiohttp.FormData()
        form.add_field(FIELD_TO, message.to)
        form.add_field(FIELD_SUBJECT, message.subject)
        form.add_field(FIELD_TEXT, message.text)

        for attachment in message.attachments:
            form.add_field(
                FIELD_ATTACHMENTS,
                attachment.data,
                filename=attachment.filename,
                content_type=attachment.content_type,
            )

        return form

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            )
            self._owns_session = True
        return self._session

    def is_available(self) -> bool:
        return bool(self.api_url)

    async def close(self) -> None:
        if self._session is not None and self._owns_session and not self._session.closed:
            await self._session.close()
            self.logger.debug("HTTP session closed")
        self._session = None
