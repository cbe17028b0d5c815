"""
HTTP Email Transport Tests

Runs HttpEmailTransport against a local aiohttp server standing in for
the serverless email API.

Tests show:
- Multipart form layout (fields + image attachments)
- Success detection from the JSON body
- HTTP, unexpected-body and network failures

To run:
    pytest tests/mailer/test_http_transport.py -v
"""

import asyncio

import aiohttp
import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

from mailer.constants import SendStatus
from mailer.implementations.http_transport import HttpEmailTransport
from mailer.interfaces.transport_interface import Attachment, EmailMessage

API_PATH = "/api/send-email"


class EmailApiStub:
    """Records received forms and answers with a configurable response"""

    def __init__(self):
        self.received = []
        self.status = 200
        self.body = {"message": "Email sent successfully!"}
        self.raw_text = None
        self.delay = 0.0
        self.server = None

    @property
    def url(self) -> str:
        return str(self.server.make_url(API_PATH))

    async def handle(self, request: web.Request) -> web.Response:
        form = await request.post()
        self.received.append(
            {
                "to": form["to"],
                "subject": form["subject"],
                "text": form["text"],
                "attachments": [
                    (part.filename, part.content_type, part.file.read())
                    for part in form.getall("attachments", [])
                ],
            }
        )

        if self.delay:
            await asyncio.sleep(self.delay)
        if self.raw_text is not None:
            return web.Response(status=self.status, text=self.raw_text)
        return web.json_response(self.body, status=self.status)


@pytest_asyncio.fixture
async def email_api():
    stub = EmailApiStub()
    app = web.Application()
    app.router.add_post(API_PATH, stub.handle)

    stub.server = TestServer(app)
    await stub.server.start_server()
    yield stub
    await stub.server.close()


@pytest_asyncio.fixture
async def transport(email_api):
    http_transport = HttpEmailTransport(api_url=email_api.url, timeout=5)
    yield http_transport
    await http_transport.close()


@pytest.fixture
def message():
    return EmailMessage(
        to="guest@example.com",
        subject="Thanks!",
        text="Your photos are attached.",
        attachments=[
            Attachment("image1.jpg", b"\xff\xd8first"),
            Attachment("image2.jpg", b"\xff\xd8second"),
        ],
    )


@pytest.mark.unit_integration
async def test_send_posts_one_multipart_form(transport, email_api, message):
    result = await transport.send(message)

    assert result.success is True
    assert result.status is SendStatus.SUCCESS
    assert result.http_status == 200

    assert len(email_api.received) == 1
    form = email_api.received[0]
    assert form["to"] == "guest@example.com"
    assert form["subject"] == "Thanks!"
    assert form["text"] == "Your photos are attached."
    assert form["attachments"] == [
        ("image1.jpg", "image/jpeg", b"\xff\xd8first"),
        ("image2.jpg", "image/jpeg", b"\xff\xd8second"),
    ]


@pytest.mark.unit_integration
async def test_non_200_is_http_error(transport, email_api, message):
    email_api.status = 500
    email_api.body = {"error": "boom"}

    result = await transport.send(message)

    assert result.success is False
    assert result.status is SendStatus.HTTP_ERROR
    assert result.http_status == 500
    assert result.error_message == "Email API failed. Status: 500"


@pytest.mark.unit_integration
async def test_200_with_other_message_is_unexpected(transport, email_api, message):
    email_api.body = {"message": "queued"}

    result = await transport.send(message)

    assert result.status is SendStatus.UNEXPECTED_RESPONSE
    assert result.error_message == "Unexpected API response."


@pytest.mark.unit_integration
async def test_200_with_non_json_body_is_unexpected(transport, email_api, message):
    email_api.raw_text = "<html>ok</html>"

    result = await transport.send(message)

    assert result.success is False
    assert result.status is SendStatus.UNEXPECTED_RESPONSE


@pytest.mark.unit_integration
async def test_200_with_json_list_is_unexpected(transport, email_api, message):
    email_api.body = ["Email sent successfully!"]

    result = await transport.send(message)

    assert result.status is SendStatus.UNEXPECTED_RESPONSE


@pytest.mark.unit_integration
async def test_connection_refused_is_network_error(message):
    app = web.Application()
    server = TestServer(app)
    await server.start_server()
    url = str(server.make_url(API_PATH))
    await server.close()

    transport = HttpEmailTransport(api_url=url, timeout=5)
    try:
        result = await transport.send(message)
    finally:
        await transport.close()

    assert result.success is False
    assert result.status is SendStatus.NETWORK_ERROR
    assert result.error_message.startswith("Network error: ")


@pytest.mark.unit_integration
@pytest.mark.slow
async def test_timeout_is_network_error(email_api, message):
    email_api.delay = 1.0
    transport = HttpEmailTransport(api_url=email_api.url, timeout=0.2)
    try:
        result = await transport.send(message)
    finally:
        await transport.close()

    assert result.status is SendStatus.NETWORK_ERROR
    assert result.error_message.startswith("Network error: ")


@pytest.mark.unit_integration
async def test_session_is_reused_and_closed(transport, message):
    await transport.send(message)
    session = transport._session
    await transport.send(message)

    assert transport._session is session

    await transport.close()
    assert session.closed is True
    assert transport._session is None


@pytest.mark.unit_integration
async def test_external_session_is_not_closed(email_api, message):
    async with aiohttp.ClientSession() as session:
        transport = HttpEmailTransport(api_url=email_api.url, session=session)
        result = await transport.send(message)
        await transport.close()

        assert result.success is True
        assert session.closed is False


@pytest.mark.unit
def test_is_available_requires_url():
    assert HttpEmailTransport(api_url="").is_available() is False
    assert HttpEmailTransport(api_url="https://api.example.com/send").is_available() is True
