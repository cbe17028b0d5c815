"""
Test Configuration and Fixtures

Fixtures shared by every test package: fast session timing, mock
adapters and a callback tracker.

Why use fixtures?
- DRY: Setup code in one place
- Automatic cleanup: Fixtures handle teardown (session shutdown)
- Clear dependencies: Test signature shows what it needs

To use pytest:
    pip install -e ".[test]"
    pytest tests/
"""

import io

import pytest
import pytest_asyncio
from PIL import Image

from camera.implementations.mock_camera import MockCamera
from core.capture_session import CaptureSession
from mailer.controllers.email_controller import EmailController
from mailer.implementations.mock_transport import MockEmailTransport
from storage.implementations.mock_media_store import MockMediaStore

# Real seconds per session second: a 30s recording takes 0.3s
TIME_SCALE = 0.01


# =============================================================================
# ADAPTER FIXTURES
# =============================================================================


@pytest.fixture
def mock_camera(tmp_path):
    """
    Provide a MockCamera writing fake recordings into a temp directory.

    Photos are kept small so attachment preparation stays fast.
    """
    return MockCamera(output_dir=tmp_path / "recordings", photo_size=(320, 240))


@pytest.fixture
def mock_media_store():
    return MockMediaStore()


@pytest.fixture
def mock_transport():
    return MockEmailTransport()


@pytest.fixture
def email_controller(mock_transport):
    return EmailController(transport=mock_transport)


# =============================================================================
# SESSION FIXTURES
# =============================================================================


@pytest_asyncio.fixture
async def session(mock_camera, mock_media_store, email_controller):
    """
    Provide a started CaptureSession with mock adapters and scaled timers.

    Usage:
        async def test_flow(session):
            session.record()
            await wait_for_phase(session, "recording")
    """
    capture_session = CaptureSession(
        camera=mock_camera,
        media_store=mock_media_store,
        email_controller=email_controller,
        time_scale=TIME_SCALE,
    )
    await capture_session.start()
    yield capture_session
    await capture_session.shutdown()


@pytest.fixture
def phase_recorder(session):
    """
    Record every phase the session passes through (by label).

    Short phases (thank-you, preview) can be missed by polling, so
    flow tests assert on this history instead.
    """
    phases = []
    session.on_state_change = lambda old, new: phases.append(new.phase.label)
    return phases


# =============================================================================
# HELPER FIXTURES
# =============================================================================


@pytest.fixture
def callback_tracker():
    """
    Provide a helper for tracking callback invocations.

    Usage:
        def test_errors(session, callback_tracker):
            session.on_error = callback_tracker.track
            # ... trigger error ...
            assert callback_tracker.was_called()
    """

    class CallbackTracker:
        def __init__(self):
            self.calls = []

        def track(self, *args):
            """Record a callback invocation"""
            self.calls.append(args)

        def was_called(self) -> bool:
            return len(self.calls) > 0

        def get_call_count(self) -> int:
            return len(self.calls)

        def get_last_call(self):
            return self.calls[-1] if self.calls else None

        def reset(self):
            self.calls.clear()

    return CallbackTracker()


@pytest.fixture
def jpeg_factory():
    """
    Build JPEG bytes of a given size.

    Usage:
        def test_resize(jpeg_factory):
            data = jpeg_factory(4000, 3000)
    """

    def _make(width: int, height: int, colour=(120, 80, 40)) -> bytes:
        buffer = io.BytesIO()
        Image.new("RGB", (width, height), colour).save(buffer, format="JPEG")
        return buffer.getvalue()

    return _make


# =============================================================================
# PYTEST CONFIGURATION
# =============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers"""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "unit_integration: Unit integration tests")
    config.addinivalue_line("markers", "integration: Full integration tests")
    config.addinivalue_line("markers", "slow: Slow tests (use sparingly)")
