"""
Mock Camera Implementation

Simulated camera for testing without a real device or FFmpeg.
Photos are real JPEGs generated with Pillow so downstream image
processing (email attachments, media store) works unchanged.

This is a "Fake" (test double) - it has working logic but no real hardware.
"""

import asyncio
import io
import logging
import time
from pathlib import Path
from typing import Iterable, Optional, Set

from PIL import Image

from camera.interfaces.camera_interface import (
    CameraInterface,
    CaptureError,
    CaptureResult,
    PhotoAsset,
    VideoAsset,
)

# Colours cycled through for generated photos, one per shot
_PHOTO_COLOURS = [(200, 60, 60), (60, 200, 60), (60, 60, 200)]


class MockCamera(CameraInterface):
    """
    Mock camera for testing.

    Usage:
        camera = MockCamera(output_dir=tmp_path)
        await camera.start_session()
        result = await camera.capture_photo()
        assert result.success

        camera.simulate_photo_failure(shots=[2])  # second photo fails
    """

    def __init__(
        self,
        output_dir: Optional[Path] = None,
        photo_size: tuple = (1600, 1200),
        photo_delay: float = 0.0,
        stop_delay: float = 0.0,
    ):
        """
        Initialize mock camera.

        Args:
            output_dir: Where fake recordings are written (None = no file,
                        recordings then fail on stop)
            photo_size: Width/height of generated photos
            photo_delay: Simulated seconds per photo capture
            stop_delay: Simulated seconds to finalize a recording
        """
        self.logger = logging.getLogger(__name__)
        self.output_dir = Path(output_dir) if output_dir else None
        self.photo_size = photo_size
        self.photo_delay = photo_delay
        self.stop_delay = stop_delay

        self._authorized = True
        self._session_running = False
        self._is_recording = False
        self._start_time: Optional[float] = None

        # Counters for assertions
        self.photos_taken = 0
        self.photo_attempts = 0
        self.recordings_started = 0
        self.recordings_stopped = 0

        # Configuration for test scenarios
        self._should_fail_start = False
        self._should_fail_stop = False
        self._failing_photo_attempts: Set[int] = set()
        self._fail_all_photos = False

        self.logger.info("Mock Camera initialized")

    # =========================================================================
    # SESSION
    # =========================================================================

    def is_authorized(self) -> bool:
        return self._authorized

    def is_session_running(self) -> bool:
        return self._session_running

    async def start_session(self) -> bool:
        if not self._authorized:
            self.logger.error("[MOCK] Not authorized, session not started")
            return False
        self._session_running = True
        self.logger.info("[MOCK] Camera session started")
        return True

    async def stop_session(self) -> None:
        if self._is_recording:
            await self.stop_recording()
        self._session_running = False
        self.logger.info("[MOCK] Camera session stopped")

    # =========================================================================
    # VIDEO
    # =========================================================================

    async def start_recording(self) -> bool:
        if self._is_recording:
            self.logger.error("[MOCK] Already recording")
            return False

        if self._should_fail_start:
            self.logger.error("[MOCK] Simulated start failure")
            raise CaptureError("Simulated camera failure")

        self._is_recording = True
        self._start_time = time.time()
        self.recordings_started += 1
        self.logger.info("[MOCK] Recording started")
        return True

    async def stop_recording(self) -> CaptureResult:
        if not self._is_recording:
            self.logger.warning("[MOCK] Not recording")
            return CaptureResult(success=False, error_message="Not recording")

        self.logger.info("[MOCK] Stopping recording...")
        if self.stop_delay:
            await asyncio.sleep(self.stop_delay)

        duration = time.time() - self._start_time if self._start_time else 0.0
        self._is_recording = False
        self._start_time = None
        self.recordings_stopped += 1

        if self._should_fail_stop or self.output_dir is None:
            self.logger.error("[MOCK] Simulated recording failure")
            return CaptureResult(success=False, error_message="Simulated recording failure")

        output_file = self._finalize_file(duration)
        return CaptureResult(success=True, asset=VideoAsset(path=output_file, duration=duration))

    def is_recording(self) -> bool:
        return self._is_recording

    def _finalize_file(self, duration: float) -> Path:
        """Write a fake MP4 so the media store has a real file to move"""
        self.output_dir.mkdir(parents=True, exist_ok=True)
        output_file = self.output_dir / f"mock_recording_{self.recordings_stopped}.mp4"

        with open(output_file, "wb") as f:
            f.write(b"\x00\x00\x00\x20ftypmp42")  # MP4 header
            f.write(b"\x00" * 1024)

        self.logger.info(f"[MOCK] Recording saved: {output_file} ({duration:.1f}s)")
        return output_file

    # =========================================================================
    # PHOTO
    # =========================================================================

    async def capture_photo(self) -> CaptureResult:
        self.photo_attempts += 1
        attempt = self.photo_attempts

        if self.photo_delay:
            await asyncio.sleep(self.photo_delay)

        if self._fail_all_photos or attempt in self._failing_photo_attempts:
            self.logger.error(f"[MOCK] Simulated photo failure (attempt {attempt})")
            return CaptureResult(success=False, error_message="Simulated photo failure")

        data = self._generate_jpeg(attempt)
        self.photos_taken += 1
        width, height = self.photo_size

        self.logger.info(f"[MOCK] Photo captured (attempt {attempt})")
        return CaptureResult(success=True, asset=PhotoAsset(data=data, width=width, height=height))

    def _generate_jpeg(self, attempt: int) -> bytes:
        colour = _PHOTO_COLOURS[(attempt - 1) % len(_PHOTO_COLOURS)]
        image = Image.new("RGB", self.photo_size, colour)
        buffer = io.BytesIO()
        image.save(buffer, format="JPEG", quality=85)
        return buffer.getvalue()

    # =========================================================================
    # STATUS & CLEANUP
    # =========================================================================

    def is_available(self) -> bool:
        """Mock camera is always available"""
        return True

    async def cleanup(self) -> None:
        self.logger.debug("[MOCK] Cleanup")
        if self._is_recording:
            await self.stop_recording()
        self._session_running = False

    # =========================================================================
    # TESTING HELPER METHODS (not part of CameraInterface)
    # =========================================================================

    def simulate_start_failure(self) -> None:
        """Make the next start_recording() raise CaptureError"""
        self._should_fail_start = True
        self.logger.debug("[MOCK] Configured to fail on start")

    def simulate_stop_failure(self) -> None:
        """Make stop_recording() return a failed result"""
        self._should_fail_stop = True

    def simulate_photo_failure(self, shots: Optional[Iterable[int]] = None) -> None:
        """
        Make photo captures fail.

        Args:
            shots: 1-based capture attempts that fail (None = every attempt)

        Example:
            camera.simulate_photo_failure(shots=[1, 3])
        """
        if shots is None:
            self._fail_all_photos = True
        else:
            self._failing_photo_attempts.update(shots)

    def simulate_not_authorized(self) -> None:
        self._authorized = False
        self._session_running = False

    def simulate_session_stopped(self) -> None:
        self._session_running = False

    def reset_test_config(self) -> None:
        """Reset test configuration to normal operation"""
        self._should_fail_start = False
        self._should_fail_stop = False
        self._failing_photo_attempts.clear()
        self._fail_all_photos = False
        self._authorized = True
        self.logger.debug("[MOCK] Test configuration reset")
