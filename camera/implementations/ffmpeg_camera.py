"""
FFmpeg Camera Implementation

Real camera using FFmpeg subprocesses on a V4L2 device.
Videos are recorded by a long-running FFmpeg process; photos are a
single MJPEG frame grabbed to stdout.

This wraps FFmpeg to match our CameraInterface.
"""

import asyncio
import io
import logging
import os
import shutil
import time
from datetime import datetime
from pathlib import Path
from typing import Optional

from PIL import Image, UnidentifiedImageError

from camera.constants import (
    DEVICE_BUSY_MARKER,
    get_photo_command,
    get_video_command,
    validate_camera_device,
)
from camera.interfaces.camera_interface import (
    CameraBusyError,
    CameraInterface,
    CameraNotFoundError,
    CaptureError,
    CaptureProcessError,
    CaptureResult,
    PhotoAsset,
    StorageFullError,
    VideoAsset,
)
from config.settings import (
    CAMERA_STOP_TIMEOUT,
    CAMERA_WARMUP_TIME,
    DEFAULT_CAMERA_DEVICE,
    DIR_TEMP,
    MEDIA_STORE_PATH,
    MIN_FREE_SPACE_BYTES,
    PHOTO_CAPTURE_TIMEOUT,
    VIDEO_FILENAME_PATTERN,
    VIDEO_FPS,
    VIDEO_HEIGHT,
    VIDEO_WIDTH,
)
from storage.utils.path_utils import check_disk_space, ensure_directory, generate_filename


class FFmpegCamera(CameraInterface):
    """
    Camera backed by FFmpeg and a V4L2 device.

    FFmpeg opens the device per capture, so the "session" is a checked
    and armed state rather than a held device handle.

    Usage:
        camera = FFmpegCamera(camera_device="/dev/video0")
        await camera.start_session()
        await camera.start_recording()
        # ... recording happens in background ...
        result = await camera.stop_recording()
        await camera.cleanup()
    """

    def __init__(
        self,
        camera_device: str = DEFAULT_CAMERA_DEVICE,
        output_dir: Path = MEDIA_STORE_PATH / DIR_TEMP,
        width: int = VIDEO_WIDTH,
        height: int = VIDEO_HEIGHT,
        fps: int = VIDEO_FPS,
        min_free_space_bytes: int = MIN_FREE_SPACE_BYTES,
    ):
        """
        Initialize FFmpeg camera.

        Args:
            camera_device: Path to camera device (e.g., /dev/video0)
            output_dir: Where in-progress recordings are written
            width: Video width in pixels
            height: Video height in pixels
            fps: Frame rate
            min_free_space_bytes: Refuse to record below this much free space
        """
        self.logger = logging.getLogger(__name__)

        self.camera_device = camera_device
        self.output_dir = Path(output_dir)
        self.width = width
        self.height = height
        self.fps = fps
        self.min_free_space_bytes = min_free_space_bytes

        self._session_running = False
        self._process: Optional[asyncio.subprocess.Process] = None
        self._output_file: Optional[Path] = None
        self._start_time: Optional[float] = None

        self.logger.info(
            f"FFmpeg Camera initialized "
            f"(camera: {camera_device}, resolution: {width}x{height}, fps: {fps})",
        )

    # =========================================================================
    # SESSION
    # =========================================================================

    def is_authorized(self) -> bool:
        """The process may open the device for reading"""
        return validate_camera_device(self.camera_device) and os.access(
            self.camera_device, os.R_OK | os.W_OK
        )

    def is_session_running(self) -> bool:
        return self._session_running

    async def start_session(self) -> bool:
        if self._session_running:
            return True

        if not self.is_available():
            self.logger.error("Cannot start camera session: FFmpeg or camera missing")
            return False

        if not self.is_authorized():
            self.logger.error(f"No permission to use camera {self.camera_device}")
            return False

        if not ensure_directory(self.output_dir):
            self.logger.error(f"Cannot create recording directory {self.output_dir}")
            return False

        self._session_running = True
        self.logger.info("✅ Camera session started")
        return True

    async def stop_session(self) -> None:
        if self.is_recording():
            await self.stop_recording()
        self._session_running = False
        self.logger.info("Camera session stopped")

    # =========================================================================
    # VIDEO
    # =========================================================================

    async def start_recording(self) -> bool:
        """
        Launch FFmpeg in the background and wait for the warmup period.

        Raises:
            CameraNotFoundError: Device missing
            CameraBusyError: Another process holds the device
            StorageFullError: Less free space than required
            CaptureProcessError: FFmpeg exited during warmup
        """
        if self.is_recording():
            self.logger.error("Already recording, cannot start new recording")
            return False

        if not self._session_running:
            self.logger.error("Camera session not running")
            return False

        if not validate_camera_device(self.camera_device):
            raise CameraNotFoundError(f"Camera device not found: {self.camera_device}")

        ensure_directory(self.output_dir)
        if not check_disk_space(self.output_dir, self.min_free_space_bytes):
            raise StorageFullError(
                f"Less than {self.min_free_space_bytes // (1024 * 1024)} MB free "
                f"in {self.output_dir}"
            )

        output_file = generate_filename(self.output_dir, VIDEO_FILENAME_PATTERN)
        command = get_video_command(
            input_device=self.camera_device,
            output_file=str(output_file),
            width=self.width,
            height=self.height,
            fps=self.fps,
        )

        self.logger.info(f"Starting FFmpeg recording to: {output_file}")
        self.logger.debug(f"FFmpeg command: {' '.join(command)}")

        try:
            self._process = await asyncio.create_subprocess_exec(
                *command,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                stdin=asyncio.subprocess.DEVNULL,
            )
        except FileNotFoundError:
            raise CaptureError("FFmpeg not found. Install with: sudo apt-get install ffmpeg")

        try:
            await asyncio.sleep(CAMERA_WARMUP_TIME)

            # Process exited already - something went wrong
            if self._process.returncode is not None:
                _, stderr = await self._process.communicate()
                error_msg = stderr.decode("utf-8", errors="ignore").strip()

                if DEVICE_BUSY_MARKER in error_msg:
                    raise CameraBusyError(f"Camera is busy: {self.camera_device}")
                raise CaptureProcessError(f"FFmpeg failed to start: {error_msg}")

        except (CaptureError, asyncio.CancelledError):
            await self._kill_process()
            raise

        self._output_file = output_file
        self._start_time = time.time()

        self.logger.info(f"Recording started (PID: {self._process.pid})")
        return True

    async def stop_recording(self) -> CaptureResult:
        """
        Stop FFmpeg gracefully and return the finished file.

        Sends SIGTERM so FFmpeg can flush and close the file, then waits
        up to CAMERA_STOP_TIMEOUT before killing it.
        """
        if self._process is None:
            return CaptureResult(success=False, error_message="Not recording")

        process = self._process
        output_file = self._output_file
        duration = time.time() - self._start_time if self._start_time else 0.0

        self.logger.info("Stopping recording...")

        try:
            if process.returncode is None:
                process.terminate()

            try:
                _, stderr = await asyncio.wait_for(process.communicate(), timeout=CAMERA_STOP_TIMEOUT)
                if process.returncode not in (0, 255, -15):
                    error_msg = stderr.decode("utf-8", errors="ignore").strip()
                    self.logger.warning(f"FFmpeg exited with code {process.returncode}: {error_msg}")
            except asyncio.TimeoutError:
                # Last resort, the current file may be unplayable
                self.logger.warning("FFmpeg didn't stop gracefully, force killing")
                process.kill()
                await process.wait()

        except ProcessLookupError:
            pass

        finally:
            self._process = None
            self._output_file = None
            self._start_time = None

        if output_file is None or not output_file.exists() or output_file.stat().st_size == 0:
            self.logger.error("❌ Output file was not created!")
            return CaptureResult(success=False, error_message="Recording produced no file")

        file_size_mb = output_file.stat().st_size / (1024 * 1024)
        self.logger.info(f"✅ Recording finished: {output_file} ({file_size_mb:.1f} MB)")
        return CaptureResult(
            success=True,
            asset=VideoAsset(path=output_file, duration=duration),
        )

    def is_recording(self) -> bool:
        return self._process is not None and self._process.returncode is None

    # =========================================================================
    # PHOTO
    # =========================================================================

    async def capture_photo(self) -> CaptureResult:
        if not self._session_running:
            return CaptureResult(success=False, error_message="Camera session not running")

        if self.is_recording():
            return CaptureResult(success=False, error_message="Camera is busy recording")

        command = get_photo_command(self.camera_device)
        self.logger.debug(f"FFmpeg photo command: {' '.join(command)}")

        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                stdin=asyncio.subprocess.DEVNULL,
            )
        except FileNotFoundError:
            return CaptureResult(success=False, error_message="FFmpeg not found")

        try:
            stdout, stderr = await asyncio.wait_for(
                process.communicate(), timeout=PHOTO_CAPTURE_TIMEOUT
            )
        except asyncio.TimeoutError:
            process.kill()
            await process.wait()
            return CaptureResult(success=False, error_message="Photo capture timed out")

        if process.returncode != 0 or not stdout:
            error_msg = stderr.decode("utf-8", errors="ignore").strip()
            if DEVICE_BUSY_MARKER in error_msg:
                error_msg = f"Camera is busy: {self.camera_device}"
            self.logger.error(f"❌ Photo capture failed: {error_msg}")
            return CaptureResult(success=False, error_message=error_msg or "Photo capture failed")

        try:
            with Image.open(io.BytesIO(stdout)) as image:
                width, height = image.size
        except UnidentifiedImageError:
            return CaptureResult(success=False, error_message="Camera returned an invalid image")

        self.logger.info(f"✅ Photo captured ({width}x{height}, {len(stdout) // 1024} KB)")
        return CaptureResult(
            success=True,
            asset=PhotoAsset(data=stdout, width=width, height=height, captured_at=datetime.now()),
        )

    # =========================================================================
    # STATUS & CLEANUP
    # =========================================================================

    def is_available(self) -> bool:
        if not shutil.which("ffmpeg"):
            self.logger.warning("FFmpeg not found in PATH")
            return False

        if not validate_camera_device(self.camera_device):
            self.logger.warning(f"Camera not found: {self.camera_device}")
            return False

        return True

    async def cleanup(self) -> None:
        self.logger.info("Cleaning up FFmpeg Camera")

        try:
            if self.is_recording():
                await self.stop_recording()
        except Exception as e:
            self.logger.error(f"Error stopping recording during cleanup: {e}")
            await self._kill_process()

        self._session_running = False
        self.logger.info("FFmpeg Camera cleanup complete")

    async def _kill_process(self) -> None:
        """Internal cleanup after failed recording attempt"""
        if self._process is not None and self._process.returncode is None:
            try:
                self._process.kill()
                await asyncio.wait_for(self._process.wait(), timeout=1.0)
            except (ProcessLookupError, asyncio.TimeoutError):
                pass
        self._process = None
        self._output_file = None
        self._start_time = None
