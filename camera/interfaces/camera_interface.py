"""
Camera Interface

Abstract interface for camera implementations.
Defines the contract the capture session relies on: session lifecycle,
video recording and single-photo capture.

The session never touches FFmpeg or device files directly; it only
depends on this abstraction, so tests run against MockCamera.

All I/O methods are coroutines. Implementations must not block the
event loop for longer than a quick status check.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Optional, Union


@dataclass(frozen=True)
class PhotoAsset:
    """
    A captured still photo.

    Attributes:
        data: Encoded JPEG bytes
        width: Pixel width
        height: Pixel height
        captured_at: Capture timestamp
    """

    data: bytes = field(repr=False)
    width: int
    height: int
    captured_at: datetime = field(default_factory=datetime.now)


@dataclass(frozen=True)
class VideoAsset:
    """A finished recording waiting to be saved by the media store"""

    path: Path
    duration: float
    captured_at: datetime = field(default_factory=datetime.now)


@dataclass(frozen=True)
class CaptureResult:
    """
    Result of a capture operation.

    Attributes:
        success: True if an asset was produced
        asset: PhotoAsset or VideoAsset (if successful)
        error_message: Error description (if failed)
    """

    success: bool
    asset: Optional[Union[PhotoAsset, VideoAsset]] = None
    error_message: Optional[str] = None


class CameraInterface(ABC):
    """
    Abstract base class for booth cameras.

    Any camera implementation (FFmpeg/V4L2, mock, etc.) must implement
    all these methods to work with CaptureSession.
    """

    @abstractmethod
    def is_authorized(self) -> bool:
        """
        Check if the process may use the camera device.

        Returns:
            True if access is granted, False otherwise
        """
        pass

    @abstractmethod
    def is_session_running(self) -> bool:
        """
        Check if the camera session has been started and is ready
        to record or take photos.
        """
        pass

    @abstractmethod
    async def start_session(self) -> bool:
        """
        Prepare the camera for capturing.

        Returns:
            True if the session is running afterwards
        """
        pass

    @abstractmethod
    async def stop_session(self) -> None:
        """Release the camera. Stops an active recording first."""
        pass

    @abstractmethod
    async def start_recording(self) -> bool:
        """
        Start recording video.

        Returns as soon as the recorder is running; the recording
        continues in the background until stop_recording().

        Returns:
            True if recording started, False otherwise

        Raises:
            CaptureError: If camera not available, busy, or disk full

        Example:
            if await camera.start_recording():
                ...
                result = await camera.stop_recording()
        """
        pass

    @abstractmethod
    async def stop_recording(self) -> CaptureResult:
        """
        Stop recording and finalize the file.

        Returns:
            CaptureResult with a VideoAsset on success. Never raises;
            failures are reported through the result.
        """
        pass

    @abstractmethod
    async def capture_photo(self) -> CaptureResult:
        """
        Take a single still photo.

        Returns:
            CaptureResult with a PhotoAsset on success. Never raises.
        """
        pass

    @abstractmethod
    def is_recording(self) -> bool:
        pass

    @abstractmethod
    def is_available(self) -> bool:
        """
        Check if the camera can be used at all.

        Should check:
        - Is capture software installed? (FFmpeg, etc.)
        - Is the camera device present?

        Returns:
            True if camera can be used, False otherwise
        """
        pass

    @abstractmethod
    async def cleanup(self) -> None:
        """
        Stop any active recording and release resources.

        Called when shutting down. This should never raise exceptions.
        """
        pass


class CaptureError(Exception):
    """
    Exception raised for camera errors.

    Examples:
    - Camera not found
    - FFmpeg not installed
    - Disk full
    - Camera already in use
    """
    pass


class CameraNotFoundError(CaptureError):
    """Camera device not found or not accessible"""
    pass


class CameraBusyError(CaptureError):
    """Camera is already in use by another process"""
    pass


class StorageFullError(CaptureError):
    """Not enough disk space for recording"""
    pass


class CaptureProcessError(CaptureError):
    """Error in capture process (FFmpeg crashed, etc.)"""
    pass
