"""
Camera Factory

Factory pattern for creating camera implementations.
Automatically selects the FFmpeg camera or the mock based on availability.
"""

import logging
from pathlib import Path
from typing import Literal, Optional

from camera.implementations.ffmpeg_camera import FFmpegCamera
from camera.implementations.mock_camera import MockCamera
from camera.interfaces.camera_interface import CameraInterface
from config.settings import DIR_TEMP, MEDIA_STORE_PATH

# Type alias for better type hints
AdapterMode = Literal["auto", "real", "mock"]


class CameraFactory:
    """
    Factory for creating camera implementations.

    Usage:
        # Auto-detect (uses FFmpeg if available, mock otherwise)
        camera = CameraFactory.create_camera()

        # Force mock mode (useful for testing)
        camera = CameraFactory.create_camera(mode="mock")

        # Force real camera (raises error if not available)
        camera = CameraFactory.create_camera(mode="real")
    """

    _logger = logging.getLogger(__name__)

    @classmethod
    def create_camera(
        cls,
        mode: AdapterMode = "auto",
        output_dir: Optional[Path] = None,
    ) -> CameraInterface:
        """
        Create a camera instance.

        Args:
            mode: "auto" (detect), "real" (force FFmpeg), "mock" (force mock)
            output_dir: Where in-progress recordings are written

        Returns:
            CameraInterface implementation

        Raises:
            RuntimeError: If mode="real" but FFmpeg or the device is missing
        """
        output_dir = Path(output_dir) if output_dir else MEDIA_STORE_PATH / DIR_TEMP

        if mode == "mock":
            cls._logger.info("Creating Mock Camera")
            return MockCamera(output_dir=output_dir)

        camera = FFmpegCamera(output_dir=output_dir)

        if mode == "real":
            if not camera.is_available():
                raise RuntimeError("Real camera requested but FFmpeg or camera not available")
            cls._logger.info("Creating FFmpeg Camera (forced)")
            return camera

        # mode == "auto" - try real first, fall back to mock
        if camera.is_available():
            cls._logger.info("Creating FFmpeg Camera (auto-detected)")
            return camera

        cls._logger.warning("FFmpeg or camera not available, using Mock Camera")
        return MockCamera(output_dir=output_dir)


def create_camera(force_mock: bool = False) -> CameraInterface:
    """
    Quick camera creation with simple options.

    Example:
        camera = create_camera(force_mock=True)
    """
    return CameraFactory.create_camera(mode="mock" if force_mock else "auto")
