"""
Camera Interfaces Package

Exposes the abstract camera interface, its result types and exceptions.
"""

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

# Public API
__all__ = [
    # Interface
    "CameraInterface",
    # Results
    "CaptureResult",
    "PhotoAsset",
    "VideoAsset",
    # Exceptions
    "CameraBusyError",
    "CameraNotFoundError",
    "CaptureError",
    "CaptureProcessError",
    "StorageFullError",
]
