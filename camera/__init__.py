"""
Camera Module

Video recording and still photo capture for the booth.

Provides automatic detection and graceful fallback between the real
FFmpeg/V4L2 camera and a mock implementation for testing.

Public API:
    - CameraFactory: Factory for creating camera implementations
    - create_camera: Quick camera creation with auto-detection
    - CameraInterface: Camera contract
    - CaptureResult, PhotoAsset, VideoAsset: Capture results
    - CaptureError: Custom exceptions

Usage:
    from camera import create_camera

    camera = create_camera()
    await camera.start_session()
    result = await camera.capture_photo()
"""

from camera.factory import CameraFactory, create_camera
from camera.interfaces.camera_interface import (
    CameraInterface,
    CaptureError,
    CaptureResult,
    PhotoAsset,
    VideoAsset,
)

__all__ = [
    "CameraFactory",
    "CameraInterface",
    "CaptureError",
    "CaptureResult",
    "PhotoAsset",
    "VideoAsset",
    "create_camera",
]
