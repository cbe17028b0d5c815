"""
Camera Implementations Package

Concrete camera implementations (real FFmpeg/V4L2 and mock).
"""

from camera.implementations.ffmpeg_camera import FFmpegCamera
from camera.implementations.mock_camera import MockCamera

__all__ = [
    "FFmpegCamera",
    "MockCamera",
]
