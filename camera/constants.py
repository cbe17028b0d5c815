"""
Camera Constants

FFmpeg-specific constants and command builders for the V4L2 camera.

Configuration values (resolution, codecs, audio) live in
config/settings.py. This file only holds what is specific to driving
FFmpeg.
"""

from pathlib import Path

from config.settings import (
    AUDIO_BITRATE,
    AUDIO_CHANNELS,
    AUDIO_CODEC,
    AUDIO_ENABLED,
    AUDIO_INPUT_DEVICE,
    AUDIO_INPUT_FORMAT,
    AUDIO_SAMPLE_RATE,
    PHOTO_HEIGHT,
    PHOTO_WIDTH,
    VIDEO_CODEC,
    VIDEO_CRF,
    VIDEO_FPS,
    VIDEO_HEIGHT,
    VIDEO_PRESET,
    VIDEO_WIDTH,
)

# =============================================================================
# FFMPEG INPUT CONFIGURATION
# =============================================================================

# Video4Linux2, standard Linux video capture API
VIDEO_INPUT_FORMAT = "v4l2"

# MJPEG from camera (less CPU than raw, and photos can be copied as-is)
CAMERA_PIXEL_FORMAT = "mjpeg"

# Input queue for USB timing jitter (default of 8 drops frames)
THREAD_QUEUE_SIZE = 512

# "error" only shows errors, keeps stderr short enough to log
FFMPEG_LOG_LEVEL = "error"

# stderr text FFmpeg prints when another process holds the device
DEVICE_BUSY_MARKER = "Device or resource busy"


# =============================================================================
# COMMAND BUILDERS
# =============================================================================


def get_video_command(
    input_device: str,
    output_file: str,
    width: int = VIDEO_WIDTH,
    height: int = VIDEO_HEIGHT,
    fps: int = VIDEO_FPS,
    capture_audio: bool = AUDIO_ENABLED,
) -> list[str]:
    """
    Generate FFmpeg command for video recording.

    Args:
        input_device: Camera device path (e.g., /dev/video0)
        output_file: Output filename with path
        width: Video width in pixels
        height: Video height in pixels
        fps: Frame rate
        capture_audio: Also record the default PulseAudio source

    Returns:
        List of command arguments for asyncio.create_subprocess_exec
    """
    command = [
        "ffmpeg",
        "-f",
        VIDEO_INPUT_FORMAT,
        "-input_format",
        CAMERA_PIXEL_FORMAT,
        "-video_size",
        f"{width}x{height}",
        "-framerate",
        str(fps),
        "-thread_queue_size",
        str(THREAD_QUEUE_SIZE),
        "-i",
        input_device,
    ]

    if capture_audio:
        command.extend(
            [
                "-f",
                AUDIO_INPUT_FORMAT,
                "-ac",
                str(AUDIO_CHANNELS),
                "-ar",
                str(AUDIO_SAMPLE_RATE),
                "-thread_queue_size",
                str(THREAD_QUEUE_SIZE),
                "-i",
                AUDIO_INPUT_DEVICE,
            ],
        )

    command.extend(
        [
            "-c:v",
            VIDEO_CODEC,
            "-preset",
            VIDEO_PRESET,
            "-crf",
            str(VIDEO_CRF),
            "-pix_fmt",
            "yuv420p",
        ],
    )

    if capture_audio:
        command.extend(["-c:a", AUDIO_CODEC, "-b:a", AUDIO_BITRATE])

    command.extend(
        [
            # Fragmented MP4 stays playable when stopped with SIGTERM
            "-movflags",
            "+frag_keyframe+empty_moov",
            "-loglevel",
            FFMPEG_LOG_LEVEL,
            "-y",
            output_file,
        ],
    )

    return command


def get_photo_command(
    input_device: str,
    width: int = PHOTO_WIDTH,
    height: int = PHOTO_HEIGHT,
) -> list[str]:
    """
    Generate FFmpeg command that grabs one MJPEG frame to stdout.

    Example:
        cmd = get_photo_command("/dev/video0")
        # stdout of the process is a complete JPEG file
    """
    return [
        "ffmpeg",
        "-f",
        VIDEO_INPUT_FORMAT,
        "-input_format",
        CAMERA_PIXEL_FORMAT,
        "-video_size",
        f"{width}x{height}",
        "-i",
        input_device,
        "-frames:v",
        "1",
        "-c:v",
        "copy",
        "-f",
        "image2pipe",
        "-loglevel",
        FFMPEG_LOG_LEVEL,
        "pipe:1",
    ]


def validate_camera_device(device_path: str) -> bool:
    """
    Check if camera device exists and is a character device.

    Args:
        device_path: Path to camera device (e.g., /dev/video0)
    """
    path = Path(device_path)
    return path.exists() and path.is_char_device()
