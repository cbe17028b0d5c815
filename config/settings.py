"""
Central Configuration File

ALL configuration values live here. This is the single source of truth.

Guidelines:
- Secrets and per-event text (API endpoint, email wording) should be in .env
- Import these settings in modules: from config.settings import SHOT_PAUSE_SECONDS
- User-selectable durations live in the booth YAML config (config/booth_config.py)
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# =============================================================================
# SESSION TIMING
# =============================================================================

# Video flow (seconds)
VIDEO_COUNTDOWN_SECONDS = 3  # Pre-roll before recording starts
THANK_YOU_SECONDS = 5  # Thank-you screen after a saved video

# Photo burst flow (seconds)
BURST_SHOT_COUNT = 3
SHOT_PAUSE_SECONDS = 3  # Pause between shots
PHOTO_DISPLAY_SECONDS = 2  # Preview of the photo just taken
BURST_ANIMATION_SECONDS = 5  # Montage shown after the last shot

# Email dialog watchdogs (seconds)
EMAIL_INPUT_TIMEOUT_SECONDS = 60  # Reset on every keystroke/tap
EMAIL_SUCCESS_TIMEOUT_SECONDS = 10  # Not reset by interaction

# Tick cadence for countdowns (seconds per displayed second)
COUNTDOWN_TICK_SECONDS = 1.0

# =============================================================================
# USER-SELECTABLE DURATIONS
# =============================================================================

# Video recording length
COUNTDOWN_DURATION_CHOICES = (30, 60, 120)
DEFAULT_COUNTDOWN_DURATION = 30

# Per-shot countdown during a photo burst
PHOTO_BURST_COUNTDOWN_CHOICES = (5, 8, 10)
DEFAULT_PHOTO_BURST_COUNTDOWN_DURATION = 5

# Booth YAML config (optional, defaults are used if missing)
BOOTH_CONFIG_PATH = os.getenv("BOOTH_CONFIG_PATH", "config/booth.yaml")

# =============================================================================
# CAMERA CONFIGURATION
# =============================================================================

# Video Settings
VIDEO_WIDTH = 1920
VIDEO_HEIGHT = 1080
VIDEO_FPS = 30
VIDEO_CODEC = "libx264"
VIDEO_PRESET = "ultrafast"  # FFmpeg encoding preset
VIDEO_CRF = 23  # Constant Rate Factor (quality)
VIDEO_FORMAT = "mp4"

# Audio Input (PulseAudio default source, camera microphone)
AUDIO_ENABLED = os.getenv("AUDIO_ENABLED", "true").lower() == "true"
AUDIO_INPUT_DEVICE = "default"
AUDIO_INPUT_FORMAT = "pulse"
AUDIO_CHANNELS = 1
AUDIO_SAMPLE_RATE = 44100
AUDIO_CODEC = "aac"
AUDIO_BITRATE = "128k"

# Photo Settings
PHOTO_WIDTH = 1920
PHOTO_HEIGHT = 1080
PHOTO_CAPTURE_TIMEOUT = 10  # seconds for a single-frame grab

# Camera Device
DEFAULT_CAMERA_DEVICE = os.getenv("CAMERA_DEVICE", "/dev/video0")
CAMERA_WARMUP_TIME = 1.0  # seconds
CAMERA_STOP_TIMEOUT = 5  # seconds to wait for FFmpeg to finalize

# =============================================================================
# STORAGE CONFIGURATION
# =============================================================================

MEDIA_STORE_PATH = Path(os.getenv("MEDIA_STORE_PATH", "./captures"))
DIR_PHOTOS = "photos"
DIR_VIDEOS = "videos"
DIR_TEMP = "tmp"  # In-progress recordings

PHOTO_FILENAME_PATTERN = "photo_%Y-%m-%d_%H%M%S_%f.jpg"
VIDEO_FILENAME_PATTERN = f"video_%Y-%m-%d_%H%M%S.{VIDEO_FORMAT}"

# Recording refuses to start below this much free space
MIN_FREE_SPACE_BYTES = 100 * 1024 * 1024  # 100 MB

# =============================================================================
# EMAIL CONFIGURATION
# =============================================================================

EMAIL_API_URL = os.getenv(
    "EMAIL_API_URL",
    "https://email-serverless-in-nodejs.vercel.app/api/send-email",
)
EMAIL_SUBJECT = os.getenv("EMAIL_SUBJECT", "Thank you for coming to our event!")
EMAIL_TEXT = os.getenv(
    "EMAIL_TEXT",
    "Thank you so much for celebrating with us! Your photos are attached.",
)
EMAIL_SUCCESS_MESSAGE = "Email sent successfully!"

# Attachment preparation
ATTACHMENT_MAX_DIMENSION = 1024  # Longest edge, pixels
ATTACHMENT_JPEG_QUALITY = 60  # Pillow scale (0-95)
ATTACHMENT_FILENAME_PATTERN = "image{index}.jpg"

HTTP_TIMEOUT = 30  # seconds

# =============================================================================
# SERVICE CONFIGURATION
# =============================================================================

# Remote Control Configuration
# File-based control for driving the booth via SSH/scripts
# Commands: RECORD, STOP, PHOTO, MODE, EMAIL, TAP, SEND, RETRY, CANCEL,
#           CLOSE, ACK, SETTINGS, STATUS
CONTROL_FILE = os.getenv(
    "CONTROL_FILE",
    "/tmp/booth_control.cmd",  # noqa: S108
)
CONTROL_POLL_INTERVAL = 0.1  # seconds

# Logging Configuration
LOG_DIR = os.getenv("LOG_DIR", "/var/log/booth")
LOG_SERVICE_FILE = "service.log"
LOG_BACKUP_COUNT = 7  # days
