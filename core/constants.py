"""
Session Constants

Enums and user-facing error messages shared by the state machine,
the session runtime and the booth service.

Timing values live in config/settings.py. This file only holds the
vocabulary the session uses to talk about them.
"""

from enum import Enum

# =============================================================================
# MODES & TIMERS
# =============================================================================


class CaptureMode(Enum):
    """What the booth captures on the next flow"""

    VIDEO = "video"
    PHOTO = "photo"

    def toggled(self) -> "CaptureMode":
        return CaptureMode.PHOTO if self is CaptureMode.VIDEO else CaptureMode.VIDEO


class TimerSlot(Enum):
    """
    Timer slots owned by the session.

    Each slot holds at most one running timer. Starting a timer in a slot
    cancels whatever was running there.
    """

    COUNTDOWN = "countdown"  # Ticking countdown (pre-roll, recording, shot)
    HOLD = "hold"  # Fixed display holds (preview, pause, animation, thank-you)
    INPUT_TIMEOUT = "input_timeout"  # Email dialog inactivity
    SUCCESS_TIMEOUT = "success_timeout"  # Email success auto-dismiss


WATCHDOG_SLOTS = (TimerSlot.INPUT_TIMEOUT, TimerSlot.SUCCESS_TIMEOUT)


class HoldKind(Enum):
    """Which fixed-length display a HOLD timer belongs to"""

    PHOTO_DISPLAY = "photo_display"
    SHOT_PAUSE = "shot_pause"
    BURST_ANIMATION = "burst_animation"
    THANK_YOU = "thank_you"


# =============================================================================
# ERROR CODES
# =============================================================================

CAMERA_NOT_AUTHORIZED = "camera_not_authorized"
CAMERA_NOT_READY = "camera_not_ready"
RECORDING_FAILED = "recording_failed"
SAVE_FAILED = "save_failed"
PHOTO_SAVE_FAILED = "photo_save_failed"

ERROR_MESSAGES = {
    CAMERA_NOT_AUTHORIZED: "Camera access is required to record videos",
    CAMERA_NOT_READY: "Camera is not ready. Please wait and try again.",
    RECORDING_FAILED: "Recording failed",
    SAVE_FAILED: "Failed to save video",
    PHOTO_SAVE_FAILED: "Failed to save photo",
}


def get_error_message(code: str) -> str:
    """Get the user-facing message for an error code"""
    return ERROR_MESSAGES.get(code, "Unknown error")
