"""
Capture Settings & Duration Policy

CaptureSettings holds the two durations a booth operator can choose.
DurationPolicy is the read-only snapshot of every timing value a flow
uses, taken when the flow starts so later setting changes never affect
a flow already in progress.
"""

from dataclasses import dataclass

from config.settings import (
    BURST_ANIMATION_SECONDS,
    COUNTDOWN_DURATION_CHOICES,
    DEFAULT_COUNTDOWN_DURATION,
    DEFAULT_PHOTO_BURST_COUNTDOWN_DURATION,
    EMAIL_INPUT_TIMEOUT_SECONDS,
    EMAIL_SUCCESS_TIMEOUT_SECONDS,
    PHOTO_BURST_COUNTDOWN_CHOICES,
    PHOTO_DISPLAY_SECONDS,
    SHOT_PAUSE_SECONDS,
    THANK_YOU_SECONDS,
    VIDEO_COUNTDOWN_SECONDS,
)


class SettingsError(ValueError):
    """Raised when a capture setting is outside its allowed choices"""

    pass


@dataclass
class CaptureSettings:
    """
    User-selectable capture durations.

    Attributes:
        countdown_duration: Video recording length in seconds (30, 60 or 120)
        photo_burst_countdown_duration: Per-shot countdown (5, 8 or 10)

    Example:
        settings = CaptureSettings(countdown_duration=60)
        settings.photo_burst_countdown_duration  # 5
    """

    countdown_duration: int = DEFAULT_COUNTDOWN_DURATION
    photo_burst_countdown_duration: int = DEFAULT_PHOTO_BURST_COUNTDOWN_DURATION

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        if self.countdown_duration not in COUNTDOWN_DURATION_CHOICES:
            raise SettingsError(
                f"countdown_duration must be one of {COUNTDOWN_DURATION_CHOICES}, "
                f"got {self.countdown_duration}"
            )
        if self.photo_burst_countdown_duration not in PHOTO_BURST_COUNTDOWN_CHOICES:
            raise SettingsError(
                "photo_burst_countdown_duration must be one of "
                f"{PHOTO_BURST_COUNTDOWN_CHOICES}, "
                f"got {self.photo_burst_countdown_duration}"
            )

    def to_dict(self) -> dict:
        return {
            "countdown_duration": self.countdown_duration,
            "photo_burst_countdown_duration": self.photo_burst_countdown_duration,
        }


@dataclass(frozen=True)
class DurationPolicy:
    """Every timing value (seconds) one capture flow runs with"""

    video_countdown: int
    recording: int
    photo_countdown: int
    shot_pause: int = SHOT_PAUSE_SECONDS
    photo_display: int = PHOTO_DISPLAY_SECONDS
    burst_animation: int = BURST_ANIMATION_SECONDS
    thank_you: int = THANK_YOU_SECONDS
    input_timeout: int = EMAIL_INPUT_TIMEOUT_SECONDS
    success_timeout: int = EMAIL_SUCCESS_TIMEOUT_SECONDS

    @classmethod
    def from_settings(cls, settings: CaptureSettings) -> "DurationPolicy":
        return cls(
            video_countdown=VIDEO_COUNTDOWN_SECONDS,
            recording=settings.countdown_duration,
            photo_countdown=settings.photo_burst_countdown_duration,
        )
