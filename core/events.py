"""
Session Events

Everything that can happen to a capture session: guest taps, timer
callbacks and adapter completions. The state machine is the only
consumer; each event is reduced against the current SessionState.
"""

from dataclasses import dataclass
from typing import Any, Optional

from core.constants import CaptureMode, HoldKind, TimerSlot


@dataclass(frozen=True)
class Event:
    pass


# =============================================================================
# GUEST ACTIONS
# =============================================================================


@dataclass(frozen=True)
class RecordTapped(Event):
    """Record button (video mode). Carries the camera readiness at tap time."""

    camera_authorized: bool = True
    camera_running: bool = True


@dataclass(frozen=True)
class CaptureTapped(Event):
    """Shutter button (photo mode), starts a burst"""


@dataclass(frozen=True)
class StopTapped(Event):
    pass


@dataclass(frozen=True)
class ModeToggled(Event):
    # None flips the current mode
    target: Optional[CaptureMode] = None


@dataclass(frozen=True)
class EmailEdited(Event):
    text: str


@dataclass(frozen=True)
class DialogTapped(Event):
    """Any tap inside the email dialog (keeps the input watchdog alive)"""


@dataclass(frozen=True)
class SendTapped(Event):
    pass


@dataclass(frozen=True)
class RetryTapped(Event):
    pass


@dataclass(frozen=True)
class CancelTapped(Event):
    pass


@dataclass(frozen=True)
class CloseTapped(Event):
    pass


@dataclass(frozen=True)
class AcknowledgeTapped(Event):
    pass


# =============================================================================
# TIMERS
# =============================================================================


@dataclass(frozen=True)
class CountdownTicked(Event):
    remaining: int


@dataclass(frozen=True)
class CountdownFinished(Event):
    pass


@dataclass(frozen=True)
class HoldElapsed(Event):
    kind: HoldKind


@dataclass(frozen=True)
class WatchdogFired(Event):
    slot: TimerSlot


# =============================================================================
# ADAPTER COMPLETIONS
# =============================================================================


@dataclass(frozen=True)
class RecordingFinished(Event):
    """Camera stopped; result is a CaptureResult holding a VideoAsset"""

    result: Any


@dataclass(frozen=True)
class VideoSaved(Event):
    result: Any  # SaveResult


@dataclass(frozen=True)
class PhotoCaptured(Event):
    result: Any  # CaptureResult holding a PhotoAsset


@dataclass(frozen=True)
class EmailSendCompleted(Event):
    result: Any  # SendResult
