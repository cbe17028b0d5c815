"""
Session Effects

Work the state machine asks the session runtime to perform. Effects are
plain data; CaptureSession maps each type to a handler.
"""

from dataclasses import dataclass
from typing import Any, Tuple

from core.constants import HoldKind, TimerSlot


@dataclass(frozen=True)
class Effect:
    pass


# Timers


@dataclass(frozen=True)
class StartCountdown(Effect):
    seconds: int


@dataclass(frozen=True)
class StartHold(Effect):
    kind: HoldKind
    seconds: int


@dataclass(frozen=True)
class StartWatchdog(Effect):
    slot: TimerSlot
    seconds: int


@dataclass(frozen=True)
class CancelTimer(Effect):
    slot: TimerSlot


# Camera


@dataclass(frozen=True)
class StartRecording(Effect):
    pass


@dataclass(frozen=True)
class StopRecording(Effect):
    pass


@dataclass(frozen=True)
class CapturePhoto(Effect):
    shot: int


# Storage


@dataclass(frozen=True)
class SaveVideo(Effect):
    asset: Any


@dataclass(frozen=True)
class SavePhoto(Effect):
    asset: Any


# Email


@dataclass(frozen=True)
class SendEmail(Effect):
    recipient: str
    images: Tuple[Any, ...]


@dataclass(frozen=True)
class CancelEmailSend(Effect):
    pass


# Presentation


@dataclass(frozen=True)
class ReportError(Effect):
    code: str
    message: str
