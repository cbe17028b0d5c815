"""
Session Models

Immutable snapshots describing where a capture session is.

SessionState = mode + phase + burst + policy. The state machine never
mutates a snapshot; every transition builds a new one with
dataclasses.replace().
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Optional, Tuple

from core.constants import CaptureMode
from core.policy import DurationPolicy

# =============================================================================
# PHASES
# =============================================================================


@dataclass(frozen=True)
class Phase:
    """Base class for session phases"""

    label = "phase"

    def __str__(self) -> str:
        return self.label


@dataclass(frozen=True)
class Idle(Phase):
    label = "idle"


@dataclass(frozen=True)
class CountingDown(Phase):
    """Pre-roll (video) or per-shot countdown (photo burst)"""

    remaining: int
    label = "counting_down"


@dataclass(frozen=True)
class Recording(Phase):
    remaining: int
    total: int
    label = "recording"


@dataclass(frozen=True)
class FinalizingRecording(Phase):
    """Stop requested; waiting for the camera's file and the media store"""

    label = "finalizing_recording"


@dataclass(frozen=True)
class ShowingThankYou(Phase):
    label = "showing_thank_you"


@dataclass(frozen=True)
class CapturingPhoto(Phase):
    shot: int
    label = "capturing_photo"


@dataclass(frozen=True)
class DisplayingCapturedPhoto(Phase):
    image: Any
    label = "displaying_captured_photo"


@dataclass(frozen=True)
class PausingBetweenShots(Phase):
    """Renders like idle but is not Idle, so the burst cannot be interrupted"""

    next_shot: int
    label = "pausing_between_shots"


@dataclass(frozen=True)
class ShowingBurstAnimation(Phase):
    images: Tuple[Any, ...]
    label = "showing_burst_animation"


class EmailStatus(Enum):
    SENDING = "sending"
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True)
class EmailSubState:
    """Sub-state of the email dialog; None means awaiting input"""

    status: EmailStatus
    message: str = ""

    @classmethod
    def sending(cls) -> "EmailSubState":
        return cls(EmailStatus.SENDING)

    @classmethod
    def success(cls) -> "EmailSubState":
        return cls(EmailStatus.SUCCESS)

    @classmethod
    def failed(cls, message: str) -> "EmailSubState":
        return cls(EmailStatus.FAILED, message)

    def __str__(self) -> str:
        if self.status is EmailStatus.FAILED:
            return f"failed({self.message})"
        return self.status.value


@dataclass(frozen=True)
class ShowingEmailInput(Phase):
    sub: Optional[EmailSubState] = None
    label = "showing_email_input"

    def __str__(self) -> str:
        return f"{self.label}[{self.sub if self.sub else 'input'}]"


# =============================================================================
# BURST & SESSION STATE
# =============================================================================


@dataclass(frozen=True)
class BurstCapture:
    """Photos and recipient collected during one burst"""

    images: Tuple[Any, ...] = ()
    shot: int = 0
    email: str = ""

    def with_image(self, image: Any) -> "BurstCapture":
        return replace(self, images=self.images + (image,))


@dataclass(frozen=True)
class SessionState:
    mode: CaptureMode = CaptureMode.VIDEO
    phase: Phase = field(default_factory=Idle)
    burst: BurstCapture = field(default_factory=BurstCapture)
    # Snapshot taken when a flow starts, dropped on return to Idle
    policy: Optional[DurationPolicy] = None

    @property
    def is_idle(self) -> bool:
        return isinstance(self.phase, Idle)

    @property
    def images(self) -> Tuple[Any, ...]:
        return self.burst.images

    @property
    def email_input(self) -> str:
        return self.burst.email

    @property
    def email_sub_state(self) -> Optional[EmailSubState]:
        if isinstance(self.phase, ShowingEmailInput):
            return self.phase.sub
        return None

    def to_dict(self) -> dict:
        status = {
            "mode": self.mode.value,
            "phase": self.phase.label,
            "images": len(self.burst.images),
            "email": self.burst.email,
        }
        if isinstance(self.phase, (CountingDown, Recording)):
            status["remaining"] = self.phase.remaining
        if isinstance(self.phase, ShowingEmailInput):
            status["email_status"] = str(self.phase.sub) if self.phase.sub else "input"
        return status
