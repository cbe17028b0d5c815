import logging
import time
from dataclasses import dataclass, replace
from typing import Callable, Dict, Optional, Tuple

from config.settings import BURST_SHOT_COUNT
from core.constants import (
    CAMERA_NOT_AUTHORIZED,
    CAMERA_NOT_READY,
    RECORDING_FAILED,
    SAVE_FAILED,
    CaptureMode,
    HoldKind,
    TimerSlot,
    get_error_message,
)
from core.effects import (
    CancelEmailSend,
    CancelTimer,
    CapturePhoto,
    Effect,
    ReportError,
    SavePhoto,
    SaveVideo,
    SendEmail,
    StartCountdown,
    StartHold,
    StartRecording,
    StartWatchdog,
    StopRecording,
)
from core.events import (
    AcknowledgeTapped,
    CancelTapped,
    CaptureTapped,
    CloseTapped,
    CountdownFinished,
    CountdownTicked,
    DialogTapped,
    EmailEdited,
    EmailSendCompleted,
    Event,
    HoldElapsed,
    ModeToggled,
    PhotoCaptured,
    RecordingFinished,
    RecordTapped,
    RetryTapped,
    SendTapped,
    StopTapped,
    VideoSaved,
    WatchdogFired,
)
from core.models import (
    BurstCapture,
    CapturingPhoto,
    CountingDown,
    DisplayingCapturedPhoto,
    EmailStatus,
    EmailSubState,
    FinalizingRecording,
    Idle,
    PausingBetweenShots,
    Recording,
    SessionState,
    ShowingBurstAnimation,
    ShowingEmailInput,
    ShowingThankYou,
)
from core.policy import CaptureSettings, DurationPolicy
from mailer.constants import NO_RECIPIENT_OR_IMAGES_MESSAGE
from mailer.utils.validation_utils import is_valid_email


@dataclass(frozen=True)
class Transition:
    """Result of reducing one event: the next state and the work to do"""

    state: SessionState
    effects: Tuple[Effect, ...] = ()
    reason: str = ""


# =============================================================================
# REDUCER
# =============================================================================


def reduce(state: SessionState, event: Event, settings: CaptureSettings) -> Optional[Transition]:
    """
    Compute the next state for `event`.

    Pure function: no timers, no I/O. Returns None when the event does
    not apply to the current phase (stale timer, tap on a hidden button,
    completion for a flow that was already dismissed).

    Args:
        state: Current session snapshot
        event: What happened
        settings: Current capture settings (only read when a flow starts)

    Returns:
        Transition, or None if the event is ignored
    """
    handler = _PHASE_HANDLERS.get(type(state.phase))
    if handler is None:
        return None
    return handler(state, event, settings)


def _reduce_idle(state, event, settings):
    if isinstance(event, ModeToggled):
        target = event.target or state.mode.toggled()
        if target == state.mode:
            return None
        return Transition(replace(state, mode=target), reason=f"mode switched to {target.value}")

    if isinstance(event, RecordTapped):
        if state.mode is not CaptureMode.VIDEO:
            return None
        if not event.camera_authorized:
            return _report(state, CAMERA_NOT_AUTHORIZED, "record rejected, camera not authorized")
        if not event.camera_running:
            return _report(state, CAMERA_NOT_READY, "record rejected, camera not ready")

        policy = DurationPolicy.from_settings(settings)
        return Transition(
            replace(
                state,
                phase=CountingDown(policy.video_countdown),
                burst=BurstCapture(),
                policy=policy,
            ),
            (StartCountdown(policy.video_countdown),),
            "record tapped",
        )

    if isinstance(event, CaptureTapped):
        if state.mode is not CaptureMode.PHOTO:
            return None

        policy = DurationPolicy.from_settings(settings)
        return Transition(
            replace(
                state,
                phase=CountingDown(policy.photo_countdown),
                burst=BurstCapture(shot=1),
                policy=policy,
            ),
            (StartCountdown(policy.photo_countdown),),
            f"photo burst started (shot 1/{BURST_SHOT_COUNT})",
        )

    return None


def _reduce_counting_down(state, event, settings):
    if isinstance(event, CountdownTicked):
        # The final tick (0) leaves "1" on screen until the countdown finishes
        if event.remaining <= 0:
            return Transition(state)
        return Transition(replace(state, phase=CountingDown(event.remaining)))

    if isinstance(event, CountdownFinished):
        if state.mode is CaptureMode.VIDEO:
            total = state.policy.recording
            return Transition(
                replace(state, phase=Recording(total, total)),
                (StartRecording(), StartCountdown(total)),
                "pre-roll finished",
            )

        shot = state.burst.shot
        return Transition(
            replace(state, phase=CapturingPhoto(shot)),
            (CapturePhoto(shot),),
            f"shot {shot} countdown finished",
        )

    return None


def _reduce_recording(state, event, settings):
    if isinstance(event, CountdownTicked):
        return Transition(replace(state, phase=Recording(event.remaining, state.phase.total)))

    if isinstance(event, (CountdownFinished, StopTapped)):
        reason = "recording time elapsed" if isinstance(event, CountdownFinished) else "stop tapped"
        return Transition(
            replace(state, phase=FinalizingRecording()),
            (CancelTimer(TimerSlot.COUNTDOWN), StopRecording()),
            reason,
        )

    if isinstance(event, RecordingFinished):
        # Camera stopped on its own (failed start, crashed process)
        return _recording_finished(state, event.result, (CancelTimer(TimerSlot.COUNTDOWN),))

    return None


def _reduce_finalizing(state, event, settings):
    if isinstance(event, RecordingFinished):
        return _recording_finished(state, event.result)

    if isinstance(event, VideoSaved):
        result = event.result
        if not result.success:
            return _go_idle(
                state,
                (ReportError(SAVE_FAILED, result.error_message or get_error_message(SAVE_FAILED)),),
                f"video save failed: {result.error_message}",
            )
        return Transition(
            replace(state, phase=ShowingThankYou()),
            (StartHold(HoldKind.THANK_YOU, state.policy.thank_you),),
            f"video saved to {result.location}",
        )

    return None


def _reduce_thank_you(state, event, settings):
    if isinstance(event, HoldElapsed) and event.kind is HoldKind.THANK_YOU:
        return _go_idle(state, reason="thank-you finished")
    return None


def _reduce_capturing_photo(state, event, settings):
    if not isinstance(event, PhotoCaptured):
        return None

    result = event.result
    shot = state.phase.shot
    if not result.success or result.asset is None:
        return _advance_burst(state, f"shot {shot} failed: {result.error_message}")

    asset = result.asset
    return Transition(
        replace(state, phase=DisplayingCapturedPhoto(asset), burst=state.burst.with_image(asset)),
        (SavePhoto(asset), StartHold(HoldKind.PHOTO_DISPLAY, state.policy.photo_display)),
        f"shot {shot} captured",
    )


def _reduce_displaying_photo(state, event, settings):
    if isinstance(event, HoldElapsed) and event.kind is HoldKind.PHOTO_DISPLAY:
        return _advance_burst(state, f"shot {state.burst.shot} displayed")
    return None


def _reduce_pausing(state, event, settings):
    if isinstance(event, HoldElapsed) and event.kind is HoldKind.SHOT_PAUSE:
        shot = state.phase.next_shot
        return Transition(
            replace(
                state,
                phase=CountingDown(state.policy.photo_countdown),
                burst=replace(state.burst, shot=shot),
            ),
            (StartCountdown(state.policy.photo_countdown),),
            f"shot {shot}/{BURST_SHOT_COUNT} countdown",
        )
    return None


def _reduce_burst_animation(state, event, settings):
    if isinstance(event, HoldElapsed) and event.kind is HoldKind.BURST_ANIMATION:
        return _enter_email(state, None, "burst animation finished")
    return None


def _reduce_email(state, event, settings):
    sub = state.phase.sub

    if isinstance(event, CloseTapped):
        sending = sub is not None and sub.status is EmailStatus.SENDING
        return _dismiss(state, CaptureMode.PHOTO, "email dialog closed", cancel_send=sending)

    if sub is None:
        return _reduce_email_input(state, event)
    if sub.status is EmailStatus.SENDING:
        return _reduce_email_sending(state, event)
    if sub.status is EmailStatus.FAILED:
        if isinstance(event, RetryTapped):
            return _request_send(state, "retry tapped")
        if isinstance(event, CancelTapped):
            return _dismiss(state, CaptureMode.PHOTO, "email cancelled after failure")
        return None
    # SUCCESS
    if isinstance(event, AcknowledgeTapped):
        return _dismiss(state, CaptureMode.VIDEO, "email success acknowledged")
    if isinstance(event, WatchdogFired) and event.slot is TimerSlot.SUCCESS_TIMEOUT:
        return _dismiss(state, CaptureMode.VIDEO, "email success timeout")
    return None


def _reduce_email_input(state, event):
    policy = state.policy

    if isinstance(event, EmailEdited):
        return Transition(
            replace(state, burst=replace(state.burst, email=event.text)),
            (StartWatchdog(TimerSlot.INPUT_TIMEOUT, policy.input_timeout),),
        )

    if isinstance(event, DialogTapped):
        return Transition(state, (StartWatchdog(TimerSlot.INPUT_TIMEOUT, policy.input_timeout),))

    if isinstance(event, SendTapped):
        email = state.burst.email.strip()
        # Send stays disabled while a non-empty address is malformed
        if email and state.burst.images and not is_valid_email(email):
            return None
        return _request_send(state, "send tapped")

    if isinstance(event, WatchdogFired) and event.slot is TimerSlot.INPUT_TIMEOUT:
        return _dismiss(state, CaptureMode.PHOTO, "email input timeout")

    return None


def _reduce_email_sending(state, event):
    if not isinstance(event, EmailSendCompleted):
        # Send/Retry while a request is in flight are no-ops
        return None

    result = event.result
    if result.success:
        return _enter_email(state, EmailSubState.success(), "email sent")
    return _enter_email(state, EmailSubState.failed(result.error_message), "email failed")


# =============================================================================
# SHARED TRANSITIONS
# =============================================================================


def _recording_finished(state, result, leading: Tuple[Effect, ...] = ()):
    if not result.success or result.asset is None:
        message = result.error_message or get_error_message(RECORDING_FAILED)
        return _go_idle(
            state,
            leading + (ReportError(RECORDING_FAILED, message),),
            f"recording failed: {message}",
        )
    return Transition(
        replace(state, phase=FinalizingRecording()),
        leading + (SaveVideo(result.asset),),
        "recording stopped, saving video",
    )


def _advance_burst(state, reason):
    shot = state.burst.shot
    policy = state.policy

    if shot < BURST_SHOT_COUNT:
        return Transition(
            replace(state, phase=PausingBetweenShots(shot + 1)),
            (StartHold(HoldKind.SHOT_PAUSE, policy.shot_pause),),
            reason,
        )

    images = state.burst.images
    if not images:
        return _go_idle(state, reason=f"{reason}; burst ended with no photos")

    return Transition(
        replace(state, phase=ShowingBurstAnimation(images)),
        (StartHold(HoldKind.BURST_ANIMATION, policy.burst_animation),),
        f"{reason}; burst complete with {len(images)} photo(s)",
    )


def _enter_email(state, sub, reason, trailing: Tuple[Effect, ...] = ()):
    """Enter an email sub-state; always resets both watchdogs first"""
    effects = [
        CancelTimer(TimerSlot.INPUT_TIMEOUT),
        CancelTimer(TimerSlot.SUCCESS_TIMEOUT),
    ]
    if sub is None:
        effects.append(StartWatchdog(TimerSlot.INPUT_TIMEOUT, state.policy.input_timeout))
    elif sub.status is EmailStatus.SUCCESS:
        effects.append(StartWatchdog(TimerSlot.SUCCESS_TIMEOUT, state.policy.success_timeout))
    effects.extend(trailing)

    return Transition(replace(state, phase=ShowingEmailInput(sub)), tuple(effects), reason)


def _request_send(state, reason):
    email = state.burst.email.strip()
    images = state.burst.images

    if not email or not images:
        return _enter_email(
            state,
            EmailSubState.failed(NO_RECIPIENT_OR_IMAGES_MESSAGE),
            f"{reason}, nothing to send",
        )

    return _enter_email(
        state,
        EmailSubState.sending(),
        f"{reason}, sending {len(images)} photo(s) to {email}",
        (SendEmail(email, images),),
    )


def _dismiss(state, mode, reason, cancel_send=False):
    """Leave the email dialog: watchdogs off, burst cleared, Idle, then mode"""
    effects = [
        CancelTimer(TimerSlot.INPUT_TIMEOUT),
        CancelTimer(TimerSlot.SUCCESS_TIMEOUT),
    ]
    if cancel_send:
        effects.append(CancelEmailSend())
    return Transition(SessionState(mode=mode), tuple(effects), f"{reason} -> {mode.value} mode")


def _go_idle(state, effects: Tuple[Effect, ...] = (), reason=""):
    return Transition(SessionState(mode=state.mode), effects, reason)


def _report(state, code, reason):
    return Transition(state, (ReportError(code, get_error_message(code)),), reason)


_PHASE_HANDLERS = {
    Idle: _reduce_idle,
    CountingDown: _reduce_counting_down,
    Recording: _reduce_recording,
    FinalizingRecording: _reduce_finalizing,
    ShowingThankYou: _reduce_thank_you,
    CapturingPhoto: _reduce_capturing_photo,
    DisplayingCapturedPhoto: _reduce_displaying_photo,
    PausingBetweenShots: _reduce_pausing,
    ShowingBurstAnimation: _reduce_burst_animation,
    ShowingEmailInput: _reduce_email,
}


# =============================================================================
# STATE HOLDER
# =============================================================================


class StateMachine:
    """
    Holds the current SessionState and applies events through reduce().
    Logs every phase change and notifies the registered listener.
    """

    def __init__(self, settings: CaptureSettings, initial_mode: CaptureMode = CaptureMode.VIDEO):
        self.settings = settings
        self.current_state = SessionState(mode=initial_mode)
        self.previous_state: Optional[SessionState] = None
        self.state_start_time = time.time()
        self.logger = logging.getLogger(__name__)

        self.callbacks = {
            "on_state_change": None,  # Called with (old_state, new_state)
        }

        self.logger.info(f"State machine initialized in {self.current_state.phase} ({initial_mode.value} mode)")

    def register_callback(self, callback_name: str, callback_func: Callable):
        """Register a callback function for state machine events"""
        if callback_name in self.callbacks:
            self.callbacks[callback_name] = callback_func
            self.logger.debug(f"Registered callback: {callback_name}")
        else:
            raise ValueError(f"Unknown callback: {callback_name}")

    def get_current_state(self) -> SessionState:
        return self.current_state

    def get_state_duration(self) -> float:
        """Get how long we've been in the current phase (seconds)"""
        return time.time() - self.state_start_time

    def handle(self, event: Event) -> Tuple[Effect, ...]:
        """
        Reduce an event and commit the resulting state.

        Returns:
            Effects the caller must execute (empty if the event was ignored)
        """
        transition = reduce(self.current_state, event, self.settings)
        if transition is None:
            self.logger.debug(
                f"Ignoring {type(event).__name__} in state {self.current_state.phase}",
            )
            return ()

        self._commit(transition)
        return transition.effects

    def _commit(self, transition: Transition):
        old_state = self.current_state
        new_state = transition.state
        if new_state == old_state:
            return

        self.previous_state = old_state
        self.current_state = new_state

        phase_changed = type(new_state.phase) is not type(old_state.phase) or (
            isinstance(new_state.phase, ShowingEmailInput) and new_state.phase != old_state.phase
        )
        if phase_changed:
            self.state_start_time = time.time()

        if transition.reason:
            log_msg = f"State transition: {old_state.phase} -> {new_state.phase} ({transition.reason})"
            self.logger.info(log_msg)

        if self.callbacks["on_state_change"]:
            try:
                self.callbacks["on_state_change"](old_state, new_state)
            except Exception as e:
                self.logger.error(f"Error in state change callback: {e}")

    def get_status_info(self) -> Dict:
        """Get detailed status information for debugging/monitoring"""
        return {
            **self.current_state.to_dict(),
            "previous_phase": (
                self.previous_state.phase.label if self.previous_state else None
            ),
            "state_duration": self.get_state_duration(),
            "settings": self.settings.to_dict(),
            "callbacks_registered": {
                name: callback is not None for name, callback in self.callbacks.items()
            },
        }
