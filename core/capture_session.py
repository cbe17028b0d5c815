"""
Capture Session

Runs the capture state machine on the asyncio event loop.
Owns the timers, talks to the camera, media store and email controller,
and turns every completion back into an event for the state machine.

This is the high-level controller the booth service (or any UI) uses.

Concurrency model:
- One event loop, no threads except Pillow/file work in to_thread
- Events are queued and reduced one at a time, so a callback fired in
  the middle of a transition waits for that transition to finish
- At most one countdown, one hold, one watchdog per slot, one send
- shutdown() cancels everything and no further transitions happen
"""

import asyncio
import logging
from collections import deque
from typing import Any, Callable, Deque, Dict, Optional, Set

from camera.interfaces.camera_interface import CameraInterface, CaptureError, CaptureResult
from config.settings import COUNTDOWN_TICK_SECONDS
from core.constants import (
    PHOTO_SAVE_FAILED,
    WATCHDOG_SLOTS,
    CaptureMode,
    TimerSlot,
    get_error_message,
)
from core.countdown import Countdown, OneShotTimer
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
from core.models import Phase, SessionState
from core.policy import CaptureSettings
from core.state_machine import StateMachine
from mailer.constants import SendStatus
from mailer.controllers.email_controller import EmailController
from mailer.interfaces.transport_interface import SendResult
from mailer.utils.validation_utils import is_valid_email, validate_email
from storage.interfaces.media_store_interface import MediaStoreInterface, SaveResult


class CaptureSession:
    """
    Event-camera capture session.

    Features:
    - Video: 3s pre-roll, timed recording (30/60/120s), save, thank-you
    - Photo burst: 3 shots with countdown, preview and pause, then montage
    - Email dialog: validation, single-flight send, retry, two watchdogs
    - Mode toggle between video and photo (only while idle)

    Usage:
        session = CaptureSession(camera, media_store, email_controller)
        session.on_state_change = lambda old, new: render(new)
        session.on_error = lambda code, message: show_alert(message)

        await session.start()
        session.record()          # video flow
        ...
        session.toggle_mode()     # photo mode
        session.capture_burst()   # photo flow
        ...
        session.set_email("guest@example.com")
        session.send_email()

        await session.shutdown()
    """

    def __init__(
        self,
        camera: CameraInterface,
        media_store: MediaStoreInterface,
        email_controller: EmailController,
        settings: Optional[CaptureSettings] = None,
        time_scale: float = 1.0,
        initial_mode: CaptureMode = CaptureMode.VIDEO,
    ):
        """
        Initialize capture session.

        Args:
            camera: Camera used for recordings and photos
            media_store: Where captured media is saved
            email_controller: Sends burst photos
            settings: User-selectable durations (None = defaults)
            time_scale: Real seconds per session second (tests use 0.01)
            initial_mode: Mode shown at startup

        Example:
            session = CaptureSession(MockCamera(), MockMediaStore(),
                                     EmailController(MockEmailTransport()),
                                     time_scale=0.01)
        """
        self.logger = logging.getLogger(__name__)

        self.camera = camera
        self.media_store = media_store
        self.email_controller = email_controller
        self.settings = settings or CaptureSettings()
        self.time_scale = time_scale

        self.state_machine = StateMachine(self.settings, initial_mode)
        self.state_machine.register_callback("on_state_change", self._trigger_state_change_callback)

        # Timers (one per slot)
        self._countdown = Countdown("session", tick_interval=COUNTDOWN_TICK_SECONDS * time_scale)
        self._timers: Dict[TimerSlot, OneShotTimer] = {
            slot: OneShotTimer(slot.value, time_scale=time_scale)
            for slot in (TimerSlot.HOLD,) + WATCHDOG_SLOTS
        }

        # Event queue
        self._pending: Deque[Event] = deque()
        self._dispatching = False

        # Adapter work in flight
        self._tasks: Set[asyncio.Task] = set()
        self._recording_start_task: Optional[asyncio.Task] = None
        self._send_task: Optional[asyncio.Task] = None
        self._closed = False

        # Callbacks (set by the presentation layer)
        self.on_state_change: Optional[Callable[[SessionState, SessionState], None]] = None
        self.on_error: Optional[Callable[[str, str], None]] = None

        self._effect_handlers: Dict[type, Callable[[Any], None]] = {
            StartCountdown: self._start_countdown,
            StartHold: self._start_hold,
            StartWatchdog: self._start_watchdog,
            CancelTimer: self._cancel_timer,
            StartRecording: self._handle_start_recording,
            StopRecording: self._handle_stop_recording,
            CapturePhoto: self._handle_capture_photo,
            SaveVideo: self._handle_save_video,
            SavePhoto: self._handle_save_photo,
            SendEmail: self._handle_send_email,
            CancelEmailSend: self._handle_cancel_send,
            ReportError: self._handle_report_error,
        }

        self.logger.info(
            f"Capture session initialized "
            f"(recording: {self.settings.countdown_duration}s, "
            f"burst countdown: {self.settings.photo_burst_countdown_duration}s)"
        )

    # =========================================================================
    # STATE ACCESS
    # =========================================================================

    @property
    def state(self) -> SessionState:
        return self.state_machine.current_state

    @property
    def phase(self) -> Phase:
        return self.state.phase

    @property
    def mode(self) -> CaptureMode:
        return self.state.mode

    @property
    def images(self) -> tuple:
        return self.state.images

    @property
    def email_input(self) -> str:
        return self.state.email_input

    @property
    def is_closed(self) -> bool:
        return self._closed

    @property
    def is_sending(self) -> bool:
        return self._send_task is not None and not self._send_task.done()

    @property
    def can_send(self) -> bool:
        """Whether the dialog's send button is enabled"""
        return bool(self.images) and is_valid_email(self.email_input.strip())

    def email_validation_message(self) -> Optional[str]:
        """Message to show under the email field (None if valid)"""
        return validate_email(self.email_input)

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    async def start(self) -> bool:
        """
        Start the camera session.

        Returns:
            True if the camera is ready to capture
        """
        try:
            started = await self.camera.start_session()
        except CaptureError as e:
            self.logger.error(f"❌ Camera session failed to start: {e}")
            return False

        if started:
            self.logger.info("✅ Capture session ready")
        else:
            self.logger.warning("Camera session not running, recording will be refused")
        return started

    async def shutdown(self) -> None:
        """
        Cancel every timer and in-flight operation and release adapters.

        No transitions happen after this call; late events are dropped.
        """
        if self._closed:
            return
        self._closed = True
        self._pending.clear()

        self.logger.info("Shutting down capture session...")

        self._countdown.cancel()
        for timer in self._timers.values():
            timer.cancel()

        tasks = [task for task in self._tasks if not task.done()]
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

        try:
            await self.camera.stop_session()
            await self.camera.cleanup()
        except Exception as e:
            self.logger.error(f"Error releasing camera: {e}")

        try:
            await self.email_controller.close()
        except Exception as e:
            self.logger.error(f"Error closing email transport: {e}")

        self.logger.info("Capture session shut down")

    # =========================================================================
    # GUEST ACTIONS
    # =========================================================================

    def record(self) -> None:
        """Record button (video mode)"""
        self.dispatch(
            RecordTapped(
                camera_authorized=self.camera.is_authorized(),
                camera_running=self.camera.is_session_running(),
            )
        )

    def stop(self) -> None:
        """Stop button while recording"""
        self.dispatch(StopTapped())

    def capture_burst(self) -> None:
        """Shutter button (photo mode)"""
        self.dispatch(CaptureTapped())

    def toggle_mode(self, target: Optional[CaptureMode] = None) -> bool:
        """
        Switch between video and photo mode.

        Args:
            target: Mode to switch to (None = the other one)

        Returns:
            True if the mode changed (only possible while idle)
        """
        before = self.mode
        self.dispatch(ModeToggled(target))
        return self.mode != before

    def set_email(self, text: str) -> None:
        self.dispatch(EmailEdited(text))

    def tap_dialog(self) -> None:
        self.dispatch(DialogTapped())

    def send_email(self) -> None:
        self.dispatch(SendTapped())

    def retry_email(self) -> None:
        self.dispatch(RetryTapped())

    def cancel_email(self) -> None:
        self.dispatch(CancelTapped())

    def close_email(self) -> None:
        self.dispatch(CloseTapped())

    def acknowledge_email(self) -> None:
        self.dispatch(AcknowledgeTapped())

    def update_settings(
        self,
        countdown_duration: Optional[int] = None,
        photo_burst_countdown_duration: Optional[int] = None,
    ) -> bool:
        """
        Change capture durations.

        Only allowed while idle; a running flow keeps the durations it
        started with.

        Returns:
            True if applied, False if a flow is in progress

        Raises:
            SettingsError: If a value is not one of the allowed choices
        """
        if not self.state.is_idle:
            self.logger.warning(f"Settings change refused in state {self.phase}")
            return False

        updated = CaptureSettings(
            countdown_duration=(
                self.settings.countdown_duration if countdown_duration is None else countdown_duration
            ),
            photo_burst_countdown_duration=(
                self.settings.photo_burst_countdown_duration
                if photo_burst_countdown_duration is None
                else photo_burst_countdown_duration
            ),
        )
        self.settings.countdown_duration = updated.countdown_duration
        self.settings.photo_burst_countdown_duration = updated.photo_burst_countdown_duration

        self.logger.info(f"Capture settings updated: {self.settings.to_dict()}")
        return True

    # =========================================================================
    # EVENT DISPATCH
    # =========================================================================

    def dispatch(self, event: Event) -> None:
        """
        Feed an event to the state machine and run the resulting effects.

        Re-entrant calls (from effects or callbacks) are queued and run
        after the current event, in order.
        """
        if self._closed:
            self.logger.debug(f"Session closed, dropping {type(event).__name__}")
            return

        self._pending.append(event)
        if self._dispatching:
            return

        self._dispatching = True
        try:
            while self._pending and not self._closed:
                effects = self.state_machine.handle(self._pending.popleft())
                for effect in effects:
                    self._run_effect(effect)
        finally:
            self._dispatching = False

    def _run_effect(self, effect: Effect) -> None:
        handler = self._effect_handlers[type(effect)]
        try:
            handler(effect)
        except Exception as e:
            self.logger.error(f"Error running {type(effect).__name__}: {e}", exc_info=True)

    # =========================================================================
    # TIMER EFFECTS
    # =========================================================================

    def _start_countdown(self, effect: StartCountdown) -> None:
        self._countdown.start(
            effect.seconds,
            on_tick=lambda remaining: self.dispatch(CountdownTicked(remaining)),
            on_complete=lambda: self.dispatch(CountdownFinished()),
        )

    def _start_hold(self, effect: StartHold) -> None:
        kind = effect.kind
        self._timers[TimerSlot.HOLD].start(effect.seconds, lambda: self.dispatch(HoldElapsed(kind)))

    def _start_watchdog(self, effect: StartWatchdog) -> None:
        slot = effect.slot
        self._timers[slot].start(effect.seconds, lambda: self.dispatch(WatchdogFired(slot)))

    def _cancel_timer(self, effect: CancelTimer) -> None:
        if effect.slot is TimerSlot.COUNTDOWN:
            self._countdown.cancel()
        else:
            self._timers[effect.slot].cancel()

    # =========================================================================
    # CAMERA EFFECTS
    # =========================================================================

    def _handle_start_recording(self, effect: StartRecording) -> None:
        self._recording_start_task = self._spawn(self._start_recording(), "start-recording")

    def _handle_stop_recording(self, effect: StopRecording) -> None:
        self._spawn(self._stop_recording(), "stop-recording")

    def _handle_capture_photo(self, effect: CapturePhoto) -> None:
        self._spawn(self._capture_photo(effect.shot), f"capture-photo-{effect.shot}")

    async def _start_recording(self) -> None:
        try:
            started = await self.camera.start_recording()
            error = None if started else "Camera did not start recording"
        except CaptureError as e:
            started, error = False, str(e)

        if started:
            self.logger.info("✅ Recording started")
            return

        self.logger.error(f"❌ Failed to start recording: {error}")
        self.dispatch(RecordingFinished(CaptureResult(success=False, error_message=error)))

    async def _stop_recording(self) -> None:
        # A stop issued during camera warmup waits for the start to settle
        start_task = self._recording_start_task
        if start_task is not None and not start_task.done():
            await asyncio.wait({start_task})
        self._recording_start_task = None

        try:
            result = await self.camera.stop_recording()
        except Exception as e:
            self.logger.error(f"Error stopping recording: {e}")
            result = CaptureResult(success=False, error_message=str(e))

        self.dispatch(RecordingFinished(result))

    async def _capture_photo(self, shot: int) -> None:
        try:
            result = await self.camera.capture_photo()
        except Exception as e:
            self.logger.error(f"Error capturing photo {shot}: {e}")
            result = CaptureResult(success=False, error_message=str(e))

        if not result.success:
            self.logger.warning(f"Shot {shot} failed: {result.error_message}")

        self.dispatch(PhotoCaptured(result))

    # =========================================================================
    # STORAGE EFFECTS
    # =========================================================================

    def _handle_save_video(self, effect: SaveVideo) -> None:
        self._spawn(self._save_video(effect.asset), "save-video")

    def _handle_save_photo(self, effect: SavePhoto) -> None:
        self._spawn(self._save_photo(effect.asset), "save-photo")

    async def _save_video(self, asset) -> None:
        result = await self._save(asset)
        self.dispatch(VideoSaved(result))

    async def _save_photo(self, asset) -> None:
        # Photo saves never change the phase; the burst carries on
        result = await self._save(asset)
        if not result.success:
            self._trigger_error_callback(
                PHOTO_SAVE_FAILED,
                result.error_message or get_error_message(PHOTO_SAVE_FAILED),
            )

    async def _save(self, asset) -> SaveResult:
        try:
            return await self.media_store.save(asset)
        except Exception as e:
            self.logger.error(f"Error saving {type(asset).__name__}: {e}")
            return SaveResult(success=False, error_message=str(e))

    # =========================================================================
    # EMAIL EFFECTS
    # =========================================================================

    def _handle_send_email(self, effect: SendEmail) -> None:
        if self.is_sending:
            self.logger.warning("Email send already in flight, ignoring")
            return
        self._send_task = self._spawn(self._send_email(effect.recipient, effect.images), "send-email")

    def _handle_cancel_send(self, effect: CancelEmailSend) -> None:
        if self.is_sending:
            self._send_task.cancel()
            self.logger.info("In-flight email send cancelled")
        self._send_task = None

    async def _send_email(self, recipient: str, images: tuple) -> None:
        try:
            result = await self.email_controller.send_photos(recipient, images)
        except Exception as e:
            self.logger.error(f"Error sending email: {e}", exc_info=True)
            result = SendResult(
                success=False,
                status=SendStatus.NETWORK_ERROR,
                error_message=f"Network error: {e}",
            )

        self._send_task = None
        self.dispatch(EmailSendCompleted(result))

    # =========================================================================
    # PRESENTATION
    # =========================================================================

    def _handle_report_error(self, effect: ReportError) -> None:
        self._trigger_error_callback(effect.code, effect.message)

    def _trigger_state_change_callback(self, old_state: SessionState, new_state: SessionState) -> None:
        if self.on_state_change:
            try:
                self.on_state_change(old_state, new_state)
            except Exception as e:
                self.logger.error(f"Error in state change callback: {e}")

    def _trigger_error_callback(self, code: str, message: str) -> None:
        self.logger.warning(f"Session error [{code}]: {message}")

        if self.on_error:
            try:
                self.on_error(code, message)
            except Exception as e:
                self.logger.error(f"Error in error callback: {e}")

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _spawn(self, coro, name: str) -> asyncio.Task:
        task = asyncio.create_task(coro, name=name)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def get_status(self) -> Dict[str, Any]:
        """Get current session status (for STATUS command and debugging)"""
        status = self.state_machine.get_status_info()
        status.update(
            {
                "camera_recording": self.camera.is_recording(),
                "camera_ready": self.camera.is_session_running(),
                "sending": self.is_sending,
                "closed": self._closed,
            }
        )
        return status
