"""
Core capture logic.

Public API:
    - CaptureSession: Runs the capture flows on the event loop
    - StateMachine / reduce: Pure transition logic
    - CaptureSettings: User-selectable durations
    - CaptureMode: Video or photo
    - Countdown / OneShotTimer: Cancellable timers

Usage:
    from core import CaptureSession, CaptureMode

    session = CaptureSession(camera, media_store, email_controller)
    await session.start()
    session.toggle_mode(CaptureMode.PHOTO)
    session.capture_burst()
"""

from core.capture_session import CaptureSession
from core.constants import CaptureMode
from core.countdown import Countdown, OneShotTimer
from core.models import SessionState
from core.policy import CaptureSettings, DurationPolicy, SettingsError
from core.state_machine import StateMachine, Transition, reduce

__all__ = [
    "CaptureMode",
    "CaptureSession",
    "CaptureSettings",
    "Countdown",
    "DurationPolicy",
    "OneShotTimer",
    "SessionState",
    "SettingsError",
    "StateMachine",
    "Transition",
    "reduce",
]
