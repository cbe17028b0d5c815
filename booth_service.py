#!/usr/bin/env python3
"""
Event Booth Service - Main Orchestrator

Runs one capture session on a single camera for the whole event and
lets an operator (or a kiosk front-end) drive it through a control file.

Architecture:
- Event-driven: control-file commands become session actions
- Async: one asyncio loop runs timers, camera, storage and email
- Adapters chosen from config/booth.yaml ("auto", "real" or "mock")

Flows:
    VIDEO:  RECORD → 3s pre-roll → recording → saving → thank-you → idle
    PHOTO:  PHOTO → 3 × (countdown → capture → preview → pause)
            → montage → email dialog → idle

Usage:
    python booth_service.py

Remote control (from SSH or the kiosk):
    echo RECORD > /tmp/booth_control.cmd
    python scripts/remote_control.py email guest@example.com
"""

import asyncio
import logging
import logging.handlers
import signal
import sys
from pathlib import Path
from typing import Optional

from camera import CameraFactory
from config.booth_config import BoothConfig
from config.settings import (
    CONTROL_FILE,
    CONTROL_POLL_INTERVAL,
    DIR_TEMP,
    LOG_BACKUP_COUNT,
    LOG_DIR,
    LOG_SERVICE_FILE,
)
from core.capture_session import CaptureSession
from core.constants import CaptureMode
from core.models import SessionState
from core.policy import SettingsError
from mailer.controllers.email_controller import EmailController
from mailer.factory import EmailFactory
from storage.factory import StorageFactory


class BoothService:
    """
    Main booth service orchestrator.

    Responsibilities:
    - Build camera, media store and email transport from the booth config
    - Own the CaptureSession for the lifetime of the process
    - Poll the control file and translate commands into session actions
    - Persist duration changes back to the booth config
    - Graceful shutdown on SIGTERM/SIGINT
    """

    def __init__(
        self,
        config: Optional[BoothConfig] = None,
        session: Optional[CaptureSession] = None,
        control_file: Optional[Path] = None,
    ):
        """
        Initialize the booth service.

        Args:
            config: Booth configuration (None = load config/booth.yaml)
            session: Prebuilt session (tests); None builds one from config
            control_file: Command file path (None = CONTROL_FILE setting)
        """
        self.logger = logging.getLogger(__name__)
        self.logger.info("Initializing Booth Service...")

        self.config = config or BoothConfig()
        self.control_file = Path(control_file) if control_file else Path(CONTROL_FILE)

        self.running = False
        self._stop_event: Optional[asyncio.Event] = None

        self.session = session or self._build_session()
        self.session.on_state_change = self._handle_state_change
        self.session.on_error = self._handle_session_error

        self.logger.info("Booth Service initialized successfully")

    def _build_session(self) -> CaptureSession:
        """Create adapters through the factories and wire them into a session"""
        self.logger.info("Initializing camera...")
        camera = CameraFactory.create_camera(
            mode=self.config.camera_mode,
            output_dir=self.config.media_store_path / DIR_TEMP,
        )

        self.logger.info("Initializing media store and email...")
        media_store = StorageFactory.create_store(
            mode=self.config.storage_mode,
            base_path=self.config.media_store_path,
        )
        email_controller = EmailController(
            transport=EmailFactory.create_transport(mode=self.config.email_mode),
        )

        return CaptureSession(
            camera=camera,
            media_store=media_store,
            email_controller=email_controller,
            settings=self.config.to_capture_settings(),
        )

    # =========================================================================
    # MAIN LOOP
    # =========================================================================

    async def run(self) -> None:
        """
        Main service loop.

        Runs until a shutdown signal is received or stop() is called.
        """
        self.running = True
        self._stop_event = asyncio.Event()
        self._install_signal_handlers()

        self.logger.info("Starting Booth Service main loop...")

        if not await self.session.start():
            self.logger.warning("Camera not ready - recording will be refused until it is")

        try:
            while self.running:
                self.check_control_commands()
                try:
                    await asyncio.wait_for(self._stop_event.wait(), timeout=CONTROL_POLL_INTERVAL)
                except asyncio.TimeoutError:
                    pass
        finally:
            await self._shutdown()

    def stop(self) -> None:
        """Request the main loop to exit"""
        self.running = False
        if self._stop_event is not None:
            self._stop_event.set()

    # =========================================================================
    # REMOTE CONTROL
    # =========================================================================

    def check_control_commands(self) -> None:
        """
        Check for and process a remote control command.

        The control file holds one command line; it is deleted as soon as
        it is read so a command never runs twice.

        Supported commands:
        - RECORD / STOP: Video flow
        - PHOTO: Start a photo burst
        - MODE [VIDEO|PHOTO]: Switch mode (idle only)
        - EMAIL <address>: Type into the email field
        - TAP / SEND / RETRY / CANCEL / CLOSE / ACK: Email dialog buttons
        - SETTINGS <recording> <burst countdown>: Change durations (idle only)
        - STATUS: Log current state
        """
        if not self.control_file.exists():
            return  # No command waiting - most common case

        try:
            line = self.control_file.read_text().strip()

            # Delete file immediately to prevent re-processing
            self.control_file.unlink()

        except OSError as e:
            self.logger.error(f"Failed to read control command: {e}")
            try:
                self.control_file.unlink(missing_ok=True)
            except OSError as cleanup_error:
                self.logger.debug(f"Control file cleanup failed: {cleanup_error}")
            return

        if not line:
            return

        self.logger.info(f"Remote command received: {line}")
        self.process_remote_command(line)

    def process_remote_command(self, line: str) -> None:
        """
        Process a single remote command line.

        Args:
            line: Command word followed by optional arguments
        """
        command, _, argument = line.partition(" ")
        command = command.upper()
        argument = argument.strip()
        session = self.session

        if command == "RECORD":
            session.record()

        elif command == "STOP":
            session.stop()

        elif command == "PHOTO":
            session.capture_burst()

        elif command == "MODE":
            target = None
            if argument:
                try:
                    target = CaptureMode(argument.lower())
                except ValueError:
                    self.logger.warning(f"Remote MODE ignored - unknown mode '{argument}'")
                    return
            if not session.toggle_mode(target):
                self.logger.warning(
                    f"Remote MODE ignored - state is {session.phase} (must be idle)",
                )

        elif command == "EMAIL":
            # Address keeps its original case
            session.set_email(argument)
            message = session.email_validation_message()
            if message:
                self.logger.info(f"Email field: {message}")

        elif command == "TAP":
            session.tap_dialog()

        elif command == "SEND":
            session.send_email()

        elif command == "RETRY":
            session.retry_email()

        elif command == "CANCEL":
            session.cancel_email()

        elif command == "CLOSE":
            session.close_email()

        elif command == "ACK":
            session.acknowledge_email()

        elif command == "SETTINGS":
            self._apply_settings(argument)

        elif command == "STATUS":
            status = session.get_status()
            self.logger.info(
                f"Remote STATUS → mode: {status['mode']}, phase: {status['phase']}, "
                f"images: {status['images']}, sending: {status['sending']}, "
                f"camera ready: {status['camera_ready']}",
            )

        else:
            self.logger.warning(f"Unknown remote command: {command}")

    def _apply_settings(self, argument: str) -> None:
        parts = argument.split()
        if len(parts) != 2:
            self.logger.warning(
                "Remote SETTINGS ignored - usage: SETTINGS <recording> <burst countdown>",
            )
            return

        try:
            recording, burst = (int(part) for part in parts)
            applied = self.session.update_settings(recording, burst)
        except (ValueError, SettingsError) as e:
            self.logger.warning(f"Remote SETTINGS rejected: {e}")
            return

        if not applied:
            self.logger.warning(
                f"Remote SETTINGS ignored - state is {self.session.phase} (must be idle)",
            )
            return

        self.config.update_capture_settings(self.session.settings)

    # =========================================================================
    # SESSION CALLBACKS
    # =========================================================================

    def _handle_state_change(self, old_state: SessionState, new_state: SessionState) -> None:
        # Countdown ticks arrive every second; only phase changes are logged
        if type(old_state.phase) is not type(new_state.phase):
            self.logger.debug(f"Phase: {old_state.phase} → {new_state.phase}")

    def _handle_session_error(self, code: str, message: str) -> None:
        self.logger.error(f"❌ {message} ({code})")

    # =========================================================================
    # SHUTDOWN HANDLING
    # =========================================================================

    def _install_signal_handlers(self) -> None:
        loop = asyncio.get_running_loop()
        for signum in (signal.SIGTERM, signal.SIGINT):
            try:
                loop.add_signal_handler(signum, self._signal_handler, signum)
            except (NotImplementedError, RuntimeError):
                # Not available outside the main thread or on Windows
                self.logger.debug(f"Signal handler for {signum} not installed")

    def _signal_handler(self, signum: int) -> None:
        signal_name = signal.Signals(signum).name
        self.logger.info(f"Received signal {signal_name}, shutting down...")
        self.stop()

    async def _shutdown(self) -> None:
        """Graceful shutdown: cancel the session's timers and work, release adapters"""
        self.logger.info("Shutting down Booth Service...")
        await self.session.shutdown()
        self.logger.info("Booth Service shutdown complete")


def setup_logging() -> None:
    """
    Setup logging with rotation.

    Logs to both console and file:
    - Daily rotation at midnight
    - Keep LOG_BACKUP_COUNT days of logs
    """
    logger = logging.getLogger()
    logger.setLevel(logging.INFO)

    log_format = logging.Formatter("%(message)s | %(name)s")

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(log_format)
    logger.addHandler(console_handler)

    log_file = Path(LOG_DIR) / LOG_SERVICE_FILE
    try:
        file_handler = _rotating_handler(log_file)
    except (PermissionError, FileNotFoundError):
        # Fallback to local logs directory if LOG_DIR not writable
        logs_dir = Path("logs")
        logs_dir.mkdir(exist_ok=True)

        fallback_log = logs_dir / "booth-service.log"
        logger.warning(f"Cannot write to {log_file}, using fallback: {fallback_log}")
        logger.info(
            f"To fix: sudo mkdir -p {LOG_DIR} && sudo chown $(whoami) {LOG_DIR}",
        )
        file_handler = _rotating_handler(fallback_log)

    file_handler.setFormatter(log_format)
    logger.addHandler(file_handler)


def _rotating_handler(path: Path) -> logging.Handler:
    handler = logging.handlers.TimedRotatingFileHandler(
        str(path),
        when="midnight",
        interval=1,
        backupCount=LOG_BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setLevel(logging.INFO)
    return handler


def main():
    """
    Main entry point for the service.

    Sets up logging and runs the service until a signal arrives.
    """
    setup_logging()

    logger = logging.getLogger(__name__)
    logger.info("=" * 60)
    logger.info("Event Booth Service Starting")
    logger.info("=" * 60)

    try:
        service = BoothService()
        asyncio.run(service.run())
    except KeyboardInterrupt:
        logger.info("Keyboard interrupt received")
    except Exception as e:
        logger.critical(f"Fatal error in main: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
