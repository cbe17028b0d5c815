"""
Booth Configuration Handler

Manages the YAML configuration file for per-event booth settings.
Provides defaults and validation.
"""

import logging
from pathlib import Path
from typing import Any, Dict

import yaml

from config.settings import (
    BOOTH_CONFIG_PATH,
    DEFAULT_COUNTDOWN_DURATION,
    DEFAULT_PHOTO_BURST_COUNTDOWN_DURATION,
    MEDIA_STORE_PATH,
)
from core.policy import CaptureSettings

ADAPTER_MODES = ("auto", "real", "mock")


class BoothConfig:
    """
    Booth configuration with YAML file support.

    Reads from config/booth.yaml if it exists, otherwise uses defaults
    from config/settings.py and writes them out so the operator has a
    file to edit.

    Usage:
        config = BoothConfig()
        settings = config.to_capture_settings()
        store_path = config.media_store_path
    """

    DEFAULT_CONFIG_PATH = Path(BOOTH_CONFIG_PATH)

    def __init__(self, config_path: Path = None):
        """
        Initialize configuration.

        Args:
            config_path: Path to YAML config file (None = use default)
        """
        self.logger = logging.getLogger(__name__)
        self.config_path = Path(config_path) if config_path else self.DEFAULT_CONFIG_PATH

        self._config = self._load_config()

        self.logger.info(f"Booth config loaded from {self.config_path}")

    def _get_defaults(self) -> Dict[str, Any]:
        return {
            # Capture durations
            "countdown_duration": DEFAULT_COUNTDOWN_DURATION,
            "photo_burst_countdown_duration": DEFAULT_PHOTO_BURST_COUNTDOWN_DURATION,
            # Output
            "media_store_path": str(MEDIA_STORE_PATH),
            # Adapter selection: auto, real or mock
            "camera_mode": "auto",
            "storage_mode": "auto",
            "email_mode": "auto",
        }

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from YAML file or use defaults"""
        config = self._get_defaults()

        if self.config_path.exists():
            try:
                with open(self.config_path, "r") as f:
                    file_config = yaml.safe_load(f) or {}

                # File overrides defaults
                config.update(file_config)

                self.logger.info(f"Loaded config from {self.config_path}")

            except (OSError, yaml.YAMLError) as e:
                self.logger.warning(
                    f"Failed to load config from {self.config_path}: {e}. "
                    f"Using defaults."
                )
        else:
            self.logger.info(
                f"Config file not found at {self.config_path}. "
                f"Using defaults. Creating default config file..."
            )
            self._save_config(config)

        self._validate_config(config)

        return config

    def _validate_config(self, config: Dict[str, Any]) -> None:
        """Validate configuration values (raises ValueError)"""
        # Raises SettingsError for out-of-range durations
        CaptureSettings(
            countdown_duration=config["countdown_duration"],
            photo_burst_countdown_duration=config["photo_burst_countdown_duration"],
        )

        for key in ("camera_mode", "storage_mode", "email_mode"):
            if config[key] not in ADAPTER_MODES:
                raise ValueError(f"{key} must be one of {ADAPTER_MODES}: {config[key]}")

        if not config["media_store_path"]:
            raise ValueError("media_store_path cannot be empty")

    def _save_config(self, config: Dict[str, Any] = None) -> None:
        """Save configuration to YAML file"""
        if config is None:
            config = self._config

        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)

            with open(self.config_path, "w") as f:
                yaml.dump(
                    config,
                    f,
                    default_flow_style=False,
                    sort_keys=False,
                    indent=2,
                )

            self.logger.info(f"Config saved to {self.config_path}")

        except OSError as e:
            self.logger.error(f"Failed to save config: {e}")

    # =========================================================================
    # PROPERTY ACCESSORS
    # =========================================================================

    @property
    def countdown_duration(self) -> int:
        """Video recording length in seconds"""
        return self._config["countdown_duration"]

    @property
    def photo_burst_countdown_duration(self) -> int:
        """Per-shot countdown during a photo burst"""
        return self._config["photo_burst_countdown_duration"]

    @property
    def media_store_path(self) -> Path:
        return Path(self._config["media_store_path"])

    @property
    def camera_mode(self) -> str:
        return self._config["camera_mode"]

    @property
    def storage_mode(self) -> str:
        return self._config["storage_mode"]

    @property
    def email_mode(self) -> str:
        return self._config["email_mode"]

    # =========================================================================
    # UTILITY METHODS
    # =========================================================================

    def to_capture_settings(self) -> CaptureSettings:
        """Build the CaptureSettings the session starts with"""
        return CaptureSettings(
            countdown_duration=self.countdown_duration,
            photo_burst_countdown_duration=self.photo_burst_countdown_duration,
        )

    def update_capture_settings(self, settings: CaptureSettings, save: bool = True) -> None:
        """
        Store new durations (e.g. after the operator changed them).

        Args:
            settings: Validated capture settings
            save: If True, write the file immediately
        """
        self._config.update(settings.to_dict())

        if save:
            self._save_config()

    def get(self, key: str, default: Any = None) -> Any:
        return self._config.get(key, default)

    def to_dict(self) -> Dict[str, Any]:
        return self._config.copy()

    def __repr__(self) -> str:
        return f"BoothConfig(path={self.config_path})"
