"""
Booth Config Tests

Tests for the YAML booth configuration showing:
- Defaults and default file creation
- File values overriding defaults
- Validation of durations and adapter modes
- Persisting updated capture settings

To run:
    pytest tests/config/test_booth_config.py -v
"""

import pytest
import yaml

from config.booth_config import BoothConfig
from core.policy import CaptureSettings, SettingsError


@pytest.fixture
def config_path(tmp_path):
    return tmp_path / "booth.yaml"


@pytest.mark.unit
def test_missing_file_uses_defaults_and_writes_them(config_path):
    config = BoothConfig(config_path)

    assert config.countdown_duration == 30
    assert config.photo_burst_countdown_duration == 5
    assert config.camera_mode == "auto"
    assert config_path.exists()

    written = yaml.safe_load(config_path.read_text())
    assert written["countdown_duration"] == 30
    assert written["email_mode"] == "auto"


@pytest.mark.unit
def test_file_values_override_defaults(config_path):
    config_path.write_text(
        yaml.dump(
            {
                "countdown_duration": 120,
                "photo_burst_countdown_duration": 10,
                "camera_mode": "mock",
                "media_store_path": "/srv/booth",
            }
        )
    )

    config = BoothConfig(config_path)

    assert config.countdown_duration == 120
    assert config.photo_burst_countdown_duration == 10
    assert config.camera_mode == "mock"
    assert str(config.media_store_path) == "/srv/booth"
    # Untouched keys keep their defaults
    assert config.storage_mode == "auto"


@pytest.mark.unit
def test_empty_file_uses_defaults(config_path):
    config_path.write_text("")

    assert BoothConfig(config_path).countdown_duration == 30


@pytest.mark.unit
def test_unreadable_yaml_falls_back_to_defaults(config_path):
    config_path.write_text("countdown_duration: [unclosed")

    config = BoothConfig(config_path)

    assert config.countdown_duration == 30


@pytest.mark.unit
def test_invalid_duration_is_rejected(config_path):
    config_path.write_text(yaml.dump({"countdown_duration": 45}))

    with pytest.raises(SettingsError):
        BoothConfig(config_path)


@pytest.mark.unit
def test_invalid_adapter_mode_is_rejected(config_path):
    config_path.write_text(yaml.dump({"email_mode": "smtp"}))

    with pytest.raises(ValueError, match="email_mode"):
        BoothConfig(config_path)


@pytest.mark.unit
def test_to_capture_settings(config_path):
    config_path.write_text(yaml.dump({"countdown_duration": 60, "photo_burst_countdown_duration": 8}))

    settings = BoothConfig(config_path).to_capture_settings()

    assert settings == CaptureSettings(countdown_duration=60, photo_burst_countdown_duration=8)


@pytest.mark.unit
def test_update_capture_settings_persists(config_path):
    config = BoothConfig(config_path)

    config.update_capture_settings(CaptureSettings(countdown_duration=60, photo_burst_countdown_duration=10))

    reloaded = BoothConfig(config_path)
    assert reloaded.countdown_duration == 60
    assert reloaded.photo_burst_countdown_duration == 10


@pytest.mark.unit
def test_update_without_save_keeps_file(config_path):
    config = BoothConfig(config_path)

    config.update_capture_settings(CaptureSettings(countdown_duration=120), save=False)

    assert config.countdown_duration == 120
    assert BoothConfig(config_path).countdown_duration == 30


@pytest.mark.unit
def test_get_and_to_dict(config_path):
    config = BoothConfig(config_path)

    assert config.get("camera_mode") == "auto"
    assert config.get("missing", "fallback") == "fallback"
    assert config.to_dict()["photo_burst_countdown_duration"] == 5
    assert "booth.yaml" in repr(config)
