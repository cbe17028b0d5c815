"""
Media Store Tests

Tests for LocalMediaStore, MockMediaStore and the path helpers.

To run:
    pytest tests/storage/test_media_store.py -v
"""

from datetime import datetime

import pytest

from camera.interfaces.camera_interface import PhotoAsset, VideoAsset
from storage.factory import StorageFactory
from storage.implementations.local_media_store import LocalMediaStore
from storage.implementations.mock_media_store import MockMediaStore
from storage.utils.path_utils import (
    check_disk_space,
    ensure_directory,
    generate_filename,
)

CAPTURED_AT = datetime(2025, 6, 14, 18, 30, 5, 123456)


@pytest.fixture
def local_store(tmp_path):
    return LocalMediaStore(tmp_path / "captures")


# =============================================================================
# LOCAL MEDIA STORE
# =============================================================================


@pytest.mark.unit
def test_local_store_creates_directories(local_store):
    assert local_store.photos_dir.is_dir()
    assert local_store.videos_dir.is_dir()
    assert local_store.is_available() is True


@pytest.mark.unit
async def test_save_photo_writes_jpeg(local_store):
    asset = PhotoAsset(data=b"\xff\xd8jpeg", width=1, height=1, captured_at=CAPTURED_AT)

    result = await local_store.save(asset)

    assert result.success is True
    assert result.location.parent == local_store.photos_dir
    assert result.location.name == "photo_2025-06-14_183005_123456.jpg"
    assert result.location.read_bytes() == b"\xff\xd8jpeg"


@pytest.mark.unit
async def test_save_video_moves_recording(local_store, tmp_path):
    recording = tmp_path / "tmp" / "rec.mp4"
    recording.parent.mkdir()
    recording.write_bytes(b"video")

    result = await local_store.save(VideoAsset(path=recording, duration=30.0, captured_at=CAPTURED_AT))

    assert result.success is True
    assert result.location.parent == local_store.videos_dir
    assert result.location.read_bytes() == b"video"
    assert not recording.exists()


@pytest.mark.unit
async def test_save_missing_video_fails(local_store, tmp_path):
    result = await local_store.save(VideoAsset(path=tmp_path / "gone.mp4", duration=1.0))

    assert result.success is False
    assert "Recording not found" in result.error_message


@pytest.mark.unit
async def test_photos_with_same_timestamp_do_not_overwrite(local_store):
    first = await local_store.save(PhotoAsset(data=b"1", width=1, height=1, captured_at=CAPTURED_AT))
    second = await local_store.save(PhotoAsset(data=b"2", width=1, height=1, captured_at=CAPTURED_AT))

    assert first.location != second.location
    assert second.location.read_bytes() == b"2"


# =============================================================================
# MOCK MEDIA STORE
# =============================================================================


@pytest.mark.unit
async def test_mock_store_records_saves():
    store = MockMediaStore()

    await store.save(PhotoAsset(data=b"1", width=1, height=1))
    await store.save(VideoAsset(path="/tmp/x.mp4", duration=1.0))

    assert len(store.photos) == 1
    assert len(store.videos) == 1
    assert store.operation_log == ["save_photo", "save_video"]


@pytest.mark.unit
async def test_mock_store_simulated_failure():
    store = MockMediaStore()
    store.simulate_failure()

    result = await store.save(PhotoAsset(data=b"1", width=1, height=1))

    assert result.success is False
    assert store.saved == []


@pytest.mark.unit
def test_factory_modes(tmp_path):
    assert isinstance(StorageFactory.create_store(mode="mock"), MockMediaStore)
    assert isinstance(StorageFactory.create_store(mode="auto", base_path=tmp_path), LocalMediaStore)


# =============================================================================
# PATH UTILS
# =============================================================================


@pytest.mark.unit
def test_ensure_directory(tmp_path):
    target = tmp_path / "a" / "b"

    assert ensure_directory(target, create=False) is False
    assert ensure_directory(target) is True
    assert target.is_dir()


@pytest.mark.unit
def test_ensure_directory_rejects_file(tmp_path):
    file_path = tmp_path / "file"
    file_path.write_text("x")

    assert ensure_directory(file_path) is False


@pytest.mark.unit
def test_generate_filename_adds_suffix_on_collision(tmp_path):
    first = generate_filename(tmp_path, "video_%Y.mp4", CAPTURED_AT)
    first.touch()

    second = generate_filename(tmp_path, "video_%Y.mp4", CAPTURED_AT)

    assert first.name == "video_2025.mp4"
    assert second.name == "video_2025_1.mp4"


@pytest.mark.unit
def test_disk_space_helpers(tmp_path):
    assert check_disk_space(tmp_path, 1) is True
    assert check_disk_space(tmp_path, 10**18) is False
