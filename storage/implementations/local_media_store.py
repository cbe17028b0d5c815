"""
Local Media Store Implementation

Filesystem media store: photos are written as timestamped JPEG files,
finished recordings are moved out of the camera's temp directory.

Directory structure:
    base_path/
    ├── photos/    # photo_YYYY-MM-DD_HHMMSS_ffffff.jpg
    └── videos/    # video_YYYY-MM-DD_HHMMSS.mp4
"""

import asyncio
import logging
import shutil
from pathlib import Path
from typing import Union

from camera.interfaces.camera_interface import PhotoAsset, VideoAsset
from config.settings import (
    DIR_PHOTOS,
    DIR_VIDEOS,
    MEDIA_STORE_PATH,
    PHOTO_FILENAME_PATTERN,
    VIDEO_FILENAME_PATTERN,
)
from storage.interfaces.media_store_interface import (
    MediaStoreInterface,
    SaveResult,
    StorageError,
)
from storage.utils.path_utils import ensure_directory, generate_filename


class LocalMediaStore(MediaStoreInterface):
    """
    Local filesystem media store.

    File writes run in a worker thread (asyncio.to_thread) so a slow SD
    card never stalls countdown ticks.

    Usage:
        store = LocalMediaStore(Path("/home/pi/captures"))
        result = await store.save(photo_asset)
        print(result.location)
    """

    def __init__(self, base_path: Path = MEDIA_STORE_PATH):
        """
        Initialize local media store.

        Args:
            base_path: Root directory for stored media

        Raises:
            StorageError: If the directories cannot be created
        """
        self.logger = logging.getLogger(__name__)
        self.base_path = Path(base_path)
        self.photos_dir = self.base_path / DIR_PHOTOS
        self.videos_dir = self.base_path / DIR_VIDEOS

        for directory in (self.photos_dir, self.videos_dir):
            if not ensure_directory(directory):
                raise StorageError(f"Cannot create directory: {directory}")

        self.logger.info(f"Local media store initialized at {self.base_path}")

    async def save(self, asset: Union[PhotoAsset, VideoAsset]) -> SaveResult:
        try:
            if isinstance(asset, PhotoAsset):
                location = await asyncio.to_thread(self._write_photo, asset)
            elif isinstance(asset, VideoAsset):
                location = await asyncio.to_thread(self._move_video, asset)
            else:
                raise StorageError(f"Unsupported asset type: {type(asset).__name__}")

        except (OSError, StorageError) as e:
            self.logger.error(f"❌ Failed to save {type(asset).__name__}: {e}")
            return SaveResult(success=False, error_message=str(e))

        self.logger.info(f"✅ Saved {location.name}")
        return SaveResult(success=True, location=location)

    def _write_photo(self, asset: PhotoAsset) -> Path:
        path = generate_filename(self.photos_dir, PHOTO_FILENAME_PATTERN, asset.captured_at)
        path.write_bytes(asset.data)
        return path

    def _move_video(self, asset: VideoAsset) -> Path:
        source = Path(asset.path)
        if not source.exists():
            raise StorageError(f"Recording not found: {source}")

        destination = generate_filename(self.videos_dir, VIDEO_FILENAME_PATTERN, asset.captured_at)
        shutil.move(str(source), str(destination))
        return destination

    def is_available(self) -> bool:
        return self.photos_dir.is_dir() and self.videos_dir.is_dir()
