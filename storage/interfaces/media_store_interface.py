"""
Media Store Interface

Abstract interface for persisting captured media following Dependency
Inversion Principle. The capture session depends on this interface,
not on the filesystem.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from camera.interfaces.camera_interface import PhotoAsset, VideoAsset


@dataclass(frozen=True)
class SaveResult:
    """
    Result of a save operation.

    Attributes:
        success: True if the asset is stored
        location: Final path of the stored file (if successful)
        error_message: Error description (if failed)
    """

    success: bool
    location: Optional[Path] = None
    error_message: Optional[str] = None


class MediaStoreInterface(ABC):
    """
    Abstract base class for media stores.

    Photos are saved on each successful shot, videos when a recording
    finishes. Implementations report failures through SaveResult and
    never raise from save().
    """

    @abstractmethod
    async def save(self, asset: Union[PhotoAsset, VideoAsset]) -> SaveResult:
        """
        Persist a captured asset.

        Args:
            asset: PhotoAsset (JPEG bytes) or VideoAsset (finished file)

        Returns:
            SaveResult with the stored location
        """

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the store can accept files"""


class StorageError(Exception):
    """Exception raised for media store errors"""

    pass
