"""
Media Store Factory

Factory pattern for creating media store implementations.
Follows the same pattern as camera/factory.py.
"""

import logging
from pathlib import Path
from typing import Literal, Optional

from config.settings import MEDIA_STORE_PATH
from storage.implementations.local_media_store import LocalMediaStore
from storage.implementations.mock_media_store import MockMediaStore
from storage.interfaces.media_store_interface import MediaStoreInterface

# Type alias for better type hints
StorageMode = Literal["auto", "real", "mock"]


class StorageFactory:
    """
    Factory for creating media store implementations.

    Usage:
        # Auto-detect (uses real storage)
        store = StorageFactory.create_store()

        # Force mock mode (useful for testing)
        store = StorageFactory.create_store(mode="mock")
    """

    _logger = logging.getLogger(__name__)

    @classmethod
    def create_store(
        cls,
        mode: StorageMode = "auto",
        base_path: Optional[Path] = None,
    ) -> MediaStoreInterface:
        """
        Create a media store instance.

        Args:
            mode: "auto" (use real), "real" (force real), "mock" (force simulation)
            base_path: Root directory for stored media (None = settings default)

        Returns:
            MediaStoreInterface implementation (LocalMediaStore or MockMediaStore)
        """
        if mode == "mock":
            cls._logger.info("Creating Mock Media Store (forced)")
            return MockMediaStore()

        # "auto" or "real" - local storage is always available, so no
        # fallback to mock here (StorageError propagates)
        cls._logger.info("Creating Local Media Store")
        return LocalMediaStore(Path(base_path) if base_path else MEDIA_STORE_PATH)


def create_store(force_mock: bool = False) -> MediaStoreInterface:
    """Quick media store creation"""
    return StorageFactory.create_store(mode="mock" if force_mock else "auto")
