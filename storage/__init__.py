"""
Storage Module

Persists photos and videos captured by the booth.

Architecture mirrors the camera module:
- interfaces/: Abstract base classes (contracts)
- implementations/: Concrete implementations (real and mock)
- utils/: Shared path and disk-space helpers
"""

from storage.factory import StorageFactory, create_store
from storage.interfaces.media_store_interface import (
    MediaStoreInterface,
    SaveResult,
    StorageError,
)

# Public API - what users import
__all__ = [
    "MediaStoreInterface",
    "SaveResult",
    "StorageError",
    "StorageFactory",
    "create_store",
]
