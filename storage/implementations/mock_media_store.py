"""
Mock Media Store Implementation

In-memory media store for testing without filesystem writes.
"""

import asyncio
import logging
from pathlib import Path
from typing import List, Union

from camera.interfaces.camera_interface import PhotoAsset, VideoAsset
from storage.interfaces.media_store_interface import MediaStoreInterface, SaveResult


class MockMediaStore(MediaStoreInterface):
    """
    Mock media store for testing.

    Keeps every saved asset in `saved` so tests can assert on what the
    session persisted.
    """

    def __init__(self, save_delay: float = 0.0):
        self.logger = logging.getLogger(__name__)
        self.save_delay = save_delay

        self.saved: List[Union[PhotoAsset, VideoAsset]] = []
        self.operation_log: List[str] = []

        self._should_fail = False

        self.logger.info("[MOCK] Media store initialized (simulation mode)")

    async def save(self, asset: Union[PhotoAsset, VideoAsset]) -> SaveResult:
        if self.save_delay:
            await asyncio.sleep(self.save_delay)

        kind = "photo" if isinstance(asset, PhotoAsset) else "video"
        self.operation_log.append(f"save_{kind}")

        if self._should_fail:
            self.logger.error(f"[MOCK] Simulated {kind} save failure")
            return SaveResult(success=False, error_message="Simulated save failure")

        self.saved.append(asset)
        location = Path(f"/mock/{kind}s/{kind}_{len(self.saved)}")
        self.logger.debug(f"[MOCK] Saved {kind} -> {location}")
        return SaveResult(success=True, location=location)

    def is_available(self) -> bool:
        return True

    # =========================================================================
    # TESTING HELPER METHODS
    # =========================================================================

    def simulate_failure(self, fail: bool = True) -> None:
        self._should_fail = fail

    @property
    def photos(self) -> List[PhotoAsset]:
        return [a for a in self.saved if isinstance(a, PhotoAsset)]

    @property
    def videos(self) -> List[VideoAsset]:
        return [a for a in self.saved if isinstance(a, VideoAsset)]
