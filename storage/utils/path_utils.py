"""
Path Utilities

Helper functions for directory operations, timestamped filenames and
free-space checks. Shared by the media store and the FFmpeg camera.
"""

import logging
import shutil
from datetime import datetime
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


def ensure_directory(path: Path, create: bool = True) -> bool:
    """
    Ensure directory exists.

    Args:
        path: Directory path
        create: If True, create if doesn't exist

    Returns:
        True if directory exists or was created

    Example:
        ensure_directory(Path("./captures/photos"))
    """
    try:
        if path.exists():
            if not path.is_dir():
                logger.error(f"Path exists but is not a directory: {path}")
                return False
            return True

        if create:
            path.mkdir(parents=True, exist_ok=True)
            logger.debug(f"Created directory: {path}")
            return True

        return False

    except OSError as e:
        logger.error(f"Failed to create directory {path}: {e}")
        return False


def generate_filename(
    base_path: Path,
    pattern: str,
    timestamp: Optional[datetime] = None,
) -> Path:
    """
    Generate a timestamped, non-colliding file path.

    If a file with the generated name already exists, a numeric suffix
    is added before the extension.

    Args:
        base_path: Directory where file will be saved
        pattern: strftime pattern including the extension
        timestamp: Time to format (default: now)

    Returns:
        Complete file path

    Example:
        path = generate_filename(Path("/captures/videos"), "video_%Y-%m-%d_%H%M%S.mp4")
        # Returns: /captures/videos/video_2025-01-15_143022.mp4
    """
    name = (timestamp or datetime.now()).strftime(pattern)
    candidate = base_path / name

    counter = 1
    while candidate.exists():
        candidate = base_path / f"{Path(name).stem}_{counter}{Path(name).suffix}"
        counter += 1

    return candidate


def check_disk_space(path: Path, required_bytes: int) -> bool:
    """
    Check if sufficient disk space is available.

    Args:
        path: Path to check (must exist)
        required_bytes: Minimum required free space

    Returns:
        True if enough space available, False otherwise
    """
    try:
        stat = shutil.disk_usage(path)
        return stat.free >= required_bytes

    except OSError as e:
        logger.error(f"Error checking disk space: {e}")
        return False
