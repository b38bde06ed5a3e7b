from __future__ import annotations
"""
Image discovery for the watched directory.

This module lists the files the viewer should show: every file below the
watched directory whose name matches the configured glob, compared
case-insensitively, in a stable order.
"""

import fnmatch
import logging
from pathlib import Path

from .config import DEFAULT_PATTERN

logger = logging.getLogger(__name__)

def find_images(image_folder: Path, pattern: str = DEFAULT_PATTERN) -> list[Path]:
    """
    Scan a directory recursively for files matching `pattern`.

    Args:
        image_folder: The directory path to scan.
        pattern: Shell-style glob matched against the lower-cased file name.

    Returns:
        A list of Path objects sorted by full path.
        Returns an empty list if the folder doesn't exist or nothing matches.
    """
    if not image_folder.is_dir():
        logger.error(f"The watched folder '{image_folder}' does not exist or is not a directory.")
        return []

    lowered_pattern = pattern.lower()
    matches = [
        item for item in image_folder.rglob('*')
        if item.is_file() and fnmatch.fnmatchcase(item.name.lower(), lowered_pattern)
    ]

    if not matches:
        logger.warning(f"No files matching '{pattern}' found in '{image_folder}'.")
        return []

    logger.debug(f"Found {len(matches)} images in '{image_folder}'.")
    return sorted(matches)
