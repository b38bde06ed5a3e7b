"""
Configuration constants for the bildspel slideshow supervisor.

This module centralizes the watched directory, the viewer invocation and the
timing defaults, and defines the `SlideshowSettings` value object that the
command-line interface builds from them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

# Directory whose images are shown and watched for changes.
DEFAULT_WATCH_DIR = '/home/pi/bildspel'

# Glob matched case-insensitively against file names, recursively.
DEFAULT_PATTERN = '*.jpg'

# Framebuffer image viewer started for the slideshow.
DEFAULT_VIEWER = 'fbi'

# Seconds each image stays on screen.
DEFAULT_DISPLAY_SECONDS = 8

# Seconds of transition between two images.
DEFAULT_TRANSITION_SECONDS = 1

# Quiet period in seconds before a burst of filesystem events triggers a
# single relaunch. 0 relaunches on every event.
DEFAULT_DEBOUNCE_SECONDS = 2.0

# Upper bound in seconds for terminating the previous viewer.
DEFAULT_TERMINATE_TIMEOUT = 5.0

# Default logging level for the application.
# Can be 'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'.
DEFAULT_LOG_LEVEL = 'INFO'

# watchdog event types that mean the file set changed. Content-level events
# ('modified', 'opened', 'closed', 'closed_no_write') never trigger a relaunch.
STRUCTURAL_EVENT_TYPES = frozenset({'created', 'deleted', 'moved'})


@dataclass(frozen=True)
class SlideshowSettings:
    """Everything needed to watch one directory and run the viewer on it."""

    directory: Path = field(default_factory=lambda: Path(DEFAULT_WATCH_DIR))
    pattern: str = DEFAULT_PATTERN
    viewer: str = DEFAULT_VIEWER
    display_seconds: int = DEFAULT_DISPLAY_SECONDS
    transition_seconds: int = DEFAULT_TRANSITION_SECONDS
    debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS
    terminate_timeout: float = DEFAULT_TERMINATE_TIMEOUT
    kill_strays: bool = True
    # Minutes between unconditional relaunches, None to disable.
    refresh_interval: float | None = None
