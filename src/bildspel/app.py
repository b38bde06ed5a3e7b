from __future__ import annotations
"""
Main application class for the bildspel supervisor.

This module defines `BildspelApp`, which wires the viewer launcher, the
debouncer and the directory watcher together and keeps them running until the
process is asked to stop.
"""

import logging
import threading
import time

from .config import SlideshowSettings
from .debounce import Debouncer
from .exceptions.bildspel_errors import BildspelError, WatchedDirectoryMissing
from .launcher import ViewerLauncher
from .watcher import DirectoryWatcher

logger = logging.getLogger(__name__)

class BildspelApp:
    """
    Shows the watched directory as a slideshow and restarts it on change.
    """

    # Seconds between two health checks of the main loop.
    TICK = 1.0

    def __init__(self, settings: SlideshowSettings):
        self.settings = settings
        self.launcher = ViewerLauncher(settings)
        self.debouncer = Debouncer(self.launcher.relaunch_slideshow, settings.debounce_seconds)
        self.watcher = DirectoryWatcher(settings.directory, self.debouncer.trigger)
        self._stop_event = threading.Event()
        self._next_refresh: float | None = None

    def start(self) -> None:
        """Show the slideshow once, then start watching for changes."""
        if not self.settings.directory.is_dir():
            raise WatchedDirectoryMissing(str(self.settings.directory))

        self.launcher.relaunch_slideshow()
        self.watcher.start()
        self._schedule_refresh()

    def run(self) -> None:
        """Block until `stop()` is called, then shut everything down."""
        self.start()
        try:
            while not self._stop_event.wait(self.TICK):
                if not self.settings.directory.is_dir():
                    raise WatchedDirectoryMissing(str(self.settings.directory))
                if not self.watcher.is_alive():
                    raise BildspelError(f"Watcher for '{self.settings.directory}' stopped unexpectedly")
                if self._next_refresh is not None and time.monotonic() >= self._next_refresh:
                    logger.info("Periodic refresh of the slideshow.")
                    self.launcher.relaunch_slideshow()
                    self._schedule_refresh()
        finally:
            self.shutdown()

    def stop(self) -> None:
        """Ask `run()` to return. Safe to call from a signal handler."""
        self._stop_event.set()

    def shutdown(self) -> None:
        self.watcher.stop()
        self.debouncer.cancel()
        self.launcher.stop()
        logger.info("Slideshow stopped.")

    def _schedule_refresh(self) -> None:
        if self.settings.refresh_interval:
            self._next_refresh = time.monotonic() + self.settings.refresh_interval * 60
