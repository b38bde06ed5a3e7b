"""Filesystem watcher that reacts to files being added, removed or renamed."""

import logging
from pathlib import Path
from typing import Callable, Optional

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from .config import STRUCTURAL_EVENT_TYPES
from .exceptions.bildspel_errors import WatchedDirectoryMissing

logger = logging.getLogger(__name__)


def is_structural(event: FileSystemEvent) -> bool:
    """True when `event` changes the set of files rather than a file's content."""
    return event.event_type in STRUCTURAL_EVENT_TYPES


class StructuralChangeHandler(FileSystemEventHandler):
    """Calls `on_change` for every structural event, ignores the rest."""

    def __init__(self, on_change: Callable[[], None]):
        super().__init__()
        self.on_change = on_change

    def on_any_event(self, event: FileSystemEvent) -> None:
        logger.info(f"{event.event_type}: {event.src_path}")
        if not is_structural(event):
            return
        logger.info(f"Directory contents changed ({event.event_type} {event.src_path}).")
        self.on_change()


class DirectoryWatcher:
    """Manages the watchdog observer for the watched directory."""

    def __init__(self, directory: Path, on_change: Callable[[], None]):
        self.directory = directory
        self.event_handler = StructuralChangeHandler(on_change)
        self.observer: Optional[Observer] = None

    def start(self) -> None:
        """Starts watching the directory recursively."""
        if not self.directory.is_dir():
            raise WatchedDirectoryMissing(str(self.directory))

        if self.observer and self.observer.is_alive():
            return

        # An observer cannot be restarted, so create a new one every time
        self.observer = Observer()
        self.observer.schedule(self.event_handler, str(self.directory), recursive=True)
        self.observer.start()
        logger.info(f"Watching directory: {self.directory}")

    def stop(self) -> None:
        """Stops watching the directory."""
        if self.observer and self.observer.is_alive():
            self.observer.stop()
            self.observer.join()
            logger.info("Stopped watching directory.")
        self.observer = None

    def is_alive(self) -> bool:
        return bool(self.observer and self.observer.is_alive())
