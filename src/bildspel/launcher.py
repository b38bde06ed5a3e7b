from __future__ import annotations
"""
Viewer process management.

This module owns the external slideshow viewer. `ViewerLauncher.relaunch_slideshow`
terminates whatever viewer is showing the old file set, lists the current
images, and starts a fresh viewer on them. Relaunches are serialized, and each
one moves through IDLE -> TERMINATING -> SPAWNING -> RUNNING, so two relaunches
racing each other cannot leave two viewers on screen.
"""

import enum
import logging
import subprocess
import threading
import time
from pathlib import Path

from . import image_finder
from .config import SlideshowSettings
from .exceptions.bildspel_errors import ViewerNotFound

logger = logging.getLogger(__name__)


class LauncherState(enum.Enum):
    IDLE = 'idle'
    TERMINATING = 'terminating'
    SPAWNING = 'spawning'
    RUNNING = 'running'


class TerminateResult(enum.Enum):
    TERMINATED = 'terminated'
    NOT_FOUND = 'not-found'
    TIMEOUT = 'timeout'
    FAILED = 'failed'


class LaunchResult(enum.Enum):
    STARTED = 'started'
    NO_IMAGES = 'no-images'
    FAILED = 'failed'


def build_viewer_command(settings: SlideshowSettings, files: list[Path]) -> list[str]:
    """
    Build the viewer command line for `files`.

    The viewer autostarts, stays quiet, keeps the given order and advances
    every `display_seconds` with a `transition_seconds` transition.
    """
    return [
        settings.viewer,
        '-a',
        '-noverbose',
        '-norandom',
        '-T', str(settings.transition_seconds),
        '-t', str(settings.display_seconds),
        *(str(path) for path in files),
    ]


def terminate_process(process: subprocess.Popen, timeout: float) -> TerminateResult:
    """
    Terminate a child process and wait for it to exit.

    Sends SIGTERM, waits up to `timeout` seconds and escalates to SIGKILL if the
    process is still alive. Returns TIMEOUT when the escalation was needed.
    """
    if process.poll() is not None:
        return TerminateResult.NOT_FOUND

    process.terminate()
    try:
        process.wait(timeout=timeout)
        return TerminateResult.TERMINATED
    except subprocess.TimeoutExpired:
        logger.warning(f"Viewer (pid {process.pid}) ignored SIGTERM for {timeout}s, killing it.")
        process.kill()
        try:
            process.wait(timeout=timeout)
        except subprocess.TimeoutExpired:
            logger.error(f"Viewer (pid {process.pid}) is still alive after SIGKILL.")
        return TerminateResult.TIMEOUT


def terminate_by_name(name: str, timeout: float, poll_interval: float = 0.1) -> TerminateResult:
    """
    Terminate every process named exactly `name`, system-wide.

    Uses `pkill -x` and then polls `pgrep -x` until no such process remains or
    `timeout` seconds have passed.

    Args:
        name: Executable name to match.
        timeout: Upper bound in seconds for the whole operation.
        poll_interval: Delay in seconds between two `pgrep` probes.

    Returns:
        NOT_FOUND if nothing matched, TERMINATED once every match exited,
        TIMEOUT if a match survived `timeout`, FAILED if the tools could not run.
    """
    deadline = time.monotonic() + timeout
    try:
        result = subprocess.run(
            ['pkill', '-x', name],
            capture_output=True, text=True, timeout=timeout, check=False,
        )
    except subprocess.TimeoutExpired:
        return TerminateResult.TIMEOUT
    except OSError as e:
        logger.error(f"Unable to run pkill: {e}")
        return TerminateResult.FAILED

    if result.returncode == 1:
        return TerminateResult.NOT_FOUND
    if result.returncode != 0:
        logger.error(f"pkill -x {name} failed with status {result.returncode}: {result.stderr.strip()}")
        return TerminateResult.FAILED

    while True:
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            return TerminateResult.TIMEOUT
        try:
            probe = subprocess.run(
                ['pgrep', '-x', name],
                capture_output=True, text=True, timeout=remaining, check=False,
            )
        except subprocess.TimeoutExpired:
            return TerminateResult.TIMEOUT
        except OSError as e:
            logger.error(f"Unable to run pgrep: {e}")
            return TerminateResult.FAILED
        if probe.returncode != 0:
            return TerminateResult.TERMINATED
        time.sleep(poll_interval)


class ViewerLauncher:
    """
    Keeps at most one viewer process running on the watched directory.
    """

    def __init__(self, settings: SlideshowSettings):
        self.settings = settings
        self.state = LauncherState.IDLE
        self._lock = threading.Lock()
        self._process: subprocess.Popen | None = None
        self._reaper: threading.Thread | None = None
        # Processes we terminated ourselves; their exit is not an error.
        self._superseded: set[subprocess.Popen] = set()

    @property
    def process(self) -> subprocess.Popen | None:
        return self._process

    def relaunch_slideshow(self) -> LaunchResult:
        """
        Replace the running viewer with one showing the current images.

        Never raises for process failures: they are logged and reported through
        the returned `LaunchResult`.
        """
        with self._lock:
            self._terminate_viewer(sweep=self.settings.kill_strays)

            files = image_finder.find_images(self.settings.directory, self.settings.pattern)
            if not files:
                logger.warning(f"Nothing to show in '{self.settings.directory}', viewer not started.")
                self.state = LauncherState.IDLE
                return LaunchResult.NO_IMAGES

            self.state = LauncherState.SPAWNING
            command = build_viewer_command(self.settings, files)
            try:
                process = self._spawn(command)
            except (ViewerNotFound, OSError) as e:
                logger.error(f"Unable to start {self.settings.viewer}: {e}")
                self.state = LauncherState.IDLE
                return LaunchResult.FAILED

            self._process = process
            self.state = LauncherState.RUNNING
            self._reaper = threading.Thread(
                target=self._reap, args=(process,),
                daemon=True, name=f"{self.settings.viewer}-reaper",
            )
            self._reaper.start()
            logger.info(f"Started {self.settings.viewer} (pid {process.pid}) with {len(files)} images.")
            return LaunchResult.STARTED

    def stop(self) -> None:
        """Terminate the viewer started by this launcher, if any."""
        with self._lock:
            self._terminate_viewer(sweep=False)
            self.state = LauncherState.IDLE

    def _spawn(self, command: list[str]) -> subprocess.Popen:
        logger.debug(f"Running: {' '.join(command[:8])} ... ({len(command) - 8} files)")
        try:
            return subprocess.Popen(
                command,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
            )
        except FileNotFoundError as e:
            raise ViewerNotFound(f"Executable '{command[0]}' not found") from e

    def _terminate_viewer(self, sweep: bool) -> None:
        self.state = LauncherState.TERMINATING
        timeout = self.settings.terminate_timeout

        process = self._process
        if process is not None:
            self._superseded.add(process)
            result = terminate_process(process, timeout)
            logger.debug(f"Previous viewer (pid {process.pid}): {result.value}")
            self._process = None

        if sweep:
            result = terminate_by_name(self.settings.viewer, timeout)
            if result is TerminateResult.TERMINATED:
                logger.info(f"Terminated stray {self.settings.viewer} processes.")
            elif result in (TerminateResult.TIMEOUT, TerminateResult.FAILED):
                logger.warning(f"Could not terminate stray {self.settings.viewer} processes: {result.value}")

    def _reap(self, process: subprocess.Popen) -> None:
        """Wait for a viewer to exit and log what it printed."""
        stdout, stderr = process.communicate()

        with self._lock:
            superseded = process in self._superseded
            self._superseded.discard(process)
            if self._process is process:
                self._process = None
                self.state = LauncherState.IDLE

        if superseded:
            logger.debug(f"{self.settings.viewer} (pid {process.pid}) was replaced.")
            return
        if process.returncode != 0:
            logger.error(f"{self.settings.viewer} exited with status {process.returncode}")
            return
        logger.info(f"Stdout: {stdout}")
        logger.info(f"Stderr: {stderr}")
