# -*- coding: utf-8 -*-
"""
Configuration and fixtures for pytest.

This module defines shared fixtures used across the test suite for bildspel.
Fixtures include a temporary image directory, a stand-in for the viewer process
so that nothing is ever really spawned, and logging setup.
"""

import itertools
import logging
import subprocess
import threading
from pathlib import Path
from typing import Iterator

import pytest

from bildspel.config import SlideshowSettings

_pids = itertools.count(1000)


class SpawnedViewers(list):
    """List of spawned viewers that also carries the Popen mock."""

    popen = None


class FakeViewer:
    """
    Stand-in for `subprocess.Popen` that keeps running until terminated.

    Set `ignore_terminate` to simulate a viewer that only dies on SIGKILL.
    """

    def __init__(self, args, output=("", ""), ignore_terminate=False, **kwargs):
        self.args = args
        self.pid = next(_pids)
        self.returncode = None
        self.output = output
        self.ignore_terminate = ignore_terminate
        self.terminated = False
        self.killed = False
        self._exited = threading.Event()

    def exit(self, code: int) -> None:
        self.returncode = code
        self._exited.set()

    def poll(self):
        return self.returncode

    def terminate(self):
        self.terminated = True
        if not self.ignore_terminate:
            self.exit(-15)

    def kill(self):
        self.killed = True
        self.exit(-9)

    def wait(self, timeout=None):
        if not self._exited.wait(timeout):
            raise subprocess.TimeoutExpired(self.args, timeout)
        return self.returncode

    def communicate(self):
        self._exited.wait()
        return self.output


@pytest.fixture
def tmp_image_dir(tmp_path: Path) -> Iterator[Path]:
    """
    Create a temporary 'bildspel' directory with a few images in it.

    The directory holds two JPEGs with differently cased extensions, one JPEG
    in a subdirectory and a text file that must never be shown.

    Yields:
        Path: The path to the image directory.
    """
    image_dir = tmp_path / "bildspel"
    image_dir.mkdir()
    (image_dir / "b_image.JPG").touch()
    (image_dir / "a_image.jpg").touch()
    (image_dir / "sub").mkdir()
    (image_dir / "sub" / "c_image.jpg").touch()
    (image_dir / "notes.txt").touch()

    yield image_dir

@pytest.fixture
def settings(tmp_image_dir: Path) -> SlideshowSettings:
    """Settings for the temporary image directory with short timeouts."""
    return SlideshowSettings(
        directory=tmp_image_dir,
        debounce_seconds=0,
        terminate_timeout=0.5,
    )

@pytest.fixture
def viewers(mocker) -> list:
    """
    Patch `subprocess.Popen` in the launcher with `FakeViewer`.

    Returns:
        list: Every FakeViewer spawned during the test, in order.
    """
    spawned = SpawnedViewers()

    def spawn(args, **kwargs):
        viewer = FakeViewer(args, **kwargs)
        spawned.append(viewer)
        return viewer

    mock_popen = mocker.patch('bildspel.launcher.subprocess.Popen', side_effect=spawn)
    spawned.popen = mock_popen
    return spawned

@pytest.fixture
def mock_run(mocker):
    """
    Patch `subprocess.run` in the launcher so `pkill` reports no match.
    """
    return mocker.patch(
        'bildspel.launcher.subprocess.run',
        return_value=subprocess.CompletedProcess(args=[], returncode=1, stdout='', stderr=''),
    )

@pytest.fixture
def caplog_info(caplog):
    """
    Set the logging level to INFO for the duration of a test.

    Args:
        caplog: The pytest fixture for capturing log output.

    Returns:
        LogCaptureFixture: The configured caplog fixture.
    """
    caplog.set_level(logging.INFO)
    return caplog
