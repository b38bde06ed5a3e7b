"""
Command-Line Interface for the bildspel slideshow supervisor.

This module handles parsing of command-line arguments, sets up logging,
and initializes and runs the supervisor until it is interrupted.
"""

import argparse
import logging
import coloredlogs
import signal
import sys
import importlib.metadata
from pathlib import Path

from .app import BildspelApp
from .config import SlideshowSettings
from .exceptions.bildspel_errors import WatchedDirectoryMissing
from . import config

# Setup a dedicated logger for this application
logger = logging.getLogger(__name__)

def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Keep a framebuffer slideshow running on a directory of images,\n"
                    "restarting it whenever files are added, removed or renamed.",
        formatter_class=argparse.RawTextHelpFormatter
    )
    parser.add_argument(
        "-v", "--version",
        action="version",
        version=f"%(prog)s {importlib.metadata.version('bildspel')}",
        help="Show the version number and exit."
    )
    parser.add_argument(
        "directory",
        type=str,
        nargs='?',
        default=config.DEFAULT_WATCH_DIR,
        help=f"The folder to show and watch. Default: {config.DEFAULT_WATCH_DIR}"
    )
    parser.add_argument(
        "-p", "--pattern",
        type=str,
        default=config.DEFAULT_PATTERN,
        help=f"Case-insensitive file name glob. Default: {config.DEFAULT_PATTERN}"
    )
    parser.add_argument(
        "--viewer",
        type=str,
        default=config.DEFAULT_VIEWER,
        help=f"Viewer executable. Default: {config.DEFAULT_VIEWER}"
    )
    parser.add_argument(
        "-t", "--display",
        type=int,
        default=config.DEFAULT_DISPLAY_SECONDS,
        metavar='SECONDS',
        help=f"Seconds each image is shown. Default: {config.DEFAULT_DISPLAY_SECONDS}"
    )
    parser.add_argument(
        "-T", "--transition",
        type=int,
        default=config.DEFAULT_TRANSITION_SECONDS,
        metavar='SECONDS',
        help=f"Transition time between images. Default: {config.DEFAULT_TRANSITION_SECONDS}"
    )
    parser.add_argument(
        "--debounce",
        type=float,
        default=config.DEFAULT_DEBOUNCE_SECONDS,
        metavar='SECONDS',
        help=f"Quiet period before a burst of changes restarts the viewer.\n"
             f"0 restarts on every change. Default: {config.DEFAULT_DEBOUNCE_SECONDS}"
    )
    parser.add_argument(
        "--terminate-timeout",
        type=float,
        default=config.DEFAULT_TERMINATE_TIMEOUT,
        metavar='SECONDS',
        help=f"How long to wait for the old viewer to exit. Default: {config.DEFAULT_TERMINATE_TIMEOUT}"
    )
    parser.add_argument(
        "--no-kill-strays",
        action="store_true",
        help="Only stop the viewer started by this process, not every process\n"
             "with the viewer's name."
    )
    parser.add_argument(
        "--refresh-interval",
        type=float,
        default=None,
        metavar='MINUTES',
        help="Also restart the slideshow periodically, every MINUTES."
    )
    parser.add_argument(
        "-l", "--log-level",
        type=str,
        default=config.DEFAULT_LOG_LEVEL,
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
        help=f"Set the logging level. Default: {config.DEFAULT_LOG_LEVEL}"
    )
    return parser.parse_args(argv)

def settings_from_args(args: argparse.Namespace) -> SlideshowSettings:
    return SlideshowSettings(
        directory=Path(args.directory).expanduser().resolve(),
        pattern=args.pattern,
        viewer=args.viewer,
        display_seconds=args.display,
        transition_seconds=args.transition,
        debounce_seconds=args.debounce,
        terminate_timeout=args.terminate_timeout,
        kill_strays=not args.no_kill_strays,
        refresh_interval=args.refresh_interval,
    )

def main(argv=None):
    """
    The main entry point for the application.

    Parses command-line arguments, sets up logging, and runs the supervisor
    until it receives SIGINT or SIGTERM.
    """
    args = parse_args(argv)

    # --- Setup Logging ---
    log_level_upper = args.log_level.upper()
    logging.basicConfig(level=getattr(logging, log_level_upper, logging.INFO))
    # Install coloredlogs on the package logger so every module inherits it
    coloredlogs.install(
        level=log_level_upper,
        logger=logging.getLogger('bildspel'),
        fmt='%(asctime)s %(levelname)-8s %(name)s: %(message)s'
    )
    logging.getLogger().setLevel(getattr(logging, log_level_upper, logging.INFO))

    # --- Application Initialization ---
    try:
        app = BildspelApp(settings_from_args(args))
        signal.signal(signal.SIGTERM, lambda signum, frame: app.stop())
        app.run()
    except WatchedDirectoryMissing:
        logger.error(f"The specified image folder does not exist: {args.directory}")
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("Interrupted, exiting.")
    except Exception as e:
        logger.critical(f"An unexpected error occurred: {e}", exc_info=True)
        sys.exit(1)

if __name__ == '__main__':
    main()
