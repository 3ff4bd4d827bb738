#!/usr/bin/env python3
"""Watch a folder, show each new file's contents, then move it away.

Usage::

    folder-watcher [watch_path] [move_to_folder] [print|true]

All arguments are optional. Defaults for the two folders come from the
settings (``FOLDER_WATCH_DEFAULT_WATCH_PATH`` and
``FOLDER_WATCH_DEFAULT_MOVE_TO_FOLDER``).
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Optional

from loguru import logger

from app.utils.config import Settings, get_settings
from domains.folder_watch.watcher import create_watcher

PRINT_FLAG_VALUES = {"print", "true"}


def configure_logging(level: str) -> None:
    """Send loguru output to stdout in the project format."""
    logger.remove()
    logger.add(
        sys.stdout,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>",
        level=level.upper(),
    )


def parse_print_flag(value: Optional[str]) -> bool:
    """Return True when ``value`` asks for printing."""
    return value is not None and value.strip().lower() in PRINT_FLAG_VALUES


def parse_args(argv: Optional[list[str]] = None, settings: Optional[Settings] = None) -> argparse.Namespace:
    """Parse CLI arguments."""

    settings = settings or get_settings()

    parser = argparse.ArgumentParser(
        description="Display new files dropped into a folder, optionally print them, then move them.",
    )
    parser.add_argument(
        "watch_path",
        nargs="?",
        type=Path,
        default=settings.default_watch_path,
        help=f"Folder to watch (default: {settings.default_watch_path}).",
    )
    parser.add_argument(
        "move_to_folder",
        nargs="?",
        type=Path,
        default=settings.default_move_to_folder,
        help=f"Folder processed files are moved to (default: {settings.default_move_to_folder}).",
    )
    parser.add_argument(
        "print_flag",
        nargs="?",
        default=None,
        help="Pass 'print' or 'true' to send each new file to the default printer.",
    )

    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> int:
    """Entry point for the CLI script."""

    settings = get_settings()
    args = parse_args(argv, settings)
    configure_logging(settings.log_level)

    printing_enabled = parse_print_flag(args.print_flag)

    logger.info("File Watcher Starting...")
    logger.info("Press Ctrl+C to stop")

    watcher = create_watcher(
        watch_path=args.watch_path,
        move_to_folder=args.move_to_folder,
        printing_enabled=printing_enabled,
        settle_delay=settings.settle_delay,
        print_cleanup_delay=settings.print_cleanup_delay,
    )

    if not watcher.initialize():
        logger.error("Watcher could not be initialized, not starting.")
        return 1

    if watcher.state.move_to_folder:
        logger.info(f"Files will be moved to: {watcher.state.move_to_folder} after processing")
    if printing_enabled:
        logger.info("Printing is enabled")

    try:
        asyncio.run(watcher.run())
    except KeyboardInterrupt:
        logger.info("File watcher stopped by user")
    except Exception as e:
        logger.error(f"File watcher failed: {e}")
        return 1

    logger.info("File watcher stopped.")
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI bridge
    sys.exit(main())
