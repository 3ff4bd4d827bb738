"""
Helper utilities for the folder watcher.

Common functions used across domains.
"""

import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional


def filename_timestamp(moment: Optional[datetime] = None) -> str:
    """
    Render a timestamp that is safe to embed in a filename.

    Args:
        moment: Time to render (default: now, UTC)

    Returns:
        ISO-8601 string with ':', '.' and '+' replaced by '-'
    """
    if moment is None:
        moment = datetime.now(timezone.utc)
    return re.sub(r'[:.+]', '-', moment.isoformat(timespec="milliseconds"))


def split_extension(filename: str) -> tuple[str, str]:
    """
    Split a filename into base name and last extension.

    Dotfiles such as ``.env`` have no extension.

    Returns:
        Tuple of (base, extension) where extension keeps its leading dot
    """
    path = Path(filename)
    return path.stem, path.suffix


def get_file_extension(path: Path) -> str:
    """Get lower-cased file extension without dot."""
    return path.suffix.lstrip('.').lower()


def normalise_path(path: Path) -> Path:
    """Return a resolved version of ``path`` without forcing existence."""

    try:
        return path.expanduser().resolve()
    except (FileNotFoundError, RuntimeError):
        return path.expanduser().absolute()


def format_bytes(bytes_count: int) -> str:
    """Format bytes as human-readable string."""
    size = float(bytes_count)
    for unit in ['B', 'KB', 'MB', 'GB', 'TB']:
        if size < 1024.0:
            return f"{size:.1f} {unit}"
        size /= 1024.0
    return f"{size:.1f} PB"
