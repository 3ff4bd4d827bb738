"""Move processed files into the destination folder without overwriting."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Optional

from loguru import logger

from app.utils.helpers import filename_timestamp, split_extension


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class FileRelocator:
    """Relocate files, inserting a timestamp when the name is taken."""

    def __init__(
        self,
        destination: Optional[Path],
        clock: Callable[[], datetime] = _utc_now,
    ):
        """
        Initialize relocator.

        Args:
            destination: Target directory, or None to leave files in place
            clock: Source of the current time for collision names
        """
        self.destination = destination
        self.clock = clock

    def resolve_destination(self, file_name: str) -> Path:
        """
        Compute a destination path for ``file_name`` that does not exist yet.

        Args:
            file_name: Name of the file being moved

        Returns:
            ``destination/file_name`` or ``destination/name_<timestamp>.ext``
        """
        candidate = self.destination / file_name
        if not candidate.exists():
            return candidate

        base, extension = split_extension(file_name)
        stamp = filename_timestamp(self.clock())
        candidate = self.destination / f"{base}_{stamp}{extension}"

        counter = 1
        while candidate.exists():
            candidate = self.destination / f"{base}_{stamp}-{counter}{extension}"
            counter += 1

        return candidate

    def relocate(self, file_path: Path, file_name: str) -> Optional[Path]:
        """
        Move ``file_path`` into the destination folder.

        Failures are logged and leave the source file where it is.

        Returns:
            Final path, or None if nothing was moved
        """
        if self.destination is None:
            return None

        try:
            if not self.destination.exists():
                self.destination.mkdir(parents=True, exist_ok=True)
                logger.info(f"Created destination folder: {self.destination}")

            final_destination = self.resolve_destination(file_name)
            file_path.rename(final_destination)

        except Exception as e:
            logger.error(f"Error moving file {file_name}: {e}")
            return None

        logger.success(f"Moved file to: {final_destination}")
        return final_destination
