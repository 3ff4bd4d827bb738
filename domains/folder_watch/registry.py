"""In-memory record of filenames already seen in the watched directory."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Iterator, Set


class KnownFileRegistry:
    """Track filenames that must not enter the processing pipeline.

    Names are recorded once and never removed, so a file that is moved
    away and later reappears under the same name stays ignored.
    """

    def __init__(self, names: Iterable[str] = ()) -> None:
        self._names: Set[str] = set(names)

    def __contains__(self, name: object) -> bool:
        return name in self._names

    def __len__(self) -> int:
        return len(self._names)

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._names))

    def add(self, name: str) -> bool:
        """Record ``name``. Returns False if it was already known."""
        if name in self._names:
            return False
        self._names.add(name)
        return True

    def seed_from_directory(self, directory: Path) -> int:
        """Record every regular file currently in ``directory``.

        Subdirectories are skipped. Errors from listing propagate.

        Returns:
            Number of names newly recorded
        """
        added = 0
        for entry in directory.iterdir():
            if entry.is_file() and self.add(entry.name):
                added += 1
        return added
