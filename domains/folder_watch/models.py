"""Data types shared by the folder watch domain."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional

from domains.folder_watch.registry import KnownFileRegistry


class FileCategory(str, Enum):
    """Broad file family, decided by extension."""

    WORD = "word"
    PDF = "pdf"
    GENERIC = "generic"


class PrintMode(str, Enum):
    """What the printer sink should do with a processed file."""

    TEXT = "text"
    ORIGINAL_DOCUMENT = "original_document"
    SKIP = "skip"


@dataclass(slots=True)
class FileEvent:
    """A single filesystem notification for the watched directory."""

    raw_event_kind: str
    filename: str


@dataclass(slots=True)
class ExtractionResult:
    """Textual rendition of one processed file."""

    text_content: str
    byte_size: int
    print_mode: PrintMode
    binary: bool = False


@dataclass
class WatcherState:
    """State owned by one watcher instance; lost on restart."""

    watch_path: Path
    move_to_folder: Optional[Path] = None
    printing_enabled: bool = False
    known_files: KnownFileRegistry = field(default_factory=KnownFileRegistry)
    initialized: bool = False
