"""
Folder Watch Domain

Watches a directory for newly created files and, for each one:
- Extracts its content (plain text, Word via python-docx, PDF via pypdf)
- Displays a summary block on the console
- Optionally sends it to the default printer
- Moves it into a destination folder without overwriting
"""

from domains.folder_watch.extractors import ContentExtractor, PdfDecoder, WordDecoder
from domains.folder_watch.models import (
    ExtractionResult,
    FileCategory,
    FileEvent,
    PrintMode,
    WatcherState,
)
from domains.folder_watch.pipeline import ProcessingPipeline
from domains.folder_watch.printer import PrinterSink, PrintError
from domains.folder_watch.registry import KnownFileRegistry
from domains.folder_watch.relocator import FileRelocator
from domains.folder_watch.watcher import FolderWatcher, WatcherNotInitializedError, create_watcher

__all__ = [
    "ContentExtractor",
    "ExtractionResult",
    "FileCategory",
    "FileEvent",
    "FileRelocator",
    "FolderWatcher",
    "KnownFileRegistry",
    "PdfDecoder",
    "PrintError",
    "PrintMode",
    "PrinterSink",
    "ProcessingPipeline",
    "WatcherNotInitializedError",
    "WatcherState",
    "WordDecoder",
    "create_watcher",
]
