"""
Per-file processing pipeline.

Each newly detected file is settled, extracted, displayed, optionally
printed and finally relocated. Failures stay inside the file's own
pipeline and never reach the dispatcher.
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from typing import Optional, TextIO

from loguru import logger

from domains.folder_watch.extractors import ContentExtractor
from domains.folder_watch.models import ExtractionResult, PrintMode
from domains.folder_watch.printer import PrinterSink, PrintError
from domains.folder_watch.relocator import FileRelocator

RULE = "=" * 50


def format_display_block(file_path: Path, result: ExtractionResult) -> str:
    """Render the operator-facing block for a processed file."""
    unit = "bytes" if result.binary else "characters"
    lines = [
        RULE,
        f"NEW FILE: {file_path.name}",
        f"Path: {file_path}",
        RULE,
        f"Size: {result.byte_size} {unit}",
        RULE,
        result.text_content,
        RULE,
        "",
    ]
    return "\n".join(lines)


class ProcessingPipeline:
    """Sequence extraction, display, printing and relocation for one file."""

    def __init__(
        self,
        extractor: ContentExtractor,
        relocator: FileRelocator,
        printer: Optional[PrinterSink] = None,
        printing_enabled: bool = False,
        settle_delay: float = 0.5,
        output: Optional[TextIO] = None,
    ):
        self.extractor = extractor
        self.relocator = relocator
        self.printer = printer
        self.printing_enabled = printing_enabled
        self.settle_delay = settle_delay
        self.output = output

    async def process(self, file_path: Path) -> Optional[ExtractionResult]:
        """
        Run the pipeline for ``file_path``.

        Returns:
            The extraction result, or None if the file could not be read
        """
        # Give the writer a moment to finish
        await asyncio.sleep(self.settle_delay)

        try:
            result = await asyncio.to_thread(self.extractor.extract, file_path)
            self._safe_display(file_path, result)

            if self.printing_enabled and self.printer and result.print_mode is not PrintMode.SKIP:
                await self._print(file_path, result)

            await asyncio.to_thread(self.relocator.relocate, file_path, file_path.name)

        except Exception as e:
            logger.error(f"Error reading file {file_path}: {e}")
            return None

        return result

    def display(self, file_path: Path, result: ExtractionResult) -> None:
        print(format_display_block(file_path, result), file=self.output or sys.stdout, flush=True)

    def _safe_display(self, file_path: Path, result: ExtractionResult) -> None:
        # Rendering failures are reported, not fatal
        try:
            self.display(file_path, result)
        except Exception as e:
            logger.warning(f"Could not display {file_path.name}: {e}")

    async def _print(self, file_path: Path, result: ExtractionResult) -> None:
        try:
            await self.printer.print_result(file_path, result)
        except PrintError as e:
            logger.warning(f"Printing {file_path.name} failed: {e}")
        except Exception as e:
            logger.warning(f"Unexpected print failure for {file_path.name}: {e}")
