"""
Printer sink for processed files.

Submits print jobs through the host's native print command:
``lp`` on Linux and macOS, PowerShell ``Start-Process -Verb Print`` for
original documents on Windows and ``notepad /p`` for rendered text.
"""

from __future__ import annotations

import asyncio
import contextlib
import sys
import tempfile
from pathlib import Path
from typing import Awaitable, Callable, Optional, Sequence

from loguru import logger

from domains.folder_watch.models import ExtractionResult, PrintMode

CommandRunner = Callable[[Sequence[str]], Awaitable[None]]


class PrintError(RuntimeError):
    """Raised when a print job could not be submitted."""


# PowerShell treats typographic single quotes as quote characters too
_POWERSHELL_QUOTES = "'\u2018\u2019\u201a\u201b"


def _quote_powershell(value: str) -> str:
    """Escape ``value`` for use inside a single-quoted PowerShell string."""
    return "".join(ch * 2 if ch in _POWERSHELL_QUOTES else ch for ch in value)


def build_print_command(path: Path, mode: PrintMode, platform: str = sys.platform) -> list[str]:
    """
    Build the native print command for ``path``.

    Args:
        path: File to print (original document or rendered text file)
        mode: Print mode
        platform: ``sys.platform`` value to build for

    Returns:
        argv list
    """
    if mode is PrintMode.SKIP:
        raise ValueError("Nothing to print in skip mode")

    if platform.startswith("win"):
        if mode is PrintMode.ORIGINAL_DOCUMENT:
            return [
                "powershell",
                "-NoProfile",
                "-Command",
                f"Start-Process -FilePath '{_quote_powershell(str(path))}' -Verb Print",
            ]
        return ["notepad", "/p", str(path)]

    return ["lp", str(path)]


async def run_command(argv: Sequence[str]) -> None:
    """Run ``argv`` and raise PrintError unless it exits cleanly."""
    try:
        process = await asyncio.create_subprocess_exec(
            *argv,
            stdout=asyncio.subprocess.DEVNULL,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as e:
        raise PrintError(f"Could not start print command {argv[0]}: {e}") from e

    _, stderr = await process.communicate()
    if process.returncode != 0:
        detail = stderr.decode(errors="replace").strip() if stderr else ""
        raise PrintError(f"{argv[0]} exited with {process.returncode}: {detail or 'no output'}")


class PrinterSink:
    """Send extracted content or original files to the default printer."""

    def __init__(
        self,
        cleanup_delay: float = 5.0,
        platform: str = sys.platform,
        runner: Optional[CommandRunner] = None,
    ):
        """
        Initialize printer sink.

        Args:
            cleanup_delay: Seconds to keep a printed file available to the spooler
            platform: ``sys.platform`` value used to pick commands
            runner: Coroutine executing an argv list (default: subprocess)
        """
        self.cleanup_delay = cleanup_delay
        self.platform = platform
        self.runner = runner or run_command
        self._cleanups: set[asyncio.Task] = set()

    async def print_result(self, path: Path, result: ExtractionResult) -> None:
        """
        Print a processed file according to its print mode.

        Raises:
            PrintError: If the print job could not be submitted
        """
        if result.print_mode is PrintMode.SKIP:
            logger.debug(f"Skipping print for {path.name}")
            return

        if result.print_mode is PrintMode.ORIGINAL_DOCUMENT:
            await self.print_document(path)
        else:
            await self.print_text(result.text_content, path.name)

    async def print_document(self, path: Path) -> None:
        """
        Print the source file itself.

        On Windows the shell print verb returns before the associated
        application has opened the file, so the file is held in place for
        ``cleanup_delay`` seconds before the caller may move it.
        """
        argv = build_print_command(path, PrintMode.ORIGINAL_DOCUMENT, self.platform)
        await self.runner(argv)
        logger.info(f"Sent {path.name} to printer")

        if self.platform.startswith("win"):
            await asyncio.sleep(self.cleanup_delay)

    async def print_text(self, text: str, label: str) -> None:
        """Render ``text`` to a temporary file and print it."""
        temp_path = await asyncio.to_thread(self._write_temp_file, text)
        try:
            argv = build_print_command(temp_path, PrintMode.TEXT, self.platform)
            await self.runner(argv)
            logger.info(f"Sent text of {label} to printer")
        finally:
            task = asyncio.create_task(self._remove_later(temp_path))
            self._cleanups.add(task)
            task.add_done_callback(self._cleanups.discard)

    @staticmethod
    def _write_temp_file(text: str) -> Path:
        with tempfile.NamedTemporaryFile(
            "w", encoding="utf-8", prefix="folder-watch-", suffix=".txt", delete=False
        ) as handle:
            handle.write(text)
        return Path(handle.name)

    async def _remove_later(self, path: Path) -> None:
        await asyncio.sleep(self.cleanup_delay)
        with contextlib.suppress(OSError):
            path.unlink()

    async def wait_for_cleanup(self) -> None:
        """Wait until pending temp-file removals have run."""
        if self._cleanups:
            await asyncio.gather(*list(self._cleanups))
