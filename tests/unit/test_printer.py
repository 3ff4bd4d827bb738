import asyncio
import sys
from pathlib import Path

import pytest

from domains.folder_watch.models import ExtractionResult, PrintMode
from domains.folder_watch.printer import (
    PrinterSink,
    PrintError,
    build_print_command,
    run_command,
)


class RecordingRunner:
    """Stand-in for the native print command."""

    def __init__(self, fail: bool = False):
        self.calls: list[list[str]] = []
        self.seen_text: list[str] = []
        self.fail = fail

    async def __call__(self, argv):
        self.calls.append(list(argv))
        printed = Path(argv[-1])
        if printed.suffix == ".txt" and printed.exists():
            self.seen_text.append(printed.read_text(encoding="utf-8"))
        if self.fail:
            raise PrintError("lp exited with 1: no default destination")


def test_build_command_posix():
    path = Path("/tmp/scan.pdf")

    assert build_print_command(path, PrintMode.ORIGINAL_DOCUMENT, "linux") == ["lp", "/tmp/scan.pdf"]
    assert build_print_command(path, PrintMode.TEXT, "darwin") == ["lp", "/tmp/scan.pdf"]


def test_build_command_windows_distinguishes_modes():
    path = Path("C:/Docs/scan.pdf")

    document = build_print_command(path, PrintMode.ORIGINAL_DOCUMENT, "win32")
    text = build_print_command(path, PrintMode.TEXT, "win32")

    assert document[0] == "powershell"
    assert "-Verb Print" in document[-1]
    assert text == ["notepad", "/p", str(path)]


def test_build_command_rejects_skip():
    with pytest.raises(ValueError):
        build_print_command(Path("x"), PrintMode.SKIP, "linux")


def test_print_text_writes_temp_file_and_removes_it_later():
    runner = RecordingRunner()
    sink = PrinterSink(cleanup_delay=0, platform="linux", runner=runner)
    result = ExtractionResult("hello world!", 12, PrintMode.TEXT)

    async def scenario():
        await sink.print_result(Path("/watch/note.txt"), result)
        await sink.wait_for_cleanup()

    asyncio.run(scenario())

    assert runner.seen_text == ["hello world!"]
    temp_file = Path(runner.calls[0][-1])
    assert temp_file.name.startswith("folder-watch-")
    assert not temp_file.exists()


def test_original_document_prints_source_path(tmp_path):
    runner = RecordingRunner()
    sink = PrinterSink(platform="linux", runner=runner)
    pdf = tmp_path / "scan.pdf"
    result = ExtractionResult("text", 4, PrintMode.ORIGINAL_DOCUMENT)

    asyncio.run(sink.print_result(pdf, result))

    assert runner.calls == [["lp", str(pdf)]]


def test_skip_mode_prints_nothing():
    runner = RecordingRunner()
    sink = PrinterSink(platform="linux", runner=runner)
    result = ExtractionResult("[Binary file - 3 bytes]", 3, PrintMode.SKIP, binary=True)

    asyncio.run(sink.print_result(Path("/watch/a.bin"), result))

    assert runner.calls == []


def test_failed_text_print_still_cleans_up():
    runner = RecordingRunner(fail=True)
    sink = PrinterSink(cleanup_delay=0, platform="linux", runner=runner)
    result = ExtractionResult("hello", 5, PrintMode.TEXT)

    async def scenario():
        with pytest.raises(PrintError):
            await sink.print_result(Path("/watch/note.txt"), result)
        await sink.wait_for_cleanup()

    asyncio.run(scenario())

    assert not Path(runner.calls[0][-1]).exists()


def test_run_command_missing_executable():
    with pytest.raises(PrintError, match="Could not start print command"):
        asyncio.run(run_command(["definitely-not-a-print-command-xyz"]))


def test_run_command_nonzero_exit():
    argv = [sys.executable, "-c", "import sys; sys.stderr.write('no printer'); sys.exit(3)"]

    with pytest.raises(PrintError, match="exited with 3: no printer"):
        asyncio.run(run_command(argv))


def test_windows_command_escapes_quotes_in_file_name():
    path = Path("C:/in/x'; Remove-Item -Recurse C:/Important; '.pdf")

    script = build_print_command(path, PrintMode.ORIGINAL_DOCUMENT, "win32")[-1]

    assert script == (
        "Start-Process -FilePath 'C:/in/x''; Remove-Item -Recurse C:/Important; ''.pdf' -Verb Print"
    )


def test_windows_command_handles_apostrophes_in_ordinary_names():
    plain = build_print_command(Path("C:/in/O'Brien.pdf"), PrintMode.ORIGINAL_DOCUMENT, "win32")[-1]
    curly = build_print_command(Path("C:/in/O\u2019Brien.pdf"), PrintMode.ORIGINAL_DOCUMENT, "win32")[-1]

    assert "-FilePath 'C:/in/O''Brien.pdf'" in plain
    assert "-FilePath 'C:/in/O\u2019\u2019Brien.pdf'" in curly


def test_windows_document_print_holds_file_before_returning(tmp_path):
    runner = RecordingRunner()
    sink = PrinterSink(cleanup_delay=0.2, platform="win32", runner=runner)
    pdf = tmp_path / "scan.pdf"

    async def scenario():
        loop = asyncio.get_running_loop()
        started = loop.time()
        await sink.print_document(pdf)
        return loop.time() - started

    elapsed = asyncio.run(scenario())

    assert len(runner.calls) == 1
    assert elapsed >= 0.2


def test_posix_document_print_returns_immediately(tmp_path):
    runner = RecordingRunner()
    sink = PrinterSink(cleanup_delay=30, platform="linux", runner=runner)

    asyncio.run(asyncio.wait_for(sink.print_document(tmp_path / "scan.pdf"), timeout=5))

    assert runner.calls == [["lp", str(tmp_path / "scan.pdf")]]
