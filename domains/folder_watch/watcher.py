"""
Folder watcher: detect newly created files and hand them to the pipeline.

Uses the watchdog library for cross-platform notifications. The
observer thread only enqueues events; a single asyncio consumer owns
the known-file registry and starts one pipeline task per new file.
"""

from __future__ import annotations

import asyncio
import os
import signal
from pathlib import Path
from typing import Optional

from loguru import logger
from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from app.utils.helpers import format_bytes, normalise_path
from domains.folder_watch.extractors import ContentExtractor
from domains.folder_watch.models import FileEvent, WatcherState
from domains.folder_watch.pipeline import ProcessingPipeline
from domains.folder_watch.printer import PrinterSink
from domains.folder_watch.registry import KnownFileRegistry
from domains.folder_watch.relocator import FileRelocator


class WatcherNotInitializedError(RuntimeError):
    """Raised when watching starts before the baseline scan succeeded."""


class FolderEventHandler(FileSystemEventHandler):
    """Forward top-level file notifications into an asyncio queue."""

    def __init__(
        self,
        loop: asyncio.AbstractEventLoop,
        queue: "asyncio.Queue[Optional[FileEvent]]",
        watch_path: Path,
    ) -> None:
        """
        Initialize event handler.

        Args:
            loop: Event loop owning ``queue``
            queue: Queue drained by the dispatcher
            watch_path: Normalised watched directory
        """
        super().__init__()
        self.loop = loop
        self.queue = queue
        self.watch_path = watch_path

    def on_created(self, event: FileSystemEvent) -> None:
        """Forward creations."""
        self._forward(event.event_type, event.src_path)

    def on_modified(self, event: FileSystemEvent) -> None:
        """Forward file modifications; directory ones are noise."""
        if event.is_directory:
            return
        self._forward(event.event_type, event.src_path)

    def on_moved(self, event: FileSystemEvent) -> None:
        """Forward the destination side of a rename into the folder."""
        dest = getattr(event, "dest_path", None)
        if dest:
            self._forward(event.event_type, dest)

    def on_deleted(self, event: FileSystemEvent) -> None:
        """Deletions never describe a new file; only report losing the folder."""
        if Path(os.fsdecode(event.src_path)) == self.watch_path:
            logger.error(f"Watcher error: watched directory removed: {self.watch_path}")

    def _forward(self, kind: str, raw_path) -> None:
        path = Path(os.fsdecode(raw_path))
        if path.parent != self.watch_path:
            return
        self.loop.call_soon_threadsafe(self.queue.put_nowait, FileEvent(kind, path.name))


class FolderWatcher:
    """Watch one directory and process each new regular file at most once."""

    def __init__(self, state: WatcherState, pipeline: ProcessingPipeline):
        """
        Initialize folder watcher.

        Args:
            state: Watcher state (paths, flags, registry)
            pipeline: Pipeline invoked for each new file
        """
        self.state = state
        self.state.watch_path = normalise_path(state.watch_path)
        self.pipeline = pipeline
        self._tasks: set[asyncio.Task] = set()
        self._queue: Optional[asyncio.Queue] = None
        self.observer: Optional[Observer] = None

    @property
    def registry(self) -> KnownFileRegistry:
        """Filenames already seen in the watched directory."""
        return self.state.known_files

    def initialize(self) -> bool:
        """
        Ensure the watched directory exists and record the files already in it.

        Returns:
            True if the watcher may start watching
        """
        watch_path = self.state.watch_path

        try:
            if not watch_path.exists():
                watch_path.mkdir(parents=True, exist_ok=True)
                logger.info(f"Created directory: {watch_path}")

            self.registry.seed_from_directory(watch_path)

        except Exception as e:
            logger.error(f"Error initializing watcher: {e}")
            self.state.initialized = False
            return False

        logger.info(f"Watching folder: {watch_path}")
        logger.info(f"Initial files: {', '.join(self.registry) or 'none'}")
        logger.info("Waiting for new files...")

        self.state.initialized = True
        return True

    def handle_event(self, event: FileEvent) -> Optional[asyncio.Task]:
        """
        Decide whether a notification describes a new file and start its pipeline.

        Must run on the event loop; this is the only writer of the registry.

        Returns:
            The pipeline task, or None if the event was ignored
        """
        if not event.filename or not self.state.initialized:
            return None

        file_path = self.state.watch_path / event.filename

        try:
            if not file_path.exists() or not file_path.is_file():
                return None
            size = file_path.stat().st_size
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.error(f"Error handling file event for {event.filename}: {e}")
            return None

        if not self.registry.add(event.filename):
            return None

        logger.info(f"Detected new file: {event.filename} ({format_bytes(size)})")

        task = asyncio.create_task(self.pipeline.process(file_path))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def dispatch(self, queue: "asyncio.Queue[Optional[FileEvent]]") -> None:
        """Drain ``queue`` in arrival order until a None sentinel arrives."""
        while True:
            event = await queue.get()
            if event is None:
                break
            try:
                self.handle_event(event)
            except Exception as e:
                logger.error(f"Error dispatching event for {event.filename}: {e}")

    def stop(self) -> None:
        """Ask a running watcher to stop. Safe to call from the loop thread."""
        if self._queue is not None:
            self._queue.put_nowait(None)

    async def run(self) -> None:
        """
        Watch the directory until stopped by a signal or ``stop()``.

        Raises:
            WatcherNotInitializedError: If initialize() did not succeed
        """
        if not self.state.initialized:
            raise WatcherNotInitializedError(
                f"Watcher for {self.state.watch_path} is not initialized"
            )

        loop = asyncio.get_running_loop()
        self._queue = asyncio.Queue()

        handler = FolderEventHandler(loop, self._queue, self.state.watch_path)
        observer = self.observer = Observer()
        observer.schedule(handler, str(self.state.watch_path), recursive=False)
        observer.daemon = True

        installed = self._install_signal_handlers(loop)

        try:
            observer.start()
            logger.success("File system observer started")
            await self.dispatch(self._queue)
        finally:
            logger.info("Stopping file watcher...")
            for signum in installed:
                loop.remove_signal_handler(signum)
            observer.stop()
            observer.join(timeout=5)
            self._queue = None

    def _install_signal_handlers(self, loop: asyncio.AbstractEventLoop) -> list[int]:
        installed = []
        for signum in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(signum, self.stop)
            except (NotImplementedError, RuntimeError, ValueError):
                # Windows and non-main threads: KeyboardInterrupt ends the loop instead
                continue
            installed.append(signum)
        return installed

    async def wait_for_pending(self) -> None:
        """Wait for pipelines that are currently in flight."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)


def create_watcher(
    watch_path: Path,
    move_to_folder: Optional[Path] = None,
    printing_enabled: bool = False,
    settle_delay: float = 0.5,
    print_cleanup_delay: float = 5.0,
    output=None,
) -> FolderWatcher:
    """Assemble a FolderWatcher with the default collaborators."""
    state = WatcherState(
        watch_path=watch_path,
        move_to_folder=normalise_path(move_to_folder) if move_to_folder else None,
        printing_enabled=printing_enabled,
    )
    pipeline = ProcessingPipeline(
        extractor=ContentExtractor(),
        relocator=FileRelocator(state.move_to_folder),
        printer=PrinterSink(cleanup_delay=print_cleanup_delay) if printing_enabled else None,
        printing_enabled=printing_enabled,
        settle_delay=settle_delay,
        output=output,
    )
    return FolderWatcher(state, pipeline)
