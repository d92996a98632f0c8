"""Source tree watcher for Spindle.

Watches the source root with watchdog and hands every changed file with a
configured extension to the pipeline.

Key classes:
- SourceWatcher: Owns the watchdog observer.
- _ChangeHandler: File system event handler feeding the pipeline.
"""

from __future__ import annotations

import time
from pathlib import Path

import click
from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from .build import is_generated, is_hidden
from .config import Configuration
from .paths import ChangedFile
from .pipeline import Pipeline, PipelineError


class SourceWatcher:
    """Runs the pipeline for every change below the source root.

    Attributes:
        config: Site configuration.
        pipeline: Pipeline handling the change events.
        verbose: Whether to report written files.
    """

    def __init__(self, config: Configuration, pipeline: Pipeline, verbose: bool = False):
        self.config = config
        self.pipeline = pipeline
        self.verbose = verbose
        self._observer: Observer | None = None

    def start(self) -> None:
        handler = _ChangeHandler(self)
        observer = Observer()
        observer.schedule(handler, str(self.config.source), recursive=True)
        observer.start()
        self._observer = observer

    def stop(self) -> None:
        if self._observer:
            self._observer.stop()
            self._observer.join()
            self._observer = None

    def run_forever(self) -> None:  # pragma: no cover - integration path
        self.start()
        click.echo(f"Watching {self.config.source}")
        try:
            while True:
                time.sleep(1)
        except KeyboardInterrupt:
            self.stop()

    def accepts(self, path: Path) -> bool:
        """Check if a changed path should be handed to the pipeline."""
        if is_hidden(path, self.config.source):
            return False
        if is_generated(path):
            return False
        return path.suffix.lstrip(".") in self.config.extensions

    def dispatch(self, path: Path) -> Path | None:
        """Run the pipeline for a changed path, reporting failures."""
        if not self.accepts(path):
            return None
        try:
            return self.pipeline.handle(ChangedFile.from_path(path), self._report)
        except PipelineError as exc:
            click.echo(click.style(f"Failed: {exc.source_path}", fg="red", bold=True), err=True)
            click.echo(click.style(f"  Error: {exc.message}", fg="white"), err=True)
            return None

    def _report(self, written: Path | None) -> None:
        if written is not None and self.verbose:
            click.echo(f"Wrote {written}")


class _ChangeHandler(FileSystemEventHandler):
    def __init__(self, watcher: SourceWatcher):
        super().__init__()
        self.watcher = watcher

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.is_directory or event.event_type not in ("created", "modified", "moved"):
            return
        src = event.dest_path if event.event_type == "moved" else event.src_path
        if isinstance(src, bytes):
            src = src.decode()
        self.watcher.dispatch(Path(src))
