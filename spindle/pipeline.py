"""Change event pipeline for Spindle.

Turns one changed source file into one output artifact in the mirrored
destination tree: resolve the destination, read the source, run the
transform for its extension, create the destination directories and
write the result.

Key classes:
- Pipeline: Handles a single change event.
- PipelineError: Filesystem failure while handling an event.
"""

from __future__ import annotations

import os
import tempfile
from collections.abc import Callable
from pathlib import Path

import click

from .config import Configuration
from .paths import ChangedFile, resolve
from .transforms import TransformRegistry, create_default_registry
from .utils import human_readable_byte_count

Done = Callable[[Path | None], None]


class PipelineError(Exception):
    """Filesystem error while handling a change event.

    Attributes:
        source_path: Path to the changed file being handled.
        message: Human-readable error message.
        original_error: The original exception that was caught.
    """

    def __init__(
        self,
        source_path: Path,
        message: str,
        original_error: Exception | None = None,
    ):
        self.source_path = source_path
        self.message = message
        self.original_error = original_error
        super().__init__(f"{source_path}: {message}")


class Pipeline:
    """Handles change events for one source and destination root.

    The pipeline holds no state between events, so distinct files may be
    handled concurrently.

    Attributes:
        source: Root of the source tree.
        destination: Root of the destination tree.
        registry: Transforms selected by file extension.
        verbose: Whether to report sizes and skipped content.
    """

    def __init__(
        self,
        source: Path,
        destination: Path,
        registry: TransformRegistry | None = None,
        verbose: bool = False,
    ):
        self.source = source
        self.destination = destination
        self.registry = registry or create_default_registry(verbose=verbose)
        self.verbose = verbose

    @classmethod
    def from_config(cls, config: Configuration, verbose: bool = False) -> Pipeline:
        return cls(
            config.source,
            config.destination,
            create_default_registry(config, verbose),
            verbose,
        )

    def handle(self, changed: ChangedFile, done: Done | None = None) -> Path | None:
        """Transform a changed file and write its output.

        Args:
            changed: The changed source file.
            done: Optional callback receiving the written path, or None if
                nothing was written.

        Returns:
            The written path, or None if the file is outside the source
            tree, unsupported, or its transform produced no output.

        Raises:
            PipelineError: If reading the source, creating directories or
                writing the output fails.
        """
        path = self._process(changed)
        if done is not None:
            done(path)
        return path

    def _process(self, changed: ChangedFile) -> Path | None:
        plan = resolve(changed.path, self.source, self.destination)
        if plan is None:
            return None

        try:
            content = changed.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise PipelineError(changed.path, f"Could not read source: {exc}", exc) from exc

        result = self.registry.dispatch(plan.stem, changed.extension, content, changed.path)
        if result is None:
            return None

        try:
            plan.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise PipelineError(
                changed.path, f"Could not create {plan.parent}: {exc}", exc
            ) from exc

        path = plan.parent / result.filename
        if self.verbose:
            original = human_readable_byte_count(len(content.encode("utf-8")))
            compiled = human_readable_byte_count(len(result.content.encode("utf-8")))
            click.echo(f"Compiled {plan.destination.name}, {original} → {compiled}")

        try:
            write_atomic(path, result.content)
        except OSError as exc:
            raise PipelineError(changed.path, f"Could not write {path}: {exc}", exc) from exc
        return path


def write_atomic(path: Path, content: str) -> None:
    """Replace a file's content without exposing a partially written file.

    The content goes to a temporary file in the same directory, which is
    then moved over the target.
    """
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        os.chmod(tmp_name, 0o644)
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise
