"""Full site builds for Spindle.

Runs the change pipeline once over every matching file in the source
tree. Files are independent, so they are handled on a thread pool.

Key functions:
- iter_sources: Discover the source files a build handles.
- build_site: Build every source file into the destination tree.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path

from .config import Configuration
from .paths import ChangedFile
from .pipeline import Pipeline


@dataclass
class BuildResult:
    """Result of a full build.

    Attributes:
        written: Output paths written, sorted.
        skipped: Source paths that produced no output, sorted.
        destination: Root of the destination tree.
    """

    written: list[Path] = field(default_factory=list)
    skipped: list[Path] = field(default_factory=list)
    destination: Path | None = None


def is_generated(path: Path) -> bool:
    """Check if a path looks like one of the pipeline's own outputs."""
    return ".min" in path.suffixes


def is_hidden(path: Path, root: Path) -> bool:
    """Check if a path, or a directory between it and root, is hidden."""
    try:
        parts = path.relative_to(root).parts
    except ValueError:
        parts = (path.name,)
    return any(part.startswith(".") for part in parts)


def iter_sources(config: Configuration) -> list[Path]:
    """List the files under the source root a build should handle.

    Files in hidden directories, hidden files, files whose extension is
    not configured and minified outputs are left out. Output is skipped when the destination tree
    lives inside the source tree.
    """
    files: list[Path] = []
    destination = config.destination.resolve()
    nested = config.source.resolve() in destination.parents
    for path in sorted(config.source.rglob("*")):
        if path.is_dir() or is_hidden(path, config.source):
            continue
        if path.suffix.lstrip(".") not in config.extensions or is_generated(path):
            continue
        if nested and destination in path.resolve().parents:
            continue
        files.append(path)
    return files


def build_site(
    config: Configuration,
    verbose: bool = False,
    pipeline: Pipeline | None = None,
    max_workers: int | None = None,
) -> BuildResult:
    """Build every source file into the destination tree.

    Args:
        config: Resolved site configuration.
        verbose: Whether the pipeline reports sizes and skipped content.
        pipeline: Optional pipeline to use instead of one built from config.
        max_workers: Optional thread pool size.

    Returns:
        BuildResult listing written outputs and skipped sources.

    Raises:
        FileNotFoundError: If the source root does not exist.
        PipelineError: If any file fails with a filesystem error.
    """
    if not config.source.is_dir():
        raise FileNotFoundError(f"Expected source directory at {config.source}")
    pipeline = pipeline or Pipeline.from_config(config, verbose)
    result = BuildResult(destination=config.destination)

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = {
            executor.submit(pipeline.handle, ChangedFile.from_path(path)): path
            for path in iter_sources(config)
        }
        for future in as_completed(futures):
            written = future.result()
            if written is None:
                result.skipped.append(futures[future])
            else:
                result.written.append(written)

    result.written.sort()
    result.skipped.sort()
    return result
