"""Source to destination path resolution for Spindle.

Key components:
- ChangedFile: A changed source file reported by the watcher.
- PathPlan: Where a changed file's output goes.
- resolve: Map a changed path under the source root to a PathPlan.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class ChangedFile:
    """A changed source file.

    Attributes:
        path: Absolute path of the changed file.
        extension: Final suffix without its dot ("js", "ktml", ...).
    """

    path: Path
    extension: str

    @classmethod
    def from_path(cls, path: Path) -> ChangedFile:
        return cls(path=path, extension=path.suffix.lstrip("."))


@dataclass(frozen=True)
class PathPlan:
    """Destination of a changed file.

    Attributes:
        destination: Changed path rebased under the destination root.
        parent: Directory the output is written into.
        stem: Destination file name up to its first dot.
    """

    destination: Path
    parent: Path
    stem: str


def stem_of(path: Path) -> str | None:
    """Return the part of a file name before its first dot, or None if empty."""
    stem = path.name.split(".")[0]
    return stem or None


def resolve(changed: Path, source: Path, destination: Path) -> PathPlan | None:
    """Resolve where the output for a changed file is written.

    Args:
        changed: Path of the changed file.
        source: Configured source root.
        destination: Configured destination root.

    Returns:
        The PathPlan, or None if ``changed`` is not below ``source`` or its
        file name has no stem.
    """
    changed_str, source_str = str(changed), str(source).rstrip(os.sep)
    if not changed_str.startswith(source_str):
        return None
    remainder = changed_str[len(source_str):]
    if not remainder.startswith(os.sep) or not remainder.strip(os.sep):
        return None

    target = Path(str(destination), remainder.lstrip(os.sep))
    normalized = Path(str(target).replace(f"{os.sep}.{os.sep}", os.sep))
    stem = stem_of(normalized)
    if stem is None:
        return None
    return PathPlan(destination=target, parent=normalized.parent, stem=stem)
