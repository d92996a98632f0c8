"""Configuration loading for Spindle.

Configuration lives in ``spindle.yaml`` next to the site sources. Paths in
the file are relative to the directory containing it:

    source: src
    destination: public
    extensions: [css, js, ktml]
    templates:
      blog: templates/blog.html

Key functions:
- load_config: Read the YAML file and apply defaults.
- configure: Apply defaults to an already parsed mapping.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

CONFIG_FILENAME = "spindle.yaml"

DEFAULT_CONFIG = {
    "port": 8080,
    "extensions": ("css", "js", "ktml", "md"),
    "language": "en",
}


class InvalidConfigurationError(Exception):
    """Error raised when a required configuration field is missing.

    Attributes:
        field: Name of the missing field.
    """

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"Invalid configuration, missing {field}")


@dataclass(frozen=True)
class Configuration:
    """Resolved site configuration.

    Attributes:
        base_path: Directory the relative paths were resolved against.
        source: Root of the watched source tree.
        destination: Root of the mirrored output tree.
        port: Port for serving the site; loaded but not used by the build.
        extensions: File extensions the watcher reacts to.
        templates: Optional mapping of template name to layout file.
        language: Value of the generated documents' lang attribute.
        analytics: Optional Google Analytics site id.
    """

    base_path: Path
    source: Path
    destination: Path
    port: int
    extensions: tuple[str, ...]
    templates: dict[str, Path] | None = None
    language: str = "en"
    analytics: str | None = None


def configure(base_path: Path, data: dict[str, Any]) -> Configuration:
    """Build a Configuration from parsed values.

    The destination defaults to the source root.

    Args:
        base_path: Directory relative paths are resolved against.
        data: Parsed configuration values.

    Returns:
        The resolved Configuration.

    Raises:
        InvalidConfigurationError: If ``source`` is missing.
    """
    if not data.get("source"):
        raise InvalidConfigurationError("source")
    config = DEFAULT_CONFIG.copy()
    config.update({key: value for key, value in data.items() if value is not None})

    templates = config.get("templates")
    if isinstance(templates, dict):
        templates = {str(name): base_path / str(path) for name, path in templates.items()}
    else:
        templates = None

    extensions = config["extensions"]
    if isinstance(extensions, str):
        extensions = [extensions]

    return Configuration(
        base_path=base_path,
        source=base_path / str(config["source"]),
        destination=base_path / str(config.get("destination", config["source"])),
        port=int(config["port"]),
        extensions=tuple(str(ext).lstrip(".") for ext in extensions),
        templates=templates,
        language=str(config["language"]),
        analytics=config.get("analytics"),
    )


def load_config(
    base_path: Path,
    filename: str = CONFIG_FILENAME,
    overrides: dict[str, Any] | None = None,
) -> Configuration:
    """Load site configuration from a YAML file.

    A missing file is treated as empty, so a ``source`` given through
    overrides is enough to run.

    Args:
        base_path: Directory containing the configuration file.
        filename: Name of the configuration file.
        overrides: Values taking precedence over the file's.

    Returns:
        The resolved Configuration.
    """
    config_path = base_path / filename
    data: dict[str, Any] = {}
    if config_path.exists():
        with open(config_path, encoding="utf-8") as f:
            loaded = yaml.safe_load(f) or {}
            if isinstance(loaded, dict):
                data.update(loaded)
    if overrides:
        data.update({key: value for key, value in overrides.items() if value is not None})
    return configure(base_path, data)
