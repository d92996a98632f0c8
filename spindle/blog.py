"""Blog entry metadata for Spindle.

Blog entries are ktml documents that carry their metadata in marker lines
of the form ``[//]: # (zkey: value)``:

    [//]: # (zauthor: Jane Doe)
    [//]: # (ztitle: A title)
    [//]: # (zsubtitle: An optional subtitle)
    [//]: # (zimage: https://example.com/hero.jpg)
    [//]: # (ztags: python, web)
    [//]: # (ztemplate: blog)

Author and title are mandatory; every other field is optional and stays
None when absent.

Key components:
- BlogMetadata: Parsed metadata of one entry.
- parse_metadata: Parse marker lines, raising MissingAuthorError or
  MissingTitleError.
- entry_header / render_header: Header markup built from the metadata.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

from .markup import strip_markers
from .tree import Node, NodeKind, TagBuilder, render
from .utils import first_paragraph

BLOG_TEMPLATE = "blog"
AVATAR_SRC = "/images/avatar.jpg"

# Words separated by single punctuation marks; ASCII letters and digits only.
_TITLE = r"([a-z0-9](?:[a-z0-9]|[’',. -][a-z0-9 ])*)"
_AUTHOR = r"([a-z](?:[a-z]|[’',. -][a-z ])*)"


def _marker(key: str, value: str) -> re.Pattern[str]:
    return re.compile(
        rf"^\[//\]: # \(z{key}: {value}\)$", re.MULTILINE | re.IGNORECASE
    )


AUTHOR_RE = _marker("author", _AUTHOR)
TITLE_RE = _marker("title", _TITLE)
SUBTITLE_RE = _marker("subtitle", _TITLE)
IMAGE_RE = _marker("image", r"(https?://[^\s/$.?#].[^\s]*)")
TAGS_RE = _marker("tags", r"([a-z]+(?:, ?[a-z]+)*)")
TEMPLATE_RE = _marker("template", r"([a-z0-9_-]+)")


class MetadataError(Exception):
    """Error raised when a blog entry's mandatory metadata is missing."""


class MissingAuthorError(MetadataError):
    def __init__(self):
        super().__init__("No author found")


class MissingTitleError(MetadataError):
    def __init__(self):
        super().__init__("No title found")


@dataclass(frozen=True)
class BlogMetadata:
    """Metadata parsed from a blog entry's marker lines.

    Attributes:
        author: Entry author.
        title: Entry title.
        tags: Tags in declaration order.
        subtitle: Optional subtitle.
        image_url: Optional hero image URL.
        first_paragraph: Optional plain-text excerpt of the body.
        template: Optional template name.
        created: Creation timestamp of the entry.
    """

    author: str
    title: str
    tags: tuple[str, ...]
    subtitle: str | None
    image_url: str | None
    first_paragraph: str | None
    template: str | None
    created: datetime


def _find(pattern: re.Pattern[str], content: str) -> str | None:
    match = pattern.search(content)
    return match.group(1) if match else None


def parse_tags(content: str) -> tuple[str, ...]:
    """Return the comma separated ``ztags`` entries, trimmed, in order."""
    raw = _find(TAGS_RE, content)
    if raw is None:
        return ()
    return tuple(tag.strip() for tag in re.split(r", ?", raw) if tag.strip())


def parse_template(content: str) -> str | None:
    return _find(TEMPLATE_RE, content)


def created_at(path: Path | None) -> datetime:
    """Return a file's creation time, falling back to now.

    Uses the birth time where the platform records one and the
    modification time elsewhere.
    """
    if path is not None:
        try:
            stat = path.stat()
        except OSError:
            pass
        else:
            timestamp = getattr(stat, "st_birthtime", stat.st_mtime)
            return datetime.fromtimestamp(timestamp, tz=timezone.utc)
    return datetime.now(tz=timezone.utc)


def format_date(value: datetime) -> str:
    """Format a date as e.g. "March 7, 2024"."""
    return f"{value:%B} {value.day}, {value.year}"


def parse_metadata(content: str, path: Path | None = None) -> BlogMetadata:
    """Parse a blog entry's marker lines.

    Args:
        content: Entry source.
        path: Optional source path used for the creation timestamp.

    Returns:
        The parsed BlogMetadata.

    Raises:
        MissingAuthorError: If no valid ``zauthor`` marker is present.
        MissingTitleError: If no valid ``ztitle`` marker is present.
    """
    author = _find(AUTHOR_RE, content)
    if author is None:
        raise MissingAuthorError()
    title = _find(TITLE_RE, content)
    if title is None:
        raise MissingTitleError()
    excerpt = first_paragraph(strip_markers(content))
    return BlogMetadata(
        author=author,
        title=title,
        tags=parse_tags(content),
        subtitle=_find(SUBTITLE_RE, content),
        image_url=_find(IMAGE_RE, content),
        first_paragraph=excerpt or None,
        template=parse_template(content),
        created=created_at(path),
    )


def _fragment(build) -> Node:
    root = Node(NodeKind.CONTAINER, "div", {"class": "entry"})
    build(TagBuilder(root))
    return root


def entry_header(metadata: BlogMetadata) -> Node:
    """Build the header shown above a blog entry's body."""

    def build(entry: TagBuilder) -> None:
        entry.h1(metadata.title, {"class": "mt-4"})
        if metadata.subtitle is not None:
            entry.h2(metadata.subtitle, {"class": "subtitle"})

        def author(block: TagBuilder) -> None:
            block.image(AVATAR_SRC)

            def details(items: TagBuilder) -> None:
                items.text("li", metadata.author)
                items.text("li", format_date(metadata.created))

            block.ul(None, details)

        entry.div({"class": "author"}, author)
        if metadata.image_url is not None:
            entry.image(metadata.image_url, {"class": "img-fluid rounded"})

    return _fragment(build)


def render_header(metadata: BlogMetadata) -> str:
    return render(entry_header(metadata))
