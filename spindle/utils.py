"""Utility functions for Spindle.

Small string helpers shared by the transforms and the pipeline.

Key functions:
    titleize: Convert a filename stem to a human-readable title.
    first_paragraph: Extract and clean the first paragraph of markdown text.
    human_readable_byte_count: Format a size with binary-prefix units.
"""

from __future__ import annotations

import re

_BINARY_PREFIXES = "KMGTPE"


def titleize(name: str) -> str:
    """Convert a filename stem to a human-readable title.

    Replaces hyphens and underscores with spaces and capitalizes each word.

    Args:
        name: Filename or stem.

    Returns:
        Human-readable title string.

    Examples:
        >>> titleize("getting-started")
        'Getting Started'
    """
    base = name.split(".")[0]
    words = re.split(r"[\s\-_]+", base)
    return " ".join(word.capitalize() for word in words if word) or "Untitled"


def first_paragraph(text: str, limit: int | None = None) -> str:
    """Extract and clean the first paragraph from markdown text.

    Skips headings, images and fenced code, strips HTML tags and
    collapses whitespace.

    Args:
        text: Markdown text content.
        limit: Optional maximum character length of the result.

    Returns:
        The first paragraph as plain text, or an empty string.
    """
    paragraphs = [p.strip() for p in text.split("\n\n") if p.strip()]
    for para in paragraphs:
        if para.startswith(("#", "![", "```", "---")):
            continue
        para = re.sub(r"<[^>]+>", "", para)
        collapsed = " ".join(para.split())
        return collapsed[:limit] if limit else collapsed
    return ""


def human_readable_byte_count(count: int) -> str:
    """Format a byte count using binary-prefix units.

    Examples:
        >>> human_readable_byte_count(512)
        '512 B'

        >>> human_readable_byte_count(1536)
        '1.5 KiB'
    """
    if count < 1024:
        return f"{count} B"
    exponent = 1
    while count >= 1024 ** (exponent + 1) and exponent < len(_BINARY_PREFIXES):
        exponent += 1
    prefix = _BINARY_PREFIXES[exponent - 1]
    return f"{count / 1024 ** exponent:.1f} {prefix}iB"
