"""Markdown body rendering for Spindle.

Converts the markdown text of a ktml document into an HTML body fragment.
Marker lines carrying document metadata are removed before rendering so
they never appear in the visible output.

Key components:
- MARKER_RE / marker_value: Read ``[//]: # (zkey: value)`` marker lines.
- strip_markers: Remove marker lines from a document.
- render_body: Render the remaining markdown to HTML.
"""

from __future__ import annotations

import re

import mistune

MARKER_RE = re.compile(r"^\[//\]: # \(z[a-z]+: .*\)[ \t]*$\n?", re.MULTILINE | re.IGNORECASE)


def marker_value(content: str, key: str) -> str | None:
    """Return the raw value of the first ``z<key>`` marker line, if any.

    Args:
        content: Document source.
        key: Marker key without its ``z`` prefix (e.g. "title").

    Returns:
        The stripped marker value or None.
    """
    pattern = re.compile(
        rf"^\[//\]: # \(z{re.escape(key)}: (.*)\)[ \t]*$", re.MULTILINE | re.IGNORECASE
    )
    match = pattern.search(content)
    return match.group(1).strip() if match else None


def strip_markers(content: str) -> str:
    """Remove every marker line from the document."""
    return MARKER_RE.sub("", content)


class _HighlightRenderer(mistune.HTMLRenderer):
    """HTML renderer with Pygments syntax highlighting for fenced code."""

    def __init__(self):
        super().__init__(escape=False)

    def block_code(self, code: str, info: str | None = None) -> str:
        """Render a code block with Pygments syntax highlighting.

        Args:
            code: The code content.
            info: Language identifier (e.g., 'python', 'javascript').

        Returns:
            HTML string with highlighted code.
        """
        if info:
            from pygments import highlight
            from pygments.formatters import HtmlFormatter
            from pygments.lexers import get_lexer_by_name
            from pygments.util import ClassNotFound

            try:
                lexer = get_lexer_by_name(info.split()[0], stripall=True)
            except ClassNotFound:
                lexer = None
            if lexer is not None:
                formatter = HtmlFormatter(nowrap=False, cssclass="highlight")
                return highlight(code, lexer, formatter)
        escaped = code.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")
        lang_class = f' class="language-{info}"' if info else ""
        return f"<pre><code{lang_class}>{escaped}</code></pre>\n"


def render_body(content: str) -> str | None:
    """Render a document's markdown to an HTML body fragment.

    Args:
        content: Document source, marker lines included.

    Returns:
        The rendered fragment with surrounding whitespace stripped, or None
        if the markdown could not be rendered.
    """
    markdown = mistune.create_markdown(
        renderer=_HighlightRenderer(), plugins=["strikethrough", "footnotes", "table", "url"]
    )
    rendered = markdown(strip_markers(content))
    if not isinstance(rendered, str):
        return None
    return rendered.strip()
