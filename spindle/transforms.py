"""Content transforms for Spindle.

Each transform turns the text of one kind of source file into the text of
its output artifact. A transform returns None when it cannot produce
output; the pipeline then writes nothing.

Key classes:
- TransformResult: Transformed content and its output file name.
- MarkupTransform: Renders ktml documents into full HTML pages.
- ScriptTransform / StylesheetTransform: Minify JavaScript and CSS.
- TransformRegistry: Selects the transform for a file extension.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

import click

from .blog import BLOG_TEMPLATE, MetadataError, parse_metadata, parse_template, render_header
from .config import Configuration
from .markup import marker_value, render_body
from .minifiers import MinifyKind, minify
from .tree import CONTENT_PLACEHOLDER, TagBuilder, html, indent_lines, render_document
from .utils import titleize

HTML5SHIV_SRC = "https://oss.maxcdn.com/html5shiv/3.7.3/html5shiv.min.js"
PLACEHOLDER_RE = re.compile(rf"^([ \t]*){re.escape(CONTENT_PLACEHOLDER)}", re.MULTILINE)


@dataclass(frozen=True)
class TransformResult:
    """Output of a transform.

    Attributes:
        content: Transformed text.
        filename: Output file name (stem plus transform suffix).
    """

    content: str
    filename: str


class BaseTransform(ABC):
    """Base class for content transforms.

    Subclasses declare the extension they handle and the suffix of the
    files they produce, and implement ``process``. Failures inside
    ``process`` never escape ``transform``.
    """

    extension: str
    suffix: str

    def __init__(self, verbose: bool = False):
        self.verbose = verbose

    @abstractmethod
    def process(
        self, stem: str, content: str, source_path: Path | None = None
    ) -> str | None:
        """Transform source text.

        Args:
            stem: Stem of the source file name.
            content: Source text.
            source_path: Optional path of the source file.

        Returns:
            The transformed text, or None if there is no output.
        """
        ...

    def output_name(self, stem: str) -> str:
        return f"{stem}{self.suffix}"

    def transform(
        self, stem: str, content: str, source_path: Path | None = None
    ) -> TransformResult | None:
        try:
            output = self.process(stem, content, source_path)
        except Exception as exc:
            self._report(f"ERROR: Could not transform {self.output_name(stem)}: {exc}")
            return None
        if output is None:
            return None
        return TransformResult(content=output, filename=self.output_name(stem))

    def _report(self, message: str) -> None:
        if self.verbose:
            click.echo(message, err=True)


class ScriptTransform(BaseTransform):
    extension = "js"
    suffix = ".min.js"

    def process(
        self, stem: str, content: str, source_path: Path | None = None
    ) -> str | None:
        return minify(MinifyKind.SCRIPT, content)


class StylesheetTransform(BaseTransform):
    extension = "css"
    suffix = ".min.css"

    def process(
        self, stem: str, content: str, source_path: Path | None = None
    ) -> str | None:
        return minify(MinifyKind.STYLESHEET, content)


class MarkupTransform(BaseTransform):
    """Renders ktml documents into full HTML pages.

    The markdown body is rendered and placed into a layout: either the
    template file named by the document's ``ztemplate`` marker or the
    default document built with the tree builder. Documents using the
    ``blog`` template must carry author and title markers.

    Attributes:
        language: lang attribute of the default layout.
        templates: Configured template name to layout file mapping.
        analytics: Optional Google Analytics site id.
    """

    extension = "ktml"
    suffix = ".html"

    def __init__(
        self,
        verbose: bool = False,
        language: str = "en",
        templates: dict[str, Path] | None = None,
        analytics: str | None = None,
    ):
        super().__init__(verbose)
        self.language = language
        self.templates = templates or {}
        self.analytics = analytics

    def process(
        self, stem: str, content: str, source_path: Path | None = None
    ) -> str | None:
        body = render_body(content)
        if body is None:
            return None

        template = parse_template(content)
        title = marker_value(content, "title") or titleize(stem)
        if template == BLOG_TEMPLATE:
            try:
                metadata = parse_metadata(content, source_path)
            except MetadataError as exc:
                self._report(f"ERROR: Invalid blog entry {stem}: {exc}")
                return None
            title = metadata.title
            body = f"{render_header(metadata)}\n{body}"

        return fill_layout(self.layout(template, title), body)

    def layout(self, template: str | None, title: str) -> str:
        """Return the layout markup containing the content placeholder."""
        path = self.templates.get(template) if template else None
        if path is not None and path.is_file():
            return path.read_text(encoding="utf-8")
        return self.default_layout(title)

    def default_layout(self, title: str) -> str:
        def head(tags: TagBuilder) -> None:
            tags.meta({"charset": "utf-8"})
            tags.meta({"name": "viewport", "content": "width=device-width, initial-scale=1"})
            tags.title(title)
            tags.if_comment("lt IE 9", lambda ie: ie.script(HTML5SHIV_SRC))

        def body(tags: TagBuilder) -> None:
            if self.analytics:
                tags.analytics(self.analytics)
            tags.div({"class": "container"}, lambda container: container.content())

        def document(root: TagBuilder) -> None:
            root.head(head)
            root.body(body)

        return render_document(html(document, self.language))


def fill_layout(layout: str, body: str) -> str:
    """Put the body in place of the layout's content placeholder.

    A placeholder at the start of a line gives the body its indentation.
    """
    layout = PLACEHOLDER_RE.sub(lambda match: indent_lines(body, match.group(1)), layout)
    return layout.replace(CONTENT_PLACEHOLDER, body)


class TransformRegistry:
    """Registry mapping file extensions to transforms.

    New transforms can be registered without touching the pipeline.
    """

    def __init__(self, verbose: bool = False):
        self.verbose = verbose
        self._transforms: dict[str, BaseTransform] = {}

    def register(self, transform: BaseTransform) -> None:
        self._transforms[transform.extension] = transform

    def get_transform(self, extension: str) -> BaseTransform | None:
        return self._transforms.get(extension)

    def dispatch(
        self,
        stem: str,
        extension: str,
        content: str,
        source_path: Path | None = None,
    ) -> TransformResult | None:
        """Run the transform registered for an extension.

        Args:
            stem: Stem of the source file name.
            extension: Source file extension without its dot.
            content: Source text.
            source_path: Optional path of the source file, used for blog
                entry dates.

        Returns:
            The TransformResult, or None for unsupported types and failed
            transforms.
        """
        transform = self.get_transform(extension)
        if transform is None:
            if self.verbose:
                click.echo(f"ERROR: Unsupported content type {extension}", err=True)
            return None
        return transform.transform(stem, content, source_path)


def create_default_registry(
    config: Configuration | None = None, verbose: bool = False
) -> TransformRegistry:
    """Create a registry with the ktml, js and css transforms.

    Args:
        config: Optional configuration supplying language, templates and
            analytics for the markup transform.
        verbose: Whether transforms report skipped content.

    Returns:
        Configured TransformRegistry.
    """
    registry = TransformRegistry(verbose)
    registry.register(
        MarkupTransform(
            verbose,
            language=config.language if config else "en",
            templates=config.templates if config else None,
            analytics=config.analytics if config else None,
        )
    )
    registry.register(ScriptTransform(verbose))
    registry.register(StylesheetTransform(verbose))
    return registry
