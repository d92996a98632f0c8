"""Declarative markup tree builder for Spindle.

This module builds an in-memory tree of markup nodes and serializes it
to text. Trees are assembled through an explicit builder handle: each
tag-creating call appends a node to its parent and, for containers, runs a
construction callable that receives a handle on the new node.

Key components:
- Node: Tagged union of all node variants, discriminated by NodeKind.
- TagBuilder: Builder handle used to append children to a container.
- merge_*_attributes: Attribute-merging helpers shared by tag kinds.
- render / render_document: Serialize a tree to markup text.

The builder performs no validation of nesting and no escaping of text or
attribute values.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum

Attributes = Mapping[str, str]
AddTag = Callable[[dict[str, str]], "Node"]
Build = Callable[["TagBuilder"], None]

INDENT_STEP = 2
DOCTYPE = "<!doctype html>"
CONTENT_PLACEHOLDER = "<spindlecontent />"


class NodeKind(Enum):
    """Discriminator for the node variants."""

    CONTAINER = "container"
    TEXT = "text"
    SELF_CLOSING = "self_closing"
    COMMENT = "comment"
    CONDITIONAL = "conditional"
    RAW = "raw"


class LinkRel(Enum):
    """Supported values of a link tag's rel attribute."""

    SHORTCUT = "shortcut icon"
    STYLESHEET = "stylesheet"
    ALTERNATE = "alternate"


@dataclass
class Node:
    """A single node of the render tree.

    Attributes:
        kind: Variant of the node.
        type: Tag name ("div", "p", ...). Comments use "comment".
        attributes: Optional ordered attribute mapping.
        text: Text for TEXT nodes, comment body for COMMENT nodes,
            condition for CONDITIONAL nodes and markup for RAW nodes.
        children: Child nodes; only used by CONTAINER and CONDITIONAL.
    """

    kind: NodeKind
    type: str
    attributes: dict[str, str] | None = None
    text: str = ""
    children: list[Node] = field(default_factory=list)


def merge_href_attributes(
    href: str, attributes: Attributes | None, add_tag: AddTag
) -> Node:
    """Merge an href into the attributes and hand them to add_tag."""
    merged = dict(attributes or {})
    merged["href"] = href
    return add_tag(merged)


def merge_src_attributes(
    src: str, attributes: Attributes | None, add_tag: AddTag
) -> Node:
    """Merge a src into the attributes and hand them to add_tag."""
    merged = dict(attributes or {})
    merged["src"] = src
    return add_tag(merged)


def merge_image_attributes(
    src: str, attributes: Attributes | None, add_tag: AddTag
) -> Node:
    """Merge a src into the attributes, defaulting alt to an empty string."""
    merged = dict(attributes or {})
    merged["src"] = src
    merged.setdefault("alt", "")
    return add_tag(merged)


def merge_type_attributes(
    type_: str, attributes: Attributes | None, add_tag: AddTag
) -> Node:
    """Merge an input type into the attributes and hand them to add_tag."""
    merged = dict(attributes or {})
    merged["type"] = type_
    return add_tag(merged)


def merge_link_attributes(
    rel: LinkRel, attributes: Attributes | None, add_tag: AddTag
) -> Node:
    """Merge a rel value into the attributes and hand them to add_tag."""
    merged = dict(attributes or {})
    merged["rel"] = rel.value
    return add_tag(merged)


class TagBuilder:
    """Builder handle appending children to a container node.

    Every method appends exactly one node to the wrapped container and
    returns it. Container-creating methods accept an optional ``build``
    callable that receives a new TagBuilder for the created child.

    Attributes:
        node: The container being built.
    """

    def __init__(self, node: Node):
        self.node = node

    def add(self, node: Node) -> Node:
        self.node.children.append(node)
        return node

    def tag(
        self,
        type_: str,
        attributes: Attributes | None = None,
        build: Build | None = None,
    ) -> Node:
        """Append a container child and run build against it."""
        child = Node(NodeKind.CONTAINER, type_, _copy(attributes))
        return self._init(child, build)

    def text(self, type_: str, text: str, attributes: Attributes | None = None) -> Node:
        return self.add(Node(NodeKind.TEXT, type_, _copy(attributes), text=text))

    def void(self, type_: str, attributes: Attributes | None = None) -> Node:
        return self.add(Node(NodeKind.SELF_CLOSING, type_, _copy(attributes)))

    def comment(self, comment: str) -> Node:
        return self.add(Node(NodeKind.COMMENT, "comment", text=comment))

    def if_comment(self, condition: str, build: Build | None = None) -> Node:
        """Append a browser conditional comment block."""
        child = Node(NodeKind.CONDITIONAL, "comment", text=condition)
        return self._init(child, build)

    def raw(self, content: str) -> Node:
        return self.add(Node(NodeKind.RAW, "raw", text=content))

    def _init(self, child: Node, build: Build | None) -> Node:
        if build is not None:
            build(TagBuilder(child))
        return self.add(child)

    # Containers

    def head(self, build: Build | None = None) -> Node:
        return self.tag("head", None, build)

    def body(self, build: Build | None = None) -> Node:
        return self.tag("body", None, build)

    def div(self, attributes: Attributes | None = None, build: Build | None = None) -> Node:
        return self.tag("div", attributes, build)

    def nav(self, attributes: Attributes | None = None, build: Build | None = None) -> Node:
        return self.tag("nav", attributes, build)

    def noscript(
        self, attributes: Attributes | None = None, build: Build | None = None
    ) -> Node:
        return self.tag("noscript", attributes, build)

    def ul(self, attributes: Attributes | None = None, build: Build | None = None) -> Node:
        return self.tag("ul", attributes, build)

    def li(self, attributes: Attributes | None = None, build: Build | None = None) -> Node:
        return self.tag("li", attributes, build)

    def p(self, attributes: Attributes | None = None, build: Build | None = None) -> Node:
        return self.tag("p", attributes, build)

    def span(self, attributes: Attributes | None = None, build: Build | None = None) -> Node:
        return self.tag("span", attributes, build)

    def button(
        self, attributes: Attributes | None = None, build: Build | None = None
    ) -> Node:
        return self.tag("button", attributes, build)

    # Text leaves

    def title(self, text: str) -> Node:
        return self.text("title", text)

    def h1(self, text: str, attributes: Attributes | None = None) -> Node:
        return self.text("h1", text, attributes)

    def h2(self, text: str, attributes: Attributes | None = None) -> Node:
        return self.text("h2", text, attributes)

    def h3(self, text: str, attributes: Attributes | None = None) -> Node:
        return self.text("h3", text, attributes)

    def h4(self, text: str, attributes: Attributes | None = None) -> Node:
        return self.text("h4", text, attributes)

    def h5(self, text: str, attributes: Attributes | None = None) -> Node:
        return self.text("h5", text, attributes)

    def blockquote(self, text: str, attributes: Attributes | None = None) -> Node:
        return self.text("blockquote", text, attributes)

    # Void tags

    def meta(self, attributes: Attributes) -> Node:
        return self.void("meta", attributes)

    def hr(self, attributes: Attributes | None = None) -> Node:
        return self.void("hr", attributes)

    def content(self) -> Node:
        """Append the placeholder later replaced by a page's body."""
        return self.void("spindlecontent")

    # Attribute-merging tags

    def a(self, text: str, href: str, attributes: Attributes | None = None) -> Node:
        return merge_href_attributes(href, attributes, lambda attrs: self.text("a", text, attrs))

    def script(self, src: str, attributes: Attributes | None = None) -> Node:
        return merge_src_attributes(src, attributes, lambda attrs: self.text("script", "", attrs))

    def image(self, src: str, attributes: Attributes | None = None) -> Node:
        return merge_image_attributes(src, attributes, lambda attrs: self.void("img", attrs))

    def input(self, type_: str, attributes: Attributes | None = None) -> Node:
        return merge_type_attributes(type_, attributes, lambda attrs: self.void("input", attrs))

    def link(self, rel: LinkRel, attributes: Attributes | None = None) -> Node:
        return merge_link_attributes(rel, attributes, lambda attrs: self.void("link", attrs))

    def analytics(self, site: str) -> Node:
        """Append the Google Analytics loader for the given site id."""
        return self.raw(
            "\n".join(
                [
                    f"<script async src='https://www.googletagmanager.com/gtag/js?id={site}'></script>",
                    "<script>",
                    "window.dataLayer = window.dataLayer || [];",
                    "function gtag(){dataLayer.push(arguments);}",
                    "gtag('js', new Date());",
                    f"gtag('config', '{site}');",
                    "</script>",
                ]
            )
        )


def _copy(attributes: Attributes | None) -> dict[str, str] | None:
    return dict(attributes) if attributes is not None else None


def html(build: Build | None = None, language: str = "en") -> Node:
    """Create a document root and run build against it.

    Args:
        build: Construction callable receiving a TagBuilder for the root.
        language: Value of the root's lang attribute.

    Returns:
        The html container node.
    """
    root = Node(NodeKind.CONTAINER, "html", {"lang": language})
    if build is not None:
        build(TagBuilder(root))
    return root


def indent_lines(markup: str, pad: str) -> str:
    """Prefix every non-empty line of markup with pad.

    Lines inside a pre block keep their whitespace as is.
    """
    lines = []
    preformatted = False
    for line in markup.split("\n"):
        lines.append(line if preformatted or not line else pad + line)
        opened, closed = line.rfind("<pre"), line.rfind("</pre>")
        if opened > closed:
            preformatted = True
        elif closed >= 0:
            preformatted = False
    return "\n".join(lines)


def render_attributes(attributes: Attributes | None) -> str:
    """Render attributes as `` key='value'`` segments in insertion order."""
    if not attributes:
        return ""
    return "".join(f" {key}='{value}'" for key, value in attributes.items())


def _render_children(node: Node, indent: int) -> str:
    return "\n".join(render(child, indent + INDENT_STEP) for child in node.children)


def _wrap(opening: str, node: Node, indent: int, closing: str) -> str:
    if not node.children:
        return f"{opening}\n{closing}"
    return f"{opening}\n{_render_children(node, indent)}\n{closing}"


def _render_container(node: Node, indent: int) -> str:
    pad = " " * indent
    attrs = render_attributes(node.attributes)
    return _wrap(f"{pad}<{node.type}{attrs}>", node, indent, f"{pad}</{node.type}>")


def _render_text(node: Node, indent: int) -> str:
    pad = " " * indent
    attrs = render_attributes(node.attributes)
    return f"{pad}<{node.type}{attrs}>{node.text}</{node.type}>"


def _render_self_closing(node: Node, indent: int) -> str:
    pad = " " * indent
    return f"{pad}<{node.type}{render_attributes(node.attributes)} />"


def _render_comment(node: Node, indent: int) -> str:
    return f"{' ' * indent}<!-- {node.text} -->"


def _render_conditional(node: Node, indent: int) -> str:
    pad = " " * indent
    return _wrap(f"{pad}<!--[if {node.text}]>", node, indent, f"{pad}<![endif]-->")


def _render_raw(node: Node, indent: int) -> str:
    return indent_lines(node.text, " " * indent)


RENDERERS: dict[NodeKind, Callable[[Node, int], str]] = {
    NodeKind.CONTAINER: _render_container,
    NodeKind.TEXT: _render_text,
    NodeKind.SELF_CLOSING: _render_self_closing,
    NodeKind.COMMENT: _render_comment,
    NodeKind.CONDITIONAL: _render_conditional,
    NodeKind.RAW: _render_raw,
}


def render(node: Node, indent: int = 0) -> str:
    """Serialize a node and its descendants.

    Args:
        node: Node to render.
        indent: Number of leading spaces for the node's own lines.

    Returns:
        Rendered markup without a trailing newline.
    """
    return RENDERERS[node.kind](node, indent)


def render_document(node: Node) -> str:
    """Serialize a document root, prefixed with the doctype line."""
    return f"{DOCTYPE}\n{render(node)}"
