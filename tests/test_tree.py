"""Tests for the declarative tag tree builder."""

from spindle.tree import (
    CONTENT_PLACEHOLDER,
    LinkRel,
    Node,
    NodeKind,
    TagBuilder,
    html,
    indent_lines,
    merge_href_attributes,
    merge_image_attributes,
    merge_link_attributes,
    merge_src_attributes,
    merge_type_attributes,
    render,
    render_attributes,
    render_document,
)


def fragment(build, type_="div"):
    root = Node(NodeKind.CONTAINER, type_)
    build(TagBuilder(root))
    return root


def test_empty_container_renders_without_blank_lines():
    assert render(Node(NodeKind.CONTAINER, "div")) == "<div>\n</div>"
    assert render(Node(NodeKind.CONTAINER, "ul"), 4) == "    <ul>\n    </ul>"


def test_document_has_doctype_and_nested_indentation():
    doc = html(lambda root: root.head(lambda head: head.title("Hi")))
    assert render_document(doc) == (
        "<!doctype html>\n"
        "<html lang='en'>\n"
        "  <head>\n"
        "    <title>Hi</title>\n"
        "  </head>\n"
        "</html>"
    )


def test_html_language_attribute():
    assert render(html(language="fr")) == "<html lang='fr'>\n</html>"


def test_attributes_render_in_insertion_order():
    assert render_attributes(None) == ""
    assert render_attributes({}) == ""
    assert render_attributes({"id": "main", "class": "x"}) == " id='main' class='x'"
    node = fragment(lambda root: root.div({"id": "main", "class": "x"}))
    assert render(node.children[0]) == "<div id='main' class='x'>\n</div>"


def test_text_leaf_is_not_escaped():
    node = fragment(lambda root: root.p(None, lambda p: p.text("em", "<b>&</b>")))
    assert render(node) == "<div>\n  <p>\n    <em><b>&</b></em>\n  </p>\n</div>"


def test_self_closing_comment_and_raw_nodes():
    def build(root):
        root.hr()
        root.meta({"charset": "utf-8"})
        root.comment("note")
        root.raw("<span>raw</span>")
        root.content()

    assert render(fragment(build)) == (
        "<div>\n"
        "  <hr />\n"
        "  <meta charset='utf-8' />\n"
        "  <!-- note -->\n"
        "  <span>raw</span>\n"
        f"  {CONTENT_PLACEHOLDER}\n"
        "</div>"
    )


def test_self_closing_never_renders_children():
    node = Node(NodeKind.SELF_CLOSING, "br", children=[Node(NodeKind.RAW, "raw", text="x")])
    assert render(node) == "<br />"


def test_conditional_comment_wraps_children():
    node = fragment(
        lambda head: head.if_comment("lt IE 9", lambda ie: ie.script("shiv.js")), "head"
    )
    assert render(node) == (
        "<head>\n"
        "  <!--[if lt IE 9]>\n"
        "    <script src='shiv.js'></script>\n"
        "  <![endif]-->\n"
        "</head>"
    )


def test_builder_methods_return_created_node():
    root = Node(NodeKind.CONTAINER, "body")
    builder = TagBuilder(root)
    div = builder.div({"class": "row"})
    heading = builder.h1("Title")
    assert root.children == [div, heading]
    assert div.kind is NodeKind.CONTAINER
    assert heading.kind is NodeKind.TEXT
    TagBuilder(div).span(None, lambda span: span.text("button", "Go"))
    assert render(div) == (
        "<div class='row'>\n"
        "  <span>\n"
        "    <button>Go</button>\n"
        "  </span>\n"
        "</div>"
    )


def test_merge_helpers_create_mapping_when_absent():
    assert merge_href_attributes("/x", None, dict) == {"href": "/x"}
    assert merge_src_attributes("a.js", None, dict) == {"src": "a.js"}
    assert merge_image_attributes("a.png", None, dict) == {"src": "a.png", "alt": ""}
    assert merge_type_attributes("text", None, dict) == {"type": "text"}
    assert merge_link_attributes(LinkRel.SHORTCUT, None, dict) == {"rel": "shortcut icon"}


def test_merge_helpers_keep_caller_mapping_untouched():
    attributes = {"alt": "cat", "class": "hero"}
    merged = merge_image_attributes("cat.png", attributes, dict)
    assert merged == {"alt": "cat", "class": "hero", "src": "cat.png"}
    assert attributes == {"alt": "cat", "class": "hero"}


def test_attribute_merging_tags():
    def build(root):
        root.a("Go", "/next", {"class": "btn"})
        root.image("logo.png")
        root.input("checkbox", {"checked": "checked"})
        root.link(LinkRel.STYLESHEET, {"href": "site.min.css"})
        root.script("app.min.js", {"defer": "defer"})

    assert render(fragment(build)) == (
        "<div>\n"
        "  <a class='btn' href='/next'>Go</a>\n"
        "  <img src='logo.png' alt='' />\n"
        "  <input checked='checked' type='checkbox' />\n"
        "  <link href='site.min.css' rel='stylesheet' />\n"
        "  <script defer='defer' src='app.min.js'></script>\n"
        "</div>"
    )


def test_builder_copies_attribute_mapping():
    attributes = {"class": "row"}
    node = fragment(lambda root: root.div(attributes))
    attributes["class"] = "changed"
    assert node.children[0].attributes == {"class": "row"}


def test_analytics_snippet_mentions_site():
    node = fragment(lambda body: body.analytics("UA-123"), "body")
    rendered = render(node)
    assert all(line.startswith("  ") for line in rendered.splitlines()[1:-1])
    assert "gtag/js?id=UA-123" in rendered
    assert "gtag('config', 'UA-123');" in rendered


def test_rendering_is_idempotent():
    def build(root):
        root.head(lambda head: head.title("Same"))
        root.body(lambda body: body.div({"class": "c"}, lambda div: div.p(None)))

    doc = html(build)
    assert render_document(doc) == render_document(doc)
    assert render_document(html(build)) == render_document(doc)


def test_raw_node_indents_every_line():
    node = fragment(lambda body: body.div(None, lambda div: div.raw("<script>\nrun();\n</script>")))
    assert render(node) == (
        "<div>\n  <div>\n    <script>\n    run();\n    </script>\n  </div>\n</div>"
    )


def test_indent_lines_skips_blank_and_preformatted_lines():
    markup = "<p>a</p>\n\n<pre>x\n  y</pre>\n<p>b</p>"
    assert indent_lines(markup, "  ") == "  <p>a</p>\n\n  <pre>x\n  y</pre>\n  <p>b</p>"
