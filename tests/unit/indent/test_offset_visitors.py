from __future__ import annotations

import pytest

from tagindent.config import IndentConfig
from tagindent.document import Document, Element, Token, read_document
from tagindent.errors import UnregisteredNodeError
from tagindent.indent import (
    ALIGN_TO_BASE,
    FIRST_TOKEN_OF_LINE,
    RELATIVE_INDENT,
    SAME_INDENT,
    OffsetGraph,
    OffsetVisitor,
    TokenStream,
    build_embedded_registry,
    build_offset_graph,
    node_label,
)


def _token(document: Document, text: str, occurrence: int = 0) -> Token:
    matches = [token for token in document.tokens if token.text == text]
    return matches[occurrence]


def test_first_token_is_root_and_rest_default_to_same_indent() -> None:
    document = read_document("\n<p>x</p>\n<br>")
    graph = build_offset_graph(document, IndentConfig())

    assert graph.root == 1
    br_open = _token(document, "<", 1)
    entry = graph.entry(br_open)
    assert entry is not None
    assert (entry.base, entry.kind) == (1, SAME_INDENT)


def test_element_children_are_relative_and_end_tag_same_indent() -> None:
    document = read_document("<div>\n  <p>x</p>\n</div>")
    graph = build_offset_graph(document, IndentConfig())

    child = graph.entry(_token(document, "<", 1))
    closer = graph.entry(_token(document, "</", 1))
    assert child is not None and closer is not None
    assert (child.base, child.kind, child.weight) == (0, RELATIVE_INDENT, 1)
    assert (closer.base, closer.kind) == (0, SAME_INDENT)


def test_attributes_align_to_first_attribute_when_enabled() -> None:
    text = '<div class="a"\n     id="b">\n</div>'
    document = read_document(text)
    aligned = build_offset_graph(document, IndentConfig(align_attributes_vertically=True))
    plain = build_offset_graph(document, IndentConfig())
    second = _token(document, "id")

    aligned_entry = aligned.entry(second)
    plain_entry = plain.entry(second)
    assert aligned_entry is not None and plain_entry is not None
    first_attribute = _token(document, "class")
    assert (aligned_entry.base, aligned_entry.kind) == (first_attribute.index, ALIGN_TO_BASE)
    assert (plain_entry.base, plain_entry.kind) == (0, RELATIVE_INDENT)


def test_tab_indentation_keeps_relative_rule_without_mixed_alignment() -> None:
    document = read_document('<input type="a"\n\tvalue="b">')
    tabs = build_offset_graph(
        document, IndentConfig(indent_unit="tab", align_attributes_vertically=True)
    )
    mixed = build_offset_graph(
        document,
        IndentConfig(indent_unit="tab", align_attributes_vertically=True, mixed_alignment=True),
    )
    second = _token(document, "value")

    tabs_entry = tabs.entry(second)
    mixed_entry = mixed.entry(second)
    assert tabs_entry is not None and mixed_entry is not None
    assert (tabs_entry.base, tabs_entry.kind) == (0, RELATIVE_INDENT)
    assert mixed_entry.kind == ALIGN_TO_BASE


def test_ignored_nodes_pin_their_inner_tokens() -> None:
    document = read_document("<div>\n  <pre>\n      keep\n  </pre>\n</div>")
    graph = build_offset_graph(document, IndentConfig())

    pre_open = graph.entry(_token(document, "<", 1))
    kept = graph.entry(_token(document, "keep"))
    assert pre_open is not None and kept is not None
    assert pre_open.kind == RELATIVE_INDENT
    assert kept.kind == FIRST_TOKEN_OF_LINE


def test_script_content_pinned_when_script_indentation_disabled() -> None:
    document = read_document("<script>\n  let a = 1;\n</script>")
    graph = build_offset_graph(document, IndentConfig(indent_script_and_style=False))

    entry = graph.entry(_token(document, "let a = 1;"))
    assert entry is not None
    assert entry.kind == FIRST_TOKEN_OF_LINE


def test_node_labels() -> None:
    document = read_document("<Div>{x}</Div>{#each items as item}{/each}")
    element = document.children[0]
    assert isinstance(element, Element)

    assert node_label(element, document.tokens) == "div"
    assert node_label(element.children[0], document.tokens) == "mustache"
    assert node_label(document.children[1], document.tokens) == "each-block"


def test_unknown_node_type_is_unregistered() -> None:
    document = read_document("<p>x</p>")
    graph = OffsetGraph(TokenStream(document.tokens))
    visitor = OffsetVisitor(graph, document, IndentConfig(), build_embedded_registry())

    with pytest.raises(UnregisteredNodeError, match="No visitor registered for node type str"):
        visitor.visit("not a node")  # type: ignore[arg-type]
