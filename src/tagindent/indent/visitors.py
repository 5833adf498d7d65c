"""Structural visitors populating the offset graph, one rule set per node kind."""

from __future__ import annotations

from tagindent.config import EXPRESSION_PRECEDENCE, IndentConfig
from tagindent.document.nodes import (
    Attribute,
    BlockTag,
    Comment,
    ControlBlock,
    Document,
    Element,
    EndTag,
    MustacheTag,
    Node,
    ScriptBlock,
    StartTag,
    StyleBlock,
    Text,
)
from tagindent.document.tokens import PUNCTUATOR, Token
from tagindent.errors import UnregisteredNodeError
from tagindent.indent.classify import TokenStream
from tagindent.indent.embedded import EmbeddedRegistry, build_embedded_registry
from tagindent.indent.offsets import (
    ALIGN_TO_BASE,
    RELATIVE_INDENT,
    SAME_INDENT,
    OffsetGraph,
)
from tagindent.indent.units import IndentUnit

_CLOSING_BRACKETS = frozenset({"}", ")", "]"})


def build_offset_graph(
    document: Document,
    config: IndentConfig,
    registry: EmbeddedRegistry | None = None,
) -> OffsetGraph:
    """Build the offset graph for one document, outer nodes before inner ones."""
    graph = OffsetGraph(TokenStream(document.tokens))
    visitor = OffsetVisitor(graph, document, config, registry or build_embedded_registry())
    visitor.visit_document()
    return graph


def node_label(node: Node, tokens: tuple[Token, ...]) -> str:
    """Return the name used to match a node against ``ignored_nodes``."""
    if isinstance(node, Element):
        return node.name.lower()
    if isinstance(node, ScriptBlock):
        return "script"
    if isinstance(node, StyleBlock):
        return "style"
    if isinstance(node, ControlBlock):
        return f"{node.kind}-block"
    if isinstance(node, MustacheTag):
        return "mustache"
    if isinstance(node, Text):
        return "text"
    if isinstance(node, Comment):
        return "comment"
    if isinstance(node, Attribute):
        return "attribute" if node.key is None else tokens[node.key].text.lower()
    if isinstance(node, StartTag):
        return "start-tag"
    if isinstance(node, EndTag):
        return "end-tag"
    raise UnregisteredNodeError(node)


class OffsetVisitor:
    """Walks a document tree and declares how each token's indentation is derived."""

    def __init__(
        self,
        graph: OffsetGraph,
        document: Document,
        config: IndentConfig,
        registry: EmbeddedRegistry,
    ) -> None:
        self._graph = graph
        self._stream = graph.stream
        self._document = document
        self._config = config
        self._registry = registry
        self._ignored = frozenset(label.lower() for label in config.ignored_nodes)
        unit = IndentUnit.parse(config.indent_unit, mixed_alignment=config.mixed_alignment)
        # Tabs cannot express a column offset unless alignment spaces are allowed.
        self._align_attributes = config.align_attributes_vertically and (
            not unit.uses_tabs or config.mixed_alignment
        )

    def visit_document(self) -> None:
        root = self._stream.first_significant()
        if root is None:
            return
        self._graph.set_root(root)
        self._graph.declare_range(root.index + 1, len(self._stream) - 1, root, SAME_INDENT, 0)
        for child in self._document.children:
            self.visit(child)

    def visit(self, node: Node) -> None:
        """Dispatch a node to the visitor for its kind."""
        if self._ignored and node_label(node, self._document.tokens) in self._ignored:
            self._graph.pin(node.first + 1, node.last)
            return
        if isinstance(node, Element):
            self._visit_element(node)
        elif isinstance(node, (ScriptBlock, StyleBlock)):
            self._visit_raw_text_block(node)
        elif isinstance(node, ControlBlock):
            self._visit_control_block(node)
        elif isinstance(node, MustacheTag):
            self._visit_delimited(node.first, node.last)
        elif isinstance(node, StartTag):
            self._visit_start_tag(node)
        elif isinstance(node, EndTag):
            self._visit_end_tag(node)
        elif isinstance(node, Attribute):
            self._visit_attribute(node)
        elif isinstance(node, (Text, Comment)):
            return
        else:
            raise UnregisteredNodeError(node)

    def _token(self, index: int) -> Token:
        return self._stream[index]

    def _spans_lines(self, first: int, last: int) -> bool:
        return self._token(last).end_line > self._token(first).line

    # -- markup ------------------------------------------------------------

    def _visit_element(self, node: Element) -> None:
        opener = self._token(node.first)
        if node.end_tag is not None:
            self._graph.declare_range(
                node.start_tag.last + 1, node.end_tag.first - 1, opener, RELATIVE_INDENT, 1
            )
            self._graph.declare_offset(self._token(node.end_tag.first), opener, SAME_INDENT)
        self.visit(node.start_tag)
        if node.end_tag is not None:
            self.visit(node.end_tag)
        for child in node.children:
            self.visit(child)

    def _visit_start_tag(self, tag: StartTag) -> None:
        opener = self._token(tag.first)
        self._graph.declare_range(tag.first + 1, tag.last, opener, RELATIVE_INDENT, 1)
        attributes = tag.attributes
        if (
            self._align_attributes
            and len(attributes) > 1
            and self._token(attributes[0].first).line == opener.line
        ):
            anchor = self._token(attributes[0].first)
            for attribute in attributes[1:]:
                self._graph.declare_offset(self._token(attribute.first), anchor, ALIGN_TO_BASE)
        if self._spans_lines(tag.first, tag.last):
            self._graph.declare_offset(self._token(tag.last), opener, SAME_INDENT)
        for attribute in attributes:
            self.visit(attribute)

    def _visit_end_tag(self, tag: EndTag) -> None:
        opener = self._token(tag.first)
        self._graph.declare_range(tag.first + 1, tag.last - 1, opener, RELATIVE_INDENT, 1)
        if self._spans_lines(tag.first, tag.last):
            self._graph.declare_offset(self._token(tag.last), opener, SAME_INDENT)

    def _visit_attribute(self, node: Attribute) -> None:
        if node.key is None:
            for value in node.values:
                self.visit(value)
            return
        key = self._token(node.key)
        self._graph.declare_range(node.key + 1, node.last, key, RELATIVE_INDENT, 1)
        if self._config.attribute_expression_precedence != EXPRESSION_PRECEDENCE:
            return
        for value in node.values:
            self.visit(value)

    def _visit_raw_text_block(self, node: ScriptBlock | StyleBlock) -> None:
        opener = self._token(node.first)
        self.visit(node.start_tag)
        content = [self._token(index) for index in node.content]
        if content:
            if self._config.indent_script_and_style:
                indenter = self._registry.select(node.lang)
                indenter.declare_offsets(self._graph, content, opener, self._document.text)
            else:
                self._graph.pin(content[0].index, content[-1].index)
        self._graph.declare_offset(self._token(node.end_tag.first), opener, SAME_INDENT)
        self.visit(node.end_tag)

    # -- templating --------------------------------------------------------

    def _visit_control_block(self, node: ControlBlock) -> None:
        open_tag = node.branches[0].tag
        opener = self._token(open_tag.first)
        boundaries = [branch.tag for branch in node.branches[1:]] + [node.close_tag]
        for branch, following in zip(node.branches, boundaries):
            tag_first = self._token(branch.tag.first)
            if branch.tag is not open_tag:
                self._graph.declare_offset(tag_first, opener, SAME_INDENT)
            self._graph.declare_range(
                branch.tag.last + 1, following.first - 1, tag_first, RELATIVE_INDENT, 1
            )
        self._graph.declare_offset(self._token(node.close_tag.first), opener, SAME_INDENT)
        for branch in node.branches:
            self._visit_block_tag(branch.tag)
            for child in branch.children:
                self.visit(child)
        self._visit_block_tag(node.close_tag)

    def _visit_block_tag(self, tag: BlockTag) -> None:
        self._visit_delimited(tag.first, tag.last)

    def _visit_delimited(self, first: int, last: int) -> None:
        """Rules for ``{ ... }`` spanning lines: continuation +1, closers aligned."""
        if not self._spans_lines(first, last):
            return
        opener = self._token(first)
        self._graph.declare_range(first + 1, last, opener, RELATIVE_INDENT, 1)
        for token in self._stream.significant_between(first + 1, last):
            if token.kind == PUNCTUATOR and token.text in _CLOSING_BRACKETS:
                if self._stream.is_line_head(token):
                    self._graph.declare_offset(token, opener, SAME_INDENT)
