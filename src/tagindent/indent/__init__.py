"""Indentation model: classifier, offset graph, visitors, resolver and fixes."""

from .analysis import DocumentResult, Location, Report, check_document
from .classify import CONTENT, STRUCTURAL, WHITESPACE, TokenStream, classify, is_whitespace
from .embedded import (
    BracketDepthIndenter,
    EmbeddedIndenter,
    EmbeddedRegistry,
    PinnedIndenter,
    build_embedded_registry,
)
from .fixes import Mismatch, TextEdit, apply_edits, diff, emit
from .offsets import (
    ALIGN_TO_BASE,
    FIRST_TOKEN_OF_LINE,
    OFFSET_KINDS,
    RELATIVE_INDENT,
    SAME_INDENT,
    OffsetEntry,
    OffsetGraph,
)
from .resolver import ChainResolver, LineRecord, resolve_all
from .units import Indentation, IndentUnit
from .visitors import OffsetVisitor, build_offset_graph, node_label

__all__ = [
    "ALIGN_TO_BASE",
    "BracketDepthIndenter",
    "CONTENT",
    "ChainResolver",
    "DocumentResult",
    "EmbeddedIndenter",
    "EmbeddedRegistry",
    "FIRST_TOKEN_OF_LINE",
    "IndentUnit",
    "Indentation",
    "LineRecord",
    "Location",
    "Mismatch",
    "OFFSET_KINDS",
    "OffsetEntry",
    "OffsetGraph",
    "OffsetVisitor",
    "PinnedIndenter",
    "RELATIVE_INDENT",
    "Report",
    "SAME_INDENT",
    "STRUCTURAL",
    "TextEdit",
    "TokenStream",
    "WHITESPACE",
    "apply_edits",
    "build_embedded_registry",
    "build_offset_graph",
    "check_document",
    "classify",
    "diff",
    "emit",
    "is_whitespace",
    "node_label",
    "resolve_all",
]
