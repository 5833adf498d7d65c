"""Expected-indentation resolution over an offset graph."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from tagindent.document.nodes import Document
from tagindent.document.tokens import Token
from tagindent.errors import InternalConsistencyError, OffsetCycleError
from tagindent.indent.offsets import (
    ALIGN_TO_BASE,
    FIRST_TOKEN_OF_LINE,
    RELATIVE_INDENT,
    SAME_INDENT,
    OffsetGraph,
)
from tagindent.indent.units import Indentation, IndentUnit


@dataclass(slots=True, frozen=True)
class LineRecord:
    """Expected versus actual indentation for one checked line."""

    line_number: int
    first_token: Token
    expected_column: int
    actual_column: int
    expected_text: str
    actual_text: str

    @property
    def matches(self) -> bool:
        return self.expected_text == self.actual_text


class ChainResolver:
    """Resolves offset chains to indentations, memoizing every token once.

    A line head is *checked* when it is the root or carries an entry whose
    base sits on another line. Every other line keeps its actual indentation
    and anchors whatever is based on it.
    """

    def __init__(self, graph: OffsetGraph, document: Document, unit: IndentUnit) -> None:
        self._graph = graph
        self._stream = graph.stream
        self._document = document
        self._unit = unit
        self._expected: dict[int, Indentation] = {}
        self._active: list[int] = []

    def is_checked(self, head: Token) -> bool:
        """Return True when a line head's indentation is governed by the graph."""
        if head.index == self._graph.root:
            return True
        entry = self._graph.entry(head)
        if entry is None or entry.kind == FIRST_TOKEN_OF_LINE:
            return False
        base = self._stream[entry.base]
        return self._stream.head_of(base).index != head.index

    def resolve(self, head: Token) -> Indentation:
        """Return the expected indentation of a checked line head."""
        cached = self._expected.get(head.index)
        if cached is not None:
            return cached
        if head.index in self._active:
            start = self._active.index(head.index)
            raise OffsetCycleError(tuple(self._active[start:]) + (head.index,))
        if head.index == self._graph.root:
            result = Indentation(0)
        else:
            self._active.append(head.index)
            try:
                result = self._follow(head)
            finally:
                self._active.pop()
        self._expected[head.index] = result
        return result

    def anchor(self, token: Token) -> Indentation:
        """Return the resolved indentation of the line a token sits on."""
        head = self._stream.head_of(token)
        if self.is_checked(head):
            return self.resolve(head)
        return self.actual(head)

    def visual(self, token: Token) -> Indentation:
        """Return the resolved visual column of a token for alignment."""
        head = self._stream.head_of(token)
        base = self.anchor(token)
        if head.line != token.line:
            return base
        return self._unit.shift(base, token.column - head.column)

    def actual(self, head: Token) -> Indentation:
        return self._unit.measure(self._document.leading_text(head))

    def _follow(self, head: Token) -> Indentation:
        entry = self._graph.entry(head)
        if entry is None or entry.kind == FIRST_TOKEN_OF_LINE:
            return self.actual(head)
        base = self._stream[entry.base]
        if entry.kind == RELATIVE_INDENT:
            return self._unit.indent(self.anchor(base), entry.weight)
        if entry.kind == SAME_INDENT:
            return self.anchor(base)
        if entry.kind == ALIGN_TO_BASE:
            return self.visual(base)
        raise InternalConsistencyError(f"Unknown offset kind: {entry.kind}")


def resolve_all(graph: OffsetGraph, document: Document, unit: IndentUnit) -> Iterator[LineRecord]:
    """Yield one record per checked line, in document order.

    The returned generator is single-pass; resolve again for a fresh pass.
    """
    resolver = ChainResolver(graph, document, unit)
    for head in graph.stream.line_heads():
        if not resolver.is_checked(head):
            continue
        actual_text = document.leading_text(head)
        if actual_text.strip():
            continue
        expected_text = unit.render(resolver.resolve(head))
        yield LineRecord(
            line_number=head.line,
            first_token=head,
            expected_column=len(expected_text),
            actual_column=len(actual_text),
            expected_text=expected_text,
            actual_text=actual_text,
        )
