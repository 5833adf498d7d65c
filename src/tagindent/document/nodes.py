"""Closed structural node vocabulary produced by a document parser.

Every node refers to tokens by their index in ``Document.tokens``; ``first``
and ``last`` are inclusive token indices.
"""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass, field
from typing import Union

from tagindent.document.tokens import Token


@dataclass(slots=True, frozen=True)
class Text:
    """Run of character data between tags and mustaches."""

    first: int
    last: int


@dataclass(slots=True, frozen=True)
class Comment:
    """Markup comment ``<!-- ... -->``."""

    first: int
    last: int


@dataclass(slots=True, frozen=True)
class MustacheTag:
    """Expression tag: ``{expr}`` (kind ``text``) or ``{@kind expr}``."""

    kind: str
    first: int
    last: int


@dataclass(slots=True, frozen=True)
class Attribute:
    """Attribute, directive, shorthand or spread inside a start tag."""

    first: int
    last: int
    key: int | None
    values: tuple[MustacheTag, ...] = ()


@dataclass(slots=True, frozen=True)
class StartTag:
    """``<name attr...>`` or ``<name attr... />``."""

    first: int
    last: int
    name: int
    attributes: tuple[Attribute, ...]
    self_closing: bool


@dataclass(slots=True, frozen=True)
class EndTag:
    """``</name>``."""

    first: int
    last: int


@dataclass(slots=True, frozen=True)
class Element:
    """Markup element with optional end tag."""

    name: str
    first: int
    last: int
    start_tag: StartTag
    children: tuple[Node, ...]
    end_tag: EndTag | None


@dataclass(slots=True, frozen=True)
class ScriptBlock:
    """``<script>`` element whose content is raw embedded source."""

    first: int
    last: int
    start_tag: StartTag
    content: tuple[int, ...]
    end_tag: EndTag
    lang: str


@dataclass(slots=True, frozen=True)
class StyleBlock:
    """``<style>`` element whose content is raw embedded source."""

    first: int
    last: int
    start_tag: StartTag
    content: tuple[int, ...]
    end_tag: EndTag
    lang: str


@dataclass(slots=True, frozen=True)
class BlockTag:
    """One of ``{#kw ...}``, ``{:kw ...}`` or ``{/kw}``."""

    keyword: str
    first: int
    last: int


@dataclass(slots=True, frozen=True)
class BlockBranch:
    """Branch of a control block introduced by its tag."""

    tag: BlockTag
    children: tuple[Node, ...]


@dataclass(slots=True, frozen=True)
class ControlBlock:
    """Control block (``if``, ``each``, ``await``, ``key``) with its branches."""

    kind: str
    first: int
    last: int
    branches: tuple[BlockBranch, ...]
    close_tag: BlockTag


Node = Union[
    Text,
    Comment,
    MustacheTag,
    Attribute,
    StartTag,
    EndTag,
    Element,
    ScriptBlock,
    StyleBlock,
    ControlBlock,
]


@dataclass(slots=True, frozen=True)
class Document:
    """Parsed source: text, ordered tokens and top-level nodes."""

    text: str
    tokens: tuple[Token, ...]
    children: tuple[Node, ...]
    _line_starts: tuple[int, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        starts = [0]
        for index, char in enumerate(self.text):
            if char == "\n":
                starts.append(index + 1)
        object.__setattr__(self, "_line_starts", tuple(starts))

    @property
    def line_count(self) -> int:
        """Return the number of physical lines."""
        return len(self._line_starts)

    def line_start(self, line: int) -> int:
        """Return the character offset where 1-based ``line`` begins."""
        return self._line_starts[line - 1]

    def line_of(self, offset: int) -> int:
        """Return the 1-based line containing a character offset."""
        return bisect_right(self._line_starts, offset)

    def leading_text(self, token: Token) -> str:
        """Return the source text between the start of a token's line and the token."""
        return self.text[self.line_start(token.line) : token.start]
