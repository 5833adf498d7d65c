"""Offset graph: symbolic indentation rules between tokens."""

from __future__ import annotations

from dataclasses import dataclass

from tagindent.document.tokens import Token
from tagindent.errors import InternalConsistencyError, UnresolvableOffsetError
from tagindent.indent.classify import TokenStream

RELATIVE_INDENT = "relative-indent"
SAME_INDENT = "same-indent"
ALIGN_TO_BASE = "align-to-base"
FIRST_TOKEN_OF_LINE = "first-token-of-line"

OFFSET_KINDS = frozenset({RELATIVE_INDENT, SAME_INDENT, ALIGN_TO_BASE, FIRST_TOKEN_OF_LINE})


@dataclass(slots=True, frozen=True)
class OffsetEntry:
    """Indentation of ``token`` expressed relative to ``base``."""

    token: int
    base: int
    kind: str
    weight: int


class OffsetGraph:
    """Arena of offset entries indexed by token index.

    Declaring an offset for a token that already has one replaces it, so the
    visitor that runs last (the innermost one) decides.
    """

    def __init__(self, stream: TokenStream) -> None:
        self._stream = stream
        self._entries: list[OffsetEntry | None] = [None] * len(stream)
        self._root: int | None = None

    @property
    def stream(self) -> TokenStream:
        return self._stream

    @property
    def root(self) -> int | None:
        """Index of the token with known absolute column 0."""
        return self._root

    def set_root(self, token: Token) -> None:
        self._check_owned(token)
        self._root = token.index
        self._entries[token.index] = None

    def declare_offset(
        self,
        target: Token,
        base: Token,
        kind: str = RELATIVE_INDENT,
        weight: int = 1,
    ) -> None:
        """Anchor ``target`` to ``base``; the latest declaration wins."""
        if kind not in OFFSET_KINDS:
            raise InternalConsistencyError(f"Unknown offset kind: {kind}")
        if weight < 0:
            raise InternalConsistencyError("Offset weight must be >= 0.")
        self._check_owned(target)
        self._check_owned(base)
        if target.index == self._root:
            return
        self._entries[target.index] = OffsetEntry(
            token=target.index,
            base=base.index,
            kind=kind,
            weight=weight if kind == RELATIVE_INDENT else 0,
        )

    def declare_range(
        self,
        first: int,
        last: int,
        base: Token,
        kind: str = RELATIVE_INDENT,
        weight: int = 1,
    ) -> None:
        """Apply one rule to every significant token in ``[first, last]`` except ``base``."""
        for token in self._stream.significant_between(first, last):
            if token.index == base.index:
                continue
            self.declare_offset(token, base, kind, weight)

    def pin(self, first: int, last: int) -> None:
        """Keep every significant token in ``[first, last]`` at its actual line indentation."""
        for token in self._stream.significant_between(first, last):
            self.declare_offset(token, token, FIRST_TOKEN_OF_LINE, 0)

    def entry(self, token: Token) -> OffsetEntry | None:
        """Return the entry declared for a token, if any."""
        return self._entries[token.index]

    def __len__(self) -> int:
        return sum(1 for entry in self._entries if entry is not None)

    def copy(self) -> OffsetGraph:
        """Return an independent graph with the same entries."""
        clone = OffsetGraph(self._stream)
        clone._entries = list(self._entries)
        clone._root = self._root
        return clone

    def _check_owned(self, token: Token) -> None:
        if not self._stream.owns(token):
            raise UnresolvableOffsetError(
                f"Token {token.index} ({token.text!r}) is not part of the analysed document."
            )
