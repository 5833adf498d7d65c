"""Token classification and whitespace-skipping adjacency queries."""

from __future__ import annotations

from collections.abc import Iterator, Sequence

from tagindent.document.tokens import HTML_TEXT, PUNCTUATOR, Token

WHITESPACE = "whitespace"
CONTENT = "content"
STRUCTURAL = "structural"

_WHITESPACE_CHARS = frozenset(" \t\r\n")


def classify(token: Token) -> str:
    """Return ``whitespace``, ``content`` or ``structural`` for a token."""
    if is_whitespace(token):
        return WHITESPACE
    if token.kind == PUNCTUATOR:
        return STRUCTURAL
    return CONTENT


def is_whitespace(token: Token | None) -> bool:
    """Return True for inter-element text made only of spaces, tabs and newlines."""
    return (
        token is not None
        and token.kind == HTML_TEXT
        and all(char in _WHITESPACE_CHARS for char in token.text)
    )


class TokenStream:
    """Read-only view over a document's tokens with line-head bookkeeping."""

    def __init__(self, tokens: Sequence[Token]) -> None:
        self._tokens = tokens
        self._heads: dict[int, int] = {}
        self._line_heads: list[int] = []
        head: Token | None = None
        previous_end_line = 0
        for token in tokens:
            if is_whitespace(token):
                continue
            if head is None or token.line > previous_end_line:
                head = token
                self._line_heads.append(token.index)
            self._heads[token.index] = head.index
            previous_end_line = max(previous_end_line, token.end_line)

    def __len__(self) -> int:
        return len(self._tokens)

    def __getitem__(self, index: int) -> Token:
        return self._tokens[index]

    def owns(self, token: Token) -> bool:
        """Return True when the token is this stream's token at its index."""
        return 0 <= token.index < len(self._tokens) and self._tokens[token.index] is token

    def next_significant(self, token: Token) -> Token | None:
        """Return the nearest following non-whitespace token, or None at the end."""
        for index in range(token.index + 1, len(self._tokens)):
            candidate = self._tokens[index]
            if not is_whitespace(candidate):
                return candidate
        return None

    def previous_significant(self, token: Token) -> Token | None:
        """Return the nearest preceding non-whitespace token, or None at the start."""
        for index in range(token.index - 1, -1, -1):
            candidate = self._tokens[index]
            if not is_whitespace(candidate):
                return candidate
        return None

    def first_significant(self) -> Token | None:
        """Return the document's first non-whitespace token."""
        for token in self._tokens:
            if not is_whitespace(token):
                return token
        return None

    def significant_between(self, first: int, last: int) -> Iterator[Token]:
        """Yield non-whitespace tokens with index in the inclusive range."""
        for index in range(max(first, 0), min(last, len(self._tokens) - 1) + 1):
            token = self._tokens[index]
            if not is_whitespace(token):
                yield token

    def line_heads(self) -> Iterator[Token]:
        """Yield the first token of each line that starts outside any token."""
        for index in self._line_heads:
            yield self._tokens[index]

    def head_of(self, token: Token) -> Token:
        """Return the line head governing a token's position."""
        if is_whitespace(token):
            raise ValueError("Whitespace tokens have no line head.")
        return self._tokens[self._heads[token.index]]

    def is_line_head(self, token: Token) -> bool:
        """Return True when the token is the first token of its line."""
        return self._heads.get(token.index) == token.index
