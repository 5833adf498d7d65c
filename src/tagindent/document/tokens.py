"""Token record shared by the reader and the indentation engine."""

from __future__ import annotations

from dataclasses import dataclass

HTML_TEXT = "html-text"
PUNCTUATOR = "punctuator"
NAME = "name"
LITERAL = "literal"
EXPRESSION = "expression"
RAW_TEXT = "raw-text"
COMMENT = "comment"

TOKEN_KINDS = frozenset({HTML_TEXT, PUNCTUATOR, NAME, LITERAL, EXPRESSION, RAW_TEXT, COMMENT})


@dataclass(slots=True, frozen=True)
class Token:
    """Immutable source token with offsets and 1-based line, 0-based column."""

    index: int
    kind: str
    text: str
    start: int
    end: int
    line: int
    column: int

    @property
    def end_line(self) -> int:
        """Return the line holding the token's last character."""
        return self.line + self.text.count("\n", 0, max(0, len(self.text) - 1))

    def spans_lines(self) -> bool:
        """Return True when the token text crosses a line break."""
        return self.end_line != self.line
