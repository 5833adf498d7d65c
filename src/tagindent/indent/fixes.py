"""Mismatch detection and leading-whitespace text edits."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from tagindent.document.tokens import Token
from tagindent.errors import InternalConsistencyError
from tagindent.indent.resolver import LineRecord


@dataclass(slots=True, frozen=True)
class Mismatch:
    """A checked line whose leading whitespace differs from the expected text."""

    line: int
    token: Token
    expected_text: str
    actual_text: str


@dataclass(slots=True, frozen=True)
class TextEdit:
    """Replace source characters ``[start, end)`` with ``text``."""

    start: int
    end: int
    text: str


def diff(records: Iterable[LineRecord]) -> Iterator[Mismatch]:
    """Yield a mismatch for every record whose expected text differs."""
    for record in records:
        if record.matches:
            continue
        yield Mismatch(
            line=record.line_number,
            token=record.first_token,
            expected_text=record.expected_text,
            actual_text=record.actual_text,
        )


def emit(mismatches: Iterable[Mismatch]) -> Iterator[TextEdit]:
    """Yield one edit per mismatch covering exactly the line's leading whitespace."""
    for mismatch in mismatches:
        yield TextEdit(
            start=mismatch.token.start - len(mismatch.actual_text),
            end=mismatch.token.start,
            text=mismatch.expected_text,
        )


def apply_edits(text: str, edits: Iterable[TextEdit]) -> str:
    """Apply non-overlapping edits in one pass."""
    ordered = sorted(edits, key=lambda edit: (edit.start, edit.end))
    pieces: list[str] = []
    cursor = 0
    for edit in ordered:
        if edit.start < cursor or edit.end < edit.start or edit.end > len(text):
            raise InternalConsistencyError(
                f"Text edit [{edit.start}, {edit.end}) overlaps or leaves the document."
            )
        pieces.append(text[cursor : edit.start])
        pieces.append(edit.text)
        cursor = edit.end
    pieces.append(text[cursor:])
    return "".join(pieces)
