"""Deterministic lexical scanning of embedded script and style source."""

from __future__ import annotations

from dataclasses import dataclass

OPENING_BRACKETS = frozenset("{([")
CLOSING_BRACKETS = frozenset("})]")
STATEMENT_BOUNDARIES = frozenset(";,") | OPENING_BRACKETS | CLOSING_BRACKETS


@dataclass(slots=True, frozen=True)
class LexicalRules:
    """Comment and string markers for one embedded language."""

    line_comment_prefixes: tuple[str, ...] = ("//",)
    block_comment_pairs: tuple[tuple[str, str], ...] = (("/*", "*/"),)
    string_delimiters: tuple[str, ...] = ("'", '"', "`")
    escape_char: str = "\\"
    continuation_prefixes: tuple[str, ...] = ()


SCRIPT_RULES = LexicalRules(continuation_prefixes=(".", "?", ":", "&&", "||", "+", "*", "="))
STYLE_RULES = LexicalRules(line_comment_prefixes=())
SASS_RULES = LexicalRules(line_comment_prefixes=("//",), string_delimiters=("'", '"'))


@dataclass(slots=True, frozen=True)
class LineScan:
    """Bracket state at the start of one line of embedded source."""

    depth: int
    leading_closers: int
    continues_literal: bool
    continues_statement: bool = False


def scan_lines(text: str, rules: LexicalRules | None = None) -> list[LineScan]:
    """Return bracket depth and literal state at the start of every line of ``text``.

    A line continues a statement when the previous non-blank line does not end
    at a statement boundary or a bracket, or when it begins with one of the
    rules' continuation prefixes.
    """
    rules = rules or LexicalRules()
    masked, literal_starts = _mask(text, rules)
    scans: list[LineScan] = []
    depth = 0
    previous_end = ""
    for number, line in enumerate(masked.split("\n")):
        stripped = line.strip()
        closers = 0
        for char in stripped:
            if char not in CLOSING_BRACKETS:
                break
            closers += 1
        continues_statement = bool(stripped) and not closers and (
            (previous_end != "" and previous_end not in STATEMENT_BOUNDARIES)
            or stripped.startswith(rules.continuation_prefixes)
        )
        scans.append(
            LineScan(
                depth=depth,
                leading_closers=min(closers, depth),
                continues_literal=number in literal_starts,
                continues_statement=continues_statement,
            )
        )
        for char in line:
            if char in OPENING_BRACKETS:
                depth += 1
            elif char in CLOSING_BRACKETS:
                depth = max(0, depth - 1)
        if stripped:
            previous_end = stripped[-1]
    return scans


def _mask(text: str, rules: LexicalRules) -> tuple[str, set[int]]:
    line_prefixes = _longest_first(rules.line_comment_prefixes)
    block_pairs = tuple(
        sorted(
            ((start, end) for start, end in rules.block_comment_pairs if start and end),
            key=lambda pair: len(pair[0]),
            reverse=True,
        )
    )
    string_delimiters = _longest_first(rules.string_delimiters)

    chars = list(text)
    length = len(text)
    index = 0
    line = 0
    literal_starts: set[int] = set()
    state: tuple[str, str] | None = None

    while index < length:
        if text[index] == "\n":
            line += 1
            if state is not None and state[0] != "line_comment":
                literal_starts.add(line)
            if state is not None and state[0] == "line_comment":
                state = None
            index += 1
            continue

        if state is None:
            marker = _match_any(text, index, line_prefixes)
            if marker is not None:
                state = ("line_comment", marker)
            else:
                pair = _match_block_start(text, index, block_pairs)
                if pair is not None:
                    marker = pair[0]
                    state = ("block_comment", pair[1])
                else:
                    marker = _match_any(text, index, string_delimiters)
                    if marker is not None:
                        state = ("string", marker)
            if marker is None:
                index += 1
                continue
            _blank(chars, index, len(marker))
            index += len(marker)
            continue

        mode, closer = state
        if mode != "line_comment" and text.startswith(closer, index):
            if mode == "block_comment" or not _is_escaped(text, index, closer, rules.escape_char):
                _blank(chars, index, len(closer))
                state = None
                index += len(closer)
                continue
        chars[index] = " "
        index += 1

    return "".join(chars), literal_starts


def _longest_first(markers: tuple[str, ...]) -> tuple[str, ...]:
    return tuple(sorted((marker for marker in markers if marker), key=len, reverse=True))


def _blank(chars: list[str], start: int, count: int) -> None:
    for offset in range(count):
        chars[start + offset] = " "


def _match_any(text: str, index: int, markers: tuple[str, ...]) -> str | None:
    for marker in markers:
        if text.startswith(marker, index):
            return marker
    return None


def _match_block_start(
    text: str,
    index: int,
    pairs: tuple[tuple[str, str], ...],
) -> tuple[str, str] | None:
    for start, end in pairs:
        if text.startswith(start, index):
            return start, end
    return None


def _is_escaped(text: str, index: int, marker: str, escape_char: str) -> bool:
    if len(marker) > 1:
        return False
    backslashes = 0
    cursor = index - 1
    while cursor >= 0 and text[cursor] == escape_char:
        backslashes += 1
        cursor -= 1
    return backslashes % 2 == 1
