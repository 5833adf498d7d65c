"""Indenters for script and style content, selected by embedded language."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Protocol

from tagindent.document.tokens import Token
from tagindent.indent.lexical import SASS_RULES, SCRIPT_RULES, STYLE_RULES, LexicalRules, scan_lines
from tagindent.indent.offsets import (
    FIRST_TOKEN_OF_LINE,
    RELATIVE_INDENT,
    SAME_INDENT,
    OffsetGraph,
)


class EmbeddedIndenter(Protocol):
    """Protocol implemented by embedded-language indenters."""

    name: str

    def supports_language(self, lang: str) -> bool:
        """Return True when the indenter understands a ``lang`` value."""

    def declare_offsets(
        self,
        graph: OffsetGraph,
        content: Sequence[Token],
        opener: Token,
        source: str,
    ) -> None:
        """Declare offsets for content tokens (one per line) of a block."""


@dataclass(slots=True, frozen=True)
class BracketDepthIndenter:
    """Indents embedded lines by bracket depth below a root anchor.

    The first content token is the root anchor, one level below the block's
    start tag. Every later line sits ``depth`` levels below the root, where
    ``depth`` counts brackets still open at the start of that line minus the
    closers the line begins with. Lines that begin inside a multi-line
    comment or string, or that continue an unfinished statement, keep their
    actual indentation.
    """

    name: str
    languages: tuple[str, ...]
    rules: LexicalRules

    def supports_language(self, lang: str) -> bool:
        return lang.lower() in self.languages

    def declare_offsets(
        self,
        graph: OffsetGraph,
        content: Sequence[Token],
        opener: Token,
        source: str,
    ) -> None:
        if not content:
            return
        root = content[0]
        region_start = source.rfind("\n", 0, root.start) + 1
        region = source[region_start : content[-1].end]
        scans = scan_lines(region, self.rules)
        first_line = root.line
        graph.declare_offset(root, opener, RELATIVE_INDENT, 1)
        for token in content[1:]:
            scan = scans[token.line - first_line]
            if scan.continues_literal or scan.continues_statement:
                graph.declare_offset(token, token, FIRST_TOKEN_OF_LINE, 0)
                continue
            depth = scan.depth - scan.leading_closers
            if depth <= 0:
                graph.declare_offset(token, root, SAME_INDENT, 0)
            else:
                graph.declare_offset(token, root, RELATIVE_INDENT, depth)


@dataclass(slots=True, frozen=True)
class PinnedIndenter:
    """Fallback that keeps every embedded line at its actual indentation."""

    name: str = "pinned"

    def supports_language(self, lang: str) -> bool:
        _ = lang
        return True

    def declare_offsets(
        self,
        graph: OffsetGraph,
        content: Sequence[Token],
        opener: Token,
        source: str,
    ) -> None:
        _ = opener
        _ = source
        for token in content:
            graph.declare_offset(token, token, FIRST_TOKEN_OF_LINE, 0)


@dataclass(slots=True)
class EmbeddedRegistry:
    """Ordered indenter registry with explicit fallback indenter."""

    _indenters: list[EmbeddedIndenter] = field(default_factory=list)
    _fallback: EmbeddedIndenter | None = None

    def register(self, indenter: EmbeddedIndenter, *, fallback: bool = False) -> None:
        """Register an indenter in deterministic insertion order."""
        if fallback:
            self._fallback = indenter
            return
        self._indenters.append(indenter)

    def select(self, lang: str) -> EmbeddedIndenter:
        """Select the first indenter that supports the language, else fallback."""
        for indenter in self._indenters:
            if indenter.supports_language(lang):
                return indenter
        if self._fallback is not None:
            return self._fallback
        raise LookupError(f"No embedded indenter supports language: {lang}")


def build_embedded_registry() -> EmbeddedRegistry:
    """Build the default embedded-language registry."""
    registry = EmbeddedRegistry()
    registry.register(
        BracketDepthIndenter(
            name="script",
            languages=("js", "javascript", "ts", "typescript", "mjs", "jsx", "tsx"),
            rules=SCRIPT_RULES,
        )
    )
    registry.register(
        BracketDepthIndenter(name="style", languages=("css", "postcss"), rules=STYLE_RULES)
    )
    registry.register(
        BracketDepthIndenter(name="sass", languages=("scss", "less"), rules=SASS_RULES)
    )
    registry.register(PinnedIndenter(), fallback=True)
    return registry
