"""Indent unit parsing and indentation arithmetic."""

from __future__ import annotations

from dataclasses import dataclass

from tagindent.errors import ConfigurationError

TAB = "tab"


@dataclass(slots=True, frozen=True, order=True)
class Indentation:
    """Expected leading whitespace: ``width`` indent chars then ``align`` spaces."""

    width: int
    align: int = 0


@dataclass(slots=True, frozen=True)
class IndentUnit:
    """One indentation level: ``size`` copies of ``char``."""

    char: str
    size: int
    mixed_alignment: bool = False

    @classmethod
    def parse(cls, value: object, *, mixed_alignment: bool = False) -> IndentUnit:
        """Build a unit from an integer space count or the string ``tab``."""
        if isinstance(value, bool):
            raise ConfigurationError("Indent unit must be a positive integer or 'tab'.")
        if isinstance(value, int):
            if value < 1:
                raise ConfigurationError("Indent unit must be a positive integer or 'tab'.")
            return cls(char=" ", size=value, mixed_alignment=mixed_alignment)
        if isinstance(value, str) and value.strip().lower() in {TAB, "\t"}:
            return cls(char="\t", size=1, mixed_alignment=mixed_alignment)
        raise ConfigurationError("Indent unit must be a positive integer or 'tab'.")

    @property
    def uses_tabs(self) -> bool:
        return self.char == "\t"

    def indent(self, base: Indentation, levels: int) -> Indentation:
        """Return ``base`` deepened by ``levels`` indentation levels."""
        return Indentation(width=base.width + levels * self.size, align=base.align)

    def shift(self, base: Indentation, columns: int) -> Indentation:
        """Return ``base`` moved right by ``columns`` visual columns for alignment."""
        if columns <= 0:
            return base
        if not self.uses_tabs:
            return Indentation(width=base.width + columns, align=base.align)
        if self.mixed_alignment:
            return Indentation(width=base.width, align=base.align + columns)
        return base

    def render(self, indentation: Indentation) -> str:
        """Return the whitespace string for an indentation."""
        return self.char * indentation.width + " " * indentation.align

    def measure(self, text: str) -> Indentation:
        """Interpret actual leading whitespace as an indentation."""
        if not self.uses_tabs:
            return Indentation(width=len(text))
        tabs = len(text) - len(text.lstrip("\t"))
        return Indentation(width=tabs, align=len(text) - tabs)

    def describe(self, text: str) -> str:
        """Describe leading whitespace for report messages, e.g. ``2 spaces``."""
        tabs = text.count("\t")
        spaces = len(text) - tabs
        if tabs and spaces:
            return f"{_plural(tabs, 'tab')} and {_plural(spaces, 'space')}"
        if tabs:
            return _plural(tabs, "tab")
        if not text:
            return _plural(0, "tab" if self.uses_tabs else "space")
        return _plural(spaces, "space")


def _plural(count: int, noun: str) -> str:
    if count == 1:
        return f"{count} {noun}"
    return f"{count} {noun}s"
