from __future__ import annotations

import pytest

from tagindent.errors import ConfigurationError
from tagindent.indent import Indentation, IndentUnit


def test_parse_accepts_space_count_and_tab() -> None:
    spaces = IndentUnit.parse(4)
    tabs = IndentUnit.parse("tab")

    assert (spaces.char, spaces.size) == (" ", 4)
    assert (tabs.char, tabs.size) == ("\t", 1)
    assert tabs.uses_tabs


@pytest.mark.parametrize("value", [0, -2, True, "four", 2.5, None])
def test_parse_rejects_invalid_units(value: object) -> None:
    with pytest.raises(ConfigurationError, match="positive integer or 'tab'"):
        IndentUnit.parse(value)


def test_indent_and_render_spaces() -> None:
    unit = IndentUnit.parse(2)

    deeper = unit.indent(Indentation(2), 2)
    assert deeper == Indentation(6)
    assert unit.render(deeper) == "      "


def test_shift_for_alignment_depends_on_unit() -> None:
    spaces = IndentUnit.parse(2)
    tabs = IndentUnit.parse("tab")
    mixed = IndentUnit.parse("tab", mixed_alignment=True)
    base = Indentation(1)

    assert spaces.shift(base, 5) == Indentation(6)
    assert tabs.shift(base, 5) == Indentation(1)
    assert mixed.shift(base, 5) == Indentation(1, 5)
    assert mixed.render(Indentation(1, 5)) == "\t     "


def test_measure_reads_leading_whitespace() -> None:
    assert IndentUnit.parse(2).measure("    ") == Indentation(4)
    assert IndentUnit.parse("tab").measure("\t\t  ") == Indentation(2, 2)


def test_describe_uses_singular_and_plural_forms() -> None:
    spaces = IndentUnit.parse(2)
    tabs = IndentUnit.parse("tab")

    assert spaces.describe("  ") == "2 spaces"
    assert spaces.describe(" ") == "1 space"
    assert spaces.describe("") == "0 spaces"
    assert tabs.describe("") == "0 tabs"
    assert tabs.describe("\t") == "1 tab"
    assert tabs.describe("\t  ") == "1 tab and 2 spaces"
