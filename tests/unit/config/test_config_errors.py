from __future__ import annotations

from pathlib import Path

import pytest

from tagindent.config import CliOverrides, load_effective_config
from tagindent.errors import ConfigurationError


def _write(root: Path, *lines: str) -> None:
    (root / "tagindent.toml").write_text("\n".join(lines), encoding="utf-8")


def test_invalid_unit_names_the_field(tmp_path: Path) -> None:
    _write(tmp_path, "[indent]", 'unit = "four"')

    with pytest.raises(ValueError, match="indent.unit"):
        load_effective_config(tmp_path)


def test_invalid_section_type(tmp_path: Path) -> None:
    _write(tmp_path, 'indent = "not-a-table"')

    with pytest.raises(ConfigurationError, match="section 'indent'"):
        load_effective_config(tmp_path)


def test_invalid_boolean(tmp_path: Path) -> None:
    _write(tmp_path, "[indent]", 'indent_script_and_style = "yes"')

    with pytest.raises(ConfigurationError, match="indent.indent_script_and_style"):
        load_effective_config(tmp_path)


def test_invalid_precedence(tmp_path: Path) -> None:
    _write(tmp_path, "[indent]", 'attribute_expression_precedence = "both"')

    with pytest.raises(ConfigurationError, match="attribute_expression_precedence"):
        load_effective_config(tmp_path)


def test_ignored_nodes_must_be_strings(tmp_path: Path) -> None:
    _write(tmp_path, "[indent]", "ignored_nodes = [1, 2]")

    with pytest.raises(ConfigurationError, match="indent.ignored_nodes"):
        load_effective_config(tmp_path)


def test_max_tokens_is_capped(tmp_path: Path) -> None:
    _write(tmp_path, "[limits]", "max_tokens = 3000000")

    with pytest.raises(ConfigurationError, match="limits.max_tokens"):
        load_effective_config(tmp_path)


def test_malformed_toml(tmp_path: Path) -> None:
    _write(tmp_path, "[indent", "unit = 2")

    with pytest.raises(ConfigurationError, match="not valid TOML"):
        load_effective_config(tmp_path)


def test_invalid_cli_override(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError, match="overrides.max_tokens"):
        load_effective_config(tmp_path, CliOverrides(max_tokens=0))
