"""Configuration loading and deterministic merge order."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path

from tagindent.errors import ConfigurationError

CONFIG_FILE_NAME = "tagindent.toml"

MAX_TOKENS_DEFAULT = 200_000
MAX_TOKENS_CAP = 2_000_000

EXPRESSION_PRECEDENCE = "expression"
ATTRIBUTE_PRECEDENCE = "attribute"
PRECEDENCE_CHOICES = (EXPRESSION_PRECEDENCE, ATTRIBUTE_PRECEDENCE)

# Whitespace inside these elements is rendered content; they are left as written.
DEFAULT_IGNORED_NODES = ("pre", "textarea")


@dataclass(slots=True, frozen=True)
class IndentConfig:
    """Fully merged indentation settings for one analysis run."""

    indent_unit: int | str = 2
    align_attributes_vertically: bool = False
    indent_script_and_style: bool = True
    mixed_alignment: bool = False
    attribute_expression_precedence: str = EXPRESSION_PRECEDENCE
    ignored_nodes: tuple[str, ...] = DEFAULT_IGNORED_NODES
    max_tokens: int = MAX_TOKENS_DEFAULT

    def to_public_dict(self) -> dict[str, object]:
        """Return a serializable snapshot of the effective configuration."""
        return {
            "indent": {
                "unit": self.indent_unit,
                "align_attributes_vertically": self.align_attributes_vertically,
                "indent_script_and_style": self.indent_script_and_style,
                "mixed_alignment": self.mixed_alignment,
                "attribute_expression_precedence": self.attribute_expression_precedence,
                "ignored_nodes": list(self.ignored_nodes),
            },
            "limits": {
                "max_tokens": self.max_tokens,
            },
        }


@dataclass(slots=True, frozen=True)
class CliOverrides:
    """Optional command-line overrides applied at highest precedence."""

    indent_unit: int | str | None = None
    align_attributes_vertically: bool | None = None
    indent_script_and_style: bool | None = None
    max_tokens: int | None = None


def default_config() -> IndentConfig:
    """Build the default configuration."""
    return IndentConfig()


def load_config_file(root: Path) -> dict[str, object]:
    """Load optional tagindent.toml from a project root."""
    config_path = root / CONFIG_FILE_NAME
    if not config_path.exists():
        return {}
    with config_path.open("rb") as handle:
        try:
            payload = tomllib.load(handle)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigurationError(f"{CONFIG_FILE_NAME} is not valid TOML: {exc}") from exc
    return payload


def _get_table(payload: dict[str, object], key: str) -> dict[str, object]:
    value = payload.get(key, {})
    if not isinstance(value, dict):
        raise ConfigurationError(f"Config section '{key}' must be a table.")
    return value


def _tuple_of_strings(value: object, name: str) -> tuple[str, ...]:
    if not isinstance(value, list):
        raise ConfigurationError(f"Config field '{name}' must be a list of strings.")
    output: list[str] = []
    for item in value:
        if not isinstance(item, str):
            raise ConfigurationError(f"Config field '{name}' must contain only strings.")
        output.append(item)
    return tuple(output)


def _optional_bool(value: object, name: str, default: bool) -> bool:
    if value is None:
        return default
    if not isinstance(value, bool):
        raise ConfigurationError(f"Config field '{name}' must be a boolean.")
    return value


def _optional_indent_unit(value: object, name: str, default: int | str) -> int | str:
    if value is None:
        return default
    if isinstance(value, bool):
        raise ConfigurationError(f"Config field '{name}' must be a positive integer or 'tab'.")
    if isinstance(value, int) and value >= 1:
        return value
    if isinstance(value, str) and value.strip().lower() == "tab":
        return "tab"
    raise ConfigurationError(f"Config field '{name}' must be a positive integer or 'tab'.")


def _optional_positive_int_with_cap(
    value: object,
    name: str,
    default: int,
    cap: int | None,
) -> int:
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ConfigurationError(f"Config field '{name}' must be a positive integer.")
    if cap is not None and value > cap:
        raise ConfigurationError(f"Config field '{name}' must be <= {cap}.")
    return value


def merge_config(
    base: IndentConfig, payload: dict[str, object], overrides: CliOverrides
) -> IndentConfig:
    """Merge defaults, config file, then CLI overrides."""
    indent_payload = _get_table(payload, "indent")
    limits_payload = _get_table(payload, "limits")

    precedence = indent_payload.get(
        "attribute_expression_precedence", base.attribute_expression_precedence
    )
    if precedence not in PRECEDENCE_CHOICES:
        raise ConfigurationError(
            "Config field 'indent.attribute_expression_precedence' must be one of "
            "expression, attribute."
        )
    ignored_nodes = base.ignored_nodes
    if "ignored_nodes" in indent_payload:
        ignored_nodes = _tuple_of_strings(indent_payload["ignored_nodes"], "indent.ignored_nodes")

    merged = IndentConfig(
        indent_unit=_optional_indent_unit(
            indent_payload.get("unit"), "indent.unit", base.indent_unit
        ),
        align_attributes_vertically=_optional_bool(
            indent_payload.get("align_attributes_vertically"),
            "indent.align_attributes_vertically",
            base.align_attributes_vertically,
        ),
        indent_script_and_style=_optional_bool(
            indent_payload.get("indent_script_and_style"),
            "indent.indent_script_and_style",
            base.indent_script_and_style,
        ),
        mixed_alignment=_optional_bool(
            indent_payload.get("mixed_alignment"),
            "indent.mixed_alignment",
            base.mixed_alignment,
        ),
        attribute_expression_precedence=str(precedence),
        ignored_nodes=ignored_nodes,
        max_tokens=_optional_positive_int_with_cap(
            limits_payload.get("max_tokens"),
            "limits.max_tokens",
            base.max_tokens,
            MAX_TOKENS_CAP,
        ),
    )
    return apply_cli_overrides(merged, overrides)


def apply_cli_overrides(config: IndentConfig, overrides: CliOverrides) -> IndentConfig:
    """Apply command-line overrides at highest precedence."""
    return IndentConfig(
        indent_unit=_optional_indent_unit(
            overrides.indent_unit, "overrides.indent_unit", config.indent_unit
        ),
        align_attributes_vertically=(
            overrides.align_attributes_vertically
            if overrides.align_attributes_vertically is not None
            else config.align_attributes_vertically
        ),
        indent_script_and_style=(
            overrides.indent_script_and_style
            if overrides.indent_script_and_style is not None
            else config.indent_script_and_style
        ),
        mixed_alignment=config.mixed_alignment,
        attribute_expression_precedence=config.attribute_expression_precedence,
        ignored_nodes=config.ignored_nodes,
        max_tokens=_optional_positive_int_with_cap(
            overrides.max_tokens, "overrides.max_tokens", config.max_tokens, MAX_TOKENS_CAP
        ),
    )


def load_effective_config(root: Path, overrides: CliOverrides | None = None) -> IndentConfig:
    """Load effective config using merge order defaults -> config file -> overrides."""
    payload = load_config_file(root.resolve())
    return merge_config(default_config(), payload, overrides or CliOverrides())
