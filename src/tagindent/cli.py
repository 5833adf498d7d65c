"""Command-line entry point for the indentation checker."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Iterable
from pathlib import Path

from tagindent.config import CliOverrides, load_effective_config
from tagindent.errors import ConfigurationError
from tagindent.logging import JsonlAuditLogger
from tagindent.runner import LintOutcome, lint_paths

DOCUMENT_SUFFIXES = (".svelte", ".html", ".htm")


def build_arg_parser() -> argparse.ArgumentParser:
    """Build argument parser for the tagindent command."""
    parser = argparse.ArgumentParser(
        prog="tagindent",
        description="Check and fix indentation of markup documents.",
    )
    parser.add_argument("paths", nargs="+", help="Files or directories to check.")
    parser.add_argument("--fix", action="store_true", help="Rewrite files with corrections.")
    parser.add_argument("--config-root", required=False, default=".")
    parser.add_argument("--indent", required=False, default=None, help="Spaces count or 'tab'.")
    parser.add_argument(
        "--align-attributes",
        dest="align_attributes",
        action="store_true",
        default=None,
    )
    parser.add_argument(
        "--no-indent-script-and-style",
        dest="indent_script_and_style",
        action="store_false",
        default=None,
    )
    parser.add_argument("--max-tokens", type=int, required=False, default=None)
    parser.add_argument("--audit-log", required=False, default=None)
    return parser


def main(argv: list[str] | None = None) -> int:
    """Entrypoint for the tagindent command."""
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    try:
        overrides = CliOverrides(
            indent_unit=_parse_indent(args.indent),
            align_attributes_vertically=args.align_attributes,
            indent_script_and_style=args.indent_script_and_style,
            max_tokens=args.max_tokens,
        )
        config = load_effective_config(Path(args.config_root), overrides)
    except ConfigurationError as exc:
        print(f"tagindent: {exc}", file=sys.stderr)
        return 2

    audit_logger = JsonlAuditLogger(Path(args.audit_log)) if args.audit_log else None
    outcomes = lint_paths(
        collect_paths(Path(item) for item in args.paths),
        config,
        fix=args.fix,
        audit_logger=audit_logger,
    )
    return _print_outcomes(outcomes, fixed=args.fix)


def collect_paths(paths: Iterable[Path]) -> list[Path]:
    """Expand directories into the markup documents they contain."""
    collected: list[Path] = []
    for path in paths:
        if path.is_dir():
            collected.extend(
                candidate
                for candidate in sorted(path.rglob("*"))
                if candidate.is_file() and candidate.suffix.lower() in DOCUMENT_SUFFIXES
            )
        else:
            collected.append(path)
    return collected


def _parse_indent(value: str | None) -> int | str | None:
    if value is None or value == "tab":
        return value
    try:
        return int(value)
    except ValueError as exc:
        raise ConfigurationError("--indent must be a positive integer or 'tab'.") from exc


def _print_outcomes(outcomes: list[LintOutcome], *, fixed: bool) -> int:
    exit_code = 0
    for outcome in outcomes:
        if outcome.error_code is not None:
            print(f"{outcome.document}: {outcome.error_code}: {outcome.error_message}")
            exit_code = 2
            continue
        if fixed:
            continue
        for report in outcome.reports:
            location = report.location
            print(f"{outcome.document}:{location.line}:{location.column}: {report.message}")
            exit_code = max(exit_code, 1)
    return exit_code


if __name__ == "__main__":
    raise SystemExit(main())
