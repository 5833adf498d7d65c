from __future__ import annotations

import json
from pathlib import Path

import pytest

from tagindent.cli import build_arg_parser, collect_paths, main


def _write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def test_reports_mismatches_and_exits_one(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    page = _write(tmp_path / "page.svelte", "<div>\n<p>x</p>\n</div>\n")

    code = main([str(page), "--config-root", str(tmp_path)])

    assert code == 1
    output = capsys.readouterr().out.splitlines()
    assert output == [
        f"{page.as_posix()}:2:0: Expected indentation of 2 spaces but found 0 spaces."
    ]


def test_clean_document_exits_zero(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    page = _write(tmp_path / "page.svelte", "<div>\n  <p>x</p>\n</div>\n")

    assert main([str(page), "--config-root", str(tmp_path)]) == 0
    assert capsys.readouterr().out == ""


def test_fix_rewrites_file(tmp_path: Path) -> None:
    page = _write(tmp_path / "page.svelte", "<div>\n<p>x</p>\n</div>\n")

    code = main(["--fix", str(page), "--config-root", str(tmp_path)])

    assert code == 0
    assert page.read_text(encoding="utf-8") == "<div>\n  <p>x</p>\n</div>\n"


def test_indent_override_and_config_file(tmp_path: Path) -> None:
    _write(tmp_path / "tagindent.toml", "[indent]\nunit = 4\n")
    page = _write(tmp_path / "page.svelte", "<div>\n    <p>x</p>\n</div>\n")

    assert main([str(page), "--config-root", str(tmp_path)]) == 0
    assert main([str(page), "--config-root", str(tmp_path), "--indent", "2"]) == 1
    assert main([str(page), "--config-root", str(tmp_path), "--indent", "tab"]) == 1


def test_parse_error_exits_two(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    page = _write(tmp_path / "page.svelte", "<div>\n")

    code = main([str(page), "--config-root", str(tmp_path)])

    assert code == 2
    assert "PARSE_ERROR" in capsys.readouterr().out


def test_invalid_indent_option_exits_two(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    page = _write(tmp_path / "page.svelte", "<p>x</p>\n")

    code = main([str(page), "--config-root", str(tmp_path), "--indent", "wide"])

    assert code == 2
    assert "--indent" in capsys.readouterr().err


def test_directories_expand_to_markup_files(tmp_path: Path) -> None:
    _write(tmp_path / "src" / "b.svelte", "<p>x</p>\n")
    _write(tmp_path / "src" / "nested" / "a.html", "<p>x</p>\n")
    _write(tmp_path / "src" / "notes.txt", "text\n")

    collected = collect_paths([tmp_path / "src"])

    assert [path.name for path in collected] == ["b.svelte", "a.html"]


def test_audit_log_option(tmp_path: Path) -> None:
    page = _write(tmp_path / "page.svelte", "<p>x</p>\n")
    audit = tmp_path / "logs" / "audit.jsonl"

    main([str(page), "--config-root", str(tmp_path), "--audit-log", str(audit)])

    (record,) = [json.loads(line) for line in audit.read_text(encoding="utf-8").splitlines()]
    assert record["document"] == page.as_posix()
    assert record["ok"] is True


def test_alignment_and_script_flags_parse() -> None:
    args = build_arg_parser().parse_args(
        ["x.svelte", "--align-attributes", "--no-indent-script-and-style"]
    )
    defaults = build_arg_parser().parse_args(["x.svelte"])

    assert args.align_attributes is True
    assert args.indent_script_and_style is False
    assert defaults.align_attributes is None
    assert defaults.indent_script_and_style is None
