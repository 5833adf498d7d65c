"""One indentation analysis pass over a parsed document."""

from __future__ import annotations

from dataclasses import dataclass

from tagindent.config import IndentConfig
from tagindent.document.nodes import Document
from tagindent.errors import ConfigurationError
from tagindent.indent.embedded import EmbeddedRegistry
from tagindent.indent.fixes import Mismatch, TextEdit, diff, emit
from tagindent.indent.resolver import resolve_all
from tagindent.indent.units import IndentUnit
from tagindent.indent.visitors import build_offset_graph


@dataclass(slots=True, frozen=True)
class Location:
    """Report location: 1-based lines, 0-based columns."""

    line: int
    column: int
    end_line: int
    end_column: int


@dataclass(slots=True, frozen=True)
class Report:
    """Reportable item handed to the host lint-runner."""

    message: str
    location: Location
    fix_edits: tuple[TextEdit, ...]


@dataclass(slots=True, frozen=True)
class DocumentResult:
    """Outcome of one analysis pass."""

    reports: tuple[Report, ...]
    lines_checked: int
    configuration_error: bool = False

    @property
    def fix_edits(self) -> tuple[TextEdit, ...]:
        return tuple(edit for report in self.reports for edit in report.fix_edits)


def check_document(
    document: Document,
    config: IndentConfig,
    *,
    registry: EmbeddedRegistry | None = None,
) -> DocumentResult:
    """Analyse a document and report every line whose indentation is wrong.

    Configuration problems produce one document-scope report without fixes.
    Internal consistency failures propagate and abort the pass.
    """
    try:
        unit = IndentUnit.parse(config.indent_unit, mixed_alignment=config.mixed_alignment)
        if len(document.tokens) > config.max_tokens:
            raise ConfigurationError(
                f"Document has {len(document.tokens)} tokens; limit is {config.max_tokens}."
            )
        graph = build_offset_graph(document, config, registry)
    except ConfigurationError as exc:
        return DocumentResult(
            reports=(
                Report(
                    message=str(exc),
                    location=Location(line=1, column=0, end_line=1, end_column=0),
                    fix_edits=(),
                ),
            ),
            lines_checked=0,
            configuration_error=True,
        )

    records = list(resolve_all(graph, document, unit))
    reports = [_mismatch_report(mismatch, unit) for mismatch in diff(records)]
    return DocumentResult(reports=tuple(reports), lines_checked=len(records))


def _mismatch_report(mismatch: Mismatch, unit: IndentUnit) -> Report:
    expected = unit.describe(mismatch.expected_text)
    actual = unit.describe(mismatch.actual_text)
    if expected == actual:
        message = (
            f"Expected indentation of {expected} but found "
            f"{_visible(mismatch.actual_text)}."
        )
    else:
        message = f"Expected indentation of {expected} but found {actual}."
    return Report(
        message=message,
        location=Location(
            line=mismatch.line,
            column=0,
            end_line=mismatch.line,
            end_column=len(mismatch.actual_text),
        ),
        fix_edits=tuple(emit([mismatch])),
    )


def _visible(text: str) -> str:
    return '"' + text.replace("\t", "\\t") + '"'
