"""Host lint-runner: parse, analyse, filter suppressed reports and apply fixes."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from pathlib import Path

from tagindent.config import IndentConfig
from tagindent.document import ParseError, read_document
from tagindent.errors import InternalConsistencyError
from tagindent.indent import EmbeddedRegistry, Report, apply_edits, check_document
from tagindent.logging import AuditEvent, JsonlAuditLogger, utc_timestamp

SuppressionPredicate = Callable[[Report], bool]

PARSE_ERROR = "PARSE_ERROR"
CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
INTERNAL_CONSISTENCY = "INTERNAL_CONSISTENCY"
READ_ERROR = "READ_ERROR"


@dataclass(slots=True, frozen=True)
class LintOutcome:
    """Result of linting one document."""

    document: str
    reports: tuple[Report, ...]
    suppressed: int
    lines_checked: int
    error_code: str | None = None
    error_message: str | None = None
    fixed_text: str | None = None

    @property
    def ok(self) -> bool:
        return self.error_code is None and not self.reports

    @property
    def aborted(self) -> bool:
        return self.error_code in {PARSE_ERROR, INTERNAL_CONSISTENCY, READ_ERROR}


def lint_text(
    text: str,
    config: IndentConfig,
    *,
    document: str = "<text>",
    is_suppressed: SuppressionPredicate | None = None,
    fix: bool = False,
    registry: EmbeddedRegistry | None = None,
    audit_logger: JsonlAuditLogger | None = None,
) -> LintOutcome:
    """Lint one document's text; with ``fix`` also return the corrected text."""
    outcome = _lint(text, config, document, is_suppressed, fix, registry)
    if audit_logger is not None:
        audit_logger.append(_audit_event(outcome))
    return outcome


def fix_text(text: str, config: IndentConfig) -> str:
    """Return text with every fixable indentation mismatch corrected."""
    outcome = lint_text(text, config, fix=True)
    if outcome.aborted:
        raise ValueError(outcome.error_message or "Analysis aborted.")
    return outcome.fixed_text if outcome.fixed_text is not None else text


def lint_paths(
    paths: Iterable[Path],
    config: IndentConfig,
    *,
    fix: bool = False,
    is_suppressed: SuppressionPredicate | None = None,
    audit_logger: JsonlAuditLogger | None = None,
) -> list[LintOutcome]:
    """Lint files independently; with ``fix`` rewrite files that changed."""
    outcomes: list[LintOutcome] = []
    for path in sorted(paths, key=lambda item: item.as_posix()):
        name = path.as_posix()
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            outcome = LintOutcome(
                document=name,
                reports=(),
                suppressed=0,
                lines_checked=0,
                error_code=READ_ERROR,
                error_message=str(exc),
            )
            if audit_logger is not None:
                audit_logger.append(_audit_event(outcome))
            outcomes.append(outcome)
            continue
        outcome = lint_text(
            text,
            config,
            document=name,
            is_suppressed=is_suppressed,
            fix=fix,
            audit_logger=audit_logger,
        )
        if fix and outcome.fixed_text is not None and outcome.fixed_text != text:
            path.write_text(outcome.fixed_text, encoding="utf-8")
        outcomes.append(outcome)
    return outcomes


def _lint(
    text: str,
    config: IndentConfig,
    document: str,
    is_suppressed: SuppressionPredicate | None,
    fix: bool,
    registry: EmbeddedRegistry | None,
) -> LintOutcome:
    try:
        parsed = read_document(text)
    except ParseError as exc:
        return LintOutcome(
            document=document,
            reports=(),
            suppressed=0,
            lines_checked=0,
            error_code=PARSE_ERROR,
            error_message=str(exc),
        )
    try:
        result = check_document(parsed, config, registry=registry)
    except InternalConsistencyError as exc:
        return LintOutcome(
            document=document,
            reports=(),
            suppressed=0,
            lines_checked=0,
            error_code=INTERNAL_CONSISTENCY,
            error_message=str(exc),
        )

    if result.configuration_error:
        return LintOutcome(
            document=document,
            reports=result.reports,
            suppressed=0,
            lines_checked=0,
            error_code=CONFIGURATION_ERROR,
            error_message=result.reports[0].message,
        )

    kept = [
        report for report in result.reports if is_suppressed is None or not is_suppressed(report)
    ]
    fixed_text = None
    if fix:
        fixed_text = apply_edits(text, [edit for report in kept for edit in report.fix_edits])
    return LintOutcome(
        document=document,
        reports=tuple(kept),
        suppressed=len(result.reports) - len(kept),
        lines_checked=result.lines_checked,
        fixed_text=fixed_text,
    )


def _audit_event(outcome: LintOutcome) -> AuditEvent:
    return AuditEvent(
        timestamp=utc_timestamp(),
        document=outcome.document,
        ok=outcome.ok,
        aborted=outcome.aborted,
        error_code=outcome.error_code,
        metadata={
            "lines_checked": outcome.lines_checked,
            "mismatches": len(outcome.reports),
            "suppressed": outcome.suppressed,
            "fixed": outcome.fixed_text is not None,
        },
    )
