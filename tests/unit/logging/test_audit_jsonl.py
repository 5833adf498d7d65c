from __future__ import annotations

import json
from pathlib import Path

from tagindent.logging import AuditEvent, JsonlAuditLogger, utc_timestamp


def _event(document: str, timestamp: str = "2026-01-01T00:00:00.000Z") -> AuditEvent:
    return AuditEvent(
        timestamp=timestamp,
        document=document,
        ok=True,
        aborted=False,
        error_code=None,
        metadata={"lines_checked": 3, "mismatches": 0, "suppressed": 0, "fixed": False},
    )


def test_append_writes_one_sorted_json_object_per_line(tmp_path: Path) -> None:
    logger = JsonlAuditLogger(tmp_path / "nested" / "audit.jsonl")

    logger.append(_event("a.svelte"))
    logger.append(_event("b.svelte"))

    lines = logger.path.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 2
    record = json.loads(lines[0])
    assert list(record) == sorted(record)
    assert set(record) == {"timestamp", "document", "ok", "aborted", "error_code", "metadata"}
    assert record["metadata"]["lines_checked"] == 3


def test_read_filters_by_since_document_and_limit(tmp_path: Path) -> None:
    logger = JsonlAuditLogger(tmp_path / "audit.jsonl")
    logger.append(_event("a.svelte", "2026-01-01T00:00:00.000Z"))
    logger.append(_event("b.svelte", "2026-01-02T00:00:00.000Z"))
    logger.append(_event("a.svelte", "2026-01-03T00:00:00.000Z"))

    assert [item["document"] for item in logger.read()] == ["a.svelte", "b.svelte", "a.svelte"]
    assert len(logger.read(since="2026-01-02T00:00:00.000Z")) == 2
    assert len(logger.read(document="a.svelte")) == 2
    assert [item["timestamp"] for item in logger.read(limit=1)] == ["2026-01-03T00:00:00.000Z"]
    assert logger.read(limit=0) == []


def test_read_skips_malformed_lines(tmp_path: Path) -> None:
    path = tmp_path / "audit.jsonl"
    path.write_text('not json\n\n{"document": "x", "timestamp": "t"}\n', encoding="utf-8")

    assert JsonlAuditLogger(path).read() == [{"document": "x", "timestamp": "t"}]


def test_utc_timestamp_format() -> None:
    value = utc_timestamp()

    assert value.endswith("Z")
    assert "T" in value
