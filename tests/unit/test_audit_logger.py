"""Tests for the audit logger."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from sevalink.audit.logger import AuditLogger
from sevalink.models import AuditEvent, AuditEventType


def _make_event(**kwargs: object) -> AuditEvent:
    defaults: dict[str, object] = {
        "event_type": AuditEventType.MESSAGE_CLASSIFIED,
        "action": "classify",
        "result": "success",
    }
    defaults.update(kwargs)
    return AuditEvent(**defaults)  # type: ignore[arg-type]


def test_log_appends_json_line(tmp_path: Path) -> None:
    log_file = tmp_path / "audit.jsonl"
    logger = AuditLogger(log_path=str(log_file))
    logger.log(_make_event(details={"category": "complaint"}))

    lines = log_file.read_text().strip().split("\n")
    assert len(lines) == 1
    parsed = json.loads(lines[0])
    assert parsed["event_type"] == "message_classified"
    assert parsed["details"] == {"category": "complaint"}


def test_log_multiple_events_append(tmp_path: Path) -> None:
    log_file = tmp_path / "audit.jsonl"
    logger = AuditLogger(log_path=str(log_file))

    for i in range(3):
        logger.log(_make_event(action=f"action_{i}"))

    lines = log_file.read_text().strip().split("\n")
    assert [json.loads(line)["action"] for line in lines] == ["action_0", "action_1", "action_2"]


def test_log_creates_file_if_missing(tmp_path: Path) -> None:
    log_file = tmp_path / "subdir" / "audit.jsonl"
    AuditLogger(log_path=str(log_file)).log(_make_event())
    assert log_file.exists()


def test_unicode_details_written(tmp_path: Path) -> None:
    log_file = tmp_path / "audit.jsonl"
    AuditLogger(log_path=str(log_file)).log(_make_event(details={"text": "रक्त"}))
    assert json.loads(log_file.read_text(encoding="utf-8"))["details"]["text"] == "रक्त"


def test_rotation(tmp_path: Path) -> None:
    log_file = tmp_path / "audit.jsonl"
    logger = AuditLogger(log_path=str(log_file), max_bytes=200, backup_count=2)
    for i in range(20):
        logger.log(_make_event(action=f"action_{i}"))

    assert log_file.exists()
    assert (tmp_path / "audit.jsonl.1").exists()
    assert (tmp_path / "audit.jsonl.2").exists()
    assert not (tmp_path / "audit.jsonl.3").exists()


def test_write_failure_is_logged_not_raised(
    tmp_path: Path, caplog: pytest.LogCaptureFixture,
) -> None:
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("")
    logger = AuditLogger(log_path=str(blocker / "audit.jsonl"))
    logger.log(_make_event())
    assert "Failed to write audit event" in caplog.text


class TestFromEnv:
    def test_disabled_without_path(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("AUDIT_LOG_PATH", raising=False)
        assert AuditLogger.from_env() is None

    def test_reads_rotation_settings(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path,
    ) -> None:
        monkeypatch.setenv("AUDIT_LOG_PATH", str(tmp_path / "a.jsonl"))
        monkeypatch.setenv("AUDIT_LOG_MAX_BYTES", "1024")
        monkeypatch.setenv("AUDIT_LOG_BACKUP_COUNT", "3")
        logger = AuditLogger.from_env()
        assert logger is not None
        assert logger._max_bytes == 1024
        assert logger._backup_count == 3
