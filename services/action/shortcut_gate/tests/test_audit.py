"""Unit tests for the bounded audit ledger."""

from __future__ import annotations

from datetime import UTC, datetime

from packages.shortcut_shared.errors import dependency_error
from services.action.shortcut_gate.audit import (
    AUDIT_CAPACITY,
    OPERATION_SHORTCUT_EXECUTION,
    AuditLog,
    assess_risk_level,
)
from services.action.shortcut_gate.domain import (
    NOT_LOGGED,
    ExecutionMetadata,
    ExecutionResult,
    ExecutionStatus,
    RiskLevel,
)


def _result(name: str = "Weather Report", *, success: bool = True, elapsed_ms: int = 10) -> ExecutionResult:
    now = datetime.now(UTC)
    return ExecutionResult(
        success=success,
        status=ExecutionStatus.SUCCEEDED if success else ExecutionStatus.FAILED,
        output="ok" if success else None,
        error=None if success else dependency_error("boom", code="EXECUTION_ERROR"),
        elapsed_ms=elapsed_ms,
        metadata=ExecutionMetadata(shortcut_name=name, start_time=now, end_time=now),
    )


def test_record_captures_execution_fields() -> None:
    audit = AuditLog()

    entry = audit.record("Weather Report", "San Francisco", _result())

    assert entry.id.startswith("audit_")
    assert entry.operation == OPERATION_SHORTCUT_EXECUTION
    assert entry.input == "San Francisco"
    assert entry.success is True
    assert entry.error is None
    assert entry.risk_level == RiskLevel.LOW


def test_input_is_masked_when_execution_logging_disabled() -> None:
    entry = AuditLog(log_executions=False).record("Weather Report", "secret", _result())

    assert entry.input == NOT_LOGGED


def test_ledger_drops_oldest_entry_at_capacity() -> None:
    audit = AuditLog()
    for index in range(AUDIT_CAPACITY + 1):
        audit.record(f"Shortcut {index}", index, _result())

    entries = audit.entries(limit=AUDIT_CAPACITY + 10)

    assert len(audit) == AUDIT_CAPACITY
    assert len(entries) == AUDIT_CAPACITY
    assert entries[0].shortcut_name == "Shortcut 1"
    assert entries[-1].shortcut_name == f"Shortcut {AUDIT_CAPACITY}"


def test_entries_returns_most_recent_in_insertion_order() -> None:
    audit = AuditLog()
    for index in range(5):
        audit.record(f"Shortcut {index}", None, _result())

    assert [entry.shortcut_name for entry in audit.entries(limit=2)] == [
        "Shortcut 3",
        "Shortcut 4",
    ]
    assert audit.entries(limit=0) == []


def test_clear_removes_entries() -> None:
    audit = AuditLog()
    audit.record("Weather Report", None, _result())

    audit.clear()

    assert audit.entries() == []


def test_risk_level_assessment() -> None:
    assert assess_risk_level("System Configuration", _result()) == RiskLevel.HIGH
    assert assess_risk_level("Weather Report", _result(success=False)) == RiskLevel.MEDIUM
    assert assess_risk_level("Weather Report", _result(elapsed_ms=30_001)) == RiskLevel.MEDIUM
    assert assess_risk_level("Weather Report", _result(elapsed_ms=30_000)) == RiskLevel.LOW


def test_failed_execution_records_error_message() -> None:
    entry = AuditLog().record("Weather Report", None, _result(success=False))

    assert entry.success is False
    assert entry.error == "boom"
