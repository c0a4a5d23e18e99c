"""Bounded in-memory audit ledger of shortcut executions."""

from __future__ import annotations

from collections import deque
from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

from services.action.shortcut_gate.classification import is_system_shortcut
from services.action.shortcut_gate.domain import NOT_LOGGED, AuditEntry, ExecutionResult, RiskLevel

AUDIT_CAPACITY = 1000
OPERATION_SHORTCUT_EXECUTION = "shortcut_execution"
SLOW_EXECUTION_MS = 30_000


class AuditLog:
    """Append-only FIFO ledger; the oldest entry is dropped once full."""

    def __init__(self, *, log_executions: bool = True, capacity: int = AUDIT_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self._log_executions = log_executions
        self._entries: deque[AuditEntry] = deque(maxlen=capacity)

    def __len__(self) -> int:
        return len(self._entries)

    def record(self, name: str, input_value: Any, result: ExecutionResult) -> AuditEntry:
        """Append one entry describing an accepted execution attempt."""
        entry = AuditEntry(
            id=f"audit_{uuid4().hex}",
            timestamp=datetime.now(UTC),
            operation=OPERATION_SHORTCUT_EXECUTION,
            shortcut_name=name,
            input=input_value if self._log_executions else NOT_LOGGED,
            success=result.success,
            elapsed_ms=result.elapsed_ms,
            error=result.error.message if result.error is not None else None,
            risk_level=assess_risk_level(name, result),
        )
        self._entries.append(entry)
        return entry

    def entries(self, limit: int = 100) -> list[AuditEntry]:
        """Return the most recent ``limit`` entries, oldest first."""
        if limit <= 0:
            return []
        items = list(self._entries)
        return items[-limit:]

    def clear(self) -> None:
        self._entries.clear()


def assess_risk_level(name: str, result: ExecutionResult) -> RiskLevel:
    if is_system_shortcut(name):
        return RiskLevel.HIGH
    if not result.success:
        return RiskLevel.MEDIUM
    if result.elapsed_ms > SLOW_EXECUTION_MS:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW
