"""Domain contracts for Shortcut Gate requests, decisions and results."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, JsonValue, field_validator

from packages.shortcut_shared.errors import ErrorDetail

T = TypeVar("T")

NOT_LOGGED = "[NOT_LOGGED]"
LISTING_KEY_PREFIX = "shortcuts:"


class RiskLevel(str, Enum):
    """Coarse severity attached to security decisions and audit entries."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ShortcutCategory(str, Enum):
    """Derived shortcut classification used for listing filters."""

    PRODUCTIVITY = "productivity"
    COMMUNICATION = "communication"
    MEDIA = "media"
    UTILITIES = "utilities"
    SYSTEM = "system"
    CUSTOM = "custom"


class InputType(str, Enum):
    """Input kinds a shortcut accepts."""

    TEXT = "text"
    NUMBER = "number"
    FILE = "file"
    URL = "url"
    BOOLEAN = "boolean"
    NONE = "none"


class OutputType(str, Enum):
    """Output kinds a shortcut produces."""

    TEXT = "text"
    FILE = "file"
    URL = "url"
    JSON = "json"
    NONE = "none"


class ExecutionStatus(str, Enum):
    """Lifecycle of one execution attempt."""

    PENDING = "pending"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    TIMED_OUT = "timed_out"
    NOT_FOUND = "not_found"

    @property
    def is_terminal(self) -> bool:
        """Return True for states that never transition again."""
        return self in _TERMINAL_STATUSES


_TERMINAL_STATUSES = frozenset(
    {
        ExecutionStatus.SUCCEEDED,
        ExecutionStatus.FAILED,
        ExecutionStatus.TIMED_OUT,
        ExecutionStatus.NOT_FOUND,
    }
)

_ALLOWED_TRANSITIONS: dict[ExecutionStatus, frozenset[ExecutionStatus]] = {
    ExecutionStatus.PENDING: frozenset(
        {ExecutionStatus.RUNNING, ExecutionStatus.NOT_FOUND, ExecutionStatus.FAILED}
    ),
    ExecutionStatus.RUNNING: frozenset(
        {ExecutionStatus.SUCCEEDED, ExecutionStatus.FAILED, ExecutionStatus.TIMED_OUT}
    ),
}


def can_transition(current: ExecutionStatus, target: ExecutionStatus) -> bool:
    """Return True when ``current -> target`` is a legal lifecycle step."""
    return target in _ALLOWED_TRANSITIONS.get(current, frozenset())


class ShortcutDescriptor(BaseModel):
    """One discovered shortcut, immutable within a cache window."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str
    description: str | None = None
    category: ShortcutCategory = ShortcutCategory.UTILITIES
    input_types: list[InputType] = Field(default_factory=lambda: [InputType.TEXT])
    output_type: OutputType = OutputType.TEXT
    discovered_at: datetime


class ShortcutInfo(ShortcutDescriptor):
    """Descriptor composed with best-effort detail metadata."""

    action_count: int | None = None
    size: int | None = None
    is_system_shortcut: bool = False
    metadata: dict[str, JsonValue] = Field(default_factory=dict)


class ShortcutFilter(BaseModel):
    """Listing filter; its fields define the listing cache key."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    category: ShortcutCategory | None = None
    search: str | None = None
    limit: int | None = Field(default=None, ge=1, le=100)

    @field_validator("search", mode="before")
    @classmethod
    def _blank_search_is_none(cls, value: object) -> object:
        """Treat blank search text as no search."""
        if isinstance(value, str) and value.strip() == "":
            return None
        return value

    def cache_key(self) -> str:
        """Return a deterministic key for semantically identical filters."""
        return LISTING_KEY_PREFIX + json.dumps(self.model_dump(mode="json"), sort_keys=True)


class ExecutionRequest(BaseModel):
    """One named-shortcut execution request."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(min_length=1)
    input: JsonValue = None
    timeout_ms: int | None = Field(default=None, ge=1000, le=300_000)
    client_id: str = "default"


class ExecutionMetadata(BaseModel):
    """Timing and size accounting populated on every execution branch."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    shortcut_name: str
    start_time: datetime
    end_time: datetime
    input_size: int = 0
    output_size: int = 0
    warnings_count: int = 0
    errors_count: int = 0


class ExecutionResult(BaseModel):
    """Structured outcome of one accepted execution request."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    success: bool
    status: ExecutionStatus
    output: JsonValue = None
    error: ErrorDetail | None = None
    elapsed_ms: int
    metadata: ExecutionMetadata
    logs: list[str] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.success

    @property
    def errors(self) -> list[ErrorDetail]:
        return [self.error] if self.error is not None else []


class InputIssue(BaseModel):
    """One input validation error or warning."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    code: str
    message: str
    field: str = "input"
    value: JsonValue = None
    suggestion: str | None = None


class ValidationReport(BaseModel):
    """Result of input validation: blocking errors and advisory warnings."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    valid: bool
    errors: list[InputIssue] = Field(default_factory=list)
    warnings: list[InputIssue] = Field(default_factory=list)


class SecurityDecision(BaseModel):
    """Allow/reject decision with risk classification and reason."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    allowed: bool
    risk_level: RiskLevel
    reason: str | None = None
    error: ErrorDetail | None = None
    warnings: list[InputIssue] = Field(default_factory=list)

    @classmethod
    def allow(
        cls,
        risk_level: RiskLevel = RiskLevel.LOW,
        warnings: list[InputIssue] | None = None,
    ) -> "SecurityDecision":
        return cls(allowed=True, risk_level=risk_level, warnings=warnings or [])

    @classmethod
    def reject(cls, error: ErrorDetail, risk_level: RiskLevel) -> "SecurityDecision":
        return cls(allowed=False, risk_level=risk_level, reason=error.message, error=error)


class AuditEntry(BaseModel):
    """Immutable record of one execution attempt."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str
    timestamp: datetime
    operation: str
    shortcut_name: str
    input: JsonValue = None
    success: bool
    elapsed_ms: int
    error: str | None = None
    risk_level: RiskLevel


class CacheStats(BaseModel):
    """Cache hit/miss counters snapshot."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    size: int
    hits: int
    misses: int
    hit_rate: float


@dataclass(frozen=True)
class ToolCall:
    """Raw tool request as received from the transport, validated by the gate."""

    method: Any
    params: Any
    client_id: str = "default"

    @classmethod
    def for_tool(
        cls, name: str, arguments: dict[str, Any] | None = None, client_id: str = "default"
    ) -> "ToolCall":
        return cls(
            method="tools/call",
            params={"name": name, "arguments": arguments or {}},
            client_id=client_id,
        )


@dataclass(frozen=True)
class GateResult(Generic[T]):
    """Typed response for pipeline operations: the decision plus any payload.

    ``payload`` is always ``None`` when the decision rejected the request.
    """

    decision: SecurityDecision
    payload: T | None = None
    errors: list[ErrorDetail] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """Return True when the request was admitted and produced no errors."""
        return self.decision.allowed and len(self.errors) == 0

    @property
    def has_payload(self) -> bool:
        return self.payload is not None


def payload_text(value: JsonValue) -> str | None:
    """Return the text form used for size checks and CLI delivery."""
    if value is None:
        return None
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)


def payload_size(value: JsonValue) -> int:
    """Return the UTF-8 byte size of a payload's text form."""
    text = payload_text(value)
    return 0 if text is None else len(text.encode("utf-8"))
