"""Shortcut Gate service package exports."""

from packages.shortcut_shared.errors import ErrorCategory, ErrorDetail
from services.action.shortcut_gate.audit import AuditLog
from services.action.shortcut_gate.cache import TTLCache
from services.action.shortcut_gate.catalog import ShortcutCatalog
from services.action.shortcut_gate.component import SERVICE_COMPONENT_ID
from services.action.shortcut_gate.coordinator import ExecutionCoordinator
from services.action.shortcut_gate.domain import (
    AuditEntry,
    CacheStats,
    ExecutionMetadata,
    ExecutionRequest,
    ExecutionResult,
    ExecutionStatus,
    GateResult,
    RiskLevel,
    SecurityDecision,
    ShortcutCategory,
    ShortcutDescriptor,
    ShortcutFilter,
    ShortcutInfo,
    ToolCall,
    ValidationReport,
)
from services.action.shortcut_gate.environment import (
    EnvironmentReport,
    require_environment,
    validate_environment,
)
from services.action.shortcut_gate.errors import (
    CatalogUnavailableError,
    ShortcutGateError,
    ShortcutsEnvironmentError,
)
from services.action.shortcut_gate.implementation import DefaultShortcutGateService
from services.action.shortcut_gate.invoker import ShortcutsCli
from services.action.shortcut_gate.rate_limiter import SlidingWindowRateLimiter
from services.action.shortcut_gate.security import SecurityGate
from services.action.shortcut_gate.service import (
    ShortcutGateService,
    build_shortcut_gate_service,
)

__all__ = [
    "AuditEntry",
    "AuditLog",
    "CacheStats",
    "CatalogUnavailableError",
    "DefaultShortcutGateService",
    "EnvironmentReport",
    "ErrorCategory",
    "ErrorDetail",
    "ExecutionCoordinator",
    "ExecutionMetadata",
    "ExecutionRequest",
    "ExecutionResult",
    "ExecutionStatus",
    "GateResult",
    "RiskLevel",
    "SERVICE_COMPONENT_ID",
    "SecurityDecision",
    "SecurityGate",
    "ShortcutCatalog",
    "ShortcutCategory",
    "ShortcutDescriptor",
    "ShortcutFilter",
    "ShortcutGateError",
    "ShortcutGateService",
    "ShortcutInfo",
    "ShortcutsCli",
    "ShortcutsEnvironmentError",
    "SlidingWindowRateLimiter",
    "TTLCache",
    "ToolCall",
    "ValidationReport",
    "build_shortcut_gate_service",
    "require_environment",
    "validate_environment",
]
