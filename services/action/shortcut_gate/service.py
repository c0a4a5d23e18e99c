"""Authoritative in-process Python API for Shortcut Gate."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from packages.shortcut_shared.config import GateSettings
from services.action.shortcut_gate.domain import (
    AuditEntry,
    CacheStats,
    ExecutionRequest,
    ExecutionResult,
    GateResult,
    SecurityDecision,
    ShortcutFilter,
    ShortcutDescriptor,
    ShortcutInfo,
)
from services.action.shortcut_gate.environment import EnvironmentReport


class ShortcutGateService(ABC):
    """Public API for guarded shortcut discovery, execution and auditing."""

    @abstractmethod
    async def initialize(self) -> EnvironmentReport:
        """Validate the host environment and warm the catalog cache."""

    @abstractmethod
    def admit_tool_listing(self, *, client_id: str = "default") -> SecurityDecision:
        """Return the gate decision for a tool-listing request."""

    @abstractmethod
    async def list_shortcuts(
        self,
        shortcut_filter: ShortcutFilter | None = None,
        *,
        client_id: str = "default",
    ) -> GateResult[list[ShortcutDescriptor]]:
        """Return shortcuts matching the filter, cache-first."""

    @abstractmethod
    async def run_shortcut(self, request: ExecutionRequest) -> GateResult[ExecutionResult]:
        """Admit, execute, filter and audit one shortcut execution."""

    @abstractmethod
    async def get_shortcut_info(
        self, name: str, *, client_id: str = "default"
    ) -> GateResult[ShortcutInfo]:
        """Return detail metadata for one shortcut."""

    @abstractmethod
    async def get_audit_log(
        self, limit: int = 100, *, client_id: str = "default"
    ) -> GateResult[list[AuditEntry]]:
        """Return the most recent audit entries in insertion order."""

    @abstractmethod
    async def dispatch(
        self,
        tool: str,
        arguments: dict[str, Any] | None = None,
        *,
        client_id: str = "default",
    ) -> GateResult[Any]:
        """Route one raw tool call through the gate to its operation."""

    @abstractmethod
    def clear_audit_log(self) -> None:
        """Drop every audit entry."""

    @abstractmethod
    def cache_stats(self) -> CacheStats:
        """Return cache hit/miss counters."""

    @abstractmethod
    def clear_cache(self) -> None:
        """Invalidate cached listings and metadata."""


def build_shortcut_gate_service(*, settings: GateSettings) -> ShortcutGateService:
    """Build the default Shortcut Gate implementation from typed settings."""
    from services.action.shortcut_gate.implementation import DefaultShortcutGateService

    return DefaultShortcutGateService.from_settings(settings)
