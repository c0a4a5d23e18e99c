"""Concrete Shortcut Gate implementation composing the pipeline components."""

from __future__ import annotations

from typing import Any
from uuid import uuid4

from pydantic import ValidationError

from packages.shortcut_shared.config import GateSettings
from packages.shortcut_shared.errors import (
    ErrorDetail,
    dependency_error,
    not_found_error,
    validation_error,
)
from packages.shortcut_shared.logging import fields, get_logger, log_context, public_api_logged
from services.action.shortcut_gate.audit import AuditLog
from services.action.shortcut_gate.cache import TTLCache
from services.action.shortcut_gate.catalog import ShortcutCatalog
from services.action.shortcut_gate.component import (
    METHOD_TOOLS_LIST,
    SERVICE_COMPONENT_ID,
    TOOL_GET_AUDIT_LOG,
    TOOL_GET_SHORTCUT_INFO,
    TOOL_LIST_SHORTCUTS,
    TOOL_RUN_SHORTCUT,
)
from services.action.shortcut_gate.coordinator import ExecutionCoordinator
from services.action.shortcut_gate.domain import (
    AuditEntry,
    CacheStats,
    ExecutionRequest,
    ExecutionResult,
    GateResult,
    RiskLevel,
    SecurityDecision,
    ShortcutDescriptor,
    ShortcutFilter,
    ShortcutInfo,
    ToolCall,
)
from services.action.shortcut_gate.environment import EnvironmentReport, require_environment
from services.action.shortcut_gate.errors import CATALOG_UNAVAILABLE, SHORTCUT_NOT_FOUND, CatalogUnavailableError
from services.action.shortcut_gate.invoker import ShortcutsCli
from services.action.shortcut_gate.security import SecurityGate
from services.action.shortcut_gate.service import ShortcutGateService

_LOGGER = get_logger(__name__)


class DefaultShortcutGateService(ShortcutGateService):
    """Default pipeline: gate, resolve, execute, filter, audit."""

    def __init__(
        self,
        *,
        settings: GateSettings,
        gate: SecurityGate,
        catalog: ShortcutCatalog,
        coordinator: ExecutionCoordinator,
        audit: AuditLog,
    ) -> None:
        self._settings = settings
        self._gate = gate
        self._catalog = catalog
        self._coordinator = coordinator
        self._audit = audit

    @classmethod
    def from_settings(cls, settings: GateSettings) -> "DefaultShortcutGateService":
        """Wire one instance of every component for the server lifetime."""
        cli = ShortcutsCli.from_settings(settings.shortcuts)
        catalog = ShortcutCatalog(cli=cli, cache=TTLCache(), settings=settings.shortcuts)
        return cls(
            settings=settings,
            gate=SecurityGate.from_settings(settings.security),
            catalog=catalog,
            coordinator=ExecutionCoordinator(cli=cli, catalog=catalog, settings=settings.shortcuts),
            audit=AuditLog(log_executions=settings.security.log_executions),
        )

    @property
    def settings(self) -> GateSettings:
        return self._settings

    async def initialize(self) -> EnvironmentReport:
        report = await require_environment(self._settings.shortcuts)
        if self._settings.shortcuts.enable_cache:
            try:
                await self._catalog.warm()
            except CatalogUnavailableError as exc:
                _LOGGER.warning("Failed to warm shortcut cache: %s", exc)
        return report

    def admit_tool_listing(self, *, client_id: str = "default") -> SecurityDecision:
        return self._gate.validate_request(
            ToolCall(method=METHOD_TOOLS_LIST, params={}, client_id=client_id)
        )

    @public_api_logged(
        logger=_LOGGER, component_id=SERVICE_COMPONENT_ID, id_fields=("client_id",)
    )
    async def list_shortcuts(
        self,
        shortcut_filter: ShortcutFilter | None = None,
        *,
        client_id: str = "default",
    ) -> GateResult[list[ShortcutDescriptor]]:
        selected = shortcut_filter or ShortcutFilter()
        decision = self._admit(
            TOOL_LIST_SHORTCUTS, selected.model_dump(mode="json", exclude_none=True), client_id
        )
        if not decision.allowed:
            return _rejected(decision)
        return await self._list(decision, selected)

    @public_api_logged(
        logger=_LOGGER, component_id=SERVICE_COMPONENT_ID, id_fields=("name", "client_id")
    )
    async def run_shortcut(self, request: ExecutionRequest) -> GateResult[ExecutionResult]:
        decision = self._admit(TOOL_RUN_SHORTCUT, _run_arguments(request), request.client_id)
        if not decision.allowed:
            return _rejected(decision)
        return await self._run(decision, request)

    @public_api_logged(
        logger=_LOGGER, component_id=SERVICE_COMPONENT_ID, id_fields=("name", "client_id")
    )
    async def get_shortcut_info(
        self, name: str, *, client_id: str = "default"
    ) -> GateResult[ShortcutInfo]:
        decision = self._admit(TOOL_GET_SHORTCUT_INFO, {"name": name}, client_id)
        if not decision.allowed:
            return _rejected(decision)
        return await self._info(decision, name)

    @public_api_logged(
        logger=_LOGGER, component_id=SERVICE_COMPONENT_ID, id_fields=("client_id",)
    )
    async def get_audit_log(
        self, limit: int = 100, *, client_id: str = "default"
    ) -> GateResult[list[AuditEntry]]:
        decision = self._admit(TOOL_GET_AUDIT_LOG, {"limit": limit}, client_id)
        if not decision.allowed:
            return _rejected(decision)
        return GateResult(decision=decision, payload=self._audit.entries(limit))

    async def dispatch(
        self,
        tool: str,
        arguments: dict[str, Any] | None = None,
        *,
        client_id: str = "default",
    ) -> GateResult[Any]:
        """Admit one raw tool call once, then parse its arguments and run it."""
        arguments = arguments or {}
        with log_context(
            {fields.REQUEST_ID: uuid4().hex, fields.TOOL: tool, fields.CLIENT_ID: client_id}
        ):
            decision = self._admit(tool, arguments, client_id)
            if not decision.allowed:
                return _rejected(decision)
            try:
                if tool == TOOL_LIST_SHORTCUTS:
                    return await self._list(decision, _list_filter(arguments))
                if tool == TOOL_RUN_SHORTCUT:
                    return await self._run(decision, _run_request(arguments, client_id))
                if tool == TOOL_GET_SHORTCUT_INFO:
                    return await self._info(decision, str(arguments["name"]))
                limit = int(arguments.get("limit", 100))
                return GateResult(decision=decision, payload=self._audit.entries(limit))
            except (ValidationError, ValueError, TypeError) as exc:
                _LOGGER.warning("Invalid arguments for %s: %s", tool, exc)
                return _rejected(
                    SecurityDecision.reject(
                        validation_error(f"Invalid arguments for {tool}: {_summary(exc)}"),
                        RiskLevel.MEDIUM,
                    )
                )

    def clear_audit_log(self) -> None:
        self._audit.clear()

    def cache_stats(self) -> CacheStats:
        return self._catalog.cache.stats()

    def clear_cache(self) -> None:
        self._catalog.clear()

    def _admit(self, tool: str, arguments: dict[str, Any], client_id: str) -> SecurityDecision:
        return self._gate.validate_request(ToolCall.for_tool(tool, arguments, client_id))

    async def _list(
        self, decision: SecurityDecision, shortcut_filter: ShortcutFilter
    ) -> GateResult[list[ShortcutDescriptor]]:
        try:
            shortcuts = await self._catalog.list(shortcut_filter)
        except CatalogUnavailableError as exc:
            return GateResult(
                decision=decision,
                errors=[dependency_error(str(exc), code=CATALOG_UNAVAILABLE)],
            )
        return GateResult(decision=decision, payload=shortcuts)

    async def _info(self, decision: SecurityDecision, name: str) -> GateResult[ShortcutInfo]:
        try:
            info = await self._catalog.get_info(name)
        except CatalogUnavailableError as exc:
            return GateResult(
                decision=decision,
                errors=[dependency_error(str(exc), code=CATALOG_UNAVAILABLE)],
            )
        if info is None:
            return GateResult(
                decision=decision,
                errors=[not_found_error(f"Shortcut '{name}' not found", code=SHORTCUT_NOT_FOUND)],
            )
        return GateResult(decision=decision, payload=info)

    async def _run(
        self, decision: SecurityDecision, request: ExecutionRequest
    ) -> GateResult[ExecutionResult]:
        sanitized = request.model_copy(update={"input": self._gate.sanitize_input(request.input)})
        result = await self._coordinator.execute(sanitized)
        result = result.model_copy(update={"output": self._gate.filter_output(result.output)})
        entry = self._audit.record(request.name, request.input, result)
        with log_context(
            {
                fields.SHORTCUT: request.name,
                fields.OUTCOME: result.status.value,
                fields.RISK_LEVEL: entry.risk_level.value,
            }
        ):
            _LOGGER.info("Shortcut execution recorded in %dms", result.elapsed_ms)
        return GateResult(decision=decision, payload=result, errors=list(result.errors))


def _rejected(decision: SecurityDecision) -> GateResult[Any]:
    errors: list[ErrorDetail] = [decision.error] if decision.error is not None else []
    return GateResult(decision=decision, errors=errors)


def _run_arguments(request: ExecutionRequest) -> dict[str, Any]:
    arguments: dict[str, Any] = {"name": request.name}
    if request.input is not None:
        arguments["input"] = request.input
    if request.timeout_ms is not None:
        arguments["timeout"] = request.timeout_ms
    return arguments


def _run_request(arguments: dict[str, Any], client_id: str) -> ExecutionRequest:
    return ExecutionRequest(
        name=arguments["name"],
        input=arguments.get("input"),
        timeout_ms=arguments.get("timeout"),
        client_id=client_id,
    )


def _list_filter(arguments: dict[str, Any]) -> ShortcutFilter:
    return ShortcutFilter(
        category=arguments.get("category"),
        search=arguments.get("search"),
        limit=arguments.get("limit"),
    )


def _summary(exc: Exception) -> str:
    if isinstance(exc, ValidationError):
        return "; ".join(
            f"{'.'.join(str(part) for part in error['loc']) or 'value'}: {error['msg']}"
            for error in exc.errors()
        )
    return str(exc)
