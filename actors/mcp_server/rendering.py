"""Text rendering of Shortcut Gate results for MCP and terminal output."""

from __future__ import annotations

import json
from typing import Any

from services.action.shortcut_gate.component import (
    TOOL_GET_AUDIT_LOG,
    TOOL_GET_SHORTCUT_INFO,
    TOOL_LIST_SHORTCUTS,
    TOOL_RUN_SHORTCUT,
)
from services.action.shortcut_gate.domain import (
    AuditEntry,
    ExecutionResult,
    GateResult,
    ShortcutDescriptor,
    ShortcutInfo,
)

NO_SHORTCUTS_MESSAGE = "No shortcuts found. Make sure you have shortcuts created in the Shortcuts app."


def render_payload(tool: str, payload: Any) -> str:
    """Render one successful tool payload."""
    if tool == TOOL_LIST_SHORTCUTS:
        return render_shortcut_list(payload)
    if tool == TOOL_RUN_SHORTCUT:
        return render_execution(payload)
    if tool == TOOL_GET_SHORTCUT_INFO:
        return render_info(payload)
    if tool == TOOL_GET_AUDIT_LOG:
        return render_audit_log(payload)
    return str(payload)


def render_shortcut_list(shortcuts: list[ShortcutDescriptor]) -> str:
    if not shortcuts:
        return NO_SHORTCUTS_MESSAGE
    lines = [f"Found {len(shortcuts)} shortcuts:", ""]
    for index, shortcut in enumerate(shortcuts, start=1):
        heading = f"{index}. **{shortcut.name}**"
        if shortcut.description:
            heading = f"{heading} - {shortcut.description}"
        lines.append(heading)
        detail = f"   Category: {shortcut.category.value}"
        if shortcut.input_types:
            detail = f"{detail} | Input: {', '.join(item.value for item in shortcut.input_types)}"
        lines.append(detail)
    return "\n".join(lines)


def render_execution(result: ExecutionResult) -> str:
    lines = [f'Shortcut "{result.metadata.shortcut_name}" executed successfully']
    if result.output not in (None, ""):
        lines.extend(["", "**Output:**", _text(result.output)])
    if result.logs:
        lines.extend(["", "**Warnings:**", *result.logs])
    lines.extend(["", f"*Execution time: {result.elapsed_ms}ms*"])
    return "\n".join(lines)


def render_info(info: ShortcutInfo) -> str:
    lines = [f"**{info.name}**", ""]
    if info.description:
        lines.append(f"**Description:** {info.description}")
    lines.append(f"**Category:** {info.category.value}")
    input_types = ", ".join(item.value for item in info.input_types) or "None"
    lines.append(f"**Input Types:** {input_types}")
    lines.append(f"**Output Type:** {info.output_type.value}")
    if info.action_count:
        lines.append(f"**Actions:** {info.action_count}")
    if info.size:
        lines.append(f"**Size:** {info.size} bytes")
    if info.is_system_shortcut:
        lines.append("**System Shortcut:** yes")
    return "\n".join(lines)


def render_audit_log(entries: list[AuditEntry]) -> str:
    if not entries:
        return "Audit log is empty."
    lines = [f"{len(entries)} audit entries:", ""]
    for entry in entries:
        status = "ok" if entry.success else "failed"
        line = (
            f"- {entry.timestamp.isoformat()} {entry.shortcut_name}: {status} "
            f"in {entry.elapsed_ms}ms (risk: {entry.risk_level.value})"
        )
        if entry.error:
            line = f"{line} - {entry.error}"
        lines.append(line)
    return "\n".join(lines)


def render_failure(result: GateResult[Any]) -> str:
    """Render a rejection or failed operation as one error message."""
    decision = result.decision
    if not decision.allowed:
        code = decision.error.code if decision.error is not None else "REJECTED"
        return (
            f"Request rejected ({code}, {decision.risk_level.value} risk): "
            f"{decision.reason or 'not allowed by security policy'}"
        )
    if not result.errors:
        return "Operation failed"
    return "; ".join(f"{error.code}: {error.message}" for error in result.errors)


def _text(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, indent=2, ensure_ascii=False)
