"""Component identity for the Shortcut Gate service."""

from __future__ import annotations

SERVICE_COMPONENT_ID = "service_shortcut_gate"

TOOL_LIST_SHORTCUTS = "list_shortcuts"
TOOL_RUN_SHORTCUT = "run_shortcut"
TOOL_GET_SHORTCUT_INFO = "get_shortcut_info"
TOOL_GET_AUDIT_LOG = "get_audit_log"

KNOWN_TOOLS = frozenset(
    {TOOL_LIST_SHORTCUTS, TOOL_RUN_SHORTCUT, TOOL_GET_SHORTCUT_INFO, TOOL_GET_AUDIT_LOG}
)

METHOD_TOOLS_CALL = "tools/call"
METHOD_TOOLS_LIST = "tools/list"
KNOWN_METHODS = frozenset({METHOD_TOOLS_CALL, METHOD_TOOLS_LIST})
