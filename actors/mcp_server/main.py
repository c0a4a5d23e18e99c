"""MCP stdio server exposing Shortcut Gate operations as tools."""

from __future__ import annotations

import asyncio
import os
from typing import Any

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from actors.mcp_server.rendering import render_failure, render_payload
from packages.shortcut_shared.config import GateSettings, load_settings
from packages.shortcut_shared.logging import configure_logging, get_logger
from services.action.shortcut_gate.component import (
    TOOL_GET_AUDIT_LOG,
    TOOL_GET_SHORTCUT_INFO,
    TOOL_LIST_SHORTCUTS,
    TOOL_RUN_SHORTCUT,
)
from services.action.shortcut_gate.domain import ShortcutCategory
from services.action.shortcut_gate.errors import ShortcutsEnvironmentError
from services.action.shortcut_gate.service import (
    ShortcutGateService,
    build_shortcut_gate_service,
)

_LOGGER = get_logger(__name__)

STDIO_CLIENT_ID = "mcp-stdio"
DEFAULT_LIST_LIMIT = 50
CONFIG_ENV_VAR = "SHORTCUT_GATE_CONFIG"
ENVIRONMENT_ERROR_EXIT_CODE = 4


class ToolCallRejected(Exception):
    """Raised inside a tool handler so the SDK reports an MCP tool error."""


TOOLS: list[Tool] = [
    Tool(
        name=TOOL_LIST_SHORTCUTS,
        description="List available macOS shortcuts with optional filtering",
        inputSchema={
            "type": "object",
            "properties": {
                "category": {
                    "type": "string",
                    "enum": [category.value for category in ShortcutCategory],
                    "description": "Filter shortcuts by category",
                },
                "search": {
                    "type": "string",
                    "description": "Search shortcuts by name or description",
                },
                "limit": {
                    "type": "number",
                    "minimum": 1,
                    "maximum": 100,
                    "default": DEFAULT_LIST_LIMIT,
                    "description": "Maximum number of shortcuts to return",
                },
            },
        },
    ),
    Tool(
        name=TOOL_RUN_SHORTCUT,
        description="Execute a macOS shortcut with optional input",
        inputSchema={
            "type": "object",
            "properties": {
                "name": {
                    "type": "string",
                    "description": "Name of the shortcut to execute",
                },
                "input": {
                    "description": "Input data to pass to the shortcut (text or JSON)",
                },
                "timeout": {
                    "type": "number",
                    "minimum": 1000,
                    "maximum": 300000,
                    "description": "Execution timeout in milliseconds",
                },
            },
            "required": ["name"],
        },
    ),
    Tool(
        name=TOOL_GET_SHORTCUT_INFO,
        description="Get detailed information about a specific shortcut",
        inputSchema={
            "type": "object",
            "properties": {
                "name": {
                    "type": "string",
                    "description": "Name of the shortcut to get information about",
                },
            },
            "required": ["name"],
        },
    ),
    Tool(
        name=TOOL_GET_AUDIT_LOG,
        description="Return the most recent shortcut executions recorded by the server",
        inputSchema={
            "type": "object",
            "properties": {
                "limit": {
                    "type": "number",
                    "minimum": 1,
                    "maximum": 1000,
                    "default": 100,
                    "description": "Maximum number of entries to return",
                },
            },
        },
    ),
]


def build_server(service: ShortcutGateService, settings: GateSettings) -> Server:
    """Create the MCP server with tool handlers bound to ``service``."""
    server = Server(settings.server.name, version=settings.server.version)

    @server.list_tools()
    async def list_tools() -> list[Tool]:
        decision = service.admit_tool_listing(client_id=STDIO_CLIENT_ID)
        if not decision.allowed:
            raise ToolCallRejected(decision.reason or "Tool listing rejected")
        return TOOLS

    @server.call_tool()
    async def call_tool(name: str, arguments: dict[str, Any] | None) -> list[TextContent]:
        return [TextContent(type="text", text=await handle_tool_call(service, name, arguments))]

    return server


async def handle_tool_call(
    service: ShortcutGateService, name: str, arguments: dict[str, Any] | None
) -> str:
    """Run one tool call and return its text, raising on rejection or failure."""
    arguments = dict(arguments or {})
    if name == TOOL_LIST_SHORTCUTS:
        arguments.setdefault("limit", DEFAULT_LIST_LIMIT)
    if isinstance(arguments.get("limit"), float) and arguments["limit"].is_integer():
        arguments["limit"] = int(arguments["limit"])
    if isinstance(arguments.get("timeout"), float) and arguments["timeout"].is_integer():
        arguments["timeout"] = int(arguments["timeout"])

    result = await service.dispatch(name, arguments, client_id=STDIO_CLIENT_ID)
    if not result.ok:
        raise ToolCallRejected(render_failure(result))
    return render_payload(name, result.payload)


async def serve(settings: GateSettings) -> None:
    """Validate the environment, then serve MCP requests over stdio."""
    service = build_shortcut_gate_service(settings=settings)
    await service.initialize()
    server = build_server(service, settings)
    _LOGGER.info("Starting %s %s on stdio", settings.server.name, settings.server.version)
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())


def main() -> None:
    settings = load_settings(config_path=os.environ.get(CONFIG_ENV_VAR))
    configure_logging(
        level=settings.logging.level,
        json_output=settings.logging.json_output,
        service=settings.logging.service,
        environment=settings.logging.environment,
    )
    try:
        asyncio.run(serve(settings))
    except ShortcutsEnvironmentError as exc:
        _LOGGER.error("Shortcut Gate cannot start: %s", exc)
        raise SystemExit(ENVIRONMENT_ERROR_EXIT_CODE) from exc


if __name__ == "__main__":
    main()
