"""Shortcut Gate command-line actor implemented with Typer."""

from __future__ import annotations

import asyncio
import dataclasses
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Awaitable, Callable

import typer
from pydantic import BaseModel

from actors.mcp_server.main import (
    CONFIG_ENV_VAR,
    ENVIRONMENT_ERROR_EXIT_CODE,
    serve as serve_mcp,
)
from actors.mcp_server.rendering import (
    render_execution,
    render_failure,
    render_info,
    render_shortcut_list,
)
from packages.shortcut_shared.config import GateSettings, load_settings
from packages.shortcut_shared.logging import configure_logging
from services.action.shortcut_gate.domain import (
    ExecutionRequest,
    GateResult,
    ShortcutCategory,
    ShortcutFilter,
)
from services.action.shortcut_gate.environment import validate_environment
from services.action.shortcut_gate.errors import ShortcutsEnvironmentError
from services.action.shortcut_gate.service import (
    ShortcutGateService,
    build_shortcut_gate_service,
)

SUCCESS_EXIT_CODE = 0
REJECTED_EXIT_CODE = 3

CLI_CLIENT_ID = "cli"


@dataclass(frozen=True)
class CliConfig:
    """Global CLI runtime options shared by every command."""

    settings: GateSettings
    as_json: bool


def _serialize(value: Any) -> Any:
    """Convert result objects to JSON-serializable structures."""
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, (list, tuple)):
        return [_serialize(item) for item in value]
    if isinstance(value, dict):
        return {str(key): _serialize(item) for key, item in value.items()}
    return value


def _emit_output(data: Any, rendered: str, as_json: bool) -> None:
    if as_json:
        typer.echo(json.dumps(_serialize(data), sort_keys=True, separators=(",", ":")))
        return
    typer.echo(rendered)


def _emit_error(message: str, as_json: bool, details: Any = None) -> None:
    if as_json:
        payload: dict[str, Any] = {"error": message}
        if details is not None:
            payload["details"] = _serialize(details)
        typer.echo(json.dumps(payload, sort_keys=True), err=True)
        return
    typer.echo(f"error: {message}", err=True)


def _run_operation(
    cfg: CliConfig,
    invoke: Callable[[ShortcutGateService], Awaitable[GateResult[Any]]],
    render: Callable[[Any], str],
) -> None:
    """Initialize the service, execute one call and map its outcome to process semantics."""
    service = build_shortcut_gate_service(settings=cfg.settings)

    async def _call() -> GateResult[Any]:
        await service.initialize()
        return await invoke(service)

    try:
        result = asyncio.run(_call())
    except ShortcutsEnvironmentError as exc:
        _emit_error(str(exc), cfg.as_json, {"errors": exc.errors})
        raise typer.Exit(code=ENVIRONMENT_ERROR_EXIT_CODE) from exc
    if not result.ok:
        details = result.payload if result.payload is not None else result.decision
        _emit_error(render_failure(result), cfg.as_json, details)
        raise typer.Exit(code=REJECTED_EXIT_CODE)
    _emit_output(result.payload, render(result.payload), cfg.as_json)
    raise typer.Exit(code=SUCCESS_EXIT_CODE)


def _require_config(ctx: typer.Context) -> CliConfig:
    config = ctx.obj
    if not isinstance(config, CliConfig):
        raise RuntimeError("CLI configuration not initialized")
    return config


def _parse_input(raw: str | None, as_json_input: bool) -> Any:
    if raw is None or not as_json_input:
        return raw
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise typer.BadParameter(f"--input is not valid JSON: {exc.msg}") from exc


app = typer.Typer(no_args_is_help=True, help="Shortcut Gate command-line interface")


@app.callback()
def main(
    ctx: typer.Context,
    config: Path | None = typer.Option(
        None,
        envvar=CONFIG_ENV_VAR,
        help="Path to shortcut-gate.yaml",
    ),
    log_level: str | None = typer.Option(None, help="Override logging level"),
    as_json: bool = typer.Option(False, "--json", help="Emit JSON output"),
) -> None:
    """Load settings and configure logging for every command."""
    settings = load_settings(
        cli_params={"logging": {"level": log_level}},
        config_path=config,
    )
    configure_logging(
        level=settings.logging.level,
        json_output=settings.logging.json_output,
        service=settings.logging.service,
        environment=settings.logging.environment,
    )
    ctx.obj = CliConfig(settings=settings, as_json=as_json)


@app.command("serve")
def serve_command(ctx: typer.Context) -> None:
    """Run the MCP server over stdio."""
    cfg = _require_config(ctx)
    try:
        asyncio.run(serve_mcp(cfg.settings))
    except ShortcutsEnvironmentError as exc:
        _emit_error(str(exc), cfg.as_json, {"errors": exc.errors})
        raise typer.Exit(code=ENVIRONMENT_ERROR_EXIT_CODE) from exc


@app.command("check")
def check_command(ctx: typer.Context) -> None:
    """Validate that the shortcuts CLI is usable on this host."""
    cfg = _require_config(ctx)
    report = asyncio.run(validate_environment(cfg.settings.shortcuts))
    if cfg.as_json:
        typer.echo(json.dumps(_serialize(dataclasses.asdict(report)), sort_keys=True))
    else:
        typer.echo(f"Platform: {report.platform}")
        typer.echo(f"Shortcuts CLI: {'available' if report.shortcuts_available else 'unavailable'}")
        for warning in report.warnings:
            typer.echo(f"warning: {warning}")
        for error in report.errors:
            typer.echo(f"error: {error}", err=True)
    raise typer.Exit(
        code=SUCCESS_EXIT_CODE if report.valid else ENVIRONMENT_ERROR_EXIT_CODE
    )


@app.command("list")
def list_command(
    ctx: typer.Context,
    category: ShortcutCategory | None = typer.Option(
        None, case_sensitive=False, help="Filter by category"
    ),
    search: str | None = typer.Option(None, help="Search name or description"),
    limit: int | None = typer.Option(None, min=1, max=100, help="Maximum results"),
) -> None:
    """List available shortcuts."""
    cfg = _require_config(ctx)
    shortcut_filter = ShortcutFilter(category=category, search=search, limit=limit)
    _run_operation(
        cfg,
        lambda service: service.list_shortcuts(shortcut_filter, client_id=CLI_CLIENT_ID),
        render_shortcut_list,
    )


@app.command("info")
def info_command(
    ctx: typer.Context, name: str = typer.Argument(..., help="Shortcut name")
) -> None:
    """Show details for one shortcut."""
    cfg = _require_config(ctx)
    _run_operation(
        cfg,
        lambda service: service.get_shortcut_info(name, client_id=CLI_CLIENT_ID),
        render_info,
    )


@app.command("run")
def run_command(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Shortcut name"),
    input_text: str | None = typer.Option(None, "--input", "-i", help="Input passed to the shortcut"),
    json_input: bool = typer.Option(False, "--json-input", help="Parse --input as JSON"),
    timeout: int | None = typer.Option(
        None, min=1000, max=300_000, help="Execution timeout in milliseconds"
    ),
) -> None:
    """Run one shortcut through the security gate."""
    cfg = _require_config(ctx)
    request = ExecutionRequest(
        name=name,
        input=_parse_input(input_text, json_input),
        timeout_ms=timeout,
        client_id=CLI_CLIENT_ID,
    )
    _run_operation(cfg, lambda service: service.run_shortcut(request), render_execution)


if __name__ == "__main__":
    app()
