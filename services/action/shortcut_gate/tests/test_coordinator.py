"""Tests for execution outcome classification and timeout enforcement."""

from __future__ import annotations

import time

import pytest

from packages.shortcut_shared.config import ShortcutsSettings
from packages.shortcut_shared.errors import ErrorCategory
from services.action.shortcut_gate.cache import TTLCache
from services.action.shortcut_gate.catalog import ShortcutCatalog
from services.action.shortcut_gate.coordinator import ExecutionCoordinator
from services.action.shortcut_gate.domain import ExecutionRequest, ExecutionStatus
from services.action.shortcut_gate.errors import (
    CATALOG_UNAVAILABLE,
    EXECUTION_ERROR,
    EXECUTION_TIMEOUT,
    SHORTCUT_NOT_FOUND,
)
from services.action.shortcut_gate.invoker import ShortcutsCli


def _coordinator(fake_shortcuts, **overrides) -> ExecutionCoordinator:
    settings = ShortcutsSettings(executable=str(fake_shortcuts), **overrides)
    cli = ShortcutsCli.from_settings(settings)
    catalog = ShortcutCatalog(cli=cli, cache=TTLCache(), settings=settings)
    return ExecutionCoordinator(cli=cli, catalog=catalog, settings=settings)


@pytest.mark.asyncio
async def test_successful_run_echoes_input(fake_shortcuts) -> None:
    coordinator = _coordinator(fake_shortcuts)

    result = await coordinator.execute(
        ExecutionRequest(name="Weather Report", input="San Francisco")
    )

    assert result.success is True
    assert result.status == ExecutionStatus.SUCCEEDED
    assert result.output == "Result for Weather Report: San Francisco"
    assert result.error is None
    assert result.metadata.shortcut_name == "Weather Report"
    assert result.metadata.input_size == len("San Francisco")
    assert result.metadata.output_size == len("Result for Weather Report: San Francisco")
    assert result.metadata.start_time <= result.metadata.end_time


@pytest.mark.asyncio
async def test_structured_input_is_sent_as_json(fake_shortcuts) -> None:
    result = await _coordinator(fake_shortcuts).execute(
        ExecutionRequest(name="Weather Report", input={"city": "Paris"})
    )

    assert result.output == 'Result for Weather Report: {"city": "Paris"}'


@pytest.mark.asyncio
async def test_shell_metacharacters_are_passed_literally(fake_shortcuts) -> None:
    payload = "$(echo pwned); `id` | cat"

    result = await _coordinator(fake_shortcuts).execute(
        ExecutionRequest(name="Weather Report", input=payload)
    )

    assert result.output == f"Result for Weather Report: {payload}"


@pytest.mark.asyncio
async def test_json_output_is_parsed(fake_shortcuts) -> None:
    result = await _coordinator(fake_shortcuts).execute(ExecutionRequest(name="JSON Shortcut"))

    assert result.output == {"token": "abc123", "value": 1}


@pytest.mark.asyncio
async def test_stderr_on_success_counts_as_warning(fake_shortcuts) -> None:
    result = await _coordinator(fake_shortcuts).execute(ExecutionRequest(name="Noisy Shortcut"))

    assert result.success is True
    assert result.output == "ok"
    assert result.logs == ["careful"]
    assert result.metadata.warnings_count == 1


@pytest.mark.asyncio
async def test_non_zero_exit_is_execution_error(fake_shortcuts) -> None:
    result = await _coordinator(fake_shortcuts).execute(ExecutionRequest(name="Broken Shortcut"))

    assert result.success is False
    assert result.status == ExecutionStatus.FAILED
    assert result.error.code == EXECUTION_ERROR
    assert result.error.category == ErrorCategory.DEPENDENCY
    assert "boom" in result.error.message
    assert result.metadata.errors_count == 1


@pytest.mark.asyncio
async def test_unknown_shortcut_is_not_found(fake_shortcuts) -> None:
    result = await _coordinator(fake_shortcuts).execute(ExecutionRequest(name="Missing"))

    assert result.success is False
    assert result.status == ExecutionStatus.NOT_FOUND
    assert result.error.code == SHORTCUT_NOT_FOUND
    assert result.error.category == ErrorCategory.NOT_FOUND


@pytest.mark.asyncio
async def test_timeout_kills_process_and_reports_timeout(fake_shortcuts) -> None:
    coordinator = _coordinator(fake_shortcuts)
    started = time.monotonic()

    result = await coordinator.execute(ExecutionRequest(name="Slow Shortcut", timeout_ms=1000))

    wall = time.monotonic() - started
    assert result.success is False
    assert result.status == ExecutionStatus.TIMED_OUT
    assert result.error.code == EXECUTION_TIMEOUT
    assert result.elapsed_ms == 1000
    assert wall < 4.0


@pytest.mark.asyncio
async def test_timeout_is_clamped_to_execution_ceiling(fake_shortcuts) -> None:
    coordinator = _coordinator(
        fake_shortcuts, default_timeout_ms=1000, max_execution_time_ms=1000
    )

    assert coordinator.effective_timeout_ms(None) == 1000
    assert coordinator.effective_timeout_ms(120_000) == 1000

    result = await coordinator.execute(ExecutionRequest(name="Slow Shortcut", timeout_ms=60_000))
    assert result.status == ExecutionStatus.TIMED_OUT
    assert result.elapsed_ms == 1000


@pytest.mark.asyncio
async def test_discovery_failure_is_failed_execution(fake_shortcuts, monkeypatch) -> None:
    monkeypatch.setenv("FAKE_SHORTCUTS_FAIL_LIST", "1")

    result = await _coordinator(fake_shortcuts).execute(ExecutionRequest(name="Weather Report"))

    assert result.status == ExecutionStatus.FAILED
    assert result.error.code == CATALOG_UNAVAILABLE


@pytest.mark.asyncio
async def test_nul_bytes_are_stripped_from_input(fake_shortcuts) -> None:
    result = await _coordinator(fake_shortcuts).execute(
        ExecutionRequest(name="Weather Report", input="a\x00b")
    )

    assert result.output == "Result for Weather Report: ab"
