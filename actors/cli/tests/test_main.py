"""CLI tests for the Shortcut Gate Typer commands."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest
from typer.testing import CliRunner

from actors.cli.main import (
    ENVIRONMENT_ERROR_EXIT_CODE,
    REJECTED_EXIT_CODE,
    SUCCESS_EXIT_CODE,
    app,
)

runner = CliRunner()


@pytest.fixture(autouse=True)
def _cli_environment(monkeypatch, tmp_path: Path, fake_shortcuts: Path):
    """Point the CLI at the fake shortcuts executable and an absent config file."""
    monkeypatch.setenv("SHORTCUT_GATE_CONFIG", str(tmp_path / "missing.yaml"))
    monkeypatch.setenv("SHORTCUT_GATE_SHORTCUTS__EXECUTABLE", str(fake_shortcuts))
    yield
    logging.getLogger().handlers.clear()


def _invoke(*args: str):
    return runner.invoke(app, ["--log-level", "ERROR", *args])


def test_run_prints_rendered_output() -> None:
    result = _invoke("run", "Weather Report", "--input", "San Francisco")

    assert result.exit_code == SUCCESS_EXIT_CODE
    assert "Result for Weather Report: San Francisco" in result.stdout


def test_run_json_output_contains_execution_result() -> None:
    result = _invoke("--json", "run", "Weather Report", "-i", '{"city": "Oslo"}', "--json-input")

    payload = json.loads(result.stdout)
    assert result.exit_code == SUCCESS_EXIT_CODE
    assert payload["success"] is True
    assert payload["status"] == "succeeded"
    assert payload["output"] == 'Result for Weather Report: {"city": "Oslo"}'


def test_blocked_shortcut_exits_with_rejection_code() -> None:
    result = _invoke("run", "System Configuration")

    assert result.exit_code == REJECTED_EXIT_CODE
    assert "SYSTEM_SHORTCUT_BLOCKED" in result.stderr


def test_failed_shortcut_exits_with_rejection_code() -> None:
    result = _invoke("--json", "run", "Broken Shortcut")

    payload = json.loads(result.stderr)
    assert result.exit_code == REJECTED_EXIT_CODE
    assert "EXECUTION_ERROR" in payload["error"]
    assert payload["details"]["status"] == "failed"


def test_list_filters_by_category() -> None:
    result = _invoke("--json", "list", "--category", "communication")

    assert result.exit_code == SUCCESS_EXIT_CODE
    assert [item["name"] for item in json.loads(result.stdout)] == ["Send Email"]


def test_info_unknown_shortcut_is_rejected() -> None:
    result = _invoke("info", "Missing")

    assert result.exit_code == REJECTED_EXIT_CODE
    assert "SHORTCUT_NOT_FOUND" in result.stderr


def test_check_reports_available_cli() -> None:
    result = _invoke("--json", "check")

    payload = json.loads(result.stdout)
    assert result.exit_code == SUCCESS_EXIT_CODE
    assert payload["valid"] is True
    assert payload["shortcuts_available"] is True


def test_check_fails_without_executable(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("SHORTCUT_GATE_SHORTCUTS__EXECUTABLE", str(tmp_path / "absent"))

    result = _invoke("check")

    assert result.exit_code == ENVIRONMENT_ERROR_EXIT_CODE
    assert "was not found on PATH" in result.stderr


def test_serve_fails_fast_without_executable(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("SHORTCUT_GATE_SHORTCUTS__EXECUTABLE", str(tmp_path / "absent"))

    result = _invoke("serve")

    assert result.exit_code == ENVIRONMENT_ERROR_EXIT_CODE
    assert "Shortcuts environment validation failed" in result.stderr


@pytest.mark.parametrize(
    "args",
    [
        ("run", "Weather Report", "--input", "San Francisco"),
        ("list",),
        ("info", "Weather Report"),
    ],
)
def test_operations_fail_fast_without_executable(
    monkeypatch, tmp_path: Path, args: tuple[str, ...]
) -> None:
    monkeypatch.setenv("SHORTCUT_GATE_SHORTCUTS__EXECUTABLE", str(tmp_path / "absent"))

    result = _invoke(*args)

    assert result.exit_code == ENVIRONMENT_ERROR_EXIT_CODE
    assert "Shortcuts environment validation failed" in result.stderr
    assert "was not found on PATH" in result.stderr
