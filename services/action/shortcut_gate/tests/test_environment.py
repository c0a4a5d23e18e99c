"""Tests for host environment validation."""

from __future__ import annotations

import pytest

from packages.shortcut_shared.config import ShortcutsSettings
from services.action.shortcut_gate.environment import require_environment, validate_environment
from services.action.shortcut_gate.errors import ShortcutsEnvironmentError
from services.action.shortcut_gate.invoker import ShortcutsCli, parse_output


@pytest.mark.asyncio
async def test_valid_environment_on_macos(fake_shortcuts) -> None:
    report = await validate_environment(
        ShortcutsSettings(executable=str(fake_shortcuts)), platform="darwin"
    )

    assert report.valid is True
    assert report.shortcuts_available is True
    assert report.errors == []
    assert report.warnings == []


@pytest.mark.asyncio
async def test_non_macos_platform_is_only_a_warning(fake_shortcuts) -> None:
    report = await validate_environment(
        ShortcutsSettings(executable=str(fake_shortcuts)), platform="linux"
    )

    assert report.valid is True
    assert report.platform == "linux"
    assert "macOS" in report.warnings[0]


@pytest.mark.asyncio
async def test_missing_executable_is_an_error(tmp_path) -> None:
    report = await validate_environment(
        ShortcutsSettings(executable=str(tmp_path / "absent")), platform="darwin"
    )

    assert report.valid is False
    assert report.shortcuts_available is False
    assert "not found" in report.errors[0]


@pytest.mark.asyncio
async def test_failing_list_probe_is_an_error(fake_shortcuts, monkeypatch) -> None:
    monkeypatch.setenv("FAKE_SHORTCUTS_FAIL_LIST", "1")

    with pytest.raises(ShortcutsEnvironmentError) as exc_info:
        await require_environment(ShortcutsSettings(executable=str(fake_shortcuts)))

    assert "not working" in exc_info.value.errors[0]
    assert exc_info.value.code == "ENVIRONMENT_ERROR"


def test_run_argv_keeps_input_as_one_element() -> None:
    cli = ShortcutsCli(executable="shortcuts")

    assert cli.run_argv("Weather Report", "a b; c") == [
        "shortcuts",
        "run",
        "Weather Report",
        "-i",
        "a b; c",
    ]
    assert cli.run_argv("Weather Report", None) == ["shortcuts", "run", "Weather Report"]


def test_parse_output_prefers_json_then_trimmed_text() -> None:
    assert parse_output('  [1, 2]\n') == [1, 2]
    assert parse_output("  hello \n") == "hello"
    assert parse_output("") == ""


@pytest.mark.asyncio
async def test_describe_without_info_command_returns_none(fake_shortcuts) -> None:
    cli = ShortcutsCli(executable=str(fake_shortcuts))

    assert await cli.describe("Weather Report", 5.0) is None
