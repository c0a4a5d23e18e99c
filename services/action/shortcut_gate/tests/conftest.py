"""Fixtures wiring a Shortcut Gate service to the fake shortcuts CLI."""

from __future__ import annotations

from pathlib import Path

import pytest

from packages.shortcut_shared.config import GateSettings, load_settings
from services.action.shortcut_gate.implementation import DefaultShortcutGateService


@pytest.fixture
def settings(tmp_path: Path, fake_shortcuts: Path) -> GateSettings:
    return load_settings(
        cli_params={
            "shortcuts": {
                "executable": str(fake_shortcuts),
                "info_command": [str(fake_shortcuts), "view", "{name}"],
            },
        },
        config_path=tmp_path / "missing.yaml",
    )


@pytest.fixture
def service(settings: GateSettings) -> DefaultShortcutGateService:
    return DefaultShortcutGateService.from_settings(settings)
