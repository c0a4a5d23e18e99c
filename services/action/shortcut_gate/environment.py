"""Host checks run before the gate starts serving requests."""

from __future__ import annotations

import shutil
import sys
from dataclasses import dataclass, field

from packages.shortcut_shared.config import ShortcutsSettings
from packages.shortcut_shared.logging import get_logger

from services.action.shortcut_gate.errors import CatalogUnavailableError, ShortcutsEnvironmentError
from services.action.shortcut_gate.invoker import ShortcutsCli

_LOGGER = get_logger(__name__)

PROBE_TIMEOUT_S = 10.0


@dataclass(frozen=True)
class EnvironmentReport:
    """Outcome of host validation."""

    valid: bool
    platform: str
    shortcuts_available: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


async def validate_environment(
    settings: ShortcutsSettings, *, platform: str | None = None
) -> EnvironmentReport:
    """Check that the shortcuts CLI exists and answers a listing probe."""
    current_platform = platform or sys.platform
    errors: list[str] = []
    warnings: list[str] = []

    if current_platform != "darwin":
        warnings.append(
            f"Shortcuts is only supported on macOS; current platform is {current_platform}"
        )

    resolved = shutil.which(settings.executable)
    if resolved is None:
        errors.append(f"Shortcuts CLI '{settings.executable}' was not found on PATH")
        return EnvironmentReport(
            valid=False,
            platform=current_platform,
            shortcuts_available=False,
            errors=errors,
            warnings=warnings,
        )

    cli = ShortcutsCli(executable=resolved)
    try:
        await cli.list_names(PROBE_TIMEOUT_S)
    except CatalogUnavailableError as exc:
        errors.append(f"Shortcuts CLI is not working: {exc}")

    return EnvironmentReport(
        valid=not errors,
        platform=current_platform,
        shortcuts_available=not errors,
        errors=errors,
        warnings=warnings,
    )


async def require_environment(settings: ShortcutsSettings) -> EnvironmentReport:
    """Validate the host and raise ``ShortcutsEnvironmentError`` on failure."""
    report = await validate_environment(settings)
    for warning in report.warnings:
        _LOGGER.warning("Environment warning: %s", warning)
    if not report.valid:
        raise ShortcutsEnvironmentError(report.errors)
    return report
