"""Configuration loading with deterministic precedence.

The cascade is always:
1) CLI params
2) Environment variables
3) ~/.config/shortcut-gate/shortcut-gate.yaml (or an explicit path)
4) Built-in model defaults

Environment variable format:
- Prefix: ``SHORTCUT_GATE_``
- Nested keys: ``__`` separator
- Example: ``SHORTCUT_GATE_SECURITY__ALLOW_SYSTEM_SHORTCUTS=true``
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

from pydantic_settings import SettingsConfigDict

from .models import DEFAULT_CONFIG_PATH, GateSettings


def load_settings(
    *,
    cli_params: Mapping[str, Any] | None = None,
    config_path: str | Path | None = None,
) -> GateSettings:
    """Load settings by applying the standard precedence cascade."""
    resolved = Path(config_path).expanduser() if config_path is not None else DEFAULT_CONFIG_PATH
    if resolved.exists() and not resolved.is_file():
        raise ValueError(f"Config path must be a file: {resolved}")

    class _ScopedGateSettings(GateSettings):
        model_config = SettingsConfigDict(yaml_file=resolved)

    return _ScopedGateSettings(**_drop_none(cli_params or {}))


def _drop_none(values: Mapping[str, Any]) -> dict[str, Any]:
    """Remove unset CLI params recursively so lower sources still apply."""
    output: dict[str, Any] = {}
    for key, value in values.items():
        if value is None:
            continue
        if isinstance(value, Mapping):
            nested = _drop_none(value)
            if nested:
                output[str(key)] = nested
            continue
        output[str(key)] = value
    return output
