"""Public API for shared Shortcut Gate configuration utilities."""

from .loader import load_settings
from .models import (
    DEFAULT_CONFIG_PATH,
    GateSettings,
    LoggingSettings,
    RateLimitSettings,
    SecuritySettings,
    ServerSettings,
    ShortcutsSettings,
)

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "GateSettings",
    "LoggingSettings",
    "RateLimitSettings",
    "SecuritySettings",
    "ServerSettings",
    "ShortcutsSettings",
    "load_settings",
]
