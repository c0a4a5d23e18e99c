"""Typed configuration models for Shortcut Gate runtime settings."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "shortcut-gate" / "shortcut-gate.yaml"


class ServerSettings(BaseModel):
    """Identity advertised by the MCP server."""

    name: str = Field(default="shortcut-gate", min_length=1)
    version: str = Field(default="1.0.0", min_length=1)
    description: str = "macOS Shortcuts MCP Server"


class LoggingSettings(BaseModel):
    """Structured logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    json_output: bool = True
    service: str = "shortcut-gate"
    environment: str = "dev"

    @field_validator("level", mode="before")
    @classmethod
    def _normalize_level(cls, value: object) -> object:
        """Accept lowercase level names from YAML or the environment."""
        if isinstance(value, str):
            normalized = value.strip().upper()
            return "WARNING" if normalized == "WARN" else normalized
        return value


class ShortcutsSettings(BaseModel):
    """Discovery, caching and execution settings for the shortcuts CLI."""

    model_config = ConfigDict(extra="forbid")

    executable: str = Field(default="shortcuts", min_length=1)
    info_command: list[str] | None = None
    default_timeout_ms: int = Field(default=10_000, ge=1000)
    max_execution_time_ms: int = Field(default=30_000, ge=1000)
    cache_timeout_ms: int = Field(default=300_000, gt=0)
    enable_cache: bool = True

    @model_validator(mode="after")
    def _check_timeouts(self) -> "ShortcutsSettings":
        """Require the default timeout to fit inside the execution ceiling."""
        if self.default_timeout_ms > self.max_execution_time_ms:
            raise ValueError("default_timeout_ms must not exceed max_execution_time_ms")
        return self


class RateLimitSettings(BaseModel):
    """Sliding-window rate limit parameters."""

    model_config = ConfigDict(extra="forbid")

    window_ms: int = Field(default=60_000, ge=1000)
    max_requests: int = Field(default=100, ge=1)


class SecuritySettings(BaseModel):
    """Security gate policy settings."""

    model_config = ConfigDict(extra="forbid")

    log_executions: bool = True
    allow_system_shortcuts: bool = False
    max_input_size: int = Field(default=1_048_576, ge=1024)
    enable_rate_limit: bool = True
    allowed_prefixes: list[str] = Field(default_factory=list)
    blocked_shortcuts: list[str] = Field(default_factory=list)
    rate_limit: RateLimitSettings = Field(default_factory=RateLimitSettings)


class GateSettings(BaseSettings):
    """Root runtime settings resolved from init/env/yaml/defaults sources."""

    model_config = SettingsConfigDict(
        env_prefix="SHORTCUT_GATE_",
        env_nested_delimiter="__",
        extra="ignore",
        nested_model_default_partial_update=True,
        yaml_file=DEFAULT_CONFIG_PATH,
        yaml_file_encoding="utf-8",
    )

    server: ServerSettings = Field(default_factory=ServerSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    shortcuts: ShortcutsSettings = Field(default_factory=ShortcutsSettings)
    security: SecuritySettings = Field(default_factory=SecuritySettings)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Apply precedence: init > env > yaml > model defaults."""
        return (
            init_settings,
            env_settings,
            YamlConfigSettingsSource(settings_cls),
        )
