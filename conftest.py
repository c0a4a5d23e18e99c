"""Repository-wide pytest fixtures: a fake ``shortcuts`` CLI and a manual clock."""

from __future__ import annotations

import stat
from pathlib import Path

import pytest

FAKE_SHORTCUTS_SCRIPT = """#!/bin/sh
case "$1" in
  list)
    if [ -n "$FAKE_SHORTCUTS_FAIL_LIST" ]; then
      echo "list unavailable" >&2
      exit 1
    fi
    printf 'Weather Report\\nSend Email\\nSystem Configuration\\nPhoto Backup\\n'
    printf 'Daily Notes\\n\\nSlow Shortcut\\nBroken Shortcut\\nNoisy Shortcut\\nJSON Shortcut\\n'
    ;;
  run)
    name="$2"
    input=""
    if [ "$3" = "-i" ]; then
      input="$4"
    fi
    case "$name" in
      "Slow Shortcut")
        sleep 5
        echo "finished"
        ;;
      "Broken Shortcut")
        echo "boom" >&2
        exit 2
        ;;
      "Noisy Shortcut")
        echo "careful" >&2
        echo "ok"
        ;;
      "JSON Shortcut")
        printf '{"token": "abc123", "value": 1}\\n'
        ;;
      *)
        printf 'Result for %s: %s\\n' "$name" "$input"
        ;;
    esac
    ;;
  view)
    printf '{"actionCount": 3, "size": 2048, "description": "Details for %s"}\\n' "$2"
    ;;
  *)
    echo "unknown command" >&2
    exit 64
    ;;
esac
"""

SHORTCUT_NAMES = [
    "Weather Report",
    "Send Email",
    "System Configuration",
    "Photo Backup",
    "Daily Notes",
    "Slow Shortcut",
    "Broken Shortcut",
    "Noisy Shortcut",
    "JSON Shortcut",
]


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fake_shortcuts(tmp_path: Path) -> Path:
    """Write an executable fake ``shortcuts`` CLI into ``tmp_path``."""
    script = tmp_path / "shortcuts"
    script.write_text(FAKE_SHORTCUTS_SCRIPT, encoding="utf-8")
    script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return script


@pytest.fixture
def shortcut_names() -> list[str]:
    return list(SHORTCUT_NAMES)
