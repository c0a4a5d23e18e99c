"""Async wrapper around the ``shortcuts`` command line tool."""

from __future__ import annotations

import asyncio
import json
import os
import signal
from dataclasses import dataclass
from typing import Sequence

from pydantic import JsonValue

from packages.shortcut_shared.config import ShortcutsSettings
from packages.shortcut_shared.logging import get_logger

from services.action.shortcut_gate.errors import CatalogUnavailableError, InvocationError, InvocationTimeoutError

_LOGGER = get_logger(__name__)

NAME_PLACEHOLDER = "{name}"


@dataclass(frozen=True)
class CliOutcome:
    """Captured result of one completed CLI process."""

    exit_code: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


class ShortcutsCli:
    """Runs shortcut commands as discrete argv lists, never through a shell."""

    def __init__(self, *, executable: str = "shortcuts", info_command: Sequence[str] | None = None) -> None:
        self._executable = executable
        self._info_command = list(info_command) if info_command else None

    @classmethod
    def from_settings(cls, settings: ShortcutsSettings) -> "ShortcutsCli":
        return cls(executable=settings.executable, info_command=settings.info_command)

    @property
    def executable(self) -> str:
        return self._executable

    def run_argv(self, name: str, input_text: str | None) -> list[str]:
        """Build the argv for running ``name`` with optional input text."""
        argv = [self._executable, "run", name]
        if input_text is not None:
            argv.extend(["-i", input_text.replace("\x00", "")])
        return argv

    async def run(self, name: str, input_text: str | None, timeout_s: float) -> CliOutcome:
        """Run one shortcut; raise ``InvocationTimeoutError`` past ``timeout_s``."""
        return await self._exec(self.run_argv(name, input_text), timeout_s)

    async def list_names(self, timeout_s: float) -> list[str]:
        """Return shortcut names from ``shortcuts list``, one per line."""
        try:
            outcome = await self._exec([self._executable, "list"], timeout_s)
        except (InvocationError, InvocationTimeoutError) as exc:
            raise CatalogUnavailableError(f"Failed to list shortcuts: {exc}") from exc
        if not outcome.ok:
            raise CatalogUnavailableError(
                f"Failed to list shortcuts: {outcome.stderr.strip() or f'exit code {outcome.exit_code}'}",
                {"exit_code": outcome.exit_code},
            )
        return [line.strip() for line in outcome.stdout.splitlines() if line.strip()]

    async def describe(self, name: str, timeout_s: float) -> JsonValue:
        """Return detail output for ``name`` or ``None`` when unavailable.

        Detail lookup is best-effort: failures are logged and reported as
        ``None`` so callers fall back to listing data.
        """
        if self._info_command is None:
            return None
        argv = [part.replace(NAME_PLACEHOLDER, name) for part in self._info_command]
        try:
            outcome = await self._exec(argv, timeout_s)
        except (InvocationError, InvocationTimeoutError) as exc:
            _LOGGER.warning("Shortcut detail lookup failed for %s: %s", name, exc)
            return None
        if not outcome.ok:
            _LOGGER.warning(
                "Shortcut detail lookup for %s exited with %s", name, outcome.exit_code
            )
            return None
        return parse_output(outcome.stdout)

    async def _exec(self, argv: list[str], timeout_s: float) -> CliOutcome:
        try:
            process = await asyncio.create_subprocess_exec(
                *argv,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                start_new_session=True,
            )
        except (FileNotFoundError, PermissionError) as exc:
            raise InvocationError(
                f"Cannot start {argv[0]}: {exc}", {"executable": argv[0]}
            ) from exc

        try:
            stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=timeout_s)
        except asyncio.TimeoutError as exc:
            await _kill_process_group(process)
            raise InvocationTimeoutError(
                f"Shortcut execution timed out after {int(timeout_s * 1000)}ms",
                {"timeout_ms": int(timeout_s * 1000)},
            ) from exc

        return CliOutcome(
            exit_code=process.returncode if process.returncode is not None else -1,
            stdout=stdout.decode("utf-8", errors="replace"),
            stderr=stderr.decode("utf-8", errors="replace"),
        )


def parse_output(stdout: str) -> JsonValue:
    """Parse CLI output as JSON, falling back to trimmed text."""
    text = stdout.strip()
    if text == "":
        return ""
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return text


async def _kill_process_group(process: asyncio.subprocess.Process) -> None:
    """Kill the process and everything it spawned, then reap it."""
    try:
        os.killpg(process.pid, signal.SIGKILL)
    except ProcessLookupError:
        pass
    except PermissionError:
        process.kill()
    await process.wait()
