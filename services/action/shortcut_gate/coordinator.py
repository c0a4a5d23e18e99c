"""Execution coordinator: resolve, invoke under a timeout, classify outcome."""

from __future__ import annotations

import time
from datetime import UTC, datetime

from packages.shortcut_shared.config import ShortcutsSettings
from packages.shortcut_shared.errors import (
    ErrorDetail,
    dependency_error,
    exception_to_error,
    not_found_error,
)
from packages.shortcut_shared.logging import get_logger

from services.action.shortcut_gate.catalog import ShortcutCatalog
from services.action.shortcut_gate.domain import (
    ExecutionMetadata,
    ExecutionRequest,
    ExecutionResult,
    ExecutionStatus,
    can_transition,
    payload_size,
    payload_text,
)
from services.action.shortcut_gate.errors import (
    CATALOG_UNAVAILABLE,
    EXECUTION_ERROR,
    EXECUTION_TIMEOUT,
    SHORTCUT_NOT_FOUND,
    CatalogUnavailableError,
    InvocationError,
    InvocationTimeoutError,
)
from services.action.shortcut_gate.invoker import CliOutcome, ShortcutsCli, parse_output

_LOGGER = get_logger(__name__)


class _Attempt:
    """Mutable bookkeeping for one execution, enforcing legal status moves."""

    def __init__(self, request: ExecutionRequest, clock) -> None:
        self.request = request
        self.status = ExecutionStatus.PENDING
        self.start_time = datetime.now(UTC)
        self._clock = clock
        self._started = clock()
        self.input_size = payload_size(request.input)

    def advance(self, target: ExecutionStatus) -> None:
        if not can_transition(self.status, target):
            raise RuntimeError(f"Illegal execution transition {self.status.value} -> {target.value}")
        self.status = target

    def finish(
        self,
        target: ExecutionStatus,
        *,
        output: object = None,
        error: ErrorDetail | None = None,
        logs: list[str] | None = None,
        elapsed_ms: int | None = None,
    ) -> ExecutionResult:
        self.advance(target)
        measured = int(round((self._clock() - self._started) * 1000))
        logs = logs or []
        return ExecutionResult(
            success=target == ExecutionStatus.SUCCEEDED,
            status=target,
            output=output,
            error=error,
            elapsed_ms=measured if elapsed_ms is None else elapsed_ms,
            metadata=ExecutionMetadata(
                shortcut_name=self.request.name,
                start_time=self.start_time,
                end_time=datetime.now(UTC),
                input_size=self.input_size,
                output_size=payload_size(output),
                warnings_count=len(logs),
                errors_count=0 if error is None else 1,
            ),
            logs=logs,
        )


class ExecutionCoordinator:
    """Runs accepted requests against the shortcuts CLI. No retries."""

    def __init__(
        self,
        *,
        cli: ShortcutsCli,
        catalog: ShortcutCatalog,
        settings: ShortcutsSettings,
        clock=time.monotonic,
    ) -> None:
        self._cli = cli
        self._catalog = catalog
        self._default_timeout_ms = settings.default_timeout_ms
        self._max_timeout_ms = settings.max_execution_time_ms
        self._clock = clock

    def effective_timeout_ms(self, requested_ms: int | None) -> int:
        """Return the requested or default timeout, clamped to the ceiling."""
        timeout_ms = requested_ms if requested_ms is not None else self._default_timeout_ms
        return min(timeout_ms, self._max_timeout_ms)

    async def execute(self, request: ExecutionRequest) -> ExecutionResult:
        attempt = _Attempt(request, self._clock)

        try:
            descriptor = await self._catalog.find(request.name)
        except CatalogUnavailableError as exc:
            return attempt.finish(
                ExecutionStatus.FAILED,
                error=dependency_error(str(exc), code=CATALOG_UNAVAILABLE),
            )
        if descriptor is None:
            return attempt.finish(
                ExecutionStatus.NOT_FOUND,
                error=not_found_error(
                    f"Shortcut '{request.name}' not found", code=SHORTCUT_NOT_FOUND
                ),
            )

        timeout_ms = self.effective_timeout_ms(request.timeout_ms)
        attempt.advance(ExecutionStatus.RUNNING)
        try:
            outcome = await self._cli.run(
                request.name, payload_text(request.input), timeout_ms / 1000.0
            )
        except InvocationTimeoutError as exc:
            _LOGGER.warning("Shortcut %s timed out after %dms", request.name, timeout_ms)
            return attempt.finish(
                ExecutionStatus.TIMED_OUT,
                error=dependency_error(
                    str(exc),
                    code=EXECUTION_TIMEOUT,
                    metadata={"timeout_ms": str(timeout_ms)},
                ),
                elapsed_ms=timeout_ms,
            )
        except InvocationError as exc:
            return attempt.finish(
                ExecutionStatus.FAILED,
                error=dependency_error(str(exc), code=EXECUTION_ERROR, retryable=False),
            )
        except Exception as exc:  # noqa: BLE001
            _LOGGER.exception("Unexpected failure running shortcut %s", request.name)
            return attempt.finish(ExecutionStatus.FAILED, error=exception_to_error(exc))

        return self._classify(attempt, outcome)

    def _classify(self, attempt: _Attempt, outcome: CliOutcome) -> ExecutionResult:
        stderr = outcome.stderr.strip()
        if not outcome.ok:
            message = f"Shortcut execution failed with exit code {outcome.exit_code}"
            if stderr:
                message = f"{message}: {stderr}"
            return attempt.finish(
                ExecutionStatus.FAILED,
                error=dependency_error(
                    message,
                    code=EXECUTION_ERROR,
                    retryable=False,
                    metadata={"exit_code": str(outcome.exit_code)},
                ),
            )

        logs: list[str] = []
        if stderr:
            _LOGGER.warning("Shortcut %s wrote to stderr: %s", attempt.request.name, stderr)
            logs.append(stderr)
        return attempt.finish(
            ExecutionStatus.SUCCEEDED, output=parse_output(outcome.stdout), logs=logs
        )
