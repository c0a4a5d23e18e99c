"""Logging instrumentation for public service methods.

``public_api_logged`` wraps one sync or async public method and emits a
structured invocation record before the call and a completion record after it,
with success inferred from the returned result object.
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass
from functools import wraps
from time import perf_counter
from typing import Any, Callable, Mapping

from . import fields
from .context import log_context


@dataclass(frozen=True)
class InvocationContext:
    """Structured metadata describing one public API invocation."""

    component_id: str
    api_name: str
    references: Mapping[str, str]


@dataclass(frozen=True)
class CompletionContext:
    """Structured metadata describing one completed public API invocation."""

    invocation: InvocationContext
    success: bool
    duration_ms: float
    errors: list[str]


class PublicApiLoggingConcern:
    """Logging concern implementation for invocation/completion events."""

    def __init__(self, *, logger: Any) -> None:
        self._logger = logger

    def on_invocation(self, context: InvocationContext) -> None:
        """Emit standardized structured invocation-start log."""
        with log_context(_invocation_log_context(context)):
            self._logger.debug("Public API invocation")

    def on_completion(self, context: CompletionContext) -> None:
        """Emit standardized structured completion log."""
        payload = _invocation_log_context(context.invocation)
        payload.update(
            {
                fields.EVENT: fields.PUBLIC_API_COMPLETION_EVENT,
                fields.SUCCESS: context.success,
                fields.DURATION_MS: context.duration_ms,
                fields.ERRORS: context.errors,
            }
        )
        with log_context(payload):
            if context.success:
                self._logger.info("Public API completion")
            else:
                self._logger.warning("Public API completion")


def public_api_logged(
    *,
    logger: Any,
    component_id: str,
    api_name: str | None = None,
    id_fields: tuple[str, ...] = (),
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Decorate one public API method with invocation/completion logging.

    ``id_fields`` names keyword arguments (or attributes of the first positional
    argument after ``self``) copied into the log context as references.
    """
    concern = PublicApiLoggingConcern(logger=logger)

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        method_name = api_name or func.__name__

        def _invocation(args: tuple[Any, ...], kwargs: dict[str, Any]) -> InvocationContext:
            return InvocationContext(
                component_id=component_id,
                api_name=method_name,
                references=_references(id_fields, args, kwargs),
            )

        def _failed(invocation: InvocationContext, started: float, exc: Exception) -> None:
            concern.on_completion(
                CompletionContext(
                    invocation=invocation,
                    success=False,
                    duration_ms=_elapsed_ms(started),
                    errors=[f"{type(exc).__name__}: {exc}"],
                )
            )

        def _completed(invocation: InvocationContext, started: float, result: object) -> None:
            success, errors = _result_summary(result)
            concern.on_completion(
                CompletionContext(
                    invocation=invocation,
                    success=success,
                    duration_ms=_elapsed_ms(started),
                    errors=errors,
                )
            )

        if inspect.iscoroutinefunction(func):

            @wraps(func)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                invocation = _invocation(args, kwargs)
                concern.on_invocation(invocation)
                started = perf_counter()
                try:
                    result = await func(*args, **kwargs)
                except Exception as exc:  # noqa: BLE001
                    _failed(invocation, started, exc)
                    raise
                _completed(invocation, started, result)
                return result

            return async_wrapper

        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            invocation = _invocation(args, kwargs)
            concern.on_invocation(invocation)
            started = perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as exc:  # noqa: BLE001
                _failed(invocation, started, exc)
                raise
            _completed(invocation, started, result)
            return result

        return wrapper

    return decorator


def _elapsed_ms(started: float) -> float:
    return round((perf_counter() - started) * 1000.0, 3)


def _references(
    id_fields: tuple[str, ...], args: tuple[Any, ...], kwargs: Mapping[str, Any]
) -> dict[str, str]:
    """Collect reference values from keyword args or the first request object."""
    request = args[1] if len(args) > 1 else None
    references: dict[str, str] = {}
    for name in id_fields:
        value = kwargs.get(name)
        if value in (None, "") and request is not None:
            value = getattr(request, name, None)
        if value in (None, ""):
            continue
        references[name] = str(value)
    return references


def _result_summary(result: object) -> tuple[bool, list[str]]:
    """Infer success and sanitized error summaries from a result value."""
    errors = _sanitize_errors(getattr(result, "errors", []))
    ok_value = getattr(result, "ok", None)
    if isinstance(ok_value, bool):
        return ok_value, errors
    return len(errors) == 0, errors


def _sanitize_errors(errors: object) -> list[str]:
    """Return safe one-line error summaries for logs."""
    if not isinstance(errors, list):
        return []
    summaries: list[str] = []
    for item in errors:
        if isinstance(item, Mapping):
            code = item.get("code")
            message = item.get("message")
        else:
            code = getattr(item, "code", None)
            message = getattr(item, "message", None)
        if message in (None, ""):
            continue
        if code in (None, ""):
            summaries.append(str(message))
        else:
            summaries.append(f"{code}: {message}")
    return summaries


def _invocation_log_context(context: InvocationContext) -> dict[str, object]:
    """Build common structured fields for one invocation event."""
    return {
        fields.EVENT: fields.PUBLIC_API_INVOCATION_EVENT,
        fields.COMPONENT_ID: context.component_id,
        fields.API_NAME: context.api_name,
        **context.references,
    }
