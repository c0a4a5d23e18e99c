"""Security gate: structural validation, rate limiting and shortcut policy.

Every check returns a ``SecurityDecision``; nothing here raises for a
rejected request. Checks run in a fixed order and stop at the first rejection:

1. request structure (method and params shape)
2. rate-limit admission for the calling client
3. tool-level requirements (known tool, required arguments)
4. shortcut allow/block policy
5. input size and content
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from packages.shortcut_shared.config import SecuritySettings
from packages.shortcut_shared.errors import codes, policy_error, validation_error
from packages.shortcut_shared.logging import get_logger, log_context
from packages.shortcut_shared.logging import fields

from services.action.shortcut_gate.classification import is_system_shortcut
from services.action.shortcut_gate.component import (
    KNOWN_METHODS,
    KNOWN_TOOLS,
    METHOD_TOOLS_LIST,
    TOOL_GET_SHORTCUT_INFO,
    TOOL_RUN_SHORTCUT,
)
from services.action.shortcut_gate.domain import (
    InputIssue,
    RiskLevel,
    SecurityDecision,
    ToolCall,
    ValidationReport,
    payload_size,
    payload_text,
)
from services.action.shortcut_gate.errors import (
    INPUT_TOO_LARGE,
    POTENTIALLY_DANGEROUS_CONTENT,
    PREFIX_NOT_ALLOWED,
    SHORTCUT_BLOCKED,
    SYSTEM_SHORTCUT_BLOCKED,
    UNKNOWN_METHOD,
    UNKNOWN_TOOL,
)
from services.action.shortcut_gate.rate_limiter import SlidingWindowRateLimiter
from services.action.shortcut_gate.redaction import dangerous_matches, filter_output, sanitize_input

_LOGGER = get_logger(__name__)


class SecurityGate:
    """Admission control for tool calls addressed to the shortcut pipeline."""

    def __init__(
        self,
        *,
        settings: SecuritySettings,
        rate_limiter: SlidingWindowRateLimiter | None = None,
    ) -> None:
        self._settings = settings
        self._rate_limiter = rate_limiter
        self._blocked = frozenset(settings.blocked_shortcuts)

    @classmethod
    def from_settings(cls, settings: SecuritySettings) -> "SecurityGate":
        limiter = None
        if settings.enable_rate_limit:
            limiter = SlidingWindowRateLimiter(
                window_ms=settings.rate_limit.window_ms,
                max_requests=settings.rate_limit.max_requests,
            )
        return cls(settings=settings, rate_limiter=limiter)

    @property
    def settings(self) -> SecuritySettings:
        return self._settings

    def validate_request(self, call: ToolCall) -> SecurityDecision:
        """Run every admission check in order and return the first rejection."""
        decision = self._check_structure(call)
        if decision is None:
            decision = self._check_rate_limit(call.client_id)
        if decision is None:
            decision = self._check_tool_call(call)
        if not decision.allowed:
            self._log_rejection(call, decision)
        return decision

    def is_shortcut_allowed(self, name: str) -> bool:
        return self.evaluate_shortcut(name).allowed

    def evaluate_shortcut(self, name: str) -> SecurityDecision:
        """Apply block list, system keyword and prefix policy to ``name``."""
        if name in self._blocked:
            return SecurityDecision.reject(
                policy_error(f"Shortcut '{name}' is blocked", code=SHORTCUT_BLOCKED),
                RiskLevel.HIGH,
            )
        if not self._settings.allow_system_shortcuts and is_system_shortcut(name):
            return SecurityDecision.reject(
                policy_error(
                    f"Shortcut '{name}' is not allowed: system shortcuts are disabled",
                    code=SYSTEM_SHORTCUT_BLOCKED,
                ),
                RiskLevel.HIGH,
            )
        prefixes = self._settings.allowed_prefixes
        if prefixes and not any(name.startswith(prefix) for prefix in prefixes):
            return SecurityDecision.reject(
                policy_error(
                    f"Shortcut '{name}' does not match an allowed prefix",
                    code=PREFIX_NOT_ALLOWED,
                    metadata={"allowed_prefixes": ",".join(prefixes)},
                ),
                RiskLevel.MEDIUM,
            )
        return SecurityDecision.allow()

    def validate_input(self, value: Any) -> ValidationReport:
        """Check serialized input size and flag suspicious command content."""
        errors: list[InputIssue] = []
        warnings: list[InputIssue] = []

        size = payload_size(value)
        if size > self._settings.max_input_size:
            errors.append(
                InputIssue(
                    code=INPUT_TOO_LARGE,
                    message=(
                        f"Input size {size} bytes exceeds maximum "
                        f"{self._settings.max_input_size} bytes"
                    ),
                    suggestion="Reduce input size or split into multiple requests",
                )
            )

        text = payload_text(value)
        if text is not None:
            for label in dangerous_matches(text):
                warnings.append(
                    InputIssue(
                        code=POTENTIALLY_DANGEROUS_CONTENT,
                        message=f"Input contains potentially dangerous content ({label})",
                        suggestion="Review input for malicious content",
                    )
                )

        return ValidationReport(valid=not errors, errors=errors, warnings=warnings)

    def sanitize_input(self, value: Any) -> Any:
        return sanitize_input(value)

    def filter_output(self, value: Any) -> Any:
        return filter_output(value)

    def reset(self) -> None:
        """Clear rate-limit windows."""
        if self._rate_limiter is not None:
            self._rate_limiter.reset()

    def _check_structure(self, call: ToolCall) -> SecurityDecision | None:
        if not isinstance(call.method, str) or call.method not in KNOWN_METHODS:
            return SecurityDecision.reject(
                validation_error(f"Unknown method: {call.method}", code=UNKNOWN_METHOD),
                RiskLevel.MEDIUM,
            )
        if not isinstance(call.params, Mapping):
            return SecurityDecision.reject(
                validation_error("Invalid request structure: params must be an object"),
                RiskLevel.MEDIUM,
            )
        return None

    def _check_rate_limit(self, client_id: str) -> SecurityDecision | None:
        if self._rate_limiter is None:
            return None
        admission = self._rate_limiter.admit(client_id)
        if admission.allowed:
            return None
        return SecurityDecision.reject(
            policy_error(
                admission.reason or "Rate limit exceeded",
                code=codes.RATE_LIMITED,
                retryable=True,
            ),
            RiskLevel.MEDIUM,
        )

    def _check_tool_call(self, call: ToolCall) -> SecurityDecision:
        if call.method == METHOD_TOOLS_LIST:
            return SecurityDecision.allow()

        tool = call.params.get("name")
        if not isinstance(tool, str) or tool == "":
            return SecurityDecision.reject(
                validation_error("Tool name is required", code=codes.MISSING_REQUIRED_FIELD),
                RiskLevel.MEDIUM,
            )
        if tool not in KNOWN_TOOLS:
            return SecurityDecision.reject(
                validation_error(f"Unknown tool: {tool}", code=UNKNOWN_TOOL),
                RiskLevel.MEDIUM,
            )

        arguments = call.params.get("arguments")
        if arguments is None:
            arguments = {}
        if not isinstance(arguments, Mapping):
            return SecurityDecision.reject(
                validation_error("Tool arguments must be an object"),
                RiskLevel.MEDIUM,
            )

        if tool == TOOL_RUN_SHORTCUT:
            return self._check_run_shortcut(arguments)
        if tool == TOOL_GET_SHORTCUT_INFO and not _has_name(arguments):
            return _missing_name()
        return SecurityDecision.allow()

    def _check_run_shortcut(self, arguments: Mapping[str, Any]) -> SecurityDecision:
        if not _has_name(arguments):
            return _missing_name()

        policy = self.evaluate_shortcut(arguments["name"])
        if not policy.allowed:
            return policy

        value = arguments.get("input")
        if value is None:
            return SecurityDecision.allow()

        report = self.validate_input(value)
        if not report.valid:
            first = report.errors[0]
            return SecurityDecision.reject(
                policy_error(first.message, code=first.code),
                RiskLevel.HIGH,
            )
        risk = RiskLevel.MEDIUM if report.warnings else RiskLevel.LOW
        return SecurityDecision.allow(risk_level=risk, warnings=list(report.warnings))

    def _log_rejection(self, call: ToolCall, decision: SecurityDecision) -> None:
        params = call.params if isinstance(call.params, Mapping) else {}
        arguments = params.get("arguments")
        shortcut = arguments.get("name") if isinstance(arguments, Mapping) else None
        with log_context(
            {
                fields.CLIENT_ID: call.client_id,
                fields.TOOL: params.get("name"),
                fields.SHORTCUT: shortcut,
                fields.RISK_LEVEL: decision.risk_level.value,
                fields.OUTCOME: decision.error.code if decision.error else "rejected",
            }
        ):
            _LOGGER.warning("Request rejected: %s", decision.reason)


def _has_name(arguments: Mapping[str, Any]) -> bool:
    name = arguments.get("name")
    return isinstance(name, str) and name != ""


def _missing_name() -> SecurityDecision:
    return SecurityDecision.reject(
        validation_error("Shortcut name is required", code=codes.MISSING_REQUIRED_FIELD),
        RiskLevel.MEDIUM,
    )
