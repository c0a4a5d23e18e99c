"""Input sanitization and output redaction for shortcut payloads."""

from __future__ import annotations

import re
from typing import Any

REDACTED = "[REDACTED]"

_SENSITIVE_WORDS = ("password", "token", "key", "secret")
# Splits snake, kebab and camel case keys: "apiKey" -> api, Key.
_KEY_SEGMENT = re.compile(r"[A-Z]?[a-z0-9]+|[A-Z]+(?![a-z])")

_SCRIPT_BLOCK = re.compile(r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.IGNORECASE)
_SCRIPT_SCHEME = re.compile(r"(?:javascript|vbscript):", re.IGNORECASE)
_INLINE_HANDLER = re.compile(r"\bon\w+\s*=", re.IGNORECASE)

_SENSITIVE_ASSIGNMENT = re.compile(
    r"(password|token|key|secret)(\s*[:=]\s*)(?!\[REDACTED\])\S+",
    re.IGNORECASE,
)

DANGEROUS_PATTERNS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"rm\s+-rf"), "recursive delete command"),
    (re.compile(r"sudo\s+"), "privilege escalation"),
    (re.compile(r"passwd"), "password change command"),
    (re.compile(r"delete\s+from", re.IGNORECASE), "SQL delete statement"),
    (re.compile(r"drop\s+table", re.IGNORECASE), "SQL drop statement"),
)


def sanitize_input(value: Any) -> Any:
    """Strip script blocks, script URL schemes and inline event handlers."""
    if isinstance(value, str):
        cleaned = _SCRIPT_BLOCK.sub("", value)
        cleaned = _SCRIPT_SCHEME.sub("", cleaned)
        return _INLINE_HANDLER.sub("", cleaned)
    if isinstance(value, list):
        return [sanitize_input(item) for item in value]
    if isinstance(value, dict):
        return {key: sanitize_input(item) for key, item in value.items()}
    return value


def filter_output(value: Any) -> Any:
    """Redact credential-looking values from shortcut output.

    Applying the filter twice yields the same result as applying it once.
    """
    if isinstance(value, str):
        return _SENSITIVE_ASSIGNMENT.sub(lambda m: f"{m.group(1)}{m.group(2)}{REDACTED}", value)
    if isinstance(value, list):
        return [filter_output(item) for item in value]
    if isinstance(value, dict):
        return {
            key: REDACTED if _is_sensitive_key(key) else filter_output(item)
            for key, item in value.items()
        }
    return value


def dangerous_matches(text: str) -> list[str]:
    """Return labels of suspicious command patterns found in ``text``."""
    return [label for pattern, label in DANGEROUS_PATTERNS if pattern.search(text)]


def _is_sensitive_key(key: object) -> bool:
    segments = {segment.lower() for segment in _KEY_SEGMENT.findall(str(key))}
    return not segments.isdisjoint(_SENSITIVE_WORDS)
