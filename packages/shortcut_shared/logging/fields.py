"""Canonical logging field names.

These constants define a stable key set for structured logs and context
propagation across the gate components and the outer surfaces.
"""

TIMESTAMP = "timestamp"
LEVEL = "level"
LOGGER = "logger"
MESSAGE = "message"
EVENT = "event"

# Request correlation fields.
REQUEST_ID = "request_id"
CLIENT_ID = "client_id"
TOOL = "tool"
SHORTCUT = "shortcut"

# Public API invocation fields.
COMPONENT_ID = "component_id"
API_NAME = "api_name"
PUBLIC_API_INVOCATION_EVENT = "public_api_invocation"
PUBLIC_API_COMPLETION_EVENT = "public_api_completion"
SUCCESS = "success"
DURATION_MS = "duration_ms"
ERRORS = "errors"
OUTCOME = "outcome"
RISK_LEVEL = "risk_level"

# Common service-level fields.
SERVICE = "service"
ENVIRONMENT = "environment"
