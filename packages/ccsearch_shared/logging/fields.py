"""Canonical structured logging field names."""

TIMESTAMP = "timestamp"
LEVEL = "level"
LOGGER = "logger"
MESSAGE = "message"
EVENT = "event"

SERVICE = "service"
ENVIRONMENT = "environment"

# Sync cycle fields.
CYCLE_ID = "cycle_id"
CURSOR = "cursor"
PAGE = "page"

# Request fields.
TRACE_ID = "trace_id"
TIMELINE = "timeline"

# Public API invocation fields.
ENVELOPE_ID = "envelope_id"
COMPONENT_ID = "component_id"
API_NAME = "api_name"
PUBLIC_API_INVOCATION_EVENT = "public_api_invocation"
PUBLIC_API_COMPLETION_EVENT = "public_api_completion"
PUBLIC_API_INSTRUMENTATION_FAILURE_EVENT = "public_api_instrumentation_failure"
SUCCESS = "success"
DURATION_MS = "duration_ms"
ERRORS = "errors"
OUTCOME = "outcome"
ERROR_CATEGORY = "error_category"
STAGE = "stage"
CONCERN = "concern"
