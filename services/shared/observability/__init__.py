"""
Shared observability helpers (telemetry, privacy utilities).

Services import from this package so logging carries the same fields and raw
outline text never reaches log output.
"""

from .privacy import hash_payload, redact_fields
from .telemetry import (
    CORRELATION_ID_HEADER,
    bind_request_context,
    ensure_request_id,
    reset_request_context,
    setup_telemetry,
)

__all__ = [
    "hash_payload",
    "redact_fields",
    "CORRELATION_ID_HEADER",
    "bind_request_context",
    "ensure_request_id",
    "reset_request_context",
    "setup_telemetry",
]
