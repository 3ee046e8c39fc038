"""Helpers for logging outbound HTTP requests safely."""

from sheet_export.fetch.redact import (
    REDACTED_VALUE,
    is_sensitive_header,
    redact_headers,
    redact_url_credentials,
)


__all__ = [
    "REDACTED_VALUE",
    "is_sensitive_header",
    "redact_headers",
    "redact_url_credentials",
]
