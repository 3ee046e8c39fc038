"""Observability module for structured logging."""

from sheet_export.observability.logging import (
    bind_export_context,
    clear_export_context,
    configure_logging,
    get_logger,
)


__all__ = [
    "bind_export_context",
    "clear_export_context",
    "configure_logging",
    "get_logger",
]
