"""Validated spreadsheet export requests and retrieval."""

from sheet_export.export import (
    ConfigurationError,
    ExportArtifact,
    ExportExecutor,
    ExportFailedError,
    ExportFormat,
    InvalidRangeError,
    NotFoundError,
    PageSize,
    Scale,
    SheetExportBuilder,
    SheetExportError,
    ValidationError,
)


__all__ = [
    "ConfigurationError",
    "ExportArtifact",
    "ExportExecutor",
    "ExportFailedError",
    "ExportFormat",
    "InvalidRangeError",
    "NotFoundError",
    "PageSize",
    "Scale",
    "SheetExportBuilder",
    "SheetExportError",
    "ValidationError",
]
