"""Export request building, validation and execution.

This module provides:
- A chainable builder with fail-fast field validation
- Build-time cross-field checks and timestamp resolution
- Deterministic export URL construction
- Single-attempt authenticated retrieval into a named artifact
- Named presets for common export shapes
"""

from sheet_export.export.auth import (
    RefreshTokenSupplier,
    StaticTokenSupplier,
    create_token_supplier,
)
from sheet_export.export.builder import SheetExportBuilder
from sheet_export.export.errors import (
    ConfigurationError,
    ExportFailedError,
    InvalidRangeError,
    NotFoundError,
    SheetExportError,
    ValidationError,
)
from sheet_export.export.executor import ExportExecutor, artifact_file_name
from sheet_export.export.metrics import ExportMetrics
from sheet_export.export.models import (
    ExportArtifact,
    ExportConfiguration,
    ExportFormat,
    PageSize,
    RangeBounds,
    Scale,
)
from sheet_export.export.presets import PRESETS, get_preset
from sheet_export.export.protocols import (
    Clock,
    DocumentModel,
    SheetHandle,
    TokenSupplier,
)
from sheet_export.export.state_machine import (
    ExportState,
    ExportStateError,
    ExportStateMachine,
)
from sheet_export.export.timestamp import SystemClock, wall_clock_serial
from sheet_export.export.url import build_export_url


__all__ = [
    # Builder
    "SheetExportBuilder",
    # Execution
    "ExportExecutor",
    "artifact_file_name",
    "StaticTokenSupplier",
    "RefreshTokenSupplier",
    "create_token_supplier",
    # Models
    "ExportArtifact",
    "ExportConfiguration",
    "ExportFormat",
    "PageSize",
    "RangeBounds",
    "Scale",
    # Presets
    "PRESETS",
    "get_preset",
    # Protocols
    "Clock",
    "DocumentModel",
    "SheetHandle",
    "TokenSupplier",
    # State
    "ExportState",
    "ExportStateError",
    "ExportStateMachine",
    # Timestamps and URLs
    "SystemClock",
    "wall_clock_serial",
    "build_export_url",
    # Metrics
    "ExportMetrics",
    # Errors
    "SheetExportError",
    "ValidationError",
    "ConfigurationError",
    "NotFoundError",
    "InvalidRangeError",
    "ExportFailedError",
]
