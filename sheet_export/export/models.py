"""Data models for export requests and their results."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, IntEnum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

from sheet_export.export.constants import DEFAULT_FILE_NAME, PARAM_FORMAT


class ExportFormat(str, Enum):
    """Output formats supported by the export endpoint."""

    PDF = "pdf"
    CSV = "csv"
    XLS = "xls"
    XLSX = "xlsx"
    TSV = "tsv"
    ODS = "ods"
    ZIP = "zip"

    @property
    def content_type(self) -> str:
        """Get the MIME type of an artifact in this format."""
        return CONTENT_TYPES[self]


CONTENT_TYPES: dict[ExportFormat, str] = {
    ExportFormat.PDF: "application/pdf",
    ExportFormat.CSV: "text/csv",
    ExportFormat.XLS: "application/vnd.ms-excel",
    ExportFormat.XLSX: (
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    ),
    ExportFormat.TSV: "text/tab-separated-values",
    ExportFormat.ODS: "application/vnd.oasis.opendocument.spreadsheet",
    ExportFormat.ZIP: "application/zip",
}


class PageSize(str, Enum):
    """Named physical page sizes."""

    LETTER = "letter"
    TABLOID = "tabloid"
    LEGAL = "legal"
    STATEMENT = "statement"
    EXECUTIVE = "executive"
    FOLIO = "folio"
    A3 = "A3"
    A4 = "A4"
    A5 = "A5"
    B4 = "B4"
    B5 = "B5"


class Scale(IntEnum):
    """Page scaling modes.

    - NORMAL: 100%
    - FIT_WIDTH: Fit to page width
    - FIT_HEIGHT: Fit to page height
    - FIT_PAGE: Fit whole content on one page
    """

    NORMAL = 1
    FIT_WIDTH = 2
    FIT_HEIGHT = 3
    FIT_PAGE = 4


ParamValue = bool | int | float | str | Enum


@dataclass
class ExportConfiguration:
    """Accumulated export parameters for a single document.

    ``params`` holds only explicitly configured keys, in insertion order,
    with native values. The timestamp inputs are kept aside and resolved
    only when the request is built.

    Attributes:
        params: Parameter key to typed value.
        timestamp_date: Instant (aware) or wall-clock time (naive) to print.
        timezone: IANA timezone used to render the timestamp.
        file_name: Base name of the produced artifact.
    """

    params: dict[str, ParamValue] = field(default_factory=dict)
    timestamp_date: datetime | None = None
    timezone: str | None = None
    file_name: str = DEFAULT_FILE_NAME

    @property
    def export_format(self) -> ExportFormat | None:
        """Get the configured format, if any."""
        value = self.params.get(PARAM_FORMAT)
        return value if isinstance(value, ExportFormat) else None

    def has(self, key: str) -> bool:
        """Check whether a parameter key is present.

        Presence is checked by key membership so that falsy values
        such as ``gid=0`` still count as configured.
        """
        return key in self.params


class RangeBounds(BaseModel):
    """One-based, inclusive range coordinates from the document model."""

    model_config = ConfigDict(frozen=True, extra="forbid", strict=True)

    row: Annotated[int, Field(ge=1)]
    column: Annotated[int, Field(ge=1)]
    num_rows: Annotated[int, Field(ge=1)]
    num_columns: Annotated[int, Field(ge=1)]


class ExportArtifact(BaseModel):
    """Named binary result of an export, ready for a storage backend."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: Annotated[str, Field(min_length=1, description="Artifact file name")]
    content: bytes = Field(description="Exported document bytes")
    content_type: str = Field(
        default="application/octet-stream", description="MIME type of content"
    )

    @property
    def size(self) -> int:
        """Get the size of the artifact in bytes."""
        return len(self.content)
