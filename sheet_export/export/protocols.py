"""Protocol interfaces for export collaborators.

The export builder depends only on these narrow contracts, so any
document model, clock or credential source with matching methods can
be used interchangeably.
"""

from collections.abc import Sequence
from datetime import datetime
from typing import Protocol, runtime_checkable

from sheet_export.export.models import RangeBounds


@runtime_checkable
class SheetHandle(Protocol):
    """A single sheet inside a document."""

    def get_id(self) -> int:
        """Return the numeric sheet identifier (gid)."""
        ...

    def get_name(self) -> str:
        """Return the sheet's display name."""
        ...

    def resolve_range(self, a1_notation: str) -> RangeBounds:
        """Resolve an A1-style address into one-based coordinates.

        Raises:
            Exception: Any error if the address cannot be resolved.
        """
        ...


@runtime_checkable
class DocumentModel(Protocol):
    """The spreadsheet document being exported."""

    def get_id(self) -> str:
        """Return the document identifier used in the export URL."""
        ...

    def get_sheet_by_name(self, name: str) -> SheetHandle | None:
        """Look up a sheet by display name, or None if absent."""
        ...

    def list_sheets(self) -> Sequence[SheetHandle]:
        """Return all sheets in the document."""
        ...


@runtime_checkable
class Clock(Protocol):
    """Source of the current instant and the process default timezone."""

    def now(self) -> datetime:
        """Return the current instant as an aware datetime."""
        ...

    def default_timezone(self) -> str:
        """Return the IANA name of the default timezone."""
        ...


@runtime_checkable
class TokenSupplier(Protocol):
    """Provider of bearer tokens for the export endpoint."""

    def get_token(self) -> str:
        """Return an access token.

        Raises:
            ExportFailedError: If no token can be obtained.
        """
        ...
