"""Chainable builder for spreadsheet export requests.

Each setter validates its input immediately and either updates the
configuration and returns the builder, or raises without modifying
anything. Cross-field checks, timestamp resolution and URL
serialization happen only when the request is built.
"""

import math
import zoneinfo
from collections.abc import Iterable
from datetime import date, datetime, time
from enum import Enum
from typing import TypeVar

import pydantic
import structlog

from sheet_export.export.auth import create_token_supplier
from sheet_export.export.constants import (
    COMPONENT_EXPORT,
    MARGIN_KEYS,
    PAGE_NUMBERS_CENTER,
    PARAM_FORMAT,
    PARAM_FROZEN_COLUMNS,
    PARAM_FROZEN_ROWS,
    PARAM_GRIDLINES,
    PARAM_PAGE_NUMBERS,
    PARAM_PORTRAIT,
    PARAM_PRINT_DATE,
    PARAM_PRINT_NOTES,
    PARAM_PRINT_TIME,
    PARAM_SCALE,
    PARAM_SHEET_ID,
    PARAM_SIZE,
    PARAM_TIMESTAMP,
    PARAM_TITLE,
)
from sheet_export.export.errors import (
    ConfigurationError,
    InvalidRangeError,
    NotFoundError,
    ValidationError,
)
from sheet_export.export.executor import ExportExecutor, artifact_file_name
from sheet_export.export.metrics import ExportMetrics
from sheet_export.export.models import (
    ExportArtifact,
    ExportConfiguration,
    ExportFormat,
    PageSize,
    ParamValue,
    RangeBounds,
    Scale,
)
from sheet_export.export.presets import get_preset
from sheet_export.export.protocols import Clock, DocumentModel, SheetHandle
from sheet_export.export.state_machine import ExportState, ExportStateMachine
from sheet_export.export.timestamp import SystemClock, resolve_timestamp
from sheet_export.export.url import build_export_url
from sheet_export.export.validation import validate_configuration
from sheet_export.observability import bind_export_context, clear_export_context
from sheet_export.settings import AppSettings, get_settings


logger = structlog.get_logger()

EnumT = TypeVar("EnumT", bound=Enum)

# Named scale aliases, matched exactly
SCALE_ALIASES: dict[str, Scale] = {
    "normal": Scale.NORMAL,
    "fit_width": Scale.FIT_WIDTH,
    "fit_height": Scale.FIT_HEIGHT,
    "fit_page": Scale.FIT_PAGE,
}

_SCALE_ALLOWED = [
    *(str(member.value) for member in Scale),
    *SCALE_ALIASES,
]


class SheetExportBuilder:
    """Builds, validates and executes an export request for one document.

    Not safe for concurrent use; create one builder per export.

    Example:
        >>> url = (
        ...     SheetExportBuilder(document)
        ...     .set_format("pdf")
        ...     .set_sheet_id(0)
        ...     .set_range("A1:D20")
        ...     .set_page_numbers(True)
        ...     .build_url()
        ... )
    """

    def __init__(
        self,
        document: DocumentModel,
        *,
        executor: ExportExecutor | None = None,
        clock: Clock | None = None,
        settings: AppSettings | None = None,
    ) -> None:
        """Initialize the builder.

        Args:
            document: Document to export.
            executor: Executor used by export(); created on demand if omitted.
            clock: Source of the current time and default timezone.
            settings: Application settings.
        """
        self._settings = settings or get_settings()
        self._document = document
        self._document_id = document.get_id()
        self._executor = executor
        self._clock = clock or SystemClock(self._settings.default_timezone)
        self._config = ExportConfiguration()
        self._metrics = executor.metrics if executor is not None else ExportMetrics()
        self._state_machine: ExportStateMachine | None = None
        self._log = logger.bind(
            component=COMPONENT_EXPORT,
            subcomponent="builder",
            document_id=self._document_id,
        )

    @property
    def config(self) -> ExportConfiguration:
        """Get the configuration accumulated so far."""
        return self._config

    @property
    def document_id(self) -> str:
        """Get the identifier of the target document."""
        return self._document_id

    @property
    def artifact_name(self) -> str:
        """Get the file name the exported artifact will carry."""
        return artifact_file_name(self._config.file_name, self._config.export_format)

    @property
    def metrics(self) -> ExportMetrics:
        """Get the metrics of exports performed by this builder."""
        return self._metrics

    @property
    def export_state(self) -> ExportState | None:
        """Get the state of the most recent export() call, if any."""
        if self._state_machine is None:
            return None
        return self._state_machine.state

    # Field setters

    def set_format(self, export_format: ExportFormat | str) -> "SheetExportBuilder":
        """Set the output format (pdf, csv, xls, xlsx, tsv, ods, zip)."""
        value = self._coerce_choice(PARAM_FORMAT, export_format, ExportFormat)
        self._config.params[PARAM_FORMAT] = value
        return self

    def set_portrait(self, portrait: bool) -> "SheetExportBuilder":
        """Set portrait (True) or landscape (False) orientation."""
        return self._set_flag(PARAM_PORTRAIT, portrait)

    def set_size(self, size: PageSize | str) -> "SheetExportBuilder":
        """Set the physical page size, e.g. "letter" or "A4"."""
        value = self._coerce_choice(PARAM_SIZE, size, PageSize)
        self._config.params[PARAM_SIZE] = value
        return self

    def set_scale(self, scale: Scale | int | str) -> "SheetExportBuilder":
        """Set page scaling as 1-4 or a named alias.

        Aliases are normal, fit_width, fit_height and fit_page. Numeric
        strings and floats are rejected even when integral.
        """
        if isinstance(scale, Scale):
            value = scale
        elif isinstance(scale, str):
            if scale not in SCALE_ALIASES:
                raise self._reject(
                    PARAM_SCALE, f"unknown scale {scale!r}", _SCALE_ALLOWED
                )
            value = SCALE_ALIASES[scale]
        elif isinstance(scale, int) and not isinstance(scale, bool):
            if scale not in {member.value for member in Scale}:
                raise self._reject(
                    PARAM_SCALE, f"{scale} is out of range", _SCALE_ALLOWED
                )
            value = Scale(scale)
        else:
            raise self._reject(
                PARAM_SCALE,
                f"expected an integer or alias, got {type(scale).__name__}",
                _SCALE_ALLOWED,
            )
        self._config.params[PARAM_SCALE] = value
        return self

    def set_sheet_id(self, sheet_id: int) -> "SheetExportBuilder":
        """Set the target sheet by numeric id (gid); 0 is valid."""
        if not isinstance(sheet_id, int) or isinstance(sheet_id, bool):
            raise self._reject(PARAM_SHEET_ID, "must be an integer")
        if sheet_id < 0:
            raise self._reject(PARAM_SHEET_ID, "must be non-negative")
        self._config.params[PARAM_SHEET_ID] = sheet_id
        return self

    def set_sheet_by_name(self, name: str) -> "SheetExportBuilder":
        """Set the target sheet by its display name.

        Raises:
            NotFoundError: If the document has no sheet with that name.
        """
        if not isinstance(name, str) or not name.strip():
            raise self._reject("sheet_name", "must be a non-empty string")

        try:
            sheet = self._document.get_sheet_by_name(name)
        except Exception as exc:
            msg = f"Sheet lookup failed for '{name}': {exc}"
            raise NotFoundError(name, msg) from exc

        if sheet is None:
            try:
                available = [s.get_name() for s in self._document.list_sheets()]
            except Exception as exc:
                msg = f"Sheet not found: {name} (listing sheets failed: {exc})"
                raise NotFoundError(name, msg) from exc
            self._log.debug("sheet_not_found", sheet_name=name, available=available)
            raise NotFoundError(name, f"Sheet not found: {name}", available=available)

        self._config.params[PARAM_SHEET_ID] = sheet.get_id()
        return self

    def set_range(self, a1_notation: str) -> "SheetExportBuilder":
        """Restrict the export to an A1-style range of the selected sheet.

        Requires a sheet to have been selected first.

        Raises:
            ConfigurationError: If no sheet id is configured.
            InvalidRangeError: If the address cannot be resolved.
        """
        sheet_id = self._require_sheet_id()
        if not isinstance(a1_notation, str) or not a1_notation.strip():
            msg = "range must be a non-empty string"
            raise InvalidRangeError(str(a1_notation), msg)

        try:
            sheet = self._find_sheet(sheet_id)
            if sheet is None:
                msg = f"no sheet with gid {sheet_id}"
                raise InvalidRangeError(a1_notation, msg)
            bounds = sheet.resolve_range(a1_notation)
        except InvalidRangeError:
            raise
        except Exception as exc:
            raise InvalidRangeError(a1_notation, str(exc), cause=exc) from exc

        self._store_range(bounds)
        return self

    def set_range_bounds(
        self,
        row: int,
        column: int,
        num_rows: int,
        num_columns: int,
    ) -> "SheetExportBuilder":
        """Restrict the export to explicit one-based range coordinates.

        Raises:
            ConfigurationError: If no sheet id is configured.
            InvalidRangeError: If any coordinate is not a positive integer.
        """
        self._require_sheet_id()
        description = f"R{row}C{column}+{num_rows}x{num_columns}"
        try:
            bounds = RangeBounds(
                row=row, column=column, num_rows=num_rows, num_columns=num_columns
            )
        except pydantic.ValidationError as exc:
            msg = "coordinates must be positive integers"
            raise InvalidRangeError(description, msg, cause=exc) from exc
        self._store_range(bounds)
        return self

    def set_print_notes(self, enabled: bool) -> "SheetExportBuilder":
        """Show or hide cell notes."""
        return self._set_flag(PARAM_PRINT_NOTES, enabled)

    def set_title(self, enabled: bool) -> "SheetExportBuilder":
        """Show or hide the document title in the header."""
        return self._set_flag(PARAM_TITLE, enabled)

    def set_gridlines(self, enabled: bool) -> "SheetExportBuilder":
        """Show or hide gridlines."""
        return self._set_flag(PARAM_GRIDLINES, enabled)

    def set_repeat_frozen_rows(self, enabled: bool) -> "SheetExportBuilder":
        """Repeat frozen rows on every page."""
        return self._set_flag(PARAM_FROZEN_ROWS, enabled)

    def set_repeat_frozen_columns(self, enabled: bool) -> "SheetExportBuilder":
        """Repeat frozen columns on every page."""
        return self._set_flag(PARAM_FROZEN_COLUMNS, enabled)

    def set_page_numbers(self, enabled: bool) -> "SheetExportBuilder":
        """Enable centered page numbers, or remove the setting entirely."""
        if not isinstance(enabled, bool):
            raise self._reject(PARAM_PAGE_NUMBERS, "must be a boolean")
        if enabled:
            self._config.params[PARAM_PAGE_NUMBERS] = PAGE_NUMBERS_CENTER
        else:
            self._config.params.pop(PARAM_PAGE_NUMBERS, None)
        return self

    def set_margins(
        self,
        *,
        left: float | None = None,
        right: float | None = None,
        top: float | None = None,
        bottom: float | None = None,
    ) -> "SheetExportBuilder":
        """Set page margins.

        All four margins must be present by build time. Every given
        value is validated before any is stored.
        """
        supplied = {
            key: value
            for key, value in zip(MARGIN_KEYS, (left, right, top, bottom), strict=True)
            if value is not None
        }
        if not supplied:
            raise self._reject("margins", "at least one margin must be given")

        for key, value in supplied.items():
            if not isinstance(value, int | float) or isinstance(value, bool):
                raise self._reject(key, "must be a number")
            if not math.isfinite(value) or value < 0:
                raise self._reject(key, "must be a finite, non-negative number")

        self._config.params.update(supplied)
        return self

    def set_print_date(self, enabled: bool) -> "SheetExportBuilder":
        """Show or hide the date in the footer."""
        return self._set_flag(PARAM_PRINT_DATE, enabled)

    def set_print_time(self, enabled: bool) -> "SheetExportBuilder":
        """Show or hide the time in the footer."""
        return self._set_flag(PARAM_PRINT_TIME, enabled)

    def set_timestamp_date(self, value: datetime | date) -> "SheetExportBuilder":
        """Set the date printed in the footer instead of the current time.

        A naive datetime, or a plain date (taken as midnight), is read as a
        wall-clock time in the export timezone.
        """
        if isinstance(value, datetime):
            self._config.timestamp_date = value
        elif isinstance(value, date):
            self._config.timestamp_date = datetime.combine(value, time.min)
        else:
            raise self._reject("timestamp_date", "must be a date or datetime")
        return self

    def set_timezone(self, timezone: str) -> "SheetExportBuilder":
        """Set the IANA timezone the printed date is rendered in."""
        if not isinstance(timezone, str) or not timezone.strip():
            raise self._reject("timezone", "must be a non-empty string")
        try:
            zoneinfo.ZoneInfo(timezone)
        except (KeyError, ValueError, zoneinfo.ZoneInfoNotFoundError) as exc:
            raise self._reject("timezone", f"unknown timezone {timezone!r}") from exc
        self._config.timezone = timezone
        return self

    def set_file_name(self, file_name: str) -> "SheetExportBuilder":
        """Set the base name of the exported artifact."""
        if not isinstance(file_name, str) or not file_name.strip():
            raise self._reject("file_name", "must be a non-empty string")
        self._config.file_name = file_name
        return self

    def apply_preset(self, name: str) -> "SheetExportBuilder":
        """Apply a named preset (pdfReport, pdfLandscape, csvData, excelBackup).

        Raises:
            ConfigurationError: If the preset name is unknown.
        """
        get_preset(name)(self)
        self._log.debug("preset_applied", preset=name)
        return self

    # Build steps

    def build_params(self) -> dict[str, ParamValue]:
        """Validate the configuration and resolve the final parameters.

        The configuration itself is not modified.

        Returns:
            Ordered parameters, including ``timestamp`` when the date or
            time is printed.

        Raises:
            ConfigurationError: If a parameter group is incomplete.
        """
        validate_configuration(self._config)
        return self._resolve_params()

    def build_url(self) -> str:
        """Build the export URL.

        Raises:
            ConfigurationError: If a parameter group is incomplete.
        """
        validate_configuration(self._config)
        return self._serialize()

    def export(self) -> ExportArtifact:
        """Build the URL, fetch it and return the named artifact.

        Raises:
            ConfigurationError: If a parameter group is incomplete.
            ExportFailedError: If the retrieval fails.
        """
        machine = ExportStateMachine()
        self._state_machine = machine
        bind_export_context(self._document_id)
        try:
            validate_configuration(self._config)
            machine.transition(ExportState.VALIDATED)
            url = self._serialize()
            machine.transition(ExportState.URL_BUILT)
            machine.transition(ExportState.FETCHING)
            artifact = self._execute(url)
            machine.transition(ExportState.COMPLETED)
        except Exception:
            machine.fail()
            raise
        finally:
            clear_export_context()
        return artifact

    # Internal helpers

    def _resolve_params(self) -> dict[str, ParamValue]:
        params = dict(self._config.params)
        if params.get(PARAM_PRINT_DATE) is True or params.get(PARAM_PRINT_TIME) is True:
            params[PARAM_TIMESTAMP] = resolve_timestamp(self._config, self._clock)
        return params

    def _serialize(self) -> str:
        params = self._resolve_params()
        url = build_export_url(
            self._document_id, params, self._settings.export_base_url
        )
        self._log.debug("export_url_built", params=list(params))
        return url

    def _execute(self, url: str) -> ExportArtifact:
        if self._executor is not None:
            return self._executor.execute(
                url,
                file_name=self._config.file_name,
                export_format=self._config.export_format,
            )

        with ExportExecutor(
            create_token_supplier(self._settings),
            settings=self._settings,
            metrics=self._metrics,
        ) as executor:
            return executor.execute(
                url,
                file_name=self._config.file_name,
                export_format=self._config.export_format,
            )

    def _set_flag(self, key: str, value: bool) -> "SheetExportBuilder":
        if not isinstance(value, bool):
            raise self._reject(key, "must be a boolean")
        self._config.params[key] = value
        return self

    def _coerce_choice(
        self,
        field: str,
        value: EnumT | str,
        enum_cls: type[EnumT],
    ) -> EnumT:
        if isinstance(value, enum_cls):
            return value
        if isinstance(value, str):
            for member in enum_cls:
                if member.value == value:
                    return member
        raise self._reject(
            field, f"unsupported value {value!r}", [m.value for m in enum_cls]
        )

    def _require_sheet_id(self) -> int:
        if not self._config.has(PARAM_SHEET_ID):
            msg = "A sheet id must be set before configuring a range"
            raise ConfigurationError(msg)
        return self._config.params[PARAM_SHEET_ID]  # type: ignore[return-value]

    def _find_sheet(self, sheet_id: int) -> SheetHandle | None:
        for sheet in self._document.list_sheets():
            if sheet.get_id() == sheet_id:
                return sheet
        return None

    def _store_range(self, bounds: RangeBounds) -> None:
        row_start = bounds.row - 1
        column_start = bounds.column - 1
        self._config.params.update(
            {
                "r1": row_start,
                "r2": row_start + bounds.num_rows,
                "c1": column_start,
                "c2": column_start + bounds.num_columns,
            }
        )

    def _reject(
        self,
        field: str,
        message: str,
        allowed_values: Iterable[object] | None = None,
    ) -> ValidationError:
        self._log.debug("setter_rejected", field=field, reason=message)
        return ValidationError(field, message, allowed_values=allowed_values)
