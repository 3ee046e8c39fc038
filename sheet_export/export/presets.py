"""Named bundles of setter calls for common export shapes.

Presets never read existing configuration; they overwrite only the
fields they touch.
"""

from collections.abc import Callable
from typing import TYPE_CHECKING

from sheet_export.export.errors import ConfigurationError
from sheet_export.export.models import ExportFormat, PageSize, Scale


if TYPE_CHECKING:
    from sheet_export.export.builder import SheetExportBuilder


PresetFn = Callable[["SheetExportBuilder"], "SheetExportBuilder"]


def _pdf_report(builder: "SheetExportBuilder") -> "SheetExportBuilder":
    return (
        builder.set_format(ExportFormat.PDF)
        .set_portrait(True)
        .set_size(PageSize.LETTER)
        .set_gridlines(False)
        .set_title(True)
        .set_page_numbers(True)
    )


def _pdf_landscape(builder: "SheetExportBuilder") -> "SheetExportBuilder":
    return (
        builder.set_format(ExportFormat.PDF)
        .set_portrait(False)
        .set_size(PageSize.A4)
        .set_scale(Scale.FIT_WIDTH)
        .set_gridlines(True)
        .set_repeat_frozen_rows(True)
        .set_page_numbers(True)
    )


def _csv_data(builder: "SheetExportBuilder") -> "SheetExportBuilder":
    return builder.set_format(ExportFormat.CSV)


def _excel_backup(builder: "SheetExportBuilder") -> "SheetExportBuilder":
    return builder.set_format(ExportFormat.XLSX)


PRESETS: dict[str, PresetFn] = {
    "pdfReport": _pdf_report,
    "pdfLandscape": _pdf_landscape,
    "csvData": _csv_data,
    "excelBackup": _excel_backup,
}


def get_preset(name: str) -> PresetFn:
    """Look up a preset by name.

    Args:
        name: Preset name.

    Returns:
        Function applying the preset's setter calls to a builder.

    Raises:
        ConfigurationError: If the name is not a known preset.
    """
    preset = PRESETS.get(name)
    if preset is None:
        msg = f"Unknown preset '{name}'"
        raise ConfigurationError(msg, valid_names=PRESETS)
    return preset
