"""Cross-field consistency checks run at build time."""

from sheet_export.export.constants import MARGIN_KEYS, PARAM_SHEET_ID, RANGE_KEYS
from sheet_export.export.errors import ConfigurationError
from sheet_export.export.models import ExportConfiguration


def validate_configuration(config: ExportConfiguration) -> None:
    """Check the range and margin groups for completeness.

    Per-field domains are enforced by the setters and are not
    re-checked here. Only the first violation is reported.

    Args:
        config: Configuration to check.

    Raises:
        ConfigurationError: If a parameter group is incomplete.
    """
    present_range = [key for key in RANGE_KEYS if config.has(key)]
    if present_range and len(present_range) != len(RANGE_KEYS):
        missing = [key for key in RANGE_KEYS if key not in present_range]
        msg = f"Range bounds must be set together; missing {', '.join(missing)}"
        raise ConfigurationError(msg)

    if present_range and not config.has(PARAM_SHEET_ID):
        msg = "Range bounds require a sheet id (gid)"
        raise ConfigurationError(msg)

    present_margins = [key for key in MARGIN_KEYS if config.has(key)]
    if present_margins and len(present_margins) != len(MARGIN_KEYS):
        missing = [key for key in MARGIN_KEYS if key not in present_margins]
        msg = f"Margins must be set together; missing {', '.join(missing)}"
        raise ConfigurationError(msg)
