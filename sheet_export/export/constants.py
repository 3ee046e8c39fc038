"""Constants for the export request builder.

Centralizes parameter keys, literal values and date-serial constants.
"""

# Parameter keys
PARAM_FORMAT = "format"
PARAM_PORTRAIT = "portrait"
PARAM_SIZE = "size"
PARAM_SCALE = "scale"
PARAM_SHEET_ID = "gid"
PARAM_PRINT_NOTES = "printnotes"
PARAM_TITLE = "title"
PARAM_GRIDLINES = "gridlines"
PARAM_FROZEN_ROWS = "fzr"
PARAM_FROZEN_COLUMNS = "fzc"
PARAM_PAGE_NUMBERS = "pagenum"
PARAM_PRINT_DATE = "printdate"
PARAM_PRINT_TIME = "printtime"
PARAM_TIMESTAMP = "timestamp"

RANGE_KEYS = ("r1", "r2", "c1", "c2")
MARGIN_KEYS = ("left_margin", "right_margin", "top_margin", "bottom_margin")

# Parameters that only affect paginated (PDF) output
PDF_ONLY_KEYS = frozenset(
    {
        PARAM_PORTRAIT,
        PARAM_SIZE,
        PARAM_SCALE,
        PARAM_PRINT_NOTES,
        PARAM_TITLE,
        PARAM_GRIDLINES,
        PARAM_FROZEN_ROWS,
        PARAM_FROZEN_COLUMNS,
        PARAM_PAGE_NUMBERS,
        PARAM_PRINT_DATE,
        PARAM_PRINT_TIME,
        PARAM_TIMESTAMP,
        *MARGIN_KEYS,
    }
)

# pagenum is presence-encoded; this is the only value ever stored
PAGE_NUMBERS_CENTER = "CENTER"

# Date-serial conversion (epoch 1899-12-30)
MILLISECONDS_PER_DAY = 86_400_000
SERIAL_EPOCH_OFFSET_DAYS = 25569

DEFAULT_FILE_NAME = "export"
DEFAULT_EXTENSION = "xlsx"

# Log component names
COMPONENT_EXPORT = "export"
