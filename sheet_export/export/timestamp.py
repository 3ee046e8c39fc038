"""Timestamp resolution into the export service's date-serial format.

The service stores printed dates as a bare serial number with no zone,
and renders it in the document owner's zone. To print the intended
local time, the instant is rendered as a wall clock in the target zone,
that wall clock is re-read as UTC, and the UTC instant is converted.
"""

import zoneinfo
from datetime import UTC, datetime, timedelta

from sheet_export.constants import DEFAULT_TIMEZONE
from sheet_export.export.constants import MILLISECONDS_PER_DAY, SERIAL_EPOCH_OFFSET_DAYS
from sheet_export.export.models import ExportConfiguration
from sheet_export.export.protocols import Clock


_UNIX_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)
_ONE_MILLISECOND = timedelta(milliseconds=1)


class SystemClock:
    """Clock backed by the system time and a configured default zone."""

    def __init__(self, default_timezone: str = DEFAULT_TIMEZONE) -> None:
        """Initialize the clock.

        Args:
            default_timezone: IANA name returned by default_timezone().
        """
        self._default_timezone = default_timezone

    def now(self) -> datetime:
        """Return the current UTC instant."""
        return datetime.now(UTC)

    def default_timezone(self) -> str:
        """Return the configured default timezone."""
        return self._default_timezone


def local_wall_clock(instant: datetime, timezone: str) -> datetime:
    """Read an instant as a naive wall clock in a timezone.

    Naive datetimes are taken to already be wall-clock values in
    ``timezone`` and are returned unchanged. Sub-second precision is
    dropped.

    Args:
        instant: Aware instant or naive wall-clock time.
        timezone: IANA timezone name.

    Returns:
        Naive datetime holding the local date and time.
    """
    if instant.tzinfo is not None:
        instant = instant.astimezone(zoneinfo.ZoneInfo(timezone))
    return instant.replace(tzinfo=None, microsecond=0)


def render_wall_clock(instant: datetime, timezone: str) -> str:
    """Render an instant as YYYY-MM-DDTHH:MM:SS in a timezone."""
    return local_wall_clock(instant, timezone).isoformat(timespec="seconds")


def to_date_serial(instant: datetime) -> float:
    """Convert an aware instant to a date serial.

    Args:
        instant: Aware datetime.

    Returns:
        Fractional days since 1899-12-30.
    """
    epoch_ms = (instant - _UNIX_EPOCH) // _ONE_MILLISECOND
    return epoch_ms / MILLISECONDS_PER_DAY + SERIAL_EPOCH_OFFSET_DAYS


def wall_clock_serial(instant: datetime, timezone: str) -> float:
    """Compute the serial for an instant as printed in a timezone.

    Args:
        instant: Aware instant or naive wall-clock time.
        timezone: IANA timezone name.

    Returns:
        Date serial of the wall-clock value treated as UTC.
    """
    wall_clock = local_wall_clock(instant, timezone)
    return to_date_serial(wall_clock.replace(tzinfo=UTC))


def resolve_timestamp(config: ExportConfiguration, clock: Clock) -> float:
    """Resolve the configured (or current) time into a date serial.

    Args:
        config: Configuration holding the optional date and zone.
        clock: Fallback source for the instant and the zone.

    Returns:
        Date serial for the ``timestamp`` parameter.
    """
    instant = config.timestamp_date
    if instant is None:
        instant = clock.now()
    timezone = config.timezone
    if timezone is None:
        timezone = clock.default_timezone()
    return wall_clock_serial(instant, timezone)
