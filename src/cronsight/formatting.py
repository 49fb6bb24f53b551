"""Timezone resolution and display formatting for occurrences.

Occurrences are shown in the US English "full date, long time" style:

    Monday, January 1, 2024 at 12:01:00 AM UTC

Formatting is a projection of an instant; it never changes which instant
was found.
"""

from __future__ import annotations

import logging
import os
import re
from datetime import datetime, timedelta, timezone, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from cronsight.scheduling.cron import WEEKDAY_NAMES

logger = logging.getLogger(__name__)

MONTH_NAMES: tuple[str, ...] = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

_ALPHABETIC_ABBREVIATION = re.compile(r"[A-Za-z]+")


class TimezoneError(ValueError):
    """Raised for a timezone name that cannot be resolved."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown timezone: {name!r}")


# =============================================================================
# Timezones
# =============================================================================


def resolve_timezone(name: str | None) -> tzinfo:
    """Resolve an IANA zone name.

    Args:
        name: IANA name such as ``Europe/Berlin``. ``None`` or ``"local"``
            selects the system local zone.

    Raises:
        TimezoneError: If the name is not a known zone.
    """
    if name is None or name.lower() == "local":
        return local_timezone()

    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise TimezoneError(name) from e


def local_timezone() -> tzinfo:
    """Return the system local zone.

    Prefers a ``ZoneInfo`` built from ``$TZ`` so the IANA key is kept;
    otherwise falls back to the fixed offset the OS reports right now.
    """
    key = os.environ.get("TZ", "").lstrip(":")
    if key:
        try:
            return ZoneInfo(key)
        except (ZoneInfoNotFoundError, ValueError):
            logger.debug("TZ=%r is not an IANA zone, using system offset", key)

    local = datetime.now().astimezone().tzinfo
    return local if local is not None else timezone.utc


def timezone_label(tz: tzinfo) -> str:
    """Name to show next to results: the IANA key when there is one."""
    if isinstance(tz, ZoneInfo):
        return tz.key
    return tz.tzname(None) or "UTC"


def parse_datetime(value: str, tz: tzinfo) -> datetime:
    """Parse an ISO 8601 timestamp into an aware datetime in ``tz``.

    Values without an offset are taken as wall-clock time in ``tz``;
    values with one are converted to ``tz``.

    Raises:
        ValueError: If the value is not ISO 8601.
    """
    # datetime.fromisoformat does not accept 'Z' before Python 3.11
    dt = datetime.fromisoformat(re.sub(r"Z$", "+00:00", value.strip()))

    if dt.tzinfo is None:
        return dt.replace(tzinfo=tz)
    return dt.astimezone(tz)


# =============================================================================
# Display
# =============================================================================


def zone_abbreviation(dt: datetime) -> str:
    """Short zone name for an aware datetime (``EST``, ``UTC``, ``GMT+5:30``)."""
    name = dt.tzname()
    if name and _ALPHABETIC_ABBREVIATION.fullmatch(name):
        return name
    return gmt_offset(dt.utcoffset() or timedelta(0))


def gmt_offset(offset: timedelta) -> str:
    total_minutes = int(offset.total_seconds() // 60)
    if total_minutes == 0:
        return "GMT"

    sign = "+" if total_minutes > 0 else "-"
    hh, mm = divmod(abs(total_minutes), 60)

    return f"GMT{sign}{hh}" if mm == 0 else f"GMT{sign}{hh}:{mm:02d}"


def format_occurrence(dt: datetime, tz: tzinfo | None = None) -> str:
    """Render an occurrence for display.

    Args:
        dt: The occurrence. Naive values are taken as wall-clock time in ``tz``.
        tz: Zone to display in; defaults to ``dt``'s own zone.

    Returns:
        e.g. ``Monday, January 1, 2024 at 12:01:00 AM UTC``.

    Raises:
        ValueError: If ``dt`` is naive and no ``tz`` is given.
    """
    if dt.tzinfo is None:
        if tz is None:
            raise ValueError("Cannot format a naive datetime without a timezone")
        dt = dt.replace(tzinfo=tz)
    elif tz is not None:
        dt = dt.astimezone(tz)

    weekday = WEEKDAY_NAMES[(dt.weekday() + 1) % 7]
    month = MONTH_NAMES[dt.month - 1]
    hour12 = dt.hour % 12 or 12
    meridiem = "AM" if dt.hour < 12 else "PM"

    return (
        f"{weekday}, {month} {dt.day}, {dt.year} at "
        f"{hour12}:{dt.minute:02d}:{dt.second:02d} {meridiem} {zone_abbreviation(dt)}"
    )
