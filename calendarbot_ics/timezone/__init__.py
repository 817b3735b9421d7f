"""
Timezone package for calendarbot_ics.

Resolves iCalendar date and date-time literals into timezone-aware datetimes.
``resolve_datetime`` accepts either form. ``resolve_date`` is the date-only entry point:
it rejects anything but an 8-digit ``YYYYMMDD`` literal and returns local midnight.

Example usage:
    >>> from calendarbot_ics.timezone import resolve_datetime
    >>> resolve_datetime("20230126T110000", "Europe/Berlin").isoformat()
    '2023-01-26T11:00:00+01:00'
    >>> resolve_datetime("20221124T084500Z").isoformat()
    '2022-11-24T08:45:00+00:00'
    >>> from calendarbot_ics.timezone import resolve_date
    >>> resolve_date("20230126").isoformat()
    '2023-01-26T00:00:00+00:00'
"""

from .service import (
    UTC,
    ensure_timezone_aware,
    get_zone,
    normalize_timezone_name,
    resolve_date,
    resolve_datetime,
)

__all__ = [
    "UTC",
    "ensure_timezone_aware",
    "get_zone",
    "normalize_timezone_name",
    "resolve_date",
    "resolve_datetime",
]
