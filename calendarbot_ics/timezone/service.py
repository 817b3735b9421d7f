"""Date/timezone resolution for iCalendar values.

Converts iCalendar DATE (``20230126``) and DATE-TIME (``20230126T110000``,
``20230126T110000Z``) literals into timezone-aware datetimes, optionally
interpreting wall-clock times in a named timezone. Windows timezone names and
legacy aliases are normalized to IANA identifiers before lookup.
"""

import logging
from datetime import datetime, timezone as dt_timezone
from functools import lru_cache
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from icalendar.prop import vDate, vDatetime

from ..ics.exceptions import ICSDateError, ICSTimezoneError

logger = logging.getLogger(__name__)

UTC = dt_timezone.utc

DATE_LITERAL_LENGTH = 8

WINDOWS_TZ_MAP = {
    # US Timezones
    "Pacific Standard Time": "America/Los_Angeles",
    "Mountain Standard Time": "America/Denver",
    "Central Standard Time": "America/Chicago",
    "Eastern Standard Time": "America/New_York",
    "Alaskan Standard Time": "America/Anchorage",
    "Hawaiian Standard Time": "Pacific/Honolulu",
    "US Mountain Standard Time": "America/Phoenix",
    "Atlantic Standard Time": "America/Halifax",
    # Europe
    "GMT Standard Time": "Europe/London",
    "Greenwich Standard Time": "Atlantic/Reykjavik",
    "W. Europe Standard Time": "Europe/Berlin",
    "Central Europe Standard Time": "Europe/Budapest",
    "Central European Standard Time": "Europe/Warsaw",
    "Romance Standard Time": "Europe/Paris",
    "E. Europe Standard Time": "Europe/Chisinau",
    "FLE Standard Time": "Europe/Kiev",
    "GTB Standard Time": "Europe/Bucharest",
    "Russian Standard Time": "Europe/Moscow",
    # Asia / Pacific
    "India Standard Time": "Asia/Kolkata",
    "China Standard Time": "Asia/Shanghai",
    "Tokyo Standard Time": "Asia/Tokyo",
    "Singapore Standard Time": "Asia/Singapore",
    "AUS Eastern Standard Time": "Australia/Sydney",
    "New Zealand Standard Time": "Pacific/Auckland",
    "UTC": "UTC",
}

TZ_ALIAS_MAP = {
    "US/Pacific": "America/Los_Angeles",
    "US/Mountain": "America/Denver",
    "US/Central": "America/Chicago",
    "US/Eastern": "America/New_York",
    "US/Alaska": "America/Anchorage",
    "US/Hawaii": "Pacific/Honolulu",
    "US/Arizona": "America/Phoenix",
    "GMT": "UTC",
    "Etc/UTC": "UTC",
    "Etc/GMT": "UTC",
    "Z": "UTC",
}


def normalize_timezone_name(tz_str: Optional[str]) -> Optional[str]:
    """Normalize timezone string to canonical IANA timezone identifier.

    Windows names are mapped first, then legacy aliases; the result is
    validated against the zoneinfo database.

    Args:
        tz_str: Timezone string (Windows name, alias, or IANA identifier)

    Returns:
        Canonical IANA timezone identifier or None if it cannot be resolved

    Examples:
        >>> normalize_timezone_name("W. Europe Standard Time")
        'Europe/Berlin'
        >>> normalize_timezone_name("US/Pacific")
        'America/Los_Angeles'
        >>> normalize_timezone_name("Invalid/Timezone") is None
        True
    """
    if not tz_str:
        return None

    name = tz_str.strip()
    candidate = WINDOWS_TZ_MAP.get(name) or TZ_ALIAS_MAP.get(name, name)

    try:
        ZoneInfo(candidate)
    except (ZoneInfoNotFoundError, ValueError):
        logger.debug("Timezone %r is not in the zoneinfo database", tz_str)
        return None
    return candidate


@lru_cache(maxsize=64)
def get_zone(tzid: str) -> ZoneInfo:
    """Return the ZoneInfo for a timezone identifier.

    Raises:
        ICSTimezoneError: If the identifier cannot be resolved
    """
    iana_name = normalize_timezone_name(tzid)
    if iana_name is None:
        raise ICSTimezoneError(f"Unknown timezone: {tzid!r}")
    return ZoneInfo(iana_name)


def ensure_timezone_aware(dt: datetime) -> datetime:
    """Ensure datetime is timezone-aware (UTC if originally naive)."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt


def resolve_datetime(value: str, tzid: Optional[str] = None) -> datetime:
    """Resolve an iCalendar DATE or DATE-TIME literal to an aware datetime.

    Args:
        value: ``YYYYMMDD`` or ``YYYYMMDDTHHMMSS`` optionally suffixed with ``Z``
        tzid: Timezone in which to interpret the wall-clock time

    Returns:
        Timezone-aware datetime. ``Z``-suffixed values are always UTC;
        values without a timezone context are treated as UTC.

    Raises:
        ICSDateError: If the literal is malformed
        ICSTimezoneError: If ``tzid`` is not a known timezone
    """
    literal = value.strip() if value else ""
    if not literal:
        raise ICSDateError("Empty date value")

    try:
        if len(literal) == DATE_LITERAL_LENGTH:
            parsed = datetime.combine(vDate.from_ical(literal), datetime.min.time())
        else:
            parsed = vDatetime.from_ical(literal)
    except ValueError as e:
        raise ICSDateError(f"Invalid date value {literal!r}: {e}") from e

    if parsed.tzinfo is not None:
        return parsed.astimezone(UTC) if literal.endswith("Z") else parsed

    if tzid:
        return parsed.replace(tzinfo=get_zone(tzid))

    return ensure_timezone_aware(parsed)


def resolve_date(value: str, tzid: Optional[str] = None) -> datetime:
    """Resolve a DATE literal (``YYYYMMDD``) to local midnight.

    Raises:
        ICSDateError: If ``value`` is not an 8-digit date
    """
    literal = value.strip() if value else ""
    if len(literal) != DATE_LITERAL_LENGTH or not literal.isdigit():
        raise ICSDateError(f"Invalid date value {literal!r}: expected YYYYMMDD")
    return resolve_datetime(literal, tzid)
