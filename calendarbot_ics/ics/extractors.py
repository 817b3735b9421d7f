"""Field extraction strategies for recognized iCalendar properties."""

import logging
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from ..timezone.service import resolve_datetime
from .exceptions import ICSParseError
from .models import RecurrenceRule
from .unfolder import ESCAPED_NEWLINE

logger = logging.getLogger(__name__)

RRULE_INTEGER_PARTS = ("interval", "count")


def split_parameters(remainder: str, property_name: str) -> Tuple[str, str]:
    """Split ``;params:value`` into the parameter string and the value.

    The split happens at the last ``:`` so parameter values may contain colons.

    Raises:
        ICSParseError: If the value separator is missing
    """
    params, separator, value = remainder[1:].rpartition(":")
    if not separator:
        raise ICSParseError(f"{property_name} parameters are missing the ':' value separator")
    return params, value


def parse_parameters(params: str) -> Dict[str, str]:
    """Parse a ``;``-delimited parameter list into an upper-cased key map.

    Segments without ``=`` are ignored.
    """
    parsed: Dict[str, str] = {}
    for param in params.split(";"):
        key, separator, value = param.partition("=")
        if separator:
            parsed[key.strip().upper()] = value
    return parsed


def extract_date(remainder: str, tzid: Optional[str], property_name: str = "DATE") -> datetime:
    """Extract a date-time from the text after a date property name.

    ``:value`` resolves against the ambient ``tzid``. ``;params:value`` uses the
    ``TZID`` parameter when present and no timezone otherwise.

    Raises:
        ICSParseError: If the remainder is structurally malformed
        ICSDateError: If the value cannot be resolved
    """
    if remainder.startswith(":"):
        return resolve_datetime(remainder[1:], tzid)

    if remainder.startswith(";"):
        params, value = split_parameters(remainder, property_name)
        return resolve_datetime(value, parse_parameters(params).get("TZID"))

    raise ICSParseError(f"{property_name} value must start with ':' or ';'")


def extract_string(value: str) -> str:
    """Unescape ``\\,`` and the escaped newline marker in a TEXT value."""
    return value.replace("\\,", ",").replace(ESCAPED_NEWLINE, "\n")


def extract_categories(value: str) -> List[str]:
    return value.split(",")


def extract_rrule(value: str, tzid: Optional[str]) -> RecurrenceRule:
    """Extract the recognized parts of an RRULE value.

    Args:
        value: Text after ``RRULE:``, e.g. ``FREQ=WEEKLY;COUNT=4``
        tzid: Ambient timezone used to resolve ``UNTIL``

    Returns:
        RecurrenceRule holding FREQ, INTERVAL, COUNT and UNTIL when present

    Raises:
        ICSParseError: If a rule part has no ``=`` or an integer part is invalid
    """
    parts: Dict[str, object] = {}
    for rule in value.split(";"):
        if not rule:
            continue

        key, separator, part_value = rule.partition("=")
        if not separator:
            raise ICSParseError(f"RRULE part {rule!r} is missing '='")

        key = key.lower()
        if key == "until":
            parts["until"] = resolve_datetime(part_value, tzid)
        elif key in RRULE_INTEGER_PARTS:
            try:
                parts[key] = int(part_value)
            except ValueError as e:
                raise ICSParseError(f"RRULE {key.upper()} must be an integer, got {part_value!r}") from e
        elif key == "freq":
            parts["freq"] = part_value
        else:
            logger.debug("Dropping unsupported RRULE part %s", key.upper())

    return RecurrenceRule(**parts)
