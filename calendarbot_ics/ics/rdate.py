"""RDATE property decoding.

Handles the three RDATE encodings::

    RDATE:20230126,20230127
    RDATE;TZID=Europe/Berlin;VALUE=DATE-TIME:20230126T110000,20230126T150000
    RDATE;TZID=Europe/Berlin;VALUE=PERIOD:20230126T110000/20230126T130000

A PERIOD may also be written as start plus duration
(``20230126T110000/PT2H``).
"""

import logging
import re
from datetime import datetime
from typing import Iterable, List, Optional

from icalendar.prop import vDuration

from ..timezone.service import resolve_datetime
from .exceptions import ICSParseError
from .extractors import parse_parameters, split_parameters
from .models import RDateEntry
from .unfolder import ESCAPED_NEWLINE

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")

SINGLE_VALUE_TYPES = ("DATE-TIME", "DATE")
PERIOD_VALUE_TYPE = "PERIOD"


def sanitize_rdate(remainder: str) -> str:
    """Remove whitespace and leftover escaped newline markers."""
    return _WHITESPACE.sub("", remainder).replace(ESCAPED_NEWLINE, "")


def _split_values(values: str) -> List[str]:
    return [value for value in values.split(",") if value]


def _is_duration(value: str) -> bool:
    return value.lstrip("+-").startswith("P")


def decode_dates(values: Iterable[str], tzid: Optional[str]) -> List[RDateEntry]:
    """Decode DATE / DATE-TIME values into entries without an end."""
    return [RDateEntry(start=resolve_datetime(value, tzid)) for value in values]


def decode_period(period: str, tzid: Optional[str]) -> RDateEntry:
    """Decode one ``start/end`` or ``start/duration`` PERIOD value.

    Raises:
        ICSParseError: If the period does not have exactly two parts or its
            duration is invalid or runs past the supported date range
    """
    parts = period.split("/")
    if len(parts) != 2:
        raise ICSParseError(f"RDATE period {period!r} must have the form start/end")

    start_value, end_value = parts
    start = resolve_datetime(start_value, tzid)

    end: datetime
    if _is_duration(end_value):
        try:
            end = start + vDuration.from_ical(end_value)
        except (ValueError, OverflowError) as e:
            raise ICSParseError(f"RDATE period {period!r} has an invalid duration") from e
    else:
        end = resolve_datetime(end_value, tzid)

    return RDateEntry(start=start, end=end)


def decode_rdate(remainder: str, tzid: Optional[str]) -> List[RDateEntry]:
    """Decode the text following ``RDATE`` into recurrence-date entries.

    Args:
        remainder: Everything after the ``RDATE`` token, including the leading
            ``:`` or ``;params:``
        tzid: Ambient timezone, used only by the bare ``:`` form; the
            parameterized form uses its own ``TZID`` parameter or none

    Returns:
        Entries in source order. An unknown or missing ``VALUE`` type in the
        parameterized form yields an empty list.

    Raises:
        ICSParseError: If the property is structurally malformed
        ICSDateError: If a date value cannot be resolved
    """
    rdate = sanitize_rdate(remainder)

    if rdate.startswith(":"):
        return decode_dates(_split_values(rdate[1:]), tzid)

    if not rdate.startswith(";"):
        raise ICSParseError("RDATE value must start with ':' or ';'")

    params, values = split_parameters(rdate, "RDATE")
    parameters = parse_parameters(params)
    effective_tzid = parameters.get("TZID")
    value_type = parameters.get("VALUE")

    if value_type == PERIOD_VALUE_TYPE:
        return [decode_period(period, effective_tzid) for period in _split_values(values)]

    if value_type in SINGLE_VALUE_TYPES:
        return decode_dates(_split_values(values), effective_tzid)

    logger.debug("Ignoring RDATE with unsupported value type %r", value_type)
    return []
