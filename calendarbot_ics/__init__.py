"""calendarbot_ics - iCalendar VEVENT parsing for CalendarBot.

Parses raw ``.ics`` text into ordered event records with timing, text,
category and recurrence (RRULE/RDATE) information.

Example:
    >>> from calendarbot_ics import parse
    >>> events = parse(open("calendar.ics", encoding="utf-8").read())
"""

__version__ = "1.0.0"
__author__ = "CalendarBot Team"
__email__ = "support@calendarbot.local"
__description__ = "iCalendar VEVENT parser with RRULE and RDATE support"

from .ics import (
    Event,
    ICSError,
    ICSFetcher,
    ICSParseError,
    ICSParser,
    ICSParseResult,
    ICSSource,
    RDateEntry,
    RecurrenceRule,
    parse,
)

__all__ = [
    "Event",
    "ICSError",
    "ICSFetcher",
    "ICSParseError",
    "ICSParseResult",
    "ICSParser",
    "ICSSource",
    "RDateEntry",
    "RecurrenceRule",
    "__author__",
    "__description__",
    "__email__",
    "__version__",
    "parse",
]
