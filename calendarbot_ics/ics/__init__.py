"""ICS calendar downloading and parsing module."""

from .exceptions import (
    ICSAuthError,
    ICSContentTooLargeError,
    ICSDateError,
    ICSError,
    ICSFetchError,
    ICSNetworkError,
    ICSParseError,
    ICSTimeoutError,
    ICSTimezoneError,
)
from .models import (
    AuthType,
    Event,
    ICSAuth,
    ICSParseResult,
    ICSResponse,
    ICSSource,
    ParseContext,
    RDateEntry,
    RecurrenceRule,
)
from .parser import ICSParser, parse
from .fetcher import ICSFetcher

__all__ = [
    "AuthType",
    "Event",
    "ICSAuth",
    "ICSAuthError",
    "ICSContentTooLargeError",
    "ICSDateError",
    "ICSError",
    "ICSFetchError",
    "ICSFetcher",
    "ICSNetworkError",
    "ICSParseError",
    "ICSParseResult",
    "ICSParser",
    "ICSResponse",
    "ICSSource",
    "ICSTimeoutError",
    "ICSTimezoneError",
    "ParseContext",
    "RDateEntry",
    "RecurrenceRule",
    "parse",
]
