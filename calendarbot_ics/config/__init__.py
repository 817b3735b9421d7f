"""Configuration for calendarbot_ics."""

from .settings import MAX_ICS_SIZE_BYTES, MAX_ICS_SIZE_WARNING, ICSParserSettings, load_settings

__all__ = [
    "ICSParserSettings",
    "MAX_ICS_SIZE_BYTES",
    "MAX_ICS_SIZE_WARNING",
    "load_settings",
]
