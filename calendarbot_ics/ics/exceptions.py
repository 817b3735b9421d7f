"""ICS-specific exceptions for error handling."""

from typing import Optional


class ICSError(Exception):
    """Base exception for ICS-related errors."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ICSParseError(ICSError):
    """Exception raised when ICS content cannot be parsed.

    Carries the 1-based logical line number and the offending line when the
    failure can be attributed to a single content line.
    """

    def __init__(
        self,
        message: str,
        line_number: Optional[int] = None,
        line: Optional[str] = None,
    ):
        super().__init__(message)
        self.line_number = line_number
        self.line = line


class ICSDateError(ICSParseError):
    """Exception raised when a date or date-time literal cannot be resolved."""


class ICSTimezoneError(ICSDateError):
    """Exception raised when a timezone identifier cannot be resolved."""


class ICSContentTooLargeError(ICSParseError):
    """Raised when ICS content exceeds size limits."""


class ICSFetchError(ICSError):
    """Exception raised when ICS file cannot be fetched."""


class ICSAuthError(ICSFetchError):
    """Exception raised when ICS authentication fails."""


class ICSNetworkError(ICSFetchError):
    """Exception raised for network-related ICS errors."""


class ICSTimeoutError(ICSFetchError):
    """Exception raised when ICS request times out."""
