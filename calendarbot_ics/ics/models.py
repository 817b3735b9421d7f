"""Data models for ICS calendar processing."""

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer


class RecurrenceRule(BaseModel):
    """Recognized parts of an RRULE property.

    Only ``FREQ``, ``INTERVAL``, ``COUNT`` and ``UNTIL`` are kept; any other
    rule part is dropped during extraction.
    """

    freq: Optional[str] = Field(default=None, description="Raw FREQ value")
    interval: Optional[int] = Field(default=None, description="INTERVAL rule part")
    count: Optional[int] = Field(default=None, description="COUNT rule part")
    until: Optional[datetime] = Field(default=None, description="UNTIL rule part")

    model_config = ConfigDict(frozen=True)

    @field_serializer("until", when_used="unless-none")
    def serialize_until(self, dt: datetime) -> str:
        """Serialize UNTIL to ISO format."""
        return dt.isoformat()


class RDateEntry(BaseModel):
    """One explicit recurrence date; ``end`` is only set for PERIOD values."""

    start: datetime
    end: Optional[datetime] = None

    model_config = ConfigDict(frozen=True)

    @field_serializer("start", "end", when_used="unless-none")
    def serialize_datetime(self, dt: datetime) -> str:
        """Serialize datetime fields to ISO format."""
        return dt.isoformat()


class Event(BaseModel):
    """Calendar event assembled from one VEVENT block."""

    # Time information
    start: Optional[datetime] = Field(default=None, description="DTSTART")
    end: Optional[datetime] = Field(default=None, description="DTEND")
    stamp: Optional[datetime] = Field(default=None, description="DTSTAMP")

    # Text properties
    summary: Optional[str] = Field(default=None, description="Event summary/title")
    description: Optional[str] = Field(default=None, description="Event description")
    uid: Optional[str] = Field(default=None, description="Event UID")

    # Recurrence
    rrule: Optional[RecurrenceRule] = Field(default=None, description="Recurrence rule")
    rdate: List[RDateEntry] = Field(default_factory=list, description="Explicit recurrence dates")

    categories: List[str] = Field(default_factory=list, description="Event categories")

    model_config = ConfigDict(frozen=True)

    @property
    def is_recurring(self) -> bool:
        """Check if the event carries an RRULE or explicit RDATE entries."""
        return self.rrule is not None or bool(self.rdate)

    @field_serializer("start", "end", "stamp", when_used="unless-none")
    def serialize_datetime(self, dt: datetime) -> str:
        """Serialize datetime fields to ISO format."""
        return dt.isoformat()


@dataclass(frozen=True)
class ParseContext:
    """Ambient state threaded through the line fold.

    ``tzid`` is the timezone set by the most recent standalone ``TZID:`` line
    (or the caller's default) and applies to every later date-bearing
    property that does not name its own timezone.
    """

    tzid: Optional[str] = None

    def with_timezone(self, tzid: Optional[str]) -> "ParseContext":
        return replace(self, tzid=tzid)


class ICSParseResult(BaseModel):
    """Result of ICS parsing operation."""

    success: bool
    events: List[Event] = Field(default_factory=list, description="Parsed calendar events")

    # Parse statistics
    line_count: int = 0
    event_count: int = 0
    recurring_event_count: int = 0

    # Error information
    error_message: Optional[str] = None
    warnings: List[str] = Field(default_factory=list)

    # Parsing metadata
    parse_time: datetime = Field(default_factory=datetime.now)
    source_url: Optional[str] = None


class AuthType(str, Enum):
    """Supported authentication types for ICS sources."""

    NONE = "none"
    BASIC = "basic"
    BEARER = "bearer"


class ICSAuth(BaseModel):
    """Authentication configuration for ICS sources."""

    type: AuthType = AuthType.NONE
    username: Optional[str] = None
    password: Optional[str] = None
    bearer_token: Optional[str] = None

    def get_headers(self) -> Dict[str, str]:
        """Get HTTP headers for authentication."""
        headers = {}

        if self.type == AuthType.BASIC and self.username and self.password:
            import base64

            credentials = f"{self.username}:{self.password}"
            encoded = base64.b64encode(credentials.encode()).decode()
            headers["Authorization"] = f"Basic {encoded}"

        elif self.type == AuthType.BEARER and self.bearer_token:
            headers["Authorization"] = f"Bearer {self.bearer_token}"

        return headers


class ICSSource(BaseModel):
    """Configuration for an ICS calendar source."""

    name: str = Field(default="calendar", description="Human-readable name for this source")
    url: str = Field(..., description="ICS calendar URL")
    auth: ICSAuth = Field(default_factory=ICSAuth, description="Authentication configuration")

    timeout: Optional[float] = Field(
        default=None, description="HTTP timeout in seconds (defaults to settings)"
    )
    custom_headers: Dict[str, str] = Field(default_factory=dict, description="Custom HTTP headers")
    validate_ssl: bool = Field(default=True, description="Validate SSL certificates")

    model_config = ConfigDict(use_enum_values=True)


class ICSResponse(BaseModel):
    """Response from ICS fetch operation."""

    success: bool
    content: Optional[str] = None
    status_code: Optional[int] = None
    headers: Dict[str, str] = Field(default_factory=dict)
    error_message: Optional[str] = None
    fetch_time: datetime = Field(default_factory=datetime.now)

    @property
    def content_length(self) -> Optional[int]:
        """Get content length if available."""
        if self.content:
            return len(self.content.encode("utf-8"))
        return None
