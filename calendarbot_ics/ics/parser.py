"""iCalendar parser producing flat, ordered VEVENT records.

The pipeline is: raw text -> unfolded logical lines -> a left-to-right fold
that threads the events assembled so far and the ambient ``ParseContext``.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional, Tuple

from ..config.settings import MAX_ICS_SIZE_BYTES, MAX_ICS_SIZE_WARNING
from ..utils.logging import VERBOSE
from .classifier import ContentLine, PropertyKind, classify_line
from .exceptions import ICSContentTooLargeError, ICSParseError
from .extractors import extract_categories, extract_date, extract_rrule, extract_string
from .models import Event, ICSParseResult, ParseContext
from .rdate import decode_rdate
from .unfolder import unfold_lines

logger = logging.getLogger(__name__)

DATE_FIELDS = {
    PropertyKind.DTSTART: "start",
    PropertyKind.DTEND: "end",
    PropertyKind.DTSTAMP: "stamp",
}

STRING_FIELDS = {
    PropertyKind.SUMMARY: "summary",
    PropertyKind.DESCRIPTION: "description",
}


@dataclass
class AssemblyState:
    """Accumulator threaded through the line fold.

    ``events`` only grows by append; updates replace the last item in place.
    ``context`` is immutable and swapped wholesale on ``TZID:`` lines.
    """

    events: List[Event] = field(default_factory=list)
    context: ParseContext = ParseContext()

    def begin_event(self) -> "AssemblyState":
        self.events.append(Event())
        return self

    def update_current(self, **fields: Any) -> "AssemblyState":
        """Apply ``fields`` to the most recent event."""
        self.events[-1] = self.events[-1].model_copy(update=fields)
        return self


def _extract_value(content: ContentLine, context: ParseContext) -> Tuple[str, Any]:
    """Decode a recognized event property into ``(field name, value)``."""
    kind = content.kind
    remainder = content.remainder

    if kind in DATE_FIELDS:
        return DATE_FIELDS[kind], extract_date(remainder, context.tzid, kind.value)
    if kind in STRING_FIELDS:
        return STRING_FIELDS[kind], extract_string(remainder)
    if kind is PropertyKind.UID:
        return "uid", remainder
    if kind is PropertyKind.RRULE:
        return "rrule", extract_rrule(remainder, context.tzid)
    if kind is PropertyKind.RDATE:
        return "rdate", decode_rdate(remainder, context.tzid)
    if kind is PropertyKind.CATEGORIES:
        return "categories", extract_categories(remainder)

    raise ICSParseError(f"No extractor for property kind {kind.name}")


def apply_line(state: AssemblyState, line: str) -> AssemblyState:
    """Apply one logical line to the assembly state in place and return it.

    Raises:
        ICSParseError: If a recognized property is malformed
    """
    content = classify_line(line)
    kind = content.kind

    if kind is PropertyKind.UNRECOGNIZED:
        return state

    if kind is PropertyKind.BEGIN_EVENT:
        return state.begin_event()

    if kind is PropertyKind.TZID:
        state.context = state.context.with_timezone(content.remainder)
        return state

    if not state.events:
        logger.debug("Ignoring %s outside VEVENT", kind.name)
        return state

    name, value = _extract_value(content, state.context)
    return state.update_current(**{name: value})


def assemble_events(
    lines: Iterable[str], context: Optional[ParseContext] = None
) -> List[Event]:
    """Fold logical lines into events in declaration order.

    Args:
        lines: Unfolded logical lines
        context: Initial parse context (ambient timezone)

    Raises:
        ICSParseError: With the 1-based line number and offending line
    """
    state = AssemblyState(context=context or ParseContext())

    for line_number, line in enumerate(lines, start=1):
        try:
            state = apply_line(state, line)
        except ICSParseError as e:
            raise type(e)(
                f"Line {line_number}: {e.message}", line_number=line_number, line=line
            ) from e

    return list(state.events)


def parse(ics_content: str, default_timezone: Optional[str] = None) -> List[Event]:
    """Parse iCalendar text into a list of events.

    Args:
        ics_content: Raw iCalendar text
        default_timezone: Ambient timezone in effect before the first ``TZID:`` line

    Returns:
        Events in the order their ``BEGIN:VEVENT`` markers appear

    Raises:
        ICSParseError: If any recognized property is malformed or a date
            cannot be resolved; no partial result is returned

    Example:
        >>> events = parse(ics_text)
        >>> [event.summary for event in events]
        ['Film with Amy and Adam']
    """
    lines = unfold_lines(ics_content)
    events = assemble_events(lines, ParseContext(tzid=default_timezone))
    logger.debug("Parsed %d events from %d logical lines", len(events), len(lines))
    return events


class ICSParser:
    """iCalendar parser service returning structured parse results."""

    def __init__(self, settings: Any = None) -> None:
        """Initialize ICS parser.

        Args:
            settings: Application settings (``ICSParserSettings`` or compatible);
                None uses built-in defaults
        """
        self.settings = settings
        self.default_timezone: Optional[str] = getattr(settings, "default_timezone", None)
        self.max_content_bytes: int = getattr(settings, "max_content_bytes", MAX_ICS_SIZE_BYTES)
        self.warn_content_bytes: int = getattr(
            settings, "warn_content_bytes", MAX_ICS_SIZE_WARNING
        )
        logger.debug("ICS parser initialized (default timezone: %s)", self.default_timezone)

    def _validate_ics_size(self, ics_content: str) -> None:
        """Validate ICS content size before processing.

        Raises:
            ICSContentTooLargeError: If content exceeds maximum size limit
        """
        size_bytes = len(ics_content.encode("utf-8"))

        if size_bytes > self.max_content_bytes:
            raise ICSContentTooLargeError(
                f"ICS content too large: {size_bytes} bytes exceeds {self.max_content_bytes} limit",
            )

        if size_bytes > self.warn_content_bytes:
            logger.warning(
                "Large ICS content detected: %d bytes (threshold: %d)",
                size_bytes,
                self.warn_content_bytes,
            )

    def parse_events(self, ics_content: str) -> List[Event]:
        """Parse ICS content into events, raising on failure.

        Raises:
            ICSContentTooLargeError: If content exceeds the configured size limit
            ICSParseError: If the content is malformed
        """
        self._validate_ics_size(ics_content)
        return parse(ics_content, self.default_timezone)

    def parse_ics_content(
        self,
        ics_content: str,
        source_url: Optional[str] = None,
    ) -> ICSParseResult:
        """Parse ICS content into a structured result.

        Errors never propagate: a failed parse is reported through
        ``success=False`` and ``error_message``.

        Args:
            ics_content: Raw ICS file content
            source_url: Optional source URL recorded on the result

        Returns:
            Parse result with events and statistics
        """
        if not ics_content or not ics_content.strip():
            logger.warning("Empty ICS content provided")
            return ICSParseResult(
                success=False,
                error_message="Empty ICS content",
                source_url=source_url,
            )

        try:
            self._validate_ics_size(ics_content)
            lines = unfold_lines(ics_content)
            events = assemble_events(lines, ParseContext(tzid=self.default_timezone))
        except ICSParseError as e:
            logger.error("Failed to parse ICS content from %s: %s", source_url or "<string>", e)
            return ICSParseResult(
                success=False,
                error_message=str(e),
                source_url=source_url,
            )

        warnings = []
        if not events:
            warning = "No VEVENT components found in ICS content"
            warnings.append(warning)
            logger.warning(warning)

        recurring_event_count = sum(1 for event in events if event.is_recurring)
        logger.log(
            VERBOSE,
            "Parsed %d events (%d recurring) from %d logical lines",
            len(events),
            recurring_event_count,
            len(lines),
        )

        return ICSParseResult(
            success=True,
            events=events,
            line_count=len(lines),
            event_count=len(events),
            recurring_event_count=recurring_event_count,
            warnings=warnings,
            source_url=source_url,
        )
