"""Content-line classification by property prefix."""

from enum import Enum
from typing import NamedTuple, Tuple


class PropertyKind(str, Enum):
    """Recognized content-line kinds."""

    BEGIN_EVENT = "BEGIN:VEVENT"
    DTSTART = "DTSTART"
    DTEND = "DTEND"
    DTSTAMP = "DTSTAMP"
    SUMMARY = "SUMMARY:"
    DESCRIPTION = "DESCRIPTION:"
    UID = "UID:"
    RRULE = "RRULE:"
    RDATE = "RDATE"
    TZID = "TZID:"
    CATEGORIES = "CATEGORIES:"
    UNRECOGNIZED = ""

    @property
    def prefix(self) -> str:
        return self.value


class ContentLine(NamedTuple):
    """A classified logical line and the text following its prefix."""

    kind: PropertyKind
    remainder: str


# Longest prefix first so the most specific token wins
_PREFIX_TABLE: Tuple[PropertyKind, ...] = tuple(
    sorted(
        (kind for kind in PropertyKind if kind is not PropertyKind.UNRECOGNIZED),
        key=lambda kind: len(kind.prefix),
        reverse=True,
    )
)


def classify_line(line: str) -> ContentLine:
    """Classify a logical line by its leading property token.

    Args:
        line: Logical content line (surrounding whitespace is ignored)

    Returns:
        ContentLine with the matched kind and the remainder after the prefix;
        ``PropertyKind.UNRECOGNIZED`` with the full line when nothing matches
    """
    stripped = line.strip()
    for kind in _PREFIX_TABLE:
        if stripped.startswith(kind.prefix):
            return ContentLine(kind, stripped[len(kind.prefix) :])
    return ContentLine(PropertyKind.UNRECOGNIZED, stripped)
