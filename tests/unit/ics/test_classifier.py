"""Unit tests for content-line classification."""

import pytest

from calendarbot_ics.ics.classifier import ContentLine, PropertyKind, classify_line


@pytest.mark.unit
class TestClassifyLine:
    """Tests for classify_line."""

    @pytest.mark.parametrize(
        ("line", "kind", "remainder"),
        [
            ("BEGIN:VEVENT", PropertyKind.BEGIN_EVENT, ""),
            ("DTSTART:20221124T084500Z", PropertyKind.DTSTART, ":20221124T084500Z"),
            (
                "DTSTART;TZID=Europe/Berlin:20230126T110000",
                PropertyKind.DTSTART,
                ";TZID=Europe/Berlin:20230126T110000",
            ),
            ("DTEND:20221124T104500Z", PropertyKind.DTEND, ":20221124T104500Z"),
            ("DTSTAMP:20221124T104500Z", PropertyKind.DTSTAMP, ":20221124T104500Z"),
            ("SUMMARY:Film", PropertyKind.SUMMARY, "Film"),
            ("DESCRIPTION:Text", PropertyKind.DESCRIPTION, "Text"),
            ("UID:abc-123", PropertyKind.UID, "abc-123"),
            ("RRULE:FREQ=DAILY", PropertyKind.RRULE, "FREQ=DAILY"),
            ("RDATE:20230126", PropertyKind.RDATE, ":20230126"),
            ("TZID:Europe/Berlin", PropertyKind.TZID, "Europe/Berlin"),
            ("CATEGORIES:A,B", PropertyKind.CATEGORIES, "A,B"),
        ],
    )
    def test_classify_when_known_prefix_then_kind_and_remainder(
        self, line: str, kind: PropertyKind, remainder: str
    ) -> None:
        assert classify_line(line) == ContentLine(kind, remainder)

    @pytest.mark.parametrize(
        "line",
        [
            "X-CUSTOM:foo",
            "END:VEVENT",
            "BEGIN:VCALENDAR",
            "LOCATION:Room 1",
            "SUMMARY;LANGUAGE=en:Film",
            "EXDATE:20230126",
        ],
    )
    def test_classify_when_unknown_prefix_then_unrecognized(self, line: str) -> None:
        assert classify_line(line).kind is PropertyKind.UNRECOGNIZED

    def test_classify_when_surrounding_whitespace_then_trimmed(self) -> None:
        assert classify_line("  UID:abc  ") == ContentLine(PropertyKind.UID, "abc")

    def test_classify_when_begin_vevent_then_not_confused_with_other_begin(self) -> None:
        assert classify_line("BEGIN:VTODO").kind is PropertyKind.UNRECOGNIZED
        assert classify_line("BEGIN:VEVENT").kind is PropertyKind.BEGIN_EVENT
