"""Line unfolding for raw iCalendar text.

Turns raw calendar text into logical content lines: folding whitespace is
rewritten to the escaped newline marker, quotes are stripped, blank lines are
dropped and stray physical lines are merged into the line before them.
"""

import logging
import re
from typing import List

logger = logging.getLogger(__name__)

# Two-character escape used inside TEXT values for a line break
ESCAPED_NEWLINE = "\\n"

FOLD_SEQUENCES = ("\n\t", "\n ")

# A physical line starting with an iCalendar name token opens a new logical line
CONTENT_LINE_START = re.compile(r"^[A-Z][A-Z0-9-]*[:;]")


def normalize_line_endings(text: str) -> str:
    """Convert CRLF and lone CR line endings to LF."""
    return text.replace("\r\n", "\n").replace("\r", "\n")


def starts_content_line(line: str) -> bool:
    """Check whether a physical line begins a new property."""
    return CONTENT_LINE_START.match(line) is not None


def unfold_lines(text: str) -> List[str]:
    """Split raw iCalendar text into unfolded logical lines.

    Args:
        text: Raw calendar text

    Returns:
        Logical content lines in source order
    """
    normalized = normalize_line_endings(text)
    for sequence in FOLD_SEQUENCES:
        normalized = normalized.replace(sequence, ESCAPED_NEWLINE)
    normalized = normalized.replace('"', "")

    logical_lines: List[str] = []
    merged = 0
    for line in normalized.split("\n"):
        if not line.strip():
            continue

        if logical_lines and not starts_content_line(line):
            logical_lines[-1] += line
            merged += 1
        else:
            logical_lines.append(line)

    if merged:
        logger.debug("Merged %d continuation lines into %d logical lines", merged, len(logical_lines))
    return logical_lines
