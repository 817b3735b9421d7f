"""Command-line entry for calendarbot_ics.

Parses an iCalendar file, stdin or URL and prints the events as JSON.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from .config.settings import ICSParserSettings, load_settings
from .ics.exceptions import ICSError
from .ics.fetcher import ICSFetcher
from .ics.models import Event, ICSSource
from .ics.parser import ICSParser
from .utils.logging import setup_logging

logger = logging.getLogger(__name__)


def _create_parser() -> argparse.ArgumentParser:
    """Create argument parser for the calendarbot_ics CLI."""
    parser = argparse.ArgumentParser(
        prog="calendarbot-ics",
        description="Parse iCalendar VEVENT data into JSON",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  calendarbot-ics calendar.ics                      # Parse a local file
  cat calendar.ics | calendarbot-ics -              # Parse stdin
  calendarbot-ics https://example.com/cal.ics       # Fetch and parse a URL
  calendarbot-ics calendar.ics --timezone Europe/Berlin --pretty
        """,
    )

    parser.add_argument(
        "source",
        nargs="?",
        default="-",
        help="ICS file path, '-' for stdin, or an http(s) URL (default: stdin)",
    )
    parser.add_argument(
        "--timezone",
        metavar="TZID",
        help="Ambient timezone used before the first TZID line",
    )
    parser.add_argument(
        "--config",
        metavar="PATH",
        help="YAML configuration file",
    )
    parser.add_argument(
        "--log-level",
        metavar="LEVEL",
        help="Log level: DEBUG, VERBOSE, INFO, WARNING, ERROR, CRITICAL",
    )
    parser.add_argument(
        "--pretty",
        action="store_true",
        help="Indent the JSON output",
    )

    return parser


def _is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def _read_source(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


async def _load_events(source: str, settings: ICSParserSettings) -> List[Event]:
    """Read or fetch the source and parse it, raising on any failure."""
    parser = ICSParser(settings)

    if _is_url(source):
        async with ICSFetcher(settings) as fetcher:
            response = await fetcher.fetch_ics(ICSSource(url=source))
        if not response.success or response.content is None:
            raise ICSError(response.error_message or f"Failed to fetch {source}")
        return parser.parse_events(response.content)

    return parser.parse_events(_read_source(source))


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the calendarbot_ics CLI.

    Returns:
        Process exit code (0 on success, 1 on failure)
    """
    args = _create_parser().parse_args(argv)

    overrides = {}
    if args.timezone:
        overrides["default_timezone"] = args.timezone
    if args.log_level:
        overrides["log_level"] = args.log_level

    try:
        settings = load_settings(args.config, **overrides)
        setup_logging(settings.log_level, settings.log_file)
    except (OSError, ValueError) as e:
        print(f"Error: invalid configuration: {e}", file=sys.stderr)
        return 1

    try:
        events = asyncio.run(_load_events(args.source, settings))
    except (ICSError, OSError) as e:
        logger.debug("Failed to load events from %s", args.source, exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    payload = [event.model_dump(mode="json") for event in events]
    print(json.dumps(payload, indent=2 if args.pretty else None, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
