"""Logging configuration and setup utilities."""

import logging
import os
import sys
from pathlib import Path
from typing import Any, Optional, Union

# Custom log level between INFO(20) and DEBUG(10)
VERBOSE = 15
logging.addLevelName(VERBOSE, "VERBOSE")

LOGGER_NAME = "calendarbot_ics"

THIRD_PARTY_LOGGERS = ("httpx", "httpcore", "asyncio")


def verbose(self: logging.Logger, message: Any, *args: Any, **kwargs: Any) -> None:
    """Log at the VERBOSE level (more than INFO, less than DEBUG).

    Example:
        >>> logger = logging.getLogger(__name__)
        >>> logger.verbose("Parsed %d events", event_count)
    """
    if self.isEnabledFor(VERBOSE):
        self._log(VERBOSE, message, args, **kwargs)


# Add verbose method to all Logger instances
logging.Logger.verbose = verbose  # type: ignore[attr-defined]


def get_log_level(level_name: str) -> int:
    """Get numeric log level from string name, including custom VERBOSE level.

    Args:
        level_name: Log level name (DEBUG, VERBOSE, INFO, WARNING, ERROR, CRITICAL)

    Returns:
        Numeric log level value

    Raises:
        ValueError: If the level name is not recognized

    Example:
        >>> get_log_level("verbose")
        15
    """
    name = level_name.upper()
    if name == "VERBOSE":
        return VERBOSE
    level = logging.getLevelName(name)
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {level_name}")
    return level


class AutoColoredFormatter(logging.Formatter):
    """Formatter that auto-detects terminal color support."""

    COLORS = {
        "ERROR": "\033[31m",
        "INFO": "\033[34m",
        "VERBOSE": "\033[32m",
        "WARNING": "\033[33m",
        "DEBUG": "\033[35m",
        "CRITICAL": "\033[31m\033[1m",
    }
    RESET = "\033[0m"

    def __init__(self, *args: Any, enable_colors: bool = True, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.use_colors = enable_colors and self._detect_color_support()

    def _detect_color_support(self) -> bool:
        """Auto-detect terminal color capabilities."""
        if not hasattr(sys.stderr, "isatty") or not sys.stderr.isatty():
            return False

        if os.environ.get("NO_COLOR"):
            return False

        term = os.environ.get("TERM", "").lower()
        return bool(term) and term != "dumb"

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with colors if supported."""
        formatted = super().format(record)

        if not self.use_colors:
            return formatted

        level_name = record.levelname
        color = self.COLORS.get(level_name)
        if color:
            formatted = formatted.replace(level_name, f"{color}{level_name}{self.RESET}", 1)
        return formatted


def setup_logging(
    log_level: str = "INFO",
    log_file: Optional[Union[str, Path]] = None,
    enable_colors: bool = True,
) -> logging.Logger:
    """Set up package logging with console and optional file output.

    Args:
        log_level: Logging level (DEBUG, VERBOSE, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional log file path
        enable_colors: Allow colored console output when the terminal supports it

    Returns:
        Configured ``calendarbot_ics`` logger
    """
    numeric_level = get_log_level(log_level)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(numeric_level)
    logger.handlers.clear()
    logger.propagate = False

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(
        AutoColoredFormatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%H:%M:%S",
            enable_colors=enable_colors,
        )
    )
    logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        logger.addHandler(file_handler)

    third_party_level = max(numeric_level, logging.WARNING)
    for lib in THIRD_PARTY_LOGGERS:
        logging.getLogger(lib).setLevel(third_party_level)

    logger.debug("Logging initialized at %s", logging.getLevelName(numeric_level))
    return logger
