"""Shared test configuration and fixtures."""

import logging
from types import SimpleNamespace
from typing import Any, Iterator

import pytest

from calendarbot_ics.ics.parser import ICSParser
from calendarbot_ics.utils.logging import LOGGER_NAME


@pytest.fixture
def test_settings() -> Any:
    """Create lightweight test settings without file or environment I/O."""
    return SimpleNamespace(
        default_timezone=None,
        max_content_bytes=1024 * 1024,
        warn_content_bytes=512 * 1024,
        request_timeout=5.0,
        max_retries=2,
        retry_backoff_factor=1.5,
        user_agent="calendarbot-ics-tests",
        log_level="ERROR",
        log_file=None,
    )


@pytest.fixture
def ics_parser(test_settings: Any) -> ICSParser:
    """Create an ICS parser for testing."""
    return ICSParser(test_settings)


@pytest.fixture
def reset_package_logger() -> Iterator[logging.Logger]:
    """Restore the package logger after tests that configure logging."""
    logger = logging.getLogger(LOGGER_NAME)
    original_level = logger.level
    original_propagate = logger.propagate
    yield logger
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
    logger.setLevel(original_level)
    logger.propagate = original_propagate


def pytest_configure(config: Any) -> None:
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Fast unit tests")
    config.addinivalue_line("markers", "critical_path: Core functionality tests")
    config.addinivalue_line("markers", "integration: Tests spanning several components")
