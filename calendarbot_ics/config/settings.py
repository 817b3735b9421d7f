"""Settings management using Pydantic for type validation and configuration."""

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

# Size validation limits
MAX_ICS_SIZE_BYTES = 50 * 1024 * 1024  # 50MB limit
MAX_ICS_SIZE_WARNING = 10 * 1024 * 1024  # 10MB warning threshold

DEFAULT_CONFIG_FILE = Path.home() / ".config" / "calendarbot-ics" / "config.yaml"


class ICSParserSettings(BaseSettings):
    """Parser, fetcher and logging settings with environment variable support."""

    # Parsing
    default_timezone: Optional[str] = Field(
        default=None,
        description="Ambient timezone applied before the first TZID line",
    )
    max_content_bytes: int = Field(
        default=MAX_ICS_SIZE_BYTES, description="Reject ICS content larger than this"
    )
    warn_content_bytes: int = Field(
        default=MAX_ICS_SIZE_WARNING, description="Log a warning above this content size"
    )

    # Network and Retry Settings
    request_timeout: float = Field(default=30.0, description="HTTP request timeout in seconds")
    max_retries: int = Field(default=3, description="Maximum retry attempts")
    retry_backoff_factor: float = Field(default=1.5, description="Exponential backoff factor")
    user_agent: str = Field(default="calendarbot-ics/1.0", description="HTTP User-Agent header")

    # Logging
    log_level: str = Field(
        default="WARNING",
        description="Log level: DEBUG, VERBOSE, INFO, WARNING, ERROR, CRITICAL",
    )
    log_file: Optional[str] = Field(default=None, description="Optional log file path")

    model_config = SettingsConfigDict(
        env_prefix="CALENDARBOT_ICS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )


def _read_yaml_config(config_file: Path) -> Dict[str, Any]:
    """Read the YAML configuration file, flattening the ``parser``/``fetch``/``logging`` sections."""
    with open(config_file, "r", encoding="utf-8") as f:
        config_data = yaml.safe_load(f) or {}

    if not isinstance(config_data, dict):
        raise ValueError(f"Configuration file {config_file} must contain a mapping")

    values: Dict[str, Any] = {}
    for section in ("parser", "fetch", "logging"):
        section_data = config_data.pop(section, None) or {}
        if not isinstance(section_data, dict):
            raise ValueError(f"Section '{section}' in {config_file} must be a mapping")
        if section == "logging":
            section_data = {
                ("log_level" if key == "level" else "log_file" if key == "file" else key): value
                for key, value in section_data.items()
            }
        values.update(section_data)

    values.update(config_data)
    return values


def load_settings(
    config_file: Optional[Union[str, Path]] = None, **overrides: Any
) -> ICSParserSettings:
    """Load settings from YAML (if present), environment and explicit overrides.

    Precedence, highest first: ``overrides``, environment variables, the
    YAML file, field defaults.

    Args:
        config_file: YAML file path; defaults to ``~/.config/calendarbot-ics/config.yaml``
        **overrides: Field values that win over every other source

    Raises:
        FileNotFoundError: If an explicitly given config file does not exist
    """
    path = Path(config_file) if config_file else DEFAULT_CONFIG_FILE
    if config_file and not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    yaml_values: Dict[str, Any] = {}
    if path.exists():
        yaml_values = _read_yaml_config(path)
        logger.debug("Loaded configuration from %s", path)

    env_settings = ICSParserSettings()
    explicit_env = {
        name: getattr(env_settings, name)
        for name in env_settings.model_fields_set
    }

    return ICSParserSettings(**{**yaml_values, **explicit_env, **overrides})
