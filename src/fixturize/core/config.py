# src/fixturize/core/config.py
"""
Configuration schema and loading for fixturize.

Uses Pydantic for validation and Dynaconf for multi-source loading.
Settings are frozen (immutable) after construction.
"""

import os
import re
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator


class FingerprintSettings(BaseModel):
    """How table fingerprints are computed on checksum-capable engines."""

    model_config = {"frozen": True}

    extended_checksum: bool = Field(
        default=False,
        description="Use CHECKSUM TABLE ... EXTENDED (reads every row, slower but exact for all storage engines)",
    )


class LoggingSettings(BaseModel):
    """Logging configuration.

    fixturize never configures logging on import. When ``configure`` is true
    the pytest plugin calls configure_logging() at session start.
    """

    model_config = {"frozen": True}

    configure: bool = Field(default=False, description="Install the structlog handler at test-session start")
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="INFO", description="Root log level")
    json_output: bool = Field(default=False, description="Emit JSON lines instead of console output")

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v: Any) -> Any:
        """Accept lower-case level names from YAML or environment."""
        if isinstance(v, str):
            return v.upper()
        return v


class FixturizeSettings(BaseModel):
    """Top-level fixturize configuration.

    Example YAML:
        enabled: true
        fingerprint:
          extended_checksum: false
        logging:
          configure: true
          level: debug
    """

    model_config = {"frozen": True}

    enabled: bool = Field(
        default=True,
        description="Skip redundant fixture loads. When false every operation goes straight to the database.",
    )
    fingerprint: FingerprintSettings = Field(
        default_factory=FingerprintSettings,
        description="Table fingerprint options",
    )
    logging: LoggingSettings = Field(
        default_factory=LoggingSettings,
        description="Logging options",
    )


# Regex pattern for ${VAR} or ${VAR:-default} syntax
_ENV_VAR_PATTERN = re.compile(r"\$\{([A-Z_][A-Z0-9_]*)(?::-([^}]*))?\}")


def _expand_env_vars(config: dict[str, Any]) -> dict[str, Any]:
    """Recursively expand ${VAR} and ${VAR:-default} patterns in config values.

    Args:
        config: Configuration dict (may contain nested structures)

    Returns:
        New dict with environment variables expanded
    """

    def _expand_string(value: str) -> str:
        def replacer(match: re.Match[str]) -> str:
            var_name = match.group(1)
            default = match.group(2)  # None if no default specified
            env_value = os.environ.get(var_name)
            if env_value is not None:
                return env_value
            if default is not None:
                return default
            # No env var and no default - keep original so validation reports it
            return match.group(0)

        return _ENV_VAR_PATTERN.sub(replacer, value)

    def _expand_value(value: Any) -> Any:
        if isinstance(value, str):
            return _expand_string(value)
        elif isinstance(value, dict):
            return {k: _expand_value(v) for k, v in value.items()}
        elif isinstance(value, list):
            return [_expand_value(item) for item in value]
        else:
            return value

    return {k: _expand_value(v) for k, v in config.items()}


def _lowercase_keys(value: Any) -> Any:
    """Lower-case mapping keys at every level (Dynaconf upper-cases them)."""
    if isinstance(value, dict):
        return {str(k).lower(): _lowercase_keys(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_lowercase_keys(item) for item in value]
    return value


def load_settings(config_path: Path | None = None) -> FixturizeSettings:
    """Load settings from an optional YAML file with environment overrides.

    Uses Dynaconf for multi-source loading with precedence:
    1. Environment variables (FIXTURIZE_*) - highest priority
    2. Config file (YAML) - when given
    3. Defaults from Pydantic schema - lowest priority

    Environment variable format: FIXTURIZE_LOGGING__LEVEL for nested keys.

    Args:
        config_path: Path to YAML configuration file, or None for
            environment + defaults only

    Returns:
        Validated FixturizeSettings instance

    Raises:
        ValidationError: If configuration fails Pydantic validation
        FileNotFoundError: If config file doesn't exist
    """
    from dynaconf import Dynaconf

    # Dynaconf silently accepts missing files
    if config_path is not None and not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    dynaconf_settings = Dynaconf(
        envvar_prefix="FIXTURIZE",
        settings_files=[str(config_path)] if config_path is not None else [],
        environments=False,  # No [default]/[production] sections
        load_dotenv=False,  # Don't auto-load .env
        merge_enabled=True,  # Deep merge nested dicts
    )

    # Filter out internal Dynaconf settings
    internal_keys = {"LOAD_DOTENV", "ENVIRONMENTS", "SETTINGS_FILES"}
    raw_config = {k: v for k, v in dynaconf_settings.as_dict().items() if k not in internal_keys}
    raw_config = _lowercase_keys(raw_config)

    raw_config = _expand_env_vars(raw_config)

    return FixturizeSettings(**raw_config)
