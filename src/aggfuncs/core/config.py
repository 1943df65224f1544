"""
Configuration schema and loading for aggfuncs.

Uses Pydantic for validation and Dynaconf for multi-source loading.
Settings are frozen (immutable) after construction.
"""

from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field


class ExecutionSettings(BaseModel):
    """Executor fan-out configuration."""

    model_config = {"frozen": True, "extra": "forbid"}

    max_workers: int = Field(
        default=1,
        gt=0,
        description="Worker threads for partial aggregation (1 runs inline)",
    )
    chunk_size: int = Field(
        default=2048,
        gt=0,
        description="Rows per partial aggregation slice",
    )


class LoggingSettings(BaseModel):
    """Structured logging configuration."""

    model_config = {"frozen": True, "extra": "forbid"}

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="INFO", description="Root log level")
    json_output: bool = Field(default=False, description="Emit JSON lines instead of console output")


class AggfuncsSettings(BaseModel):
    """Top-level settings."""

    model_config = {"frozen": True}

    execution: ExecutionSettings = Field(default_factory=ExecutionSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


def load_settings(config_path: Path) -> AggfuncsSettings:
    """Load settings from YAML file with environment variable overrides.

    Uses Dynaconf for multi-source loading with precedence:
    1. Environment variables (AGGFUNCS_*) - highest priority
    2. Config file
    3. Defaults from Pydantic schema - lowest priority

    Environment variable format: AGGFUNCS_EXECUTION__MAX_WORKERS for nested keys.

    Args:
        config_path: Path to YAML configuration file

    Returns:
        Validated AggfuncsSettings instance

    Raises:
        ValidationError: If configuration fails Pydantic validation
        FileNotFoundError: If config file doesn't exist
    """
    from dynaconf import Dynaconf

    # Dynaconf silently accepts missing files
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    dynaconf_settings = Dynaconf(
        envvar_prefix="AGGFUNCS",
        settings_files=[str(config_path)],
        environments=False,
        load_dotenv=False,
        merge_enabled=True,
    )

    # Dynaconf returns uppercase keys; Pydantic fields are lowercase
    internal_keys = {"LOAD_DOTENV", "ENVIRONMENTS", "SETTINGS_FILES"}
    raw_config = {k.lower(): _lower_keys(v) for k, v in dynaconf_settings.as_dict().items() if k not in internal_keys}

    return AggfuncsSettings(**raw_config)


def _lower_keys(value: Any) -> Any:
    if isinstance(value, dict):
        return {str(k).lower(): _lower_keys(v) for k, v in value.items()}
    return value


def resolve_config(settings: AggfuncsSettings) -> dict[str, Any]:
    """Convert validated settings to a plain dict."""
    return settings.model_dump(mode="json")


def dump_settings(settings: AggfuncsSettings) -> str:
    """Render resolved settings as YAML."""
    return yaml.safe_dump(resolve_config(settings), sort_keys=False)
