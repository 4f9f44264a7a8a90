"""Load and validate tsviz configuration from TOML files."""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any

from tsviz.config.models import (
    DEFAULT_CONFIG_PATH,
    AvailabilityConfig,
    EventsConfig,
    StdoutExporterConfig,
    TsvizConfig,
)
from tsviz.config.validation import ConfigValidator


def load_config(path: Path = DEFAULT_CONFIG_PATH) -> TsvizConfig:
    """Load config from TOML file, validate, and return."""
    if not path.exists():
        msg = f"Config not found at {path}. Run 'tsviz init' to create one."
        raise FileNotFoundError(msg)

    with open(path, "rb") as f:
        data = tomllib.load(f)

    config = _from_dict(data)

    validator = ConfigValidator()
    errors = validator.validate(config)
    if errors:
        error_msgs = "\n".join(f"  {e.path}: {e.message}" for e in errors)
        msg = f"Config validation failed:\n{error_msgs}"
        raise ValueError(msg)

    return config


def _from_dict(data: dict[str, Any]) -> TsvizConfig:
    """Convert TOML dict to TsvizConfig dataclass."""
    events_data = data.get("events", {})
    availability_data = data.get("availability", {})
    stdout_data = data.get("exporters", {}).get("stdout", {})

    return TsvizConfig(
        events=EventsConfig(
            timezone_offset=events_data.get("timezone_offset", 0),
        ),
        availability=AvailabilityConfig(
            roll_up_multiplier=availability_data.get("roll_up_multiplier", 1),
            first_bucket_offset=availability_data.get("first_bucket_offset", 0),
        ),
        stdout=StdoutExporterConfig(
            indent=stdout_data.get("indent", 2),
            sort_keys=stdout_data.get("sort_keys", False),
        ),
    )
