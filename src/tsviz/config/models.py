"""Configuration dataclasses for tsviz."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_CONFIG_DIR = Path.home() / ".tsviz"
DEFAULT_CONFIG_PATH = DEFAULT_CONFIG_DIR / "config.toml"


@dataclass
class EventsConfig:
    """Event flattening configuration."""

    timezone_offset: int = 0  # milliseconds subtracted from $ts


@dataclass
class AvailabilityConfig:
    """Availability bucketing configuration."""

    roll_up_multiplier: int = 1
    first_bucket_offset: int = 0


@dataclass
class StdoutExporterConfig:
    """Stdout exporter configuration."""

    indent: int = 2
    sort_keys: bool = False


@dataclass
class TsvizConfig:
    """Main tsviz configuration."""

    events: EventsConfig = field(default_factory=EventsConfig)
    availability: AvailabilityConfig = field(default_factory=AvailabilityConfig)
    stdout: StdoutExporterConfig = field(default_factory=StdoutExporterConfig)
