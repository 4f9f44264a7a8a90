"""Configuration management for tsviz."""

from __future__ import annotations

from tsviz.config.loader import load_config
from tsviz.config.models import (
    AvailabilityConfig,
    EventsConfig,
    StdoutExporterConfig,
    TsvizConfig,
)
from tsviz.config.serializer import generate_config_toml

__all__ = [
    "TsvizConfig",
    "EventsConfig",
    "AvailabilityConfig",
    "StdoutExporterConfig",
    "load_config",
    "generate_config_toml",
]
