"""TOML serialization for tsviz configuration."""

from __future__ import annotations

from tsviz.config.models import TsvizConfig


def generate_config_toml(config: TsvizConfig) -> str:
    """Generate TOML string from config for writing to file."""
    return f"""[events]
# milliseconds subtracted from each event's $ts
timezone_offset = {config.events.timezone_offset}

[availability]
roll_up_multiplier = {config.availability.roll_up_multiplier}
first_bucket_offset = {config.availability.first_bucket_offset}

[exporters.stdout]
indent = {config.stdout.indent}
sort_keys = {str(config.stdout.sort_keys).lower()}
"""
