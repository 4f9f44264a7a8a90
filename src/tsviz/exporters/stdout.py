"""Terminal/stdout exporter — print transformed payloads as JSON."""

from __future__ import annotations

import json
from typing import Any

import click

from tsviz.config import TsvizConfig
from tsviz.exporters.base import Exporter
from tsviz.models import FlatRow


class StdoutExporter(Exporter):
    def export(self, payload: Any, config: TsvizConfig) -> None:
        click.echo(
            json.dumps(
                payload,
                indent=config.stdout.indent or None,
                sort_keys=config.stdout.sort_keys,
                default=_encode,
            )
        )


def _encode(value: Any) -> Any:
    """JSON fallback for pipeline models."""
    if isinstance(value, FlatRow):
        return value.to_dict()
    msg = f"Object of type {type(value).__name__} is not JSON serializable"
    raise TypeError(msg)
