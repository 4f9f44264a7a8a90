"""Tests for stdout exporter — verify JSON output formatting."""

import json

from tsviz.config import TsvizConfig
from tsviz.exporters.stdout import StdoutExporter
from tsviz.models import Column, FlatRow


def _capture_export(payload, indent: int = 2, sort_keys: bool = False) -> str:
    """Helper to capture stdout exporter output."""
    config = TsvizConfig()
    config.stdout.indent = indent
    config.stdout.sort_keys = sort_keys

    import io
    from unittest.mock import patch

    buf = io.StringIO()
    with patch("click.echo", side_effect=lambda msg="", **kw: buf.write(str(msg) + "\n")):
        StdoutExporter().export(payload, config)

    return buf.getvalue()


class TestStdoutExport:
    def test_indented_by_default(self):
        output = _capture_export({"a": 1})
        assert output == '{\n  "a": 1\n}\n'

    def test_zero_indent_is_compact(self):
        output = _capture_export({"a": [1, 2]}, indent=0)
        assert output == '{"a": [1, 2]}\n'

    def test_sort_keys(self):
        output = _capture_export({"b": 1, "a": 2}, indent=0, sort_keys=True)
        assert output == '{"a": 2, "b": 1}\n'

    def test_flat_rows_serialized(self):
        row = FlatRow(timestamp="2021-01-01 00:00:00.000")
        row.add(Column("hub", "EventSourceName", "String"))
        output = _capture_export([row], indent=0)
        assert json.loads(output) == [
            {
                "timestamp": "2021-01-01 00:00:00.000",
                "EventSourceName_String": {
                    "value": "hub",
                    "name": "EventSourceName",
                    "type": "String",
                },
            }
        ]
