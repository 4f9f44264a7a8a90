"""Shared test fixtures."""

from __future__ import annotations

from typing import Any

import pytest

from tsviz.config import AvailabilityConfig, EventsConfig, TsvizConfig


@pytest.fixture
def config() -> TsvizConfig:
    """Test config with a one-hour timezone offset."""
    return TsvizConfig(
        events=EventsConfig(timezone_offset=3_600_000),
        availability=AvailabilityConfig(roll_up_multiplier=1, first_bucket_offset=0),
    )


@pytest.fixture
def sample_availability() -> dict[str, Any]:
    """Hourly availability over four hours, with a millisecond-precision key."""
    return {
        "range": {"from": "2021-01-01T00:00:00Z", "to": "2021-01-01T04:00:00Z"},
        "intervalSize": "1h",
        "distribution": {
            "2021-01-01T00:00:00Z": 4,
            "2021-01-01T01:00:00.000Z": 6,
            "2021-01-01T02:00:00Z": 2,
            "2021-01-01T03:00:00Z": 8,
        },
    }


@pytest.fixture
def sample_events() -> list[dict[str, Any]]:
    """Three sensor events; the later ones reference the first one's schema."""
    schema = {
        "rid": "schema-1",
        "$esn": "sensors-hub",
        "properties": [
            {"name": "sensorId", "type": "String"},
            {"name": "temperature", "type": "Double"},
            {"name": "online", "type": "Boolean"},
        ],
    }
    return [
        {
            "schema": schema,
            "$ts": "2021-03-04T10:15:30.250Z",
            "$lts": "2021-03-04T11:15:30.250+01:00",
            "values": ["sensor-'A'", 21.5, True],
        },
        {
            "schemaRid": "schema-1",
            "$ts": "2021-03-04T10:16:00Z",
            "values": ["sensor-B", 19.0, False],
        },
        {
            "schemaRid": "schema-1",
            "$ts": "2021-03-04T10:17:00Z",
            "values": ["sensor-C"],
        },
    ]


@pytest.fixture
def grouped_aggregate() -> dict[str, Any]:
    """Two split-by values over two timestamps, with sparse cells."""
    return {
        "dimension": ["east", "west"],
        "aggregate": {
            "dimension": ["2021-01-01T00:00:00Z", "2021-01-01T01:00:00Z"],
            "measures": [
                [[1.5, 3], [0, None]],
                [None],
            ],
        },
    }
