"""Tests for core data models."""

from datetime import UTC, datetime

import pytest

from tsviz.errors import MalformedRangeError, MalformedResultError
from tsviz.models import (
    Column,
    EventSchema,
    FlatRow,
    SeriesOptions,
    TimeRange,
    column_key,
    from_millis,
    parse_instant,
    to_iso_no_millis,
    to_millis,
)


class TestInstants:
    def test_parse_z_suffix(self):
        assert parse_instant("2021-01-01T00:00:00Z") == datetime(2021, 1, 1, tzinfo=UTC)

    def test_naive_is_utc(self):
        assert parse_instant("2021-01-01T05:00:00").tzinfo == UTC

    def test_offset_converted_to_utc(self):
        assert parse_instant("2021-01-01T01:00:00+01:00") == datetime(2021, 1, 1, tzinfo=UTC)

    def test_millis_roundtrip(self):
        dt = datetime(2021, 6, 1, 12, 30, 15, 250_000, tzinfo=UTC)
        assert to_millis(dt) == 1622550615250
        assert from_millis(to_millis(dt)) == dt

    def test_iso_no_millis(self):
        dt = datetime(2021, 6, 1, 12, 30, 15, 999_000, tzinfo=UTC)
        assert to_iso_no_millis(dt) == "2021-06-01T12:30:15Z"


class TestTimeRange:
    def test_from_wire(self):
        tr = TimeRange.from_wire({"from": "2021-01-01T00:00:00Z", "to": "2021-01-01T01:00:00Z"})
        assert tr.end_ms - tr.start_ms == 3_600_000

    def test_zero_width_allowed(self):
        tr = TimeRange.from_wire({"from": "2021-01-01T00:00:00Z", "to": "2021-01-01T00:00:00Z"})
        assert tr.start == tr.end

    def test_inverted(self):
        with pytest.raises(MalformedRangeError):
            TimeRange(start=datetime(2021, 1, 2, tzinfo=UTC), end=datetime(2021, 1, 1, tzinfo=UTC))

    def test_missing_key(self):
        with pytest.raises(MalformedRangeError, match="missing 'to'"):
            TimeRange.from_wire({"from": "2021-01-01T00:00:00Z"})


class TestEventSchema:
    def test_from_wire(self):
        schema = EventSchema.from_wire(
            {"rid": "r1", "$esn": "hub", "properties": [{"name": "a", "type": "Double"}]}
        )
        assert schema == EventSchema(id="r1", source_name="hub", properties=(("a", "Double"),))

    def test_missing_rid(self):
        with pytest.raises(MalformedResultError, match="missing 'rid'"):
            EventSchema.from_wire({"$esn": "hub", "properties": []})

    def test_properties_not_a_list_of_objects(self):
        with pytest.raises(MalformedResultError, match="wrong shape"):
            EventSchema.from_wire({"rid": "r1", "properties": ["a"]})


class TestFlatRow:
    def test_column_key(self):
        assert column_key("temperature", "Double") == "temperature_Double"

    def test_duplicate_key_replaces_in_place(self):
        row = FlatRow(timestamp="t")
        row.add(Column(1, "a", "Long"))
        row.add(Column(2, "b", "Long"))
        row.add(Column(3, "a", "Long"))
        assert list(row) == ["a_Long", "b_Long"]
        assert row["a_Long"].value == 3
        assert len(row) == 2


class TestSeriesOptions:
    def test_coerce_wire(self):
        opts = SeriesOptions.coerce({"alias": "A", "measureTypes": ["avg", "max"]})
        assert opts == SeriesOptions(alias="A", measure_types=("avg", "max"))

    def test_coerce_instance(self):
        opts = SeriesOptions(alias="A")
        assert SeriesOptions.coerce(opts) is opts

    def test_coerce_rejects_non_object(self):
        with pytest.raises(MalformedResultError, match="must be an object"):
            SeriesOptions.coerce("A")
