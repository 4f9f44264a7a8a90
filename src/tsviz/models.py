"""Core data models for the transformation pipeline: wire shapes → chart shapes."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Any, Self

from tsviz.errors import MalformedRangeError, MalformedResultError

EPOCH = datetime(1970, 1, 1, tzinfo=UTC)
ONE_MILLISECOND = timedelta(milliseconds=1)

# Key under which the service flags a failed result
ERROR_MARKER = "__tsiError__"

Buckets = dict[str, dict[str, float]]
PivotedSeries = dict[str, dict[str, dict[str, dict[str, Any]]]]


def parse_instant(value: str | datetime) -> datetime:
    """Parse an ISO-8601 string into an aware UTC datetime.

    Naive input is treated as UTC.
    """
    dt = value if isinstance(value, datetime) else datetime.fromisoformat(value)
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def to_millis(dt: datetime) -> int:
    """Epoch milliseconds for an aware datetime."""
    return (dt - EPOCH) // ONE_MILLISECOND


def from_millis(ms: float) -> datetime:
    return EPOCH + timedelta(milliseconds=ms)


def to_iso_no_millis(dt: datetime) -> str:
    """ISO timestamp stripped to whole seconds, e.g. '2021-01-01T00:00:00Z'."""
    return dt.astimezone(UTC).strftime("%Y-%m-%dT%H:%M:%SZ")


@dataclass(frozen=True)
class TimeRange:
    """Half-open instant range ``[start, end)`` of a query."""

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        object.__setattr__(self, "start", parse_instant(self.start))
        object.__setattr__(self, "end", parse_instant(self.end))
        if self.start > self.end:
            msg = f"start ({self.start.isoformat()}) must be <= end ({self.end.isoformat()})"
            raise MalformedRangeError(msg)

    @classmethod
    def from_wire(cls, data: Mapping[str, Any]) -> Self:
        """Build from the service shape ``{"from": iso, "to": iso}``."""
        try:
            start = parse_instant(data["from"])
            end = parse_instant(data["to"])
        except KeyError as e:
            msg = f"Range is missing {e.args[0]!r}"
            raise MalformedRangeError(msg) from None
        except (TypeError, ValueError) as e:
            msg = f"Range has an unparseable instant: {e}"
            raise MalformedRangeError(msg) from None
        return cls(start=start, end=end)

    @property
    def start_ms(self) -> int:
        return to_millis(self.start)

    @property
    def end_ms(self) -> int:
        return to_millis(self.end)


@dataclass(frozen=True)
class EventSchema:
    """Ordered property declarations shared by every event that references it."""

    id: str
    source_name: str
    properties: tuple[tuple[str, str], ...] = ()

    @classmethod
    def from_wire(cls, data: Mapping[str, Any]) -> Self:
        """Build from ``{"rid": ..., "$esn": ..., "properties": [{"name", "type"}]}``."""
        try:
            properties = tuple((p["name"], p["type"]) for p in data.get("properties", []))
            return cls(id=data["rid"], source_name=data.get("$esn", ""), properties=properties)
        except KeyError as e:
            msg = f"Event schema is missing {e.args[0]!r}"
            raise MalformedResultError(msg) from None
        except (AttributeError, TypeError) as e:
            msg = f"Event schema has the wrong shape: {e}"
            raise MalformedResultError(msg) from None


def column_key(name: str, type_: str) -> str:
    """Key of a flattened column: '<name>_<type>'."""
    return f"{name}_{type_}"


@dataclass(frozen=True)
class Column:
    """A self-describing cell of a flattened event row."""

    value: Any
    name: str
    type: str

    @property
    def key(self) -> str:
        return column_key(self.name, self.type)

    def to_dict(self) -> dict[str, Any]:
        return {"value": self.value, "name": self.name, "type": self.type}


@dataclass
class FlatRow(Mapping[str, Column]):
    """One flattened event: a display timestamp plus columns in insertion order.

    Columns are keyed by ``column_key``; adding a column whose key already
    exists replaces the earlier one in place.
    """

    timestamp: str
    columns: dict[str, Column] = field(default_factory=dict)

    def add(self, column: Column) -> None:
        self.columns[column.key] = column

    def __getitem__(self, key: str) -> Column:
        return self.columns[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self.columns)

    def __len__(self) -> int:
        return len(self.columns)

    def to_dict(self) -> dict[str, Any]:
        row: dict[str, Any] = {"timestamp": self.timestamp}
        for key, column in self.columns.items():
            row[key] = column.to_dict()
        return row


@dataclass(frozen=True)
class SeriesOptions:
    """Per-result metadata supplied alongside a batch of results."""

    alias: str = ""
    measure_types: tuple[str, ...] = ()

    @classmethod
    def coerce(cls, value: SeriesOptions | Mapping[str, Any]) -> SeriesOptions:
        """Accept an instance or the wire mapping ``{"alias", "measureTypes"}``."""
        if isinstance(value, SeriesOptions):
            return value
        if not isinstance(value, Mapping):
            msg = f"Series options must be an object, got {type(value).__name__}"
            raise MalformedResultError(msg)
        return cls(
            alias=value.get("alias", ""),
            measure_types=tuple(value.get("measureTypes", value.get("measure_types", ()))),
        )
