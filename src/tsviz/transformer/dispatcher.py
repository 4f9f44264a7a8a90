"""Main transformer orchestrator - applies config defaults to each transformation."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from tsviz.config import TsvizConfig
from tsviz.models import FlatRow, PivotedSeries, SeriesOptions, TimeRange, to_iso_no_millis
from tsviz.transformer.aggregates import pivot_aggregates, pivot_query_results
from tsviz.transformer.availability import AVAILABILITY_KEY, roll_up, transform_availability
from tsviz.transformer.events import flatten


class Transformer:
    """Dispatch service results to the matching transformation."""

    def __init__(self, config: TsvizConfig | None = None) -> None:
        """Initialize transformer with config, defaults when omitted."""
        self._config = config or TsvizConfig()

    def availability(
        self,
        availability: Mapping[str, Any],
        roll_up_multiplier: int | None = None,
        first_bucket_offset: int | None = None,
    ) -> dict[str, Any]:
        """Bucket an availability result, rolling up when the multiplier exceeds 1.

        Rolled-up output also carries the latest group under the range-end key.
        """
        multiplier = roll_up_multiplier or self._config.availability.roll_up_multiplier
        if first_bucket_offset is None:
            first_bucket_offset = self._config.availability.first_bucket_offset

        result = transform_availability(availability)
        if multiplier > 1:
            end_key = to_iso_no_millis(TimeRange.from_wire(availability["range"]).end)
            buckets = result[AVAILABILITY_KEY][""]
            result[AVAILABILITY_KEY][""] = roll_up(
                buckets, multiplier, first_bucket_offset, latest_key=end_key
            )
        return result

    def events(
        self, events: Iterable[Mapping[str, Any]], timezone_offset: int | None = None
    ) -> list[FlatRow]:
        """Flatten raw events using the configured timezone offset."""
        if timezone_offset is None:
            timezone_offset = self._config.events.timezone_offset
        return flatten(events, timezone_offset=timezone_offset)

    def aggregates(
        self,
        aggregates: Sequence[Mapping[str, Any]],
        series_options: Sequence[SeriesOptions | Mapping[str, Any]],
    ) -> list[PivotedSeries]:
        return pivot_aggregates(aggregates, series_options)

    def query_results(
        self,
        results: Sequence[Mapping[str, Any]],
        series_options: Sequence[SeriesOptions | Mapping[str, Any]],
    ) -> list[PivotedSeries]:
        return pivot_query_results(results, series_options)
