"""Result pivoting — dimensioned aggregate and query results to nested series maps."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from tsviz.errors import MalformedResultError, SeriesAlignmentMismatchError
from tsviz.models import ERROR_MARKER, PivotedSeries, SeriesOptions

logger = logging.getLogger(__name__)

OptionsLike = SeriesOptions | Mapping[str, Any]


def pivot_query_results(
    results: Sequence[Mapping[str, Any]],
    series_options: Sequence[OptionsLike],
) -> list[PivotedSeries]:
    """Pivot time-series query results to ``alias → '' → timestamp → variable → value``.

    Each result is ``{"timestamps": [...], "variables": {name: {"values": [...]}}}``
    and is paired positionally with its series options. A failed result
    becomes ``{alias: {}}``.

    Raises:
        SeriesAlignmentMismatchError: If the batches differ in length, or a
            variable has a different number of values than there are timestamps.
    """
    options = _align_options(results, series_options)
    pivoted: list[PivotedSeries] = []
    for index, (result, opts) in enumerate(zip(results, options, strict=True)):
        _check_object(result, "Query result", index)
        if ERROR_MARKER in result:
            logger.info("Query result %d (%r) is an error marker", index, opts.alias)
            pivoted.append({opts.alias: {}})
            continue

        timestamps = result.get("timestamps", [])
        try:
            variables = {
                name: var.get("values", []) for name, var in result.get("variables", {}).items()
            }
        except AttributeError as e:
            msg = f"Query result {index} has malformed variables: {e}"
            raise MalformedResultError(msg) from None
        for name, values in variables.items():
            if len(values) != len(timestamps):
                msg = (
                    f"Query result {index}: variable {name!r} has {len(values)} values "
                    f"for {len(timestamps)} timestamps"
                )
                raise SeriesAlignmentMismatchError(msg)

        by_time = {
            timestamp: {name: values[j] for name, values in variables.items()}
            for j, timestamp in enumerate(timestamps)
        }
        pivoted.append({opts.alias: {"": by_time}})
    return pivoted


def pivot_aggregates(
    aggregates: Sequence[Mapping[str, Any]],
    series_options: Sequence[OptionsLike],
) -> list[PivotedSeries]:
    """Pivot aggregate results to ``alias → split-by → timestamp → measure → value``.

    Three result shapes are accepted:

    - error marker: becomes ``{"": {}}``
    - grouped: ``dimension`` holds split-by values and ``aggregate`` holds
      ``dimension`` (timestamps) plus ``measures[split][time][measure]``.
      Absent cells become ``None``.
    - single dimension: ``dimension`` holds timestamps and
      ``measures[time][measure]`` is fully populated. The split-by key is ``''``.

    Raises:
        SeriesAlignmentMismatchError: If the batches differ in length.
        MalformedResultError: If a result does not have one of those shapes.
    """
    options = _align_options(aggregates, series_options)
    pivoted: list[PivotedSeries] = []
    for index, (agg, opts) in enumerate(zip(aggregates, options, strict=True)):
        _check_object(agg, "Aggregate", index)
        if ERROR_MARKER in agg:
            logger.info("Aggregate %d (%r) is an error marker", index, opts.alias)
            pivoted.append({"": {}})
        elif "aggregate" in agg:
            try:
                pivoted.append({opts.alias: _pivot_grouped(agg, opts.measure_types)})
            except (AttributeError, TypeError) as e:
                msg = f"Aggregate {index} has a malformed grouped shape: {e}"
                raise MalformedResultError(msg) from None
        else:
            try:
                pivoted.append({opts.alias: {"": _pivot_single(agg, opts.measure_types)}})
            except KeyError as e:
                msg = f"Aggregate {index} is missing {e.args[0]!r}"
                raise MalformedResultError(msg) from None
            except (IndexError, TypeError) as e:
                msg = f"Aggregate {index} has malformed measures: {e}"
                raise MalformedResultError(msg) from None
    return pivoted


def _pivot_grouped(
    agg: Mapping[str, Any], measure_types: Sequence[str]
) -> dict[str, dict[str, dict[str, Any]]]:
    timestamps = agg["aggregate"].get("dimension", [])
    measures = agg["aggregate"].get("measures") or []
    by_split: dict[str, dict[str, dict[str, Any]]] = {}
    for j, split_by in enumerate(agg.get("dimension", [])):
        by_time: dict[str, dict[str, Any]] = {}
        for k, timestamp in enumerate(timestamps):
            row = _cell(_cell(measures, j), k)
            by_time[timestamp] = {t: _cell(row, m) for m, t in enumerate(measure_types)}
        by_split[split_by] = by_time
    return by_split


def _pivot_single(
    agg: Mapping[str, Any], measure_types: Sequence[str]
) -> dict[str, dict[str, Any]]:
    measures = agg["measures"]
    return {
        timestamp: {t: measures[j][m] for m, t in enumerate(measure_types)}
        for j, timestamp in enumerate(agg.get("dimension", []))
    }


def _cell(values: Sequence[Any] | None, index: int) -> Any:
    """Element at ``index``, or None when the sequence or element is absent."""
    if values is None or index >= len(values):
        return None
    return values[index]


def _check_object(result: Any, label: str, index: int) -> None:
    if not isinstance(result, Mapping):
        msg = f"{label} {index} must be an object, got {type(result).__name__}"
        raise MalformedResultError(msg)


def _align_options(
    results: Sequence[Any], series_options: Sequence[OptionsLike]
) -> list[SeriesOptions]:
    if len(results) != len(series_options):
        msg = f"{len(results)} results but {len(series_options)} series options"
        raise SeriesAlignmentMismatchError(msg)
    return [SeriesOptions.coerce(opts) for opts in series_options]
