"""Availability bucketing — sparse distributions to a dense, aligned bucket grid."""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from typing import Any

from tsviz.errors import MalformedRangeError, MalformedResultError
from tsviz.intervals import parse_interval
from tsviz.models import (
    Buckets,
    TimeRange,
    from_millis,
    parse_instant,
    to_iso_no_millis,
    to_millis,
)

logger = logging.getLogger(__name__)

AVAILABILITY_KEY = "availabilityCount"

# Sub-bucket stride used to pad a range narrower than one bucket
PADDING_STEPS = 60


def normalize(
    distribution: Mapping[str, int],
    time_range: TimeRange | Mapping[str, Any],
    bucket_size: float,
) -> Buckets:
    """Expand a sparse distribution into ordered buckets covering ``time_range``.

    The first bucket is clipped to the range start, every distribution key is
    stripped to whole seconds (last write wins on collision), and a boundary
    bucket keyed at the range end copies the bucket at the aligned end. When
    that bucket is absent and the end lies exactly on a bucket boundary, the
    bucket before it is copied instead. A range narrower than one bucket is padded with zero
    buckets every ``bucket_size / 60`` so the chart still spans a full bucket.

    Args:
        distribution: ISO timestamp → count, as returned by the service.
        time_range: Visible range, or its wire shape ``{"from", "to"}``.
        bucket_size: Bucket width in milliseconds.

    Returns:
        ISO timestamp (whole seconds) → ``{"count": n}``, ascending by instant.

    Raises:
        MalformedRangeError: If the range is inverted or the bucket size is
            not a positive finite number.
    """
    if not isinstance(time_range, TimeRange):
        time_range = TimeRange.from_wire(time_range)
    _check_bucket_size(bucket_size)

    from_ms = time_range.start_ms
    to_ms = time_range.end_ms
    raw_bucket_count = math.ceil((to_ms - from_ms) / bucket_size)

    counts = _strip_distribution(distribution)
    aligned_start = _align(from_ms, bucket_size)
    aligned_end = _align(to_ms, bucket_size)
    logger.debug(
        "Normalizing %d distribution keys into %d raw buckets of %sms",
        len(counts),
        raw_bucket_count,
        bucket_size,
    )

    working: dict[int, Any] = {}
    first_key = aligned_start if aligned_start >= from_ms else from_ms
    working[_strip(first_key)] = counts.get(_strip(aligned_start), 0)
    working.update(counts)

    end_key = _strip(aligned_end)
    if end_key in working:
        boundary_count = working[end_key]
    elif aligned_end == to_ms:
        # Empty bucket starting exactly at the end instant: use the one before it
        previous = max(_align(aligned_end - bucket_size, bucket_size), aligned_start)
        boundary_count = working.get(_strip(previous), 0)
    else:
        boundary_count = 0
    working[_strip(to_ms)] = boundary_count

    if aligned_start == aligned_end:
        stride = bucket_size / PADDING_STEPS
        for step in range(PADDING_STEPS + 1):
            working.setdefault(_strip(aligned_start + step * stride), 0)
        if aligned_start != from_ms:
            working[_strip(aligned_start)] = 0
        low, high = _strip(aligned_start), _strip(max(to_ms, aligned_start + bucket_size))
    else:
        low, high = _strip(from_ms), _strip(to_ms)

    return {
        to_iso_no_millis(from_millis(ms)): {"count": working[ms]}
        for ms in sorted(working)
        if low <= ms <= high
    }


def roll_up(
    buckets: Mapping[str, Mapping[str, float]],
    multiplier: int,
    first_bucket_offset: int = 0,
    latest_key: str | None = None,
) -> Buckets:
    """Merge every ``multiplier`` consecutive buckets into one.

    Groups start every ``multiplier`` buckets, shifted by
    ``first_bucket_offset`` (taken modulo ``multiplier``) so group boundaries
    can line up with an external epoch. A group is keyed by its first member.
    Member counts are weighted by ``multiplier / group size``: full groups
    sum, a trailing partial group is scaled to a full group's width.

    When ``latest_key`` is given, the last group's value is also stored under
    that key.
    """
    if isinstance(multiplier, bool) or not isinstance(multiplier, int) or multiplier < 1:
        msg = f"Roll-up multiplier must be a positive integer, got {multiplier!r}"
        raise MalformedRangeError(msg)

    offset = first_bucket_offset % multiplier
    ordered = sorted(buckets, key=parse_instant)
    total = len(ordered)

    rolled: Buckets = {}
    head_key = None
    for i, timestamp in enumerate(ordered):
        head = max(i - (i + offset) % multiplier, 0)
        group_size = multiplier if head + multiplier < total else total - head
        head_key = ordered[head]
        weighted = buckets[timestamp]["count"] * multiplier / group_size
        if head_key in rolled:
            rolled[head_key]["count"] += weighted
        else:
            rolled[head_key] = {"count": weighted}

    if latest_key is not None and head_key is not None:
        rolled[latest_key] = dict(rolled[head_key])
    return rolled


def transform_availability(availability: Mapping[str, Any]) -> dict[str, dict[str, Buckets]]:
    """Transform a service availability result into the chart envelope.

    Expects ``{"range": {"from", "to"}, "intervalSize": "1h", "distribution": {...}}``
    and returns ``{"availabilityCount": {"": buckets}}``.
    """
    if not isinstance(availability, Mapping):
        msg = f"Availability result must be an object, got {type(availability).__name__}"
        raise MalformedResultError(msg)
    time_range = TimeRange.from_wire(availability.get("range", {}))
    bucket_size = parse_interval(availability.get("intervalSize", ""))
    buckets = normalize(availability.get("distribution") or {}, time_range, bucket_size)
    return envelope(buckets)


def envelope(buckets: Buckets) -> dict[str, dict[str, Buckets]]:
    return {AVAILABILITY_KEY: {"": buckets}}


def _check_bucket_size(bucket_size: float) -> None:
    if (
        isinstance(bucket_size, bool)
        or not isinstance(bucket_size, int | float)
        or not math.isfinite(bucket_size)
        or bucket_size <= 0
    ):
        msg = f"Bucket size must be a positive finite number of milliseconds, got {bucket_size!r}"
        raise MalformedRangeError(msg)


def _align(ms: float, bucket_size: float) -> int:
    """Start of the bucket containing ``ms``."""
    return round(math.floor(ms / bucket_size) * bucket_size)


def _strip(ms: float) -> int:
    """Truncate an epoch-millisecond instant to whole seconds."""
    whole = math.floor(ms)
    return whole - whole % 1000


def _strip_distribution(distribution: Mapping[str, int]) -> dict[int, int]:
    counts: dict[int, int] = {}
    for key, count in distribution.items():
        try:
            instant = parse_instant(key)
        except (TypeError, ValueError) as e:
            msg = f"Distribution key {key!r} is not an ISO timestamp: {e}"
            raise MalformedResultError(msg) from None
        counts[_strip(to_millis(instant))] = count
    return counts
