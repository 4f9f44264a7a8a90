"""Typed failures raised by the transformation pipeline."""

from __future__ import annotations


class TransformError(ValueError):
    """Base class for structural faults that abort a transformation call."""


class MalformedRangeError(TransformError):
    """Range end precedes its start, or the bucket size is unusable."""


class UnresolvedSchemaReferenceError(TransformError):
    """An event references a schema id not registered earlier in the batch."""

    def __init__(self, schema_id: str | None, index: int) -> None:
        self.schema_id = schema_id
        self.index = index
        super().__init__(f"Event {index} references unknown schema {schema_id!r}")


class SeriesAlignmentMismatchError(TransformError):
    """Parallel sequences that must line up positionally have different lengths."""


class InvalidIntervalError(TransformError):
    """An interval literal such as '1h' could not be parsed."""


class MalformedResultError(TransformError):
    """A service result is missing a required field or has the wrong shape."""
