"""Transformation layer - service results to chart-ready structures."""

from __future__ import annotations

from tsviz.transformer.aggregates import pivot_aggregates, pivot_query_results
from tsviz.transformer.availability import normalize, roll_up, transform_availability
from tsviz.transformer.dispatcher import Transformer
from tsviz.transformer.events import flatten, strip_for_concat

__all__ = [
    "Transformer",
    "normalize",
    "roll_up",
    "transform_availability",
    "flatten",
    "strip_for_concat",
    "pivot_aggregates",
    "pivot_query_results",
]
