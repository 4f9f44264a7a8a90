"""Event flattening — schema-tagged columnar events to self-describing rows."""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any

from tsviz.errors import MalformedResultError, UnresolvedSchemaReferenceError
from tsviz.models import Column, EventSchema, FlatRow, parse_instant

logger = logging.getLogger(__name__)

LOCAL_TIMESTAMP = ("LocalTimestamp", "DateTime")
EVENT_SOURCE_NAME = ("EventSourceName", "String")

# Characters that would break a concatenated "<name>_<type>" key or a grid cell
STRIP_RE = re.compile(r"[\"'`?<>;\\]")


def strip_for_concat(text: str) -> str:
    """Remove quoting and separator characters so ``text`` is safe inside a key."""
    return STRIP_RE.sub("", text)


@dataclass
class FlattenCache:
    """Lookups scoped to one ``flatten`` call.

    ``names`` and ``values`` only memoize ``strip_for_concat``; a hit returns
    exactly what a fresh computation would.
    """

    schemas: dict[str, EventSchema] = field(default_factory=dict)
    names: dict[str, str] = field(default_factory=dict)
    values: dict[str, str] = field(default_factory=dict)

    def resolve_schema(self, event: Mapping[str, Any], index: int) -> EventSchema:
        if "schema" in event:
            schema = EventSchema.from_wire(event["schema"])
            self.schemas[schema.id] = schema
            return schema
        schema_id = event.get("schemaRid")
        try:
            return self.schemas[schema_id]
        except (KeyError, TypeError):
            raise UnresolvedSchemaReferenceError(schema_id, index) from None

    def name(self, raw: str) -> str:
        if raw not in self.names:
            self.names[raw] = strip_for_concat(raw)
        return self.names[raw]

    def value(self, raw: Any) -> str | None:
        if raw is None:
            return None
        text = _stringify(raw)
        if text not in self.values:
            self.values[text] = strip_for_concat(text)
        return self.values[text]


def flatten(events: Iterable[Mapping[str, Any]], timezone_offset: float = 0) -> list[FlatRow]:
    """Flatten a batch of raw events into rows of self-describing columns.

    An event either embeds its ``schema`` or names one by ``schemaRid``; a
    referenced schema must have been embedded by an earlier event in the same
    batch. Each row holds the display timestamp (``$ts`` shifted back by
    ``timezone_offset`` milliseconds), an optional ``LocalTimestamp_DateTime``
    column, an ``EventSourceName_String`` column and one column per schema
    property in declared order. Values missing from ``values`` still get a
    column, holding ``None``.

    Raises:
        UnresolvedSchemaReferenceError: If an event references a schema id not
            yet seen in the batch. The whole batch fails.
    """
    cache = FlattenCache()
    offset = timedelta(milliseconds=timezone_offset)
    rows: list[FlatRow] = []

    for index, event in enumerate(events):
        if not isinstance(event, Mapping):
            msg = f"Event {index} must be an object, got {type(event).__name__}"
            raise MalformedResultError(msg)
        schema = cache.resolve_schema(event, index)
        row = FlatRow(timestamp=_display_timestamp(event, index, offset))

        local_timestamp = event.get("$lts")
        if local_timestamp:
            row.add(Column(local_timestamp, *LOCAL_TIMESTAMP))

        row.add(Column(schema.source_name, *EVENT_SOURCE_NAME))

        values = event.get("values") or []
        for position, (name, type_) in enumerate(schema.properties):
            raw = values[position] if position < len(values) else None
            row.add(Column(cache.value(raw), cache.name(name), type_))
        rows.append(row)

    logger.debug("Flattened %d events across %d schemas", len(rows), len(cache.schemas))
    return rows


def _display_timestamp(event: Mapping[str, Any], index: int, offset: timedelta) -> str:
    """'YYYY-MM-DD HH:MM:SS.mmm' with no zone designator."""
    try:
        shifted = parse_instant(event["$ts"]) - offset
    except KeyError:
        msg = f"Event {index} has no '$ts'"
        raise MalformedResultError(msg) from None
    except (TypeError, ValueError) as e:
        msg = f"Event {index} has an unparseable '$ts': {e}"
        raise MalformedResultError(msg) from None
    return shifted.strftime("%Y-%m-%d %H:%M:%S.") + f"{shifted.microsecond // 1000:03d}"


def _stringify(value: Any) -> str:
    """Render a value the way the service wrote it; nested values as compact JSON."""
    if isinstance(value, dict | list):
        return json.dumps(value, sort_keys=True)
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
