"""Turns the text of one Fit export entry into readings.

Flow per entry:
1. Parse JSON; anything but a top-level array is an ``EntryParseWarning``.
2. Classify the entry by path (see ``signals.classify_signal``).
3. Build a ``RawRecord`` per element, resolving its first value in the order
   plain number, ``intVal``, ``fpVal``, ``stringVal``.
4. Coerce to a ``Reading``: numbers for numeric signals, strings for sleep.

A bad element is skipped and counted; it never aborts the entry.
"""

import json
import math
from dataclasses import dataclass, field
from typing import Any

from fitproof.ingestion.exceptions import EntryParseWarning, RecordSkipped
from fitproof.ingestion.models import (
    FpVal,
    IntVal,
    PlainNumber,
    RawRecord,
    Reading,
    RecordValue,
    SignalKind,
    StringVal,
)
from fitproof.ingestion.signals import NUMERIC_KINDS, classify_signal

_NANOS_PER_MILLI = 1_000_000
_TAG_PRIORITY: tuple[tuple[str, type[IntVal] | type[FpVal] | type[StringVal]], ...] = (
    ("intVal", IntVal),
    ("fpVal", FpVal),
    ("stringVal", StringVal),
)


@dataclass
class EntryParseResult:
    """Readings and skip bookkeeping for one entry."""

    path: str
    kind: SignalKind | None
    element_count: int = 0
    readings: list[Reading] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)

    def skip_summary(self) -> str | None:
        if not self.skipped:
            return None
        return (
            f"Skipped {len(self.skipped)} of {self.element_count} records "
            f"(first: {self.skipped[0]})"
        )


def parse_entry(path: str, text: str) -> EntryParseResult:
    """Parse one accepted entry.

    Raises:
        EntryParseWarning: if the text is not valid JSON or not a JSON array.
    """
    data = _load_array(path, text)
    kind = classify_signal(path)
    result = EntryParseResult(path=path, kind=kind, element_count=len(data))
    if kind is None:
        return result
    for index, item in enumerate(data):
        try:
            record = build_record(item, index)
            result.readings.append(to_reading(record, kind, index))
        except RecordSkipped as exc:
            result.skipped.append(str(exc))
    return result


def _load_array(path: str, text: str) -> list[Any]:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise EntryParseWarning(path, f"invalid JSON: {exc}") from exc
    if not isinstance(data, list):
        raise EntryParseWarning(
            path, f"expected an array of data points, got {type(data).__name__}"
        )
    return data


def build_record(raw: Any, index: int) -> RawRecord:
    if not isinstance(raw, dict):
        raise RecordSkipped(f"record {index} must be an object")
    start = raw.get("startTimeNanos")
    if isinstance(start, int) and not isinstance(start, bool):
        start = str(start)
    if not start or not isinstance(start, str):
        raise RecordSkipped(f"record {index}: missing 'startTimeNanos'")
    values = raw.get("value")
    if not isinstance(values, list) or not values:
        raise RecordSkipped(f"record {index}: 'value' must be a non-empty array")
    data_type_name = raw.get("dataTypeName")
    return RawRecord(
        start_time_nanos=start,
        value=_build_value(values[0], index),
        data_type_name=data_type_name if isinstance(data_type_name, str) else "",
    )


def _build_value(raw: Any, index: int) -> RecordValue:
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        return PlainNumber(number=raw)
    if isinstance(raw, dict):
        for tag, value_cls in _TAG_PRIORITY:
            if raw.get(tag) is not None:
                return value_cls(value=raw[tag])
        raise RecordSkipped(f"record {index}: no intVal, fpVal or stringVal")
    raise RecordSkipped(f"record {index}: unsupported value {type(raw).__name__}")


def resolve_value(value: RecordValue) -> object:
    """Unwrap a record value into the raw JSON scalar it carries."""
    if isinstance(value, PlainNumber):
        return value.number
    return value.value


def to_reading(record: RawRecord, kind: SignalKind, index: int = 0) -> Reading:
    timestamp = nanos_to_millis(record.start_time_nanos, index)
    resolved = resolve_value(record.value)
    if kind in NUMERIC_KINDS:
        return Reading(timestamp_millis=timestamp, value=_to_number(resolved, index))
    return Reading(timestamp_millis=timestamp, value=_to_label(resolved))


def nanos_to_millis(start_time_nanos: str, index: int = 0) -> int:
    """Integer-divide a decimal nanosecond string down to milliseconds."""
    digits = start_time_nanos.strip()
    if not (digits.isascii() and digits.isdigit()):
        raise RecordSkipped(
            f"record {index}: 'startTimeNanos' must be a non-negative integer, "
            f"got {start_time_nanos!r}"
        )
    return int(digits) // _NANOS_PER_MILLI


def _to_label(resolved: object) -> str:
    # integral floats drop the fraction: 2.0 -> "2"
    if isinstance(resolved, float) and resolved.is_integer():
        return str(int(resolved))
    return str(resolved)


def _to_number(resolved: object, index: int) -> int | float:
    if isinstance(resolved, bool):
        raise RecordSkipped(f"record {index}: boolean is not a numeric value")
    if isinstance(resolved, (int, float)):
        number: int | float = resolved
    elif isinstance(resolved, str):
        try:
            number = float(resolved)
        except ValueError as exc:
            raise RecordSkipped(f"record {index}: {resolved!r} is not numeric") from exc
    else:
        raise RecordSkipped(f"record {index}: {type(resolved).__name__} is not numeric")
    if not math.isfinite(number):
        raise RecordSkipped(f"record {index}: non-finite value {resolved!r}")
    return number
