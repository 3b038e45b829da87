"""Defensive accessors for the loosely shaped records returned by the backend API.

Proposal, timesheet and project payloads arrive as decoded JSON objects whose
timestamp fields come in several encodings (Firestore-style ``{"seconds": ..}``
mappings, ISO-8601 strings, epoch milliseconds).  Everything here resolves to a
usable value or a documented default instead of raising: a missing or garbled
date is ordinary data, not an error.  The one exception is a collection that is
not shaped like a list of records at all, which signals a collaborator bug.
"""

from __future__ import annotations

import math
from datetime import date, datetime, time, tzinfo as TzInfo
from typing import Any, Iterable, List, Mapping, Optional, Sequence

import pytz
from dateutil.parser import parse as dateutil_parse

DEFAULT_AMOUNT_PATH = ("pricing", "quoteValue")
SECONDS_KEYS = ("seconds", "_seconds")


class RecordShapeError(TypeError):
    """Raised when an input collection is not a list of record mappings."""

    def __init__(self, kind: str, detail: str):
        super().__init__(
            f"Expected {kind} to be a list of mappings (decoded JSON objects); {detail}"
        )
        self.kind = kind


def ensure_records(value: Any, kind: str = "records") -> List[Mapping[str, Any]]:
    """Validate that ``value`` is a list/tuple of mappings and return it as a list."""

    if not isinstance(value, (list, tuple)):
        raise RecordShapeError(kind, f"got {type(value).__name__}")
    for index, record in enumerate(value):
        if not isinstance(record, Mapping):
            raise RecordShapeError(
                kind, f"item {index} is {type(record).__name__}"
            )
    return list(value)


def _number(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str) and value.strip():
        try:
            number = float(value)
        except ValueError:
            return None
    else:
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def _localise(value: datetime, tzinfo: TzInfo) -> datetime:
    if value.tzinfo is None:
        localize = getattr(tzinfo, "localize", None)
        if localize is not None:
            return localize(value)
        return value.replace(tzinfo=tzinfo)
    return value.astimezone(tzinfo)


def _from_epoch_seconds(seconds: float, tzinfo: TzInfo) -> Optional[datetime]:
    try:
        return datetime.fromtimestamp(seconds, tz=pytz.utc).astimezone(tzinfo)
    except (OverflowError, OSError, ValueError):
        return None


def to_datetime(value: Any, tzinfo: Optional[TzInfo] = None) -> Optional[datetime]:
    """Resolve a single timestamp value to an aware datetime, or ``None``."""

    tz = tzinfo or pytz.utc
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return _localise(value, tz)
    if isinstance(value, date):
        return _localise(datetime.combine(value, time.min), tz)
    if isinstance(value, Mapping):
        for key in SECONDS_KEYS:
            seconds = _number(value.get(key))
            if seconds is not None:
                return _from_epoch_seconds(seconds, tz)
        return None
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            parsed = dateutil_parse(text)
        except (ValueError, OverflowError):
            return None
        return _localise(parsed, tz)
    if isinstance(value, (int, float)):
        millis = _number(value)
        if millis is None:
            return None
        return _from_epoch_seconds(millis / 1000.0, tz)
    return None


def extract_date(
    record: Mapping[str, Any],
    preferred_fields: Sequence[str],
    tzinfo: Optional[TzInfo] = None,
) -> Optional[datetime]:
    """Return the first field in ``preferred_fields`` that holds a valid date."""

    for field_name in preferred_fields:
        resolved = to_datetime(record.get(field_name), tzinfo)
        if resolved is not None:
            return resolved
    return None


def extract_amount(
    record: Mapping[str, Any], path: Sequence[str] = DEFAULT_AMOUNT_PATH
) -> float:
    """Read a nested optional numeric value; anything unusable counts as ``0.0``."""

    current: Any = record
    for key in path:
        if not isinstance(current, Mapping):
            return 0.0
        current = current.get(key)
    number = _number(current)
    return number if number is not None else 0.0


def extract_number(record: Mapping[str, Any], field_name: str) -> float:
    return extract_amount(record, (field_name,))


def extract_text(
    record: Mapping[str, Any], fields: Iterable[str], default: str
) -> str:
    """First non-empty text value among ``fields``; empty strings count as absent."""

    if isinstance(fields, str):
        fields = (fields,)
    for field_name in fields:
        value = record.get(field_name)
        if value is None:
            continue
        text = str(value).strip()
        if text:
            return text
    return default


__all__ = [
    "RecordShapeError",
    "ensure_records",
    "extract_amount",
    "extract_date",
    "extract_number",
    "extract_text",
    "to_datetime",
]
