"""Calendar bucketing helpers shared by the revenue and hours reports."""

from __future__ import annotations

from datetime import date, datetime, timedelta, tzinfo as TzInfo
from typing import Dict, Optional, Union

import pytz

DateLike = Union[date, datetime]


def _calendar_date(value: DateLike) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    raise TypeError(f"Expected a date or datetime, got {type(value).__name__}")


def _require_count(count: int) -> int:
    if isinstance(count, bool) or not isinstance(count, int) or count < 1:
        raise ValueError(f"Bucket count must be a positive integer, got {count!r}")
    return count


def current_time(tzinfo: Optional[TzInfo] = None) -> datetime:
    """Return an aware ``now`` in ``tzinfo`` (UTC when omitted)."""

    return datetime.now(tzinfo or pytz.utc)


def month_key(value: DateLike) -> str:
    """Return the ``YYYY-MM`` bucket for ``value`` using its own calendar fields."""

    day = _calendar_date(value)
    return f"{day.year:04d}-{day.month:02d}"


def week_start(value: DateLike) -> date:
    day = _calendar_date(value)
    return day - timedelta(days=day.weekday())


def week_start_key(value: DateLike) -> str:
    """Return the Monday of the week containing ``value`` as ``YYYY-MM-DD``.

    The key is assembled from local calendar fields so that late-evening
    timestamps never roll into a neighbouring day.
    """

    monday = week_start(value)
    return f"{monday.year:04d}-{monday.month:02d}-{monday.day:02d}"


def init_trailing_months(count: int, *, now: Optional[DateLike] = None) -> Dict[str, float]:
    """Build ``count`` zeroed month buckets ending with the month of ``now``."""

    _require_count(count)
    anchor = _calendar_date(now if now is not None else current_time())
    anchor_index = anchor.year * 12 + (anchor.month - 1)
    buckets: Dict[str, float] = {}
    for offset in range(count - 1, -1, -1):
        year, month_index = divmod(anchor_index - offset, 12)
        buckets[f"{year:04d}-{month_index + 1:02d}"] = 0.0
    return buckets


def init_trailing_weeks(count: int, *, now: Optional[DateLike] = None) -> Dict[str, float]:
    """Build ``count`` zeroed Monday-aligned week buckets ending with the current week."""

    _require_count(count)
    anchor = week_start(now if now is not None else current_time())
    keys = []
    for offset in range(count - 1, -1, -1):
        key = week_start_key(anchor - timedelta(weeks=offset))
        if key in keys:
            continue
        keys.append(key)
    return {key: 0.0 for key in sorted(keys)}


def is_same_week(value: DateLike, now: DateLike) -> bool:
    return week_start(value) == week_start(now)


def is_same_month(value: DateLike, now: DateLike) -> bool:
    return month_key(value) == month_key(now)


def week_label(key: str) -> str:
    """Short display label such as ``Mar 04`` for a week-start key."""

    return datetime.strptime(key, "%Y-%m-%d").strftime("%b %d")


__all__ = [
    "current_time",
    "init_trailing_months",
    "init_trailing_weeks",
    "is_same_month",
    "is_same_week",
    "month_key",
    "week_label",
    "week_start",
    "week_start_key",
]
