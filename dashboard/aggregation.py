"""Grouping, bucketing and ratio primitives used by every dashboard report."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, tzinfo as TzInfo
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from .normalize import ensure_records, extract_amount, extract_date, extract_text
from .temporal import month_key

Record = Mapping[str, Any]
AmountSelector = Callable[[Record], float]
KeySelector = Union[str, Sequence[str], Callable[[Record], Optional[str]]]

SECONDS_PER_DAY = 60 * 60 * 24


# ---------------------------------------------------------------------------
# Ratios
# ---------------------------------------------------------------------------


def rate(numerator: float, denominator: float) -> float:
    """Percentage of ``numerator`` over ``denominator``; ``0.0`` when there is no base."""

    if denominator > 0:
        return (numerator / denominator) * 100
    return 0.0


def average(total: float, count: float) -> float:
    if count > 0:
        return total / count
    return 0.0


# ---------------------------------------------------------------------------
# Time bucketing and grouping
# ---------------------------------------------------------------------------


def aggregate(
    records: Sequence[Record],
    bucket_init: Mapping[str, float],
    *,
    date_fields: Sequence[str],
    amount: AmountSelector = extract_amount,
    predicate: Optional[Callable[[Record], bool]] = None,
    bucket_key: Callable[[datetime], str] = month_key,
    tzinfo: Optional[TzInfo] = None,
) -> Dict[str, float]:
    """Sum ``amount`` per time bucket.

    ``bucket_init`` is copied so the caller's map is never touched. Records whose
    date cannot be resolved from any of ``date_fields``, or whose bucket falls
    outside the initialised window, do not contribute.
    """

    series = dict(bucket_init)
    for record in ensure_records(records, "records"):
        if predicate is not None and not predicate(record):
            continue
        resolved = extract_date(record, date_fields, tzinfo)
        if resolved is None:
            continue
        key = bucket_key(resolved)
        if key in series:
            series[key] += amount(record)
    return series


def _resolve_key(record: Record, key: KeySelector, default_label: str) -> str:
    if callable(key):
        value = key(record)
        if value is None:
            return default_label
        text = str(value).strip()
        return text or default_label
    fields = (key,) if isinstance(key, str) else tuple(key)
    return extract_text(record, fields, default_label)


def group_and_sum(
    records: Sequence[Record],
    key: KeySelector,
    amount: AmountSelector = extract_amount,
    *,
    default_label: str = "Unassigned",
    predicate: Optional[Callable[[Record], bool]] = None,
) -> Dict[str, float]:
    """Sum ``amount`` per group.

    ``key`` is a field name, an ordered sequence of fallback field names, or a
    callable. Absent and empty keys are grouped under ``default_label``.
    """

    totals: Dict[str, float] = {}
    for record in ensure_records(records, "records"):
        if predicate is not None and not predicate(record):
            continue
        label = _resolve_key(record, key, default_label)
        totals[label] = totals.get(label, 0.0) + amount(record)
    return totals


def top_n(mapping: Mapping[str, float], n: int) -> Dict[str, float]:
    """Return the ``n`` largest entries in descending order; ties keep input order."""

    if isinstance(n, bool) or not isinstance(n, int) or n < 1:
        raise ValueError(f"top_n expects a positive integer, got {n!r}")
    ranked = sorted(mapping.items(), key=lambda item: item[1], reverse=True)
    return dict(ranked[:n])


# ---------------------------------------------------------------------------
# Status categories
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class StatusCategories:
    """Many-to-one mapping of proposal statuses onto report categories.

    ``labels`` fixes the output order. Any status missing from ``mapping``
    (including ``None``) lands in ``default``. ``mapping`` may be given as a
    dict or as ``(status, category)`` pairs and is stored as a tuple of pairs
    so instances stay hashable.
    """

    labels: Tuple[str, ...]
    mapping: Tuple[Tuple[str, str], ...]
    default: str
    _lookup: Dict[str, str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        pairs = self.mapping.items() if isinstance(self.mapping, Mapping) else self.mapping
        object.__setattr__(self, "labels", tuple(self.labels))
        object.__setattr__(
            self, "mapping", tuple((str(status), str(target)) for status, target in pairs)
        )
        if self.default not in self.labels:
            raise ValueError(f"Default category '{self.default}' is not one of {self.labels}")
        unknown = sorted({target for _, target in self.mapping if target not in self.labels})
        if unknown:
            raise ValueError(f"Status mapping targets unknown categories {unknown}")
        lookup = {str(status).strip().lower(): target for status, target in self.mapping}
        object.__setattr__(self, "_lookup", lookup)

    def classify(self, status: Any) -> str:
        if status is None:
            return self.default
        return self._lookup.get(str(status).strip().lower(), self.default)


DEFAULT_STATUS_CATEGORIES = StatusCategories(
    labels=("Won", "Lost", "Pending", "Pricing", "Draft"),
    mapping={
        "won": "Won",
        "lost": "Lost",
        "submitted_to_client": "Pending",
        "approved": "Pending",
        "estimated": "Pricing",
        "pricing_complete": "Pricing",
        "pending_director_approval": "Pricing",
        "draft": "Draft",
        "rejected": "Draft",
    },
    default="Draft",
)


def classify_status(status: Any, categories: StatusCategories = DEFAULT_STATUS_CATEGORIES) -> str:
    return categories.classify(status)


def status_distribution(
    records: Sequence[Record],
    categories: StatusCategories = DEFAULT_STATUS_CATEGORIES,
    *,
    status_field: str = "status",
) -> Dict[str, int]:
    counts: Counter[str] = Counter(
        categories.classify(record.get(status_field))
        for record in ensure_records(records, "records")
    )
    return {label: counts.get(label, 0) for label in categories.labels}


def has_status(record: Record, status: str, *, status_field: str = "status") -> bool:
    value = record.get(status_field)
    return value is not None and str(value).strip().lower() == status


# ---------------------------------------------------------------------------
# Close time
# ---------------------------------------------------------------------------


def close_time_days(created: datetime, won: datetime) -> float:
    """Fractional days between creation and win. Negative spans are kept as-is."""

    return (won - created).total_seconds() / SECONDS_PER_DAY


def close_times(
    records: Sequence[Record],
    *,
    created_fields: Sequence[str],
    won_fields: Sequence[str],
) -> List[float]:
    durations: List[float] = []
    for record in ensure_records(records, "records"):
        created = extract_date(record, created_fields)
        won = extract_date(record, won_fields)
        if created is None or won is None:
            continue
        durations.append(close_time_days(created, won))
    return durations


def average_close_time(
    records: Sequence[Record],
    *,
    created_fields: Sequence[str],
    won_fields: Sequence[str],
) -> float:
    durations = close_times(records, created_fields=created_fields, won_fields=won_fields)
    return average(sum(durations), len(durations))


__all__ = [
    "DEFAULT_STATUS_CATEGORIES",
    "StatusCategories",
    "aggregate",
    "average",
    "average_close_time",
    "classify_status",
    "close_time_days",
    "close_times",
    "group_and_sum",
    "has_status",
    "rate",
    "status_distribution",
    "top_n",
]
