"""Explicit configuration for report building."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import tzinfo as TzInfo
from typing import Any, Iterable, Mapping, Optional, Tuple

import pytz

from .aggregation import DEFAULT_STATUS_CATEGORIES, StatusCategories
from .health import DEFAULT_THRESHOLDS, HealthThresholds

LOGGER = logging.getLogger(__name__)

ROLE_BDM = "bdm"
ROLE_MANAGEMENT = "management"
ROLE_ALIASES = {
    "bdm": ROLE_BDM,
    "management": ROLE_MANAGEMENT,
    "coo": ROLE_MANAGEMENT,
    "director": ROLE_MANAGEMENT,
}

MAX_BUCKETS = 104


@dataclass(frozen=True)
class AnalyticsSettings:
    month_count: int = 12
    week_count: int = 16
    top_n: int = 10
    revenue_date_fields: Tuple[str, ...] = ("wonDate", "updatedAt")
    created_date_fields: Tuple[str, ...] = ("createdAt",)
    won_date_fields: Tuple[str, ...] = ("wonDate",)
    timesheet_date_fields: Tuple[str, ...] = ("date",)
    fine_grained_health: bool = True
    timezone_name: str = "UTC"
    status_categories: StatusCategories = DEFAULT_STATUS_CATEGORIES
    health_thresholds: HealthThresholds = DEFAULT_THRESHOLDS

    @property
    def tzinfo(self) -> TzInfo:
        return resolve_timezone(self.timezone_name)


def resolve_timezone(name: Optional[str]) -> TzInfo:
    """Return the pytz zone for ``name``, falling back to UTC for unknown names."""

    if not name:
        return pytz.utc
    try:
        return pytz.timezone(name)
    except pytz.UnknownTimeZoneError:
        LOGGER.warning("Unknown timezone %r; falling back to UTC", name)
        return pytz.utc


def normalize_role(role: Any) -> str:
    key = str(role or "").strip().lower()
    if key not in ROLE_ALIASES:
        raise ValueError(
            f"Unknown dashboard role '{role}'; expected one of {sorted(ROLE_ALIASES)}"
        )
    return ROLE_ALIASES[key]


def _as_count(value: Any, default: int, label: str) -> int:
    if value in (None, ""):
        return default
    try:
        count = int(value)
    except (TypeError, ValueError):
        raise ValueError(f"{label} must be an integer, got {value!r}")
    if count < 1 or count > MAX_BUCKETS:
        raise ValueError(f"{label} must be between 1 and {MAX_BUCKETS}, got {count}")
    return count


def _as_bool(value: Any, default: bool) -> bool:
    if value in (None, ""):
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    return str(value).strip().lower() in {"true", "1", "yes", "y"}


def _as_fields(value: Any, default: Tuple[str, ...]) -> Tuple[str, ...]:
    if value in (None, ""):
        return default
    if isinstance(value, str):
        value = value.split(",")
    if not isinstance(value, Iterable):
        raise ValueError(f"Date field order must be a list of field names, got {value!r}")
    fields = tuple(str(entry).strip() for entry in value if str(entry).strip())
    return fields or default


def _as_categories(value: Any, default: StatusCategories) -> StatusCategories:
    if value in (None, ""):
        return default
    if isinstance(value, StatusCategories):
        return value
    if isinstance(value, Mapping) and {"labels", "mapping", "default"} <= set(value):
        return StatusCategories(
            labels=tuple(value["labels"]),
            mapping=value["mapping"],
            default=value["default"],
        )
    raise ValueError(
        "status_categories must be a StatusCategories or a mapping with "
        f"'labels', 'mapping' and 'default' keys, got {value!r}"
    )


def _as_thresholds(value: Any, default: HealthThresholds) -> HealthThresholds:
    if value in (None, ""):
        return default
    if isinstance(value, HealthThresholds):
        return value
    if not isinstance(value, Mapping):
        raise ValueError(
            "health_thresholds must be a HealthThresholds or a mapping of "
            f"exceeded/critical/at_risk percentages, got {value!r}"
        )
    try:
        return HealthThresholds(
            exceeded=float(value.get("exceeded", default.exceeded)),
            critical=float(value.get("critical", default.critical)),
            at_risk=float(value.get("at_risk", default.at_risk)),
        )
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid health_thresholds {value!r}: {exc}")


def normalize_settings(raw: Optional[Mapping[str, Any]] = None) -> AnalyticsSettings:
    """Coerce a loose mapping (query params, JSON config) into settings."""

    raw = raw or {}
    base = AnalyticsSettings()
    return AnalyticsSettings(
        month_count=_as_count(raw.get("month_count"), base.month_count, "month_count"),
        week_count=_as_count(raw.get("week_count"), base.week_count, "week_count"),
        top_n=_as_count(raw.get("top_n"), base.top_n, "top_n"),
        revenue_date_fields=_as_fields(raw.get("revenue_date_fields"), base.revenue_date_fields),
        created_date_fields=_as_fields(raw.get("created_date_fields"), base.created_date_fields),
        won_date_fields=_as_fields(raw.get("won_date_fields"), base.won_date_fields),
        timesheet_date_fields=_as_fields(
            raw.get("timesheet_date_fields"), base.timesheet_date_fields
        ),
        fine_grained_health=_as_bool(raw.get("fine_grained_health"), base.fine_grained_health),
        timezone_name=str(raw.get("timezone_name") or base.timezone_name),
        status_categories=_as_categories(raw.get("status_categories"), base.status_categories),
        health_thresholds=_as_thresholds(raw.get("health_thresholds"), base.health_thresholds),
    )


__all__ = [
    "AnalyticsSettings",
    "ROLE_BDM",
    "ROLE_MANAGEMENT",
    "normalize_role",
    "normalize_settings",
    "resolve_timezone",
]
