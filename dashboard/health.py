"""Budget health classification for projects with allocated design hours."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

HEALTHY = "Healthy"
AT_RISK = "At Risk"
CRITICAL = "Critical"
EXCEEDED = "Exceeded"
NOT_APPLICABLE = "N/A"

HEALTH_CATEGORIES = (HEALTHY, AT_RISK, CRITICAL, EXCEEDED)


@dataclass(frozen=True)
class HealthThresholds:
    """Usage percentages at which a project changes category."""

    exceeded: float = 100.0
    critical: float = 90.0
    at_risk: float = 70.0

    def __post_init__(self) -> None:
        if not (self.at_risk <= self.critical <= self.exceeded):
            raise ValueError(
                "Health thresholds must satisfy at_risk <= critical <= exceeded"
            )


DEFAULT_THRESHOLDS = HealthThresholds()


@dataclass(frozen=True)
class BudgetHealth:
    allocated: float
    logged: float
    remaining: float
    usage_percent: float
    category: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "allocated": self.allocated,
            "logged": self.logged,
            "remaining": self.remaining,
            "usagePercent": self.usage_percent,
            "category": self.category,
        }


def usage_percent(allocated: float, logged: float) -> float:
    if allocated > 0:
        return (logged / allocated) * 100
    return 0.0


def classify_usage(
    usage: float,
    *,
    fine_grained: bool = True,
    thresholds: HealthThresholds = DEFAULT_THRESHOLDS,
) -> str:
    """Map a usage percentage to a category; the first matching rule wins.

    With ``fine_grained`` disabled the ``Critical`` band is folded into
    ``At Risk``, giving the three-way split used by the summary counts.
    """

    if usage > thresholds.exceeded:
        return EXCEEDED
    if fine_grained and usage >= thresholds.critical:
        return CRITICAL
    if usage >= thresholds.at_risk:
        return AT_RISK
    return HEALTHY


def assess_budget(
    allocated: float,
    logged: float,
    *,
    fine_grained: bool = True,
    thresholds: HealthThresholds = DEFAULT_THRESHOLDS,
) -> BudgetHealth:
    """Classify an (allocated, logged) hour pair.

    Projects without allocated hours have no meaningful usage and must be
    filtered out (and shown as ``N/A``) before calling this.
    """

    if allocated <= 0:
        raise ValueError(f"Allocated hours must be positive to assess budget health, got {allocated!r}")
    usage = usage_percent(allocated, logged)
    return BudgetHealth(
        allocated=allocated,
        logged=logged,
        remaining=allocated - logged,
        usage_percent=usage,
        category=classify_usage(usage, fine_grained=fine_grained, thresholds=thresholds),
    )


__all__ = [
    "AT_RISK",
    "BudgetHealth",
    "CRITICAL",
    "DEFAULT_THRESHOLDS",
    "EXCEEDED",
    "HEALTHY",
    "HEALTH_CATEGORIES",
    "HealthThresholds",
    "NOT_APPLICABLE",
    "assess_budget",
    "classify_usage",
    "usage_percent",
]
