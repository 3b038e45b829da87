"""Report registry powering the dashboard views.

Each report is declared as a :class:`ReportDefinition` with typed
:class:`ReportParameter` objects. Running a report normalises the incoming
parameters, builds the aggregates from a :class:`DashboardSnapshot` and
packages them as ``summary``/``charts``/``tables`` payloads that the
rendering layer turns into cards, charts and tables.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Callable, Dict, List, Optional

from dateutil.parser import parse as dateutil_parse

from .health import HEALTH_CATEGORIES
from .reports import (
    build_alerts,
    build_dashboard,
    build_designer_performance,
    build_designer_weekly_rollup,
    build_executive_summary,
    build_project_health_table,
    build_timesheet_summary,
    filter_by_date_range,
    select_designer_projects,
)
from .settings import ROLE_MANAGEMENT, normalize_settings, resolve_timezone
from .snapshot import DashboardSnapshot
from .temporal import current_time

LOGGER = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Helper utilities
# ---------------------------------------------------------------------------


def _serialise_value(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (list, tuple)):
        return [_serialise_value(entry) for entry in value]
    return value


def _parse_date(value: Any) -> Optional[date]:
    if value in (None, ""):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        parsed = dateutil_parse(str(value))
    except (TypeError, ValueError, OverflowError):
        raise ValueError(f"Could not parse date value '{value}'")
    return parsed.date()


def _format_currency(value: float) -> str:
    return f"${value:,.0f}"


def _format_number(value: float) -> str:
    if float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:,.2f}"


def _summary_entry(
    identifier: str,
    label: str,
    value: float,
    *,
    format_hint: str = "number",
    description: Optional[str] = None,
) -> Dict[str, Any]:
    if format_hint == "currency":
        display = _format_currency(value)
    elif format_hint == "percent":
        display = f"{value:.1f}%"
    elif format_hint == "hours":
        display = f"{value:.1f}h"
    elif format_hint == "days":
        display = f"{value:.1f} days"
    else:
        display = _format_number(value)
    return {
        "id": identifier,
        "label": label,
        "value": float(value),
        "display": display,
        "format": format_hint,
        "description": description,
    }


def _series_chart(
    identifier: str, chart_type: str, title: str, series: Dict[str, float], label: str
) -> Dict[str, Any]:
    return {
        "id": identifier,
        "type": chart_type,
        "title": title,
        "labels": list(series.keys()),
        "datasets": [{"label": label, "data": list(series.values())}],
    }


# ---------------------------------------------------------------------------
# Parameter and definition primitives
# ---------------------------------------------------------------------------


@dataclass
class ReportParameter:
    name: str
    label: str
    param_type: str
    description: str = ""
    required: bool = False
    default: Any = None
    options: Optional[List[Dict[str, Any]]] = None
    options_builder: Optional[Callable[[Dict[str, Any]], List[Dict[str, Any]]]] = None
    placeholder: Optional[str] = None

    def describe(self, context: Dict[str, Any]) -> Dict[str, Any]:
        options = self.options
        if self.options_builder is not None:
            options = self.options_builder(context) or []
        default_value = self.default() if callable(self.default) else self.default
        return {
            "name": self.name,
            "label": self.label,
            "type": self.param_type,
            "description": self.description,
            "required": self.required,
            "options": options,
            "default": _serialise_value(default_value),
            "placeholder": self.placeholder,
        }

    def normalise(self, value: Any) -> Any:
        candidate = value
        if candidate in (None, ""):
            candidate = self.default() if callable(self.default) else self.default
        if candidate in (None, ""):
            if self.required:
                raise ValueError(f"{self.label} is required")
            return None
        if self.param_type == "date":
            return _parse_date(candidate)
        if self.param_type == "integer":
            try:
                return int(candidate)
            except (TypeError, ValueError):
                raise ValueError(f"{self.label} must be a whole number, got '{candidate}'")
        if self.param_type == "boolean":
            if isinstance(candidate, bool):
                return candidate
            if isinstance(candidate, (int, float)):
                return bool(candidate)
            return str(candidate).strip().lower() in {"true", "1", "yes", "y"}
        if self.param_type == "enum":
            value_text = str(candidate).strip().lower()
            allowed = {option["value"] for option in self.options or []}
            if allowed and value_text not in allowed:
                raise ValueError(
                    f"Invalid value '{candidate}' for {self.label}; expected one of {sorted(allowed)}"
                )
            return value_text
        return str(candidate).strip()


Runner = Callable[[DashboardSnapshot, Dict[str, Any], Dict[str, Any]], Dict[str, Any]]


@dataclass
class ReportDefinition:
    id: str
    name: str
    description: str
    parameters: List[ReportParameter]
    runner: Runner
    tags: List[str] = field(default_factory=list)

    def describe(self, context: Dict[str, Any]) -> Dict[str, Any]:
        defaults = {
            parameter.name: _serialise_value(
                parameter.default() if callable(parameter.default) else parameter.default
            )
            for parameter in self.parameters
        }
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "parameters": [parameter.describe(context) for parameter in self.parameters],
            "tags": self.tags,
            "defaultParams": defaults,
        }

    def normalise_params(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return {
            parameter.name: parameter.normalise(payload.get(parameter.name))
            for parameter in self.parameters
        }

    def serialise_params(self, params: Dict[str, Any]) -> Dict[str, Any]:
        return {name: _serialise_value(value) for name, value in params.items()}

    def run(
        self, snapshot: DashboardSnapshot, params: Dict[str, Any], context: Dict[str, Any]
    ) -> Dict[str, Any]:
        return self.runner(snapshot, params, context)


# ---------------------------------------------------------------------------
# Analytics engine
# ---------------------------------------------------------------------------


class AnalyticsEngine:
    def __init__(self) -> None:
        self._definitions: Dict[str, ReportDefinition] = {}
        self._register_default_reports()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def list_report_definitions(self, snapshot: DashboardSnapshot) -> List[Dict[str, Any]]:
        context = self._build_context(snapshot)
        return [definition.describe(context) for definition in self._definitions.values()]

    def run_report(
        self,
        snapshot: DashboardSnapshot,
        report_id: str,
        params: Optional[Dict[str, Any]] = None,
        *,
        now: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        if report_id not in self._definitions:
            raise KeyError(f"Unknown analytics report '{report_id}'")
        definition = self._definitions[report_id]
        normalised_params = definition.normalise_params(params or {})
        tzinfo = resolve_timezone(snapshot.timezone)
        context = self._build_context(snapshot)
        if now is None:
            now = current_time(tzinfo)
        elif now.tzinfo is not None:
            now = now.astimezone(tzinfo)
        context["now"] = now
        LOGGER.debug(
            "Running analytics report %s over %s", report_id, snapshot.scan_counts
        )
        result = definition.run(snapshot, normalised_params, context)
        meta_payload = result.get("meta", {})
        meta_payload.setdefault("appliedParameters", definition.serialise_params(normalised_params))
        meta_payload.setdefault("scanCounts", snapshot.scan_counts)
        meta_payload.setdefault("timezone", snapshot.timezone)
        return {
            "id": definition.id,
            "name": definition.name,
            "description": definition.description,
            "generatedAt": current_time(tzinfo).isoformat(),
            "summary": result.get("summary", []),
            "charts": result.get("charts", []),
            "tables": result.get("tables", []),
            "notes": result.get("notes", []),
            "meta": meta_payload,
            "data": result.get("data", {}),
        }

    # ------------------------------------------------------------------
    # Registration helpers
    # ------------------------------------------------------------------
    def register(self, definition: ReportDefinition) -> None:
        self._definitions[definition.id] = definition

    def _register_default_reports(self) -> None:
        self.register(
            ReportDefinition(
                id="proposal_dashboard",
                name="Proposal Analytics",
                description="Revenue, win rate and pipeline mix for BDMs and management.",
                parameters=[
                    ReportParameter(
                        name="role",
                        label="Role",
                        param_type="enum",
                        default=ROLE_MANAGEMENT,
                        options=[
                            {"value": "bdm", "label": "BDM"},
                            {"value": "management", "label": "Management"},
                            {"value": "coo", "label": "COO"},
                            {"value": "director", "label": "Director"},
                        ],
                        description="BDMs see their own proposals; management sees all.",
                    ),
                    ReportParameter(
                        name="owner_uid",
                        label="BDM",
                        param_type="string",
                        options_builder=_build_owner_options,
                        description="Proposal owner for the BDM view.",
                    ),
                    ReportParameter(
                        name="month_count",
                        label="Months",
                        param_type="integer",
                        default=12,
                        description="Number of trailing months in the revenue chart.",
                    ),
                    ReportParameter(
                        name="week_count",
                        label="Weeks",
                        param_type="integer",
                        default=16,
                        description="Number of trailing weeks in the weekly revenue chart.",
                    ),
                    ReportParameter(
                        name="top_n",
                        label="Top BDMs",
                        param_type="integer",
                        default=10,
                    ),
                ],
                runner=_run_proposal_dashboard,
                tags=["proposals", "revenue", "bdm"],
            )
        )

        self.register(
            ReportDefinition(
                id="executive_monitoring",
                name="Executive Hours Monitoring",
                description="Budget health, alerts and designer contribution across projects.",
                parameters=[
                    ReportParameter(
                        name="start_date",
                        label="From",
                        param_type="date",
                        description="Only count timesheet entries on or after this date.",
                    ),
                    ReportParameter(
                        name="end_date",
                        label="To",
                        param_type="date",
                        description="Only count timesheet entries on or before this date.",
                    ),
                    ReportParameter(
                        name="fine_grained",
                        label="Show Critical Band",
                        param_type="boolean",
                        default=True,
                        description="Separate projects at 90-100% usage as Critical.",
                    ),
                ],
                runner=_run_executive_monitoring,
                tags=["projects", "hours", "executive"],
            )
        )

        self.register(
            ReportDefinition(
                id="designer_weekly_hours",
                name="Designer Weekly Hours",
                description="Hours per designer per Monday-aligned week.",
                parameters=[
                    ReportParameter(name="start_date", label="From", param_type="date"),
                    ReportParameter(name="end_date", label="To", param_type="date"),
                ],
                runner=_run_designer_weekly_hours,
                tags=["timesheets", "designers"],
            )
        )

        self.register(
            ReportDefinition(
                id="timesheet_summary",
                name="My Timesheet",
                description="Hours logged this week, this month and overall.",
                parameters=[
                    ReportParameter(
                        name="designer_uid",
                        label="Designer",
                        param_type="string",
                        description="Restrict the summary to one designer's entries.",
                    ),
                ],
                runner=_run_timesheet_summary,
                tags=["timesheets"],
            )
        )

    # ------------------------------------------------------------------
    # Context gathering
    # ------------------------------------------------------------------
    def _build_context(self, snapshot: DashboardSnapshot) -> Dict[str, Any]:
        owners: Dict[str, str] = {}
        for proposal in snapshot.proposals:
            uid = proposal.get("createdByUid")
            if uid in (None, ""):
                continue
            owners.setdefault(str(uid), str(proposal.get("createdByName") or uid))
        return {"owners": owners}


_engine_instance: Optional[AnalyticsEngine] = None


def get_analytics_engine() -> AnalyticsEngine:
    global _engine_instance
    if _engine_instance is None:
        _engine_instance = AnalyticsEngine()
    return _engine_instance


def _build_owner_options(context: Dict[str, Any]) -> List[Dict[str, Any]]:
    owners = context.get("owners") or {}
    return [
        {"value": uid, "label": name}
        for uid, name in sorted(owners.items(), key=lambda item: item[1].lower())
    ]


# ---------------------------------------------------------------------------
# Report runners
# ---------------------------------------------------------------------------


def _run_proposal_dashboard(
    snapshot: DashboardSnapshot, params: Dict[str, Any], context: Dict[str, Any]
) -> Dict[str, Any]:
    settings = normalize_settings(
        {
            "month_count": params.get("month_count"),
            "week_count": params.get("week_count"),
            "top_n": params.get("top_n"),
            "timezone_name": snapshot.timezone,
        }
    )
    report = build_dashboard(
        snapshot,
        role=params.get("role") or ROLE_MANAGEMENT,
        owner_uid=params.get("owner_uid"),
        settings=settings,
        now=context.get("now"),
    )
    kpis = report.kpis

    summary = [
        _summary_entry("total_revenue", "Total Revenue", kpis.total_revenue, format_hint="currency"),
        _summary_entry("total_proposals", "Total Proposals", float(kpis.total_proposals)),
        _summary_entry("win_rate", "Win Rate", kpis.win_rate, format_hint="percent"),
        _summary_entry("avg_deal_value", "Avg. Deal Value", kpis.avg_deal_value, format_hint="currency"),
        _summary_entry("total_won", "Won", float(kpis.total_won)),
        _summary_entry("total_lost", "Lost", float(kpis.total_lost)),
        _summary_entry(
            "avg_close_time",
            "Avg. Close Time",
            kpis.avg_close_time_days,
            format_hint="days",
            description="Days from creation to win for proposals carrying both dates.",
        ),
    ]

    charts = [
        _series_chart("revenue_by_month", "bar", "Monthly Revenue", report.monthly_revenue, "Revenue"),
        _series_chart(
            "status_breakdown", "doughnut", "Proposal Status", report.status_distribution, "Proposals"
        ),
    ]
    tables = []
    if report.role == ROLE_MANAGEMENT:
        charts.append(
            _series_chart("bdm_performance", "bar", "Revenue by BDM", report.top_owners or {}, "Revenue")
        )
        charts.append(
            _series_chart("revenue_by_week", "line", "Weekly Revenue", report.weekly_revenue or {}, "Revenue")
        )
        charts.append(
            _series_chart(
                "regional_revenue", "pie", "Revenue by Region", report.regional_breakdown or {}, "Revenue"
            )
        )
        tables.append(
            {
                "id": "bdm_performance",
                "title": "BDM Performance",
                "columns": [
                    {"key": "bdm", "label": "BDM"},
                    {"key": "revenue", "label": "Revenue", "format": "currency"},
                ],
                "rows": [
                    {"bdm": name, "revenue": value} for name, value in (report.top_owners or {}).items()
                ],
            }
        )

    notes = [
        "Revenue counts won proposals only, bucketed by won date with the last update as fallback.",
        "Proposals without a usable date still count toward totals but not toward the charts.",
    ]
    meta = {"role": report.role, "ownerUid": params.get("owner_uid")}
    return {
        "summary": summary,
        "charts": charts,
        "tables": tables,
        "notes": notes,
        "meta": meta,
        "data": report.to_dict(),
    }


def _run_executive_monitoring(
    snapshot: DashboardSnapshot, params: Dict[str, Any], context: Dict[str, Any]
) -> Dict[str, Any]:
    start_date: Optional[date] = params.get("start_date")
    end_date: Optional[date] = params.get("end_date")
    settings = normalize_settings(
        {"timezone_name": snapshot.timezone, "fine_grained_health": params.get("fine_grained")}
    )
    fine_grained = settings.fine_grained_health
    thresholds = settings.health_thresholds

    timesheets = filter_by_date_range(
        snapshot.timesheets,
        settings.timesheet_date_fields,
        start_date,
        end_date,
        tzinfo=settings.tzinfo,
    )
    executive = build_executive_summary(snapshot.projects, timesheets, settings=settings)
    health_rows = build_project_health_table(snapshot.projects, settings=settings)
    alerts = build_alerts(snapshot.projects, settings=settings)
    designers = build_designer_performance(timesheets)

    summary = [
        _summary_entry("total_projects", "Total Projects", float(executive.total_projects)),
        _summary_entry(
            "on_track",
            "On-Track Projects",
            float(executive.on_track),
            description=f"Under {thresholds.at_risk:g}% budget",
        ),
        _summary_entry(
            "at_risk",
            "At-Risk Projects",
            float(executive.at_risk),
            description=f"{thresholds.at_risk:g}-{thresholds.exceeded:g}% budget",
        ),
        _summary_entry(
            "exceeded",
            "Exceeded Projects",
            float(executive.exceeded),
            description=f"Over {thresholds.exceeded:g}% budget",
        ),
        _summary_entry("active_designers", "Active Designers", float(executive.active_designers)),
        _summary_entry("total_entries", "Timesheet Entries", float(executive.total_entries)),
        _summary_entry(
            "avg_hours_per_project", "Avg. Hours / Project", executive.avg_hours_per_project, format_hint="hours"
        ),
        _summary_entry("efficiency", "Budget Utilization", executive.efficiency, format_hint="percent"),
    ]

    category_counts = {category: 0 for category in HEALTH_CATEGORIES}
    for row in health_rows:
        category_counts[row.category] = category_counts.get(row.category, 0) + 1

    charts = [
        _series_chart("project_health_mix", "doughnut", "Project Health", category_counts, "Projects"),
        _series_chart(
            "designer_hours",
            "bar",
            "Designer Hours Contribution",
            {designer.name: designer.total_hours for designer in designers},
            "Total Hours Logged",
        ),
    ]

    tables = [
        {
            "id": "project_health",
            "title": "Project Health Matrix",
            "columns": [
                {"key": "projectName", "label": "Project"},
                {"key": "designLeadName", "label": "Design Manager"},
                {"key": "teamSize", "label": "Team Size", "format": "number"},
                {"key": "allocated", "label": "Budget", "format": "hours"},
                {"key": "logged", "label": "Used", "format": "hours"},
                {"key": "remaining", "label": "Remaining", "format": "hours"},
                {"key": "usagePercent", "label": "Usage %", "format": "percent"},
                {"key": "category", "label": "Status"},
            ],
            "rows": [row.to_dict() for row in health_rows],
        },
        {
            "id": "alerts",
            "title": f"Active Alerts ({len(alerts)})",
            "columns": [
                {"key": "severity", "label": "Severity"},
                {"key": "title", "label": "Alert"},
                {"key": "message", "label": "Details"},
            ],
            "rows": [alert.to_dict() for alert in alerts],
        },
        {
            "id": "designer_performance",
            "title": "Designer Performance",
            "columns": [
                {"key": "name", "label": "Designer"},
                {"key": "totalHours", "label": "Total Hours", "format": "hours"},
                {"key": "projectCount", "label": "Projects", "format": "number"},
                {"key": "avgHoursPerProject", "label": "Avg Hours/Project", "format": "hours"},
                {"key": "entries", "label": "Entries", "format": "number"},
            ],
            "rows": [designer.to_dict() for designer in designers],
        },
    ]

    notes = [
        "Projects without allocated hours are excluded from health analytics.",
        "Summary counts fold the Critical band into At Risk.",
    ]
    meta = {
        "filters": {
            "start_date": start_date.isoformat() if start_date else None,
            "end_date": end_date.isoformat() if end_date else None,
            "fine_grained": fine_grained,
        },
        "excludedProjects": len(snapshot.projects) - len(snapshot.budgeted_projects),
    }
    return {
        "summary": summary,
        "charts": charts,
        "tables": tables,
        "notes": notes,
        "meta": meta,
        "data": {
            "summary": executive.to_dict(),
            "projects": [row.to_dict() for row in health_rows],
            "alerts": [alert.to_dict() for alert in alerts],
            "designers": [designer.to_dict() for designer in designers],
        },
    }


def _run_designer_weekly_hours(
    snapshot: DashboardSnapshot, params: Dict[str, Any], context: Dict[str, Any]
) -> Dict[str, Any]:
    settings = normalize_settings({"timezone_name": snapshot.timezone})
    entries = filter_by_date_range(
        snapshot.timesheets,
        settings.timesheet_date_fields,
        params.get("start_date"),
        params.get("end_date"),
        tzinfo=settings.tzinfo,
    )
    rollup = build_designer_weekly_rollup(entries, settings=settings)
    totals = rollup.summary

    summary = [
        _summary_entry("total_designers", "Total Designers", float(totals["totalDesigners"])),
        _summary_entry("total_hours", "Total Hours (All Time)", totals["totalHoursAllTime"], format_hint="hours"),
        _summary_entry(
            "avg_hours_per_designer", "Avg Hours/Designer", totals["avgHoursPerDesigner"], format_hint="hours"
        ),
        _summary_entry("weeks_tracked", "Weeks Tracked", float(totals["weeksTracked"])),
    ]

    charts = [
        _series_chart(
            "weekly_hours_trend",
            "line",
            "Weekly Hours Trend",
            {week.week: week.total for week in rollup.weekly_totals},
            "Total Hours",
        ),
        _series_chart(
            "designer_distribution",
            "bar",
            "Designer Workload Distribution",
            {designer.name: designer.total_hours for designer in rollup.per_designer},
            "Total Hours",
        ),
    ]

    tables = [
        {
            "id": "designer_summary",
            "title": "Designer Hours Summary",
            "columns": [
                {"key": "name", "label": "Designer"},
                {"key": "totalHours", "label": "Total Hours", "format": "hours"},
                {"key": "weeksActive", "label": "Weeks Active", "format": "number"},
                {"key": "avgWeeklyHours", "label": "Avg Hours/Week", "format": "hours"},
                {"key": "avgDailyHours", "label": "Avg Hours/Day", "format": "hours"},
                {"key": "projectsWorked", "label": "Projects", "format": "number"},
                {"key": "uniqueWorkingDays", "label": "Working Days", "format": "number"},
            ],
            "rows": [designer.to_dict() for designer in rollup.per_designer],
        },
        {
            "id": "weekly_totals",
            "title": "Weekly Totals",
            "columns": [
                {"key": "weekLabel", "label": "Week"},
                {"key": "total", "label": "Total Hours", "format": "hours"},
                {"key": "designers", "label": "Designers", "format": "number"},
                {"key": "averagePerDesigner", "label": "Avg/Designer", "format": "hours"},
            ],
            "rows": [week.to_dict() for week in rollup.weekly_totals],
        },
    ]

    notes = ["Weeks start on Monday; entries without a valid date count only toward totals."]
    return {
        "summary": summary,
        "charts": charts,
        "tables": tables,
        "notes": notes,
        "meta": {"scannedEntries": len(entries)},
        "data": rollup.to_dict(),
    }


def _run_timesheet_summary(
    snapshot: DashboardSnapshot, params: Dict[str, Any], context: Dict[str, Any]
) -> Dict[str, Any]:
    designer_uid = params.get("designer_uid")
    entries = snapshot.timesheets
    projects = snapshot.projects
    if designer_uid:
        entries = [entry for entry in entries if str(entry.get("designerUid") or "") == designer_uid]
        projects = select_designer_projects(projects, designer_uid, entries)
    settings = normalize_settings({"timezone_name": snapshot.timezone})
    totals = build_timesheet_summary(
        entries,
        now=context.get("now"),
        active_projects=len(projects),
        settings=settings,
    )
    summary = [
        _summary_entry("this_week", "This Week", totals.this_week_hours, format_hint="hours"),
        _summary_entry("this_month", "This Month", totals.this_month_hours, format_hint="hours"),
        _summary_entry("total_hours", "Total Hours Logged", totals.total_hours, format_hint="hours"),
        _summary_entry("projects_worked", "Projects Worked On", float(totals.project_count)),
        _summary_entry("entries", "Total Entries", float(totals.entry_count)),
        _summary_entry("active_projects", "Active Projects", float(totals.active_projects)),
    ]
    return {
        "summary": summary,
        "meta": {"designerUid": designer_uid},
        "data": totals.to_dict(),
    }


__all__ = ["AnalyticsEngine", "ReportDefinition", "ReportParameter", "get_analytics_engine"]
