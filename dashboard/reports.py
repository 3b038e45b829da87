"""Named reports for the BDM, management and executive monitoring views.

Every builder is a pure function of the record collections it is given plus
explicit parameters; nothing is cached between calls and nothing is read from
shared state. Empty collections produce zero-valued reports.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, tzinfo as TzInfo
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from .aggregation import (
    StatusCategories,
    aggregate,
    average,
    average_close_time,
    group_and_sum,
    has_status,
    rate,
    status_distribution,
    top_n,
)
from .health import (
    AT_RISK,
    EXCEEDED,
    HEALTHY,
    HealthThresholds,
    assess_budget,
)
from .normalize import ensure_records, extract_amount, extract_date, extract_number, extract_text
from .settings import ROLE_BDM, ROLE_MANAGEMENT, AnalyticsSettings, normalize_role
from .snapshot import DashboardSnapshot, select_budgeted
from .temporal import (
    current_time,
    init_trailing_months,
    init_trailing_weeks,
    is_same_month,
    is_same_week,
    week_label,
    week_start_key,
)

Record = Mapping[str, Any]

DEFAULT_SETTINGS = AnalyticsSettings()
OWNER_UID_FIELD = "createdByUid"
REGION_FIELDS = ("country", "region", "clientLocation")


def _is_won(record: Record) -> bool:
    return has_status(record, "won")


def _is_lost(record: Record) -> bool:
    return has_status(record, "lost")


def _resolve_now(now: Optional[Union[date, datetime]], tzinfo: TzInfo) -> Union[date, datetime]:
    if now is None:
        return current_time(tzinfo)
    if isinstance(now, datetime) and now.tzinfo is not None:
        return now.astimezone(tzinfo)
    return now


# ---------------------------------------------------------------------------
# Proposal reports
# ---------------------------------------------------------------------------


@dataclass
class KpiSet:
    total_revenue: float = 0.0
    total_proposals: int = 0
    total_won: int = 0
    total_lost: int = 0
    win_rate: float = 0.0
    avg_deal_value: float = 0.0
    avg_close_time_days: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalRevenue": self.total_revenue,
            "totalProposals": self.total_proposals,
            "totalWon": self.total_won,
            "totalLost": self.total_lost,
            "winRate": self.win_rate,
            "avgDealValue": self.avg_deal_value,
            "avgCloseTimeDays": self.avg_close_time_days,
        }


def filter_by_owner(
    proposals: Sequence[Record], owner_uid: Optional[str], *, owner_field: str = OWNER_UID_FIELD
) -> List[Record]:
    records = ensure_records(proposals, "proposals")
    if owner_uid in (None, ""):
        return records
    wanted = str(owner_uid)
    return [record for record in records if str(record.get(owner_field) or "") == wanted]


def build_kpi_report(
    proposals: Sequence[Record],
    owner_uid: Optional[str] = None,
    *,
    settings: AnalyticsSettings = DEFAULT_SETTINGS,
) -> KpiSet:
    """Headline proposal KPIs.

    Every proposal counts toward ``total_proposals`` whether or not its dates
    resolve; only the close-time average needs both creation and win dates.
    """

    records = filter_by_owner(proposals, owner_uid)
    won = [record for record in records if _is_won(record)]
    total_won = len(won)
    total_lost = sum(1 for record in records if _is_lost(record))
    total_revenue = sum(extract_amount(record) for record in won)
    return KpiSet(
        total_revenue=total_revenue,
        total_proposals=len(records),
        total_won=total_won,
        total_lost=total_lost,
        win_rate=rate(total_won, total_won + total_lost),
        avg_deal_value=average(total_revenue, total_won),
        avg_close_time_days=average_close_time(
            won,
            created_fields=settings.created_date_fields,
            won_fields=settings.won_date_fields,
        ),
    )


def build_monthly_revenue(
    proposals: Sequence[Record],
    month_count: Optional[int] = None,
    *,
    now: Optional[Union[date, datetime]] = None,
    settings: AnalyticsSettings = DEFAULT_SETTINGS,
) -> Dict[str, float]:
    """Won revenue per calendar month for the trailing window ending this month."""

    records = ensure_records(proposals, "proposals")
    tzinfo = settings.tzinfo
    buckets = init_trailing_months(
        month_count if month_count is not None else settings.month_count,
        now=_resolve_now(now, tzinfo),
    )
    return aggregate(
        records,
        buckets,
        date_fields=settings.revenue_date_fields,
        predicate=_is_won,
        tzinfo=tzinfo,
    )


def build_weekly_revenue(
    proposals: Sequence[Record],
    week_count: Optional[int] = None,
    *,
    now: Optional[Union[date, datetime]] = None,
    settings: AnalyticsSettings = DEFAULT_SETTINGS,
) -> Dict[str, float]:
    """Won revenue per Monday-aligned week for the trailing window ending this week."""

    records = ensure_records(proposals, "proposals")
    tzinfo = settings.tzinfo
    buckets = init_trailing_weeks(
        week_count if week_count is not None else settings.week_count,
        now=_resolve_now(now, tzinfo),
    )
    return aggregate(
        records,
        buckets,
        date_fields=settings.revenue_date_fields,
        predicate=_is_won,
        bucket_key=week_start_key,
        tzinfo=tzinfo,
    )


def build_status_distribution(
    proposals: Sequence[Record],
    categories: StatusCategories = DEFAULT_SETTINGS.status_categories,
) -> Dict[str, int]:
    return status_distribution(ensure_records(proposals, "proposals"), categories)


def build_owner_performance(
    proposals: Sequence[Record],
    owner_field: str = "createdByName",
    *,
    default_label: str = "Unassigned",
) -> Dict[str, float]:
    """Won revenue per owner; the mapping is unordered, use ``top_n`` to rank it."""

    return group_and_sum(
        ensure_records(proposals, "proposals"),
        owner_field,
        default_label=default_label,
        predicate=_is_won,
    )


def build_regional_breakdown(won_proposals: Sequence[Record]) -> Dict[str, float]:
    """Revenue per client country, falling back to the legacy region fields."""

    return group_and_sum(
        ensure_records(won_proposals, "won proposals"),
        REGION_FIELDS,
        default_label="Unknown",
    )


# ---------------------------------------------------------------------------
# Project health
# ---------------------------------------------------------------------------


@dataclass
class ProjectHealth:
    project_id: Optional[str]
    project_name: str
    client_company: str
    design_lead: str
    team_size: int
    allocated: float
    logged: float
    remaining: float
    usage_percent: float
    category: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "projectId": self.project_id,
            "projectName": self.project_name,
            "clientCompany": self.client_company,
            "designLeadName": self.design_lead,
            "teamSize": self.team_size,
            "allocated": self.allocated,
            "logged": self.logged,
            "remaining": self.remaining,
            "usagePercent": self.usage_percent,
            "category": self.category,
        }


@dataclass
class Alert:
    severity: str
    title: str
    message: str
    project: ProjectHealth

    def to_dict(self) -> Dict[str, Any]:
        return {
            "severity": self.severity,
            "title": self.title,
            "message": self.message,
            "project": self.project.to_dict(),
        }


def _project_health(
    project: Record, *, fine_grained: bool, thresholds: HealthThresholds
) -> ProjectHealth:
    budget = assess_budget(
        extract_number(project, "allocatedHours"),
        extract_number(project, "hoursLogged"),
        fine_grained=fine_grained,
        thresholds=thresholds,
    )
    designers = project.get("assignedDesignerNames")
    project_id = project.get("id")
    return ProjectHealth(
        project_id=str(project_id) if project_id is not None else None,
        project_name=extract_text(project, ("projectName",), "Untitled Project"),
        client_company=extract_text(project, ("clientCompany",), "Unknown"),
        design_lead=extract_text(project, ("designLeadName",), "Unassigned"),
        team_size=len(designers) if isinstance(designers, (list, tuple)) else 0,
        allocated=budget.allocated,
        logged=budget.logged,
        remaining=budget.remaining,
        usage_percent=budget.usage_percent,
        category=budget.category,
    )


def build_project_health_table(
    projects: Sequence[Record],
    *,
    fine_grained: Optional[bool] = None,
    thresholds: Optional[HealthThresholds] = None,
    settings: AnalyticsSettings = DEFAULT_SETTINGS,
) -> List[ProjectHealth]:
    """Health rows for budgeted projects, highest usage first.

    Projects without allocated hours are left out; the view shows them as N/A.
    ``fine_grained`` and ``thresholds`` default to the values in ``settings``.
    """

    if fine_grained is None:
        fine_grained = settings.fine_grained_health
    if thresholds is None:
        thresholds = settings.health_thresholds
    rows = [
        _project_health(project, fine_grained=fine_grained, thresholds=thresholds)
        for project in select_budgeted(projects)
    ]
    rows.sort(key=lambda row: row.usage_percent, reverse=True)
    return rows


def build_alerts(
    projects: Sequence[Record],
    *,
    thresholds: Optional[HealthThresholds] = None,
    settings: AnalyticsSettings = DEFAULT_SETTINGS,
) -> List[Alert]:
    """One alert per over-budget (critical) or high-usage (warning) project, in project order."""

    if thresholds is None:
        thresholds = settings.health_thresholds
    alerts: List[Alert] = []
    for project in select_budgeted(projects):
        health = _project_health(project, fine_grained=False, thresholds=thresholds)
        usage = health.usage_percent
        if usage > thresholds.exceeded:
            alerts.append(
                Alert(
                    severity="critical",
                    title="Budget Exceeded",
                    message=(
                        f'Project "{health.project_name}" has exceeded its allocated hours by '
                        f"{abs(health.remaining):.1f} hours ({usage:.0f}% used)"
                    ),
                    project=health,
                )
            )
        elif usage >= thresholds.at_risk:
            alerts.append(
                Alert(
                    severity="warning",
                    title="High Budget Usage",
                    message=(
                        f'Project "{health.project_name}" is at {usage:.0f}% budget utilization '
                        f"with {health.remaining:.1f} hours remaining"
                    ),
                    project=health,
                )
            )
    return alerts


@dataclass
class ExecutiveSummary:
    total_projects: int = 0
    on_track: int = 0
    at_risk: int = 0
    exceeded: int = 0
    total_allocated: float = 0.0
    total_logged: float = 0.0
    active_designers: int = 0
    total_entries: int = 0
    avg_hours_per_project: float = 0.0
    efficiency: float = 0.0
    remaining_percentage: float = 0.0

    @property
    def remaining_hours(self) -> float:
        return self.total_allocated - self.total_logged

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalProjects": self.total_projects,
            "onTrackProjects": self.on_track,
            "atRiskProjects": self.at_risk,
            "exceededProjects": self.exceeded,
            "totalAllocated": self.total_allocated,
            "totalLogged": self.total_logged,
            "remainingHours": self.remaining_hours,
            "activeDesigners": self.active_designers,
            "totalEntries": self.total_entries,
            "avgHoursPerProject": self.avg_hours_per_project,
            "efficiency": self.efficiency,
            "remainingPercentage": self.remaining_percentage,
        }


def build_executive_summary(
    projects: Sequence[Record],
    timesheets: Sequence[Record],
    *,
    thresholds: Optional[HealthThresholds] = None,
    settings: AnalyticsSettings = DEFAULT_SETTINGS,
) -> ExecutiveSummary:
    """Portfolio-level hours metrics using the three-way (collapsed) health split."""

    if thresholds is None:
        thresholds = settings.health_thresholds
    budgeted = select_budgeted(projects)
    entries = ensure_records(timesheets, "timesheets")
    summary = ExecutiveSummary(total_projects=len(budgeted), total_entries=len(entries))
    for project in budgeted:
        health = _project_health(project, fine_grained=False, thresholds=thresholds)
        summary.total_allocated += health.allocated
        summary.total_logged += health.logged
        if health.category == EXCEEDED:
            summary.exceeded += 1
        elif health.category == AT_RISK:
            summary.at_risk += 1
        elif health.category == HEALTHY:
            summary.on_track += 1
    summary.active_designers = len(
        {entry.get("designerUid") for entry in entries if entry.get("designerUid") is not None}
    )
    summary.avg_hours_per_project = average(summary.total_logged, summary.total_projects)
    summary.efficiency = rate(summary.total_logged, summary.total_allocated)
    summary.remaining_percentage = rate(summary.remaining_hours, summary.total_allocated)
    return summary


# ---------------------------------------------------------------------------
# Timesheet reports
# ---------------------------------------------------------------------------


def _designer_identity(entry: Record) -> Tuple[str, str, str]:
    name = extract_text(entry, ("designerName",), "Unknown")
    email = extract_text(entry, ("designerEmail",), "")
    uid = extract_text(entry, ("designerUid", "designerEmail", "designerName"), "unknown")
    return uid, name, email


@dataclass
class DesignerHours:
    uid: str
    name: str
    email: str
    total_hours: float = 0.0
    weeks_active: int = 0
    avg_weekly_hours: float = 0.0
    avg_daily_hours: float = 0.0
    projects_worked: int = 0
    unique_working_days: int = 0
    weekly_hours: Dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "uid": self.uid,
            "name": self.name,
            "email": self.email,
            "totalHours": self.total_hours,
            "weeksActive": self.weeks_active,
            "avgWeeklyHours": self.avg_weekly_hours,
            "avgDailyHours": self.avg_daily_hours,
            "projectsWorked": self.projects_worked,
            "uniqueWorkingDays": self.unique_working_days,
            "weeklyHours": dict(self.weekly_hours),
        }


@dataclass
class WeeklyTotal:
    week: str
    week_label: str
    total: float
    designers: int
    average_per_designer: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "week": self.week,
            "weekLabel": self.week_label,
            "total": self.total,
            "designers": self.designers,
            "averagePerDesigner": self.average_per_designer,
        }


@dataclass
class DesignerWeeklyRollup:
    per_designer: List[DesignerHours] = field(default_factory=list)
    weekly_totals: List[WeeklyTotal] = field(default_factory=list)
    summary: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "designers": [designer.to_dict() for designer in self.per_designer],
            "weeklyTotals": [week.to_dict() for week in self.weekly_totals],
            "summary": dict(self.summary),
        }


def build_designer_weekly_rollup(
    entries: Sequence[Record],
    *,
    settings: AnalyticsSettings = DEFAULT_SETTINGS,
) -> DesignerWeeklyRollup:
    """Per-designer and per-week hour rollups.

    Entries without a usable date still count toward a designer's total hours
    but not toward weeks, working days or weekly totals.
    """

    records = ensure_records(entries, "timesheets")
    tzinfo = settings.tzinfo
    designers: Dict[str, DesignerHours] = {}
    projects: Dict[str, set] = {}
    days: Dict[str, set] = {}
    week_totals: Dict[str, float] = {}
    week_designers: Dict[str, set] = {}

    for entry in records:
        uid, name, email = _designer_identity(entry)
        hours = extract_number(entry, "hours")
        designer = designers.setdefault(uid, DesignerHours(uid=uid, name=name, email=email))
        designer.total_hours += hours
        project_id = entry.get("projectId")
        if project_id not in (None, ""):
            projects.setdefault(uid, set()).add(str(project_id))

        worked_on = extract_date(entry, settings.timesheet_date_fields, tzinfo)
        if worked_on is None:
            continue
        week = week_start_key(worked_on)
        designer.weekly_hours[week] = designer.weekly_hours.get(week, 0.0) + hours
        days.setdefault(uid, set()).add(worked_on.date().isoformat())
        week_totals[week] = week_totals.get(week, 0.0) + hours
        week_designers.setdefault(week, set()).add(uid)

    for uid, designer in designers.items():
        designer.weekly_hours = dict(sorted(designer.weekly_hours.items()))
        designer.weeks_active = len(designer.weekly_hours)
        designer.unique_working_days = len(days.get(uid, ()))
        designer.projects_worked = len(projects.get(uid, ()))
        designer.avg_weekly_hours = average(designer.total_hours, designer.weeks_active)
        designer.avg_daily_hours = average(designer.total_hours, designer.unique_working_days)

    per_designer = sorted(designers.values(), key=lambda item: item.total_hours, reverse=True)
    weekly_totals = [
        WeeklyTotal(
            week=week,
            week_label=week_label(week),
            total=total,
            designers=len(week_designers[week]),
            average_per_designer=average(total, len(week_designers[week])),
        )
        for week, total in sorted(week_totals.items())
    ]
    total_hours = sum(designer.total_hours for designer in per_designer)
    summary = {
        "totalDesigners": len(per_designer),
        "totalHoursAllTime": total_hours,
        "avgHoursPerDesigner": average(total_hours, len(per_designer)),
        "weeksTracked": len(weekly_totals),
    }
    return DesignerWeeklyRollup(per_designer=per_designer, weekly_totals=weekly_totals, summary=summary)


@dataclass
class DesignerPerformance:
    uid: str
    name: str
    email: str
    total_hours: float = 0.0
    project_count: int = 0
    avg_hours_per_project: float = 0.0
    entries: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "uid": self.uid,
            "name": self.name,
            "email": self.email,
            "totalHours": self.total_hours,
            "projectCount": self.project_count,
            "avgHoursPerProject": self.avg_hours_per_project,
            "entries": self.entries,
        }


def build_designer_performance(timesheets: Sequence[Record]) -> List[DesignerPerformance]:
    """Hours, project spread and entry counts per designer, busiest first."""

    stats: Dict[str, DesignerPerformance] = {}
    projects: Dict[str, set] = {}
    for entry in ensure_records(timesheets, "timesheets"):
        uid, name, email = _designer_identity(entry)
        designer = stats.setdefault(uid, DesignerPerformance(uid=uid, name=name, email=email))
        designer.total_hours += extract_number(entry, "hours")
        designer.entries += 1
        project_id = entry.get("projectId")
        if project_id not in (None, ""):
            projects.setdefault(uid, set()).add(str(project_id))
    for uid, designer in stats.items():
        designer.project_count = len(projects.get(uid, ()))
        designer.avg_hours_per_project = average(designer.total_hours, designer.project_count)
    return sorted(stats.values(), key=lambda item: item.total_hours, reverse=True)


@dataclass
class TimesheetSummary:
    this_week_hours: float = 0.0
    this_month_hours: float = 0.0
    total_hours: float = 0.0
    project_count: int = 0
    entry_count: int = 0
    active_projects: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "thisWeekHours": self.this_week_hours,
            "thisMonthHours": self.this_month_hours,
            "totalHours": self.total_hours,
            "projectCount": self.project_count,
            "entryCount": self.entry_count,
            "activeProjects": self.active_projects,
        }


def select_designer_projects(
    projects: Sequence[Record], designer_uid: str, timesheets: Sequence[Record] = ()
) -> List[Record]:
    """Projects assigned to ``designer_uid`` or carrying hours it has logged.

    A project belongs to the designer when its ``assignedDesigners`` uids or
    ``assignedDesignerNames`` include the designer, or when one of the
    designer's timesheet entries points at it.
    """

    wanted = str(designer_uid)
    own_entries = [
        entry
        for entry in ensure_records(timesheets, "timesheets")
        if str(entry.get("designerUid") or "") == wanted
    ]
    logged_ids = {
        str(entry.get("projectId")) for entry in own_entries if entry.get("projectId") not in (None, "")
    }
    names = {extract_text(entry, ("designerName",), "") for entry in own_entries} - {""}

    selected: List[Record] = []
    for project in ensure_records(projects, "projects"):
        uids = project.get("assignedDesigners")
        assigned_uids = {str(uid) for uid in uids} if isinstance(uids, (list, tuple)) else set()
        designer_names = project.get("assignedDesignerNames")
        assigned_names = (
            {str(name).strip() for name in designer_names}
            if isinstance(designer_names, (list, tuple))
            else set()
        )
        project_id = project.get("id")
        if (
            wanted in assigned_uids
            or names & assigned_names
            or (project_id is not None and str(project_id) in logged_ids)
        ):
            selected.append(project)
    return selected


def build_timesheet_summary(
    entries: Sequence[Record],
    *,
    now: Optional[Union[date, datetime]] = None,
    active_projects: int = 0,
    settings: AnalyticsSettings = DEFAULT_SETTINGS,
) -> TimesheetSummary:
    """A designer's own hours this week (Monday start), this month and overall."""

    records = ensure_records(entries, "timesheets")
    tzinfo = settings.tzinfo
    anchor = _resolve_now(now, tzinfo)
    summary = TimesheetSummary(entry_count=len(records), active_projects=active_projects)
    project_ids = set()
    for entry in records:
        hours = extract_number(entry, "hours")
        summary.total_hours += hours
        if entry.get("projectId") not in (None, ""):
            project_ids.add(str(entry.get("projectId")))
        worked_on = extract_date(entry, settings.timesheet_date_fields, tzinfo)
        if worked_on is None:
            continue
        if is_same_week(worked_on, anchor):
            summary.this_week_hours += hours
        if is_same_month(worked_on, anchor):
            summary.this_month_hours += hours
    summary.project_count = len(project_ids)
    return summary


def filter_by_date_range(
    records: Sequence[Record],
    date_fields: Sequence[str],
    start: Optional[Union[date, datetime]] = None,
    end: Optional[Union[date, datetime]] = None,
    *,
    tzinfo: Optional[TzInfo] = None,
) -> List[Record]:
    """Keep records dated within ``[start, end]`` (inclusive, calendar days).

    Without bounds every record is kept; with a bound, undated records drop out.
    """

    items = ensure_records(records, "records")
    if start is None and end is None:
        return items
    start_day = start.date() if isinstance(start, datetime) else start
    end_day = end.date() if isinstance(end, datetime) else end
    kept: List[Record] = []
    for record in items:
        resolved = extract_date(record, date_fields, tzinfo)
        if resolved is None:
            continue
        day = resolved.date()
        if start_day is not None and day < start_day:
            continue
        if end_day is not None and day > end_day:
            continue
        kept.append(record)
    return kept


# ---------------------------------------------------------------------------
# Role dashboards
# ---------------------------------------------------------------------------


@dataclass
class DashboardReport:
    role: str
    kpis: KpiSet
    monthly_revenue: Dict[str, float]
    status_distribution: Dict[str, int]
    owner_performance: Optional[Dict[str, float]] = None
    top_owners: Optional[Dict[str, float]] = None
    weekly_revenue: Optional[Dict[str, float]] = None
    regional_breakdown: Optional[Dict[str, float]] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "role": self.role,
            "kpis": self.kpis.to_dict(),
            "monthlyRevenue": dict(self.monthly_revenue),
            "statusCounts": dict(self.status_distribution),
            "bdmPerformance": self.owner_performance,
            "topBdms": self.top_owners,
            "weeklyRevenue": self.weekly_revenue,
            "regionalData": self.regional_breakdown,
        }


def build_dashboard(
    snapshot: DashboardSnapshot,
    *,
    role: str,
    owner_uid: Optional[str] = None,
    settings: AnalyticsSettings = DEFAULT_SETTINGS,
    now: Optional[Union[date, datetime]] = None,
) -> DashboardReport:
    """Compose the proposal dashboard for ``role``.

    A BDM sees only the proposals it created (``owner_uid`` is required);
    management roles see every proposal plus the owner, weekly and regional
    breakdowns.
    """

    normalized_role = normalize_role(role)
    if normalized_role == ROLE_BDM:
        if owner_uid in (None, ""):
            raise ValueError("The BDM dashboard requires an owner_uid")
        proposals = filter_by_owner(snapshot.proposals, owner_uid)
    else:
        proposals = list(snapshot.proposals)

    report = DashboardReport(
        role=normalized_role,
        kpis=build_kpi_report(proposals, settings=settings),
        monthly_revenue=build_monthly_revenue(proposals, now=now, settings=settings),
        status_distribution=build_status_distribution(proposals, settings.status_categories),
    )
    if normalized_role == ROLE_MANAGEMENT:
        won = [proposal for proposal in proposals if _is_won(proposal)]
        report.owner_performance = build_owner_performance(proposals)
        report.top_owners = top_n(report.owner_performance, settings.top_n)
        report.weekly_revenue = build_weekly_revenue(proposals, now=now, settings=settings)
        report.regional_breakdown = build_regional_breakdown(won)
    return report


__all__ = [
    "Alert",
    "DashboardReport",
    "DesignerHours",
    "DesignerPerformance",
    "DesignerWeeklyRollup",
    "ExecutiveSummary",
    "KpiSet",
    "ProjectHealth",
    "TimesheetSummary",
    "WeeklyTotal",
    "build_alerts",
    "build_dashboard",
    "build_designer_performance",
    "build_designer_weekly_rollup",
    "build_executive_summary",
    "build_kpi_report",
    "build_monthly_revenue",
    "build_owner_performance",
    "build_project_health_table",
    "build_regional_breakdown",
    "build_status_distribution",
    "build_timesheet_summary",
    "build_weekly_revenue",
    "filter_by_date_range",
    "filter_by_owner",
    "select_designer_projects",
]
