import pathlib
import sys
import unittest
from datetime import date, datetime

import pytz

PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from dashboard.aggregation import top_n
from dashboard.health import HealthThresholds
from dashboard.normalize import RecordShapeError
from dashboard.reports import (
    build_alerts,
    build_dashboard,
    build_designer_performance,
    build_designer_weekly_rollup,
    build_executive_summary,
    build_kpi_report,
    build_monthly_revenue,
    build_owner_performance,
    build_project_health_table,
    build_regional_breakdown,
    build_status_distribution,
    build_timesheet_summary,
    build_weekly_revenue,
    filter_by_date_range,
    select_designer_projects,
)
from dashboard.settings import AnalyticsSettings
from dashboard.snapshot import DashboardSnapshot, select_budgeted

NOW = datetime(2024, 3, 15, 12, 0, tzinfo=pytz.utc)

PROPOSALS = [
    {
        'id': 'p1',
        'status': 'won',
        'createdByUid': 'u1',
        'createdByName': 'Alex',
        'country': 'UAE',
        'pricing': {'quoteValue': 1000},
        'createdAt': '2024-01-01T00:00:00Z',
        'wonDate': '2024-01-11T00:00:00Z',
    },
    {
        'id': 'p2',
        'status': 'won',
        'createdByUid': 'u2',
        'createdByName': 'Blair',
        'region': 'GCC',
        'pricing': {'quoteValue': 500},
        'createdAt': {'seconds': 1706745600},
        'wonDate': {'seconds': 1707091200},
    },
    {
        'id': 'p3',
        'status': 'lost',
        'createdByUid': 'u1',
        'createdByName': 'Alex',
        'pricing': {'quoteValue': 200},
        'createdAt': '2024-02-10T00:00:00Z',
    },
    {
        'id': 'p4',
        'status': 'pricing_complete',
        'createdByUid': 'u2',
        'createdByName': 'Blair',
        'pricing': {'quoteValue': 900},
    },
    {
        'id': 'p5',
        'status': 'won',
        'createdByUid': 'u1',
        'createdByName': '',
        'pricing': {'quoteValue': 300},
        'updatedAt': '2024-03-04T12:00:00Z',
    },
]

PROJECTS = [
    {
        'id': 'a',
        'projectName': 'Atrium',
        'clientCompany': 'Acme',
        'allocatedHours': 100,
        'hoursLogged': 50,
        'assignedDesignerNames': ['Sam', 'Kai'],
    },
    {'id': 'b', 'projectName': 'Beacon', 'allocatedHours': 100, 'hoursLogged': 95},
    {'id': 'c', 'projectName': 'Cove', 'allocatedHours': 100, 'hoursLogged': 120},
    {'id': 'd', 'projectName': 'Dune', 'allocatedHours': 0, 'hoursLogged': 10},
]

TIMESHEETS = [
    {'designerUid': 'u1', 'designerName': 'Sam', 'projectId': 'a', 'hours': 8, 'date': '2024-03-04T09:00:00Z'},
    {'designerUid': 'u1', 'designerName': 'Sam', 'projectId': 'b', 'hours': 8, 'date': '2024-03-05T09:00:00Z'},
    {'designerUid': 'u1', 'designerName': 'Sam', 'projectId': 'a', 'hours': 6, 'date': '2024-03-12T09:00:00Z'},
    {'designerUid': 'u1', 'designerName': 'Sam', 'projectId': 'a', 'hours': 2},
    {'designerUid': 'u2', 'designerName': 'Kai', 'projectId': 'c', 'hours': 4, 'date': '2024-03-06T10:00:00Z'},
]


class KpiReportTests(unittest.TestCase):
    def test_three_proposal_example(self):
        proposals = [
            {'status': 'won', 'pricing': {'quoteValue': 1000}},
            {'status': 'won', 'pricing': {'quoteValue': 500}},
            {'status': 'lost', 'pricing': {'quoteValue': 200}},
        ]
        kpis = build_kpi_report(proposals)
        self.assertEqual(kpis.total_revenue, 1500)
        self.assertEqual(kpis.total_proposals, 3)
        self.assertEqual(kpis.total_won, 2)
        self.assertEqual(kpis.total_lost, 1)
        self.assertAlmostEqual(kpis.win_rate, 66.6666, places=3)
        self.assertEqual(kpis.avg_deal_value, 750)
        self.assertEqual(kpis.avg_close_time_days, 0.0)

    def test_all_proposals(self):
        kpis = build_kpi_report(PROPOSALS)
        self.assertEqual(kpis.total_revenue, 1800)
        self.assertEqual(kpis.total_proposals, 5)
        self.assertEqual(kpis.total_won, 3)
        self.assertEqual(kpis.total_lost, 1)
        self.assertEqual(kpis.win_rate, 75.0)
        self.assertEqual(kpis.avg_deal_value, 600)
        self.assertEqual(kpis.avg_close_time_days, 7.0)

    def test_owner_filter(self):
        kpis = build_kpi_report(PROPOSALS, 'u1')
        self.assertEqual(kpis.total_proposals, 3)
        self.assertEqual(kpis.total_revenue, 1300)
        self.assertAlmostEqual(kpis.win_rate, 200 / 3)
        self.assertEqual(kpis.avg_close_time_days, 10.0)
        self.assertEqual(build_kpi_report(PROPOSALS, 'nobody').total_proposals, 0)

    def test_empty_input_is_all_zero(self):
        kpis = build_kpi_report([])
        self.assertEqual(
            kpis.to_dict(),
            {
                'totalRevenue': 0,
                'totalProposals': 0,
                'totalWon': 0,
                'totalLost': 0,
                'winRate': 0.0,
                'avgDealValue': 0.0,
                'avgCloseTimeDays': 0.0,
            },
        )

    def test_undated_proposals_still_count(self):
        proposals = [
            {'status': 'won', 'wonDate': 'garbage', 'updatedAt': 'also garbage', 'pricing': {'quoteValue': 80}},
            {'status': 'draft', 'createdAt': 'nope'},
        ]
        kpis = build_kpi_report(proposals)
        self.assertEqual(kpis.total_proposals, 2)
        self.assertEqual(kpis.total_revenue, 80)
        self.assertTrue(all(value == 0 for value in build_monthly_revenue(proposals, now=NOW).values()))

    def test_rejects_non_list_input(self):
        with self.assertRaises(RecordShapeError):
            build_kpi_report({'status': 'won'})


class RevenueSeriesTests(unittest.TestCase):
    def test_monthly_revenue_uses_won_date_then_updated_at(self):
        series = build_monthly_revenue(PROPOSALS, 3, now=NOW)
        self.assertEqual(series, {'2024-01': 1000.0, '2024-02': 500.0, '2024-03': 300.0})

    def test_current_month_seconds_timestamp(self):
        proposals = [{'status': 'won', 'pricing': {'quoteValue': 500}, 'wonDate': {'seconds': 1710158400}}]
        series = build_monthly_revenue(proposals, 12, now=NOW)
        self.assertEqual(series['2024-03'], 500.0)
        self.assertEqual(sum(value for key, value in series.items() if key != '2024-03'), 0)

    def test_monthly_revenue_default_window(self):
        series = build_monthly_revenue([], now=NOW)
        self.assertEqual(len(series), 12)
        self.assertEqual(list(series)[-1], '2024-03')
        self.assertEqual(sum(series.values()), 0)

    def test_monthly_revenue_in_configured_timezone(self):
        settings = AnalyticsSettings(timezone_name='America/New_York')
        proposals = [{'status': 'won', 'wonDate': {'seconds': 1709251200}, 'pricing': {'quoteValue': 40}}]
        series = build_monthly_revenue(proposals, 2, now=NOW, settings=settings)
        self.assertEqual(series, {'2024-02': 40.0, '2024-03': 0.0})

    def test_weekly_revenue(self):
        series = build_weekly_revenue(PROPOSALS, now=NOW)
        self.assertEqual(len(series), 16)
        self.assertEqual(list(series)[0], '2023-11-27')
        self.assertEqual(list(series)[-1], '2024-03-11')
        self.assertEqual(series['2024-01-08'], 1000.0)
        self.assertEqual(series['2024-02-05'], 500.0)
        self.assertEqual(series['2024-03-04'], 300.0)
        self.assertEqual(sum(series.values()), 1800.0)


class BreakdownTests(unittest.TestCase):
    def test_status_distribution(self):
        self.assertEqual(
            build_status_distribution(PROPOSALS),
            {'Won': 3, 'Lost': 1, 'Pending': 0, 'Pricing': 1, 'Draft': 0},
        )

    def test_owner_performance_counts_won_revenue(self):
        self.assertEqual(
            build_owner_performance(PROPOSALS),
            {'Alex': 1000.0, 'Blair': 500.0, 'Unassigned': 300.0},
        )

    def test_top_ten_owners_by_bdm_name(self):
        proposals = [
            {'status': 'won', 'bdmName': f'BDM {index:02d}', 'pricing': {'quoteValue': index % 4}}
            for index in range(14)
        ]
        ranked = top_n(build_owner_performance(proposals, 'bdmName'), 10)
        self.assertEqual(len(ranked), 10)
        values = list(ranked.values())
        self.assertEqual(values, sorted(values, reverse=True))
        self.assertEqual(list(ranked)[:4], ['BDM 03', 'BDM 07', 'BDM 11', 'BDM 02'])

    def test_regional_breakdown_falls_back_through_location_fields(self):
        won = [proposal for proposal in PROPOSALS if proposal['status'] == 'won']
        self.assertEqual(
            build_regional_breakdown(won),
            {'UAE': 1000.0, 'GCC': 500.0, 'Unknown': 300.0},
        )


class DashboardTests(unittest.TestCase):
    def setUp(self):
        self.snapshot = DashboardSnapshot.build(proposals=PROPOSALS, projects=PROJECTS, timesheets=TIMESHEETS)

    def test_management_dashboard(self):
        report = build_dashboard(self.snapshot, role='management', now=NOW)
        self.assertEqual(report.role, 'management')
        self.assertEqual(report.kpis.total_proposals, 5)
        self.assertEqual(list(report.top_owners), ['Alex', 'Blair', 'Unassigned'])
        self.assertEqual(report.regional_breakdown['UAE'], 1000.0)
        self.assertEqual(len(report.weekly_revenue), 16)
        payload = report.to_dict()
        self.assertEqual(payload['statusCounts']['Won'], 3)
        self.assertEqual(payload['monthlyRevenue']['2024-03'], 300.0)

    def test_executive_aliases_map_to_management(self):
        for role in ('coo', 'Director', ' MANAGEMENT '):
            self.assertEqual(build_dashboard(self.snapshot, role=role, now=NOW).role, 'management')

    def test_bdm_dashboard_is_scoped_to_owner(self):
        report = build_dashboard(self.snapshot, role='bdm', owner_uid='u1', now=NOW)
        self.assertEqual(report.kpis.total_proposals, 3)
        self.assertEqual(report.kpis.total_revenue, 1300)
        self.assertEqual(report.monthly_revenue['2024-02'], 0.0)
        self.assertIsNone(report.owner_performance)
        self.assertIsNone(report.top_owners)
        self.assertIsNone(report.weekly_revenue)
        self.assertIsNone(report.regional_breakdown)

    def test_bdm_requires_owner(self):
        with self.assertRaises(ValueError):
            build_dashboard(self.snapshot, role='bdm', now=NOW)

    def test_unknown_role(self):
        with self.assertRaises(ValueError):
            build_dashboard(self.snapshot, role='intern', now=NOW)

    def test_top_owners_truncated_by_settings(self):
        settings = AnalyticsSettings(top_n=1)
        report = build_dashboard(self.snapshot, role='director', settings=settings, now=NOW)
        self.assertEqual(report.top_owners, {'Alex': 1000.0})
        self.assertEqual(len(report.owner_performance), 3)

    def test_empty_snapshot(self):
        report = build_dashboard(DashboardSnapshot(), role='management', now=NOW)
        self.assertEqual(report.kpis.total_revenue, 0)
        self.assertEqual(report.owner_performance, {})
        self.assertEqual(report.top_owners, {})
        self.assertTrue(all(value == 0 for value in report.monthly_revenue.values()))

    def test_snapshot_rejects_malformed_collections(self):
        with self.assertRaises(RecordShapeError):
            DashboardSnapshot.build(proposals={'id': 'p1'})
        self.assertEqual(self.snapshot.scan_counts, {'proposals': 5, 'timesheets': 5, 'projects': 4})
        self.assertEqual(len(self.snapshot.budgeted_projects), 3)


class ProjectHealthTests(unittest.TestCase):
    def test_health_table_excludes_unbudgeted_and_sorts_by_usage(self):
        rows = build_project_health_table(PROJECTS)
        self.assertEqual([row.project_id for row in rows], ['c', 'b', 'a'])
        self.assertEqual([row.category for row in rows], ['Exceeded', 'Critical', 'Healthy'])
        self.assertEqual(rows[0].remaining, -20)
        self.assertEqual(rows[2].team_size, 2)
        self.assertEqual(rows[2].client_company, 'Acme')
        self.assertEqual(rows[1].design_lead, 'Unassigned')

    def test_health_table_collapsed(self):
        rows = build_project_health_table(PROJECTS, fine_grained=False)
        self.assertEqual([row.category for row in rows], ['Exceeded', 'At Risk', 'Healthy'])

    def test_health_builders_follow_settings(self):
        settings = AnalyticsSettings(
            fine_grained_health=False,
            health_thresholds=HealthThresholds(exceeded=100, critical=90, at_risk=40),
        )
        rows = build_project_health_table(PROJECTS, settings=settings)
        self.assertEqual([row.category for row in rows], ['Exceeded', 'At Risk', 'At Risk'])

        alerts = build_alerts(PROJECTS, settings=settings)
        self.assertEqual([alert.project.project_id for alert in alerts], ['a', 'b', 'c'])
        self.assertEqual([alert.severity for alert in alerts], ['warning', 'warning', 'critical'])

        summary = build_executive_summary(PROJECTS, TIMESHEETS, settings=settings)
        self.assertEqual((summary.on_track, summary.at_risk, summary.exceeded), (0, 2, 1))

    def test_explicit_arguments_override_settings(self):
        settings = AnalyticsSettings(fine_grained_health=False)
        rows = build_project_health_table(PROJECTS, fine_grained=True, settings=settings)
        self.assertEqual(rows[1].category, 'Critical')
        strict = HealthThresholds(exceeded=130, critical=128, at_risk=125)
        self.assertEqual(build_alerts(PROJECTS, thresholds=strict, settings=settings), [])

    def test_budgeted_projects_are_shared_with_snapshot(self):
        snapshot = DashboardSnapshot.build(projects=PROJECTS)
        self.assertEqual(snapshot.budgeted_projects, select_budgeted(PROJECTS))
        self.assertEqual([project['id'] for project in select_budgeted(PROJECTS)], ['a', 'b', 'c'])
        with self.assertRaises(RecordShapeError):
            select_budgeted('projects')

    def test_single_critical_alert(self):
        alerts = build_alerts([
            {'projectName': 'Over', 'allocatedHours': 100, 'hoursLogged': 110},
            {'projectName': 'Fine', 'allocatedHours': 100, 'hoursLogged': 50},
        ])
        self.assertEqual(len(alerts), 1)
        self.assertEqual(alerts[0].severity, 'critical')
        self.assertEqual(alerts[0].title, 'Budget Exceeded')
        self.assertEqual(
            alerts[0].message,
            'Project "Over" has exceeded its allocated hours by 10.0 hours (110% used)',
        )

    def test_alerts_follow_project_order(self):
        alerts = build_alerts(PROJECTS)
        self.assertEqual([alert.project.project_id for alert in alerts], ['b', 'c'])
        self.assertEqual(alerts[0].severity, 'warning')
        self.assertEqual(alerts[0].title, 'High Budget Usage')
        self.assertEqual(
            alerts[0].message,
            'Project "Beacon" is at 95% budget utilization with 5.0 hours remaining',
        )
        self.assertEqual(alerts[1].to_dict()['project']['projectName'], 'Cove')

    def test_exactly_full_budget_is_a_warning(self):
        alerts = build_alerts([{'allocatedHours': 40, 'hoursLogged': 40}])
        self.assertEqual([alert.severity for alert in alerts], ['warning'])
        self.assertIn('Untitled Project', alerts[0].message)

    def test_executive_summary(self):
        summary = build_executive_summary(PROJECTS, TIMESHEETS)
        self.assertEqual(summary.total_projects, 3)
        self.assertEqual((summary.on_track, summary.at_risk, summary.exceeded), (1, 1, 1))
        self.assertEqual(summary.total_allocated, 300)
        self.assertEqual(summary.total_logged, 265)
        self.assertEqual(summary.remaining_hours, 35)
        self.assertAlmostEqual(summary.efficiency, 88.3333, places=3)
        self.assertAlmostEqual(summary.remaining_percentage, 11.6666, places=3)
        self.assertAlmostEqual(summary.avg_hours_per_project, 88.3333, places=3)
        self.assertEqual(summary.active_designers, 2)
        self.assertEqual(summary.total_entries, 5)

    def test_executive_summary_empty(self):
        payload = build_executive_summary([], []).to_dict()
        self.assertEqual(payload['totalProjects'], 0)
        self.assertEqual(payload['efficiency'], 0.0)
        self.assertEqual(payload['remainingPercentage'], 0.0)


class TimesheetReportTests(unittest.TestCase):
    def test_designer_weekly_rollup(self):
        rollup = build_designer_weekly_rollup(TIMESHEETS)
        sam, kai = rollup.per_designer
        self.assertEqual(sam.uid, 'u1')
        self.assertEqual(sam.total_hours, 24)
        self.assertEqual(sam.weeks_active, 2)
        self.assertEqual(sam.unique_working_days, 3)
        self.assertEqual(sam.avg_weekly_hours, 12)
        self.assertEqual(sam.avg_daily_hours, 8)
        self.assertEqual(sam.projects_worked, 2)
        self.assertEqual(sam.weekly_hours, {'2024-03-04': 16.0, '2024-03-11': 6.0})
        self.assertEqual(kai.total_hours, 4)

        first, second = rollup.weekly_totals
        self.assertEqual((first.week, first.week_label, first.total), ('2024-03-04', 'Mar 04', 20.0))
        self.assertEqual((first.designers, first.average_per_designer), (2, 10.0))
        self.assertEqual((second.week, second.total, second.designers), ('2024-03-11', 6.0, 1))

        self.assertEqual(
            rollup.summary,
            {
                'totalDesigners': 2,
                'totalHoursAllTime': 28,
                'avgHoursPerDesigner': 14,
                'weeksTracked': 2,
            },
        )
        self.assertEqual(set(rollup.to_dict()), {'designers', 'weeklyTotals', 'summary'})

    def test_rollup_weeks_follow_configured_timezone(self):
        settings = AnalyticsSettings(timezone_name='America/New_York')
        entries = [{'designerUid': 'u1', 'hours': 3, 'date': '2024-03-11T03:00:00Z'}]
        rollup = build_designer_weekly_rollup(entries, settings=settings)
        self.assertEqual(rollup.weekly_totals[0].week, '2024-03-04')

    def test_designer_performance(self):
        sam, kai = build_designer_performance(TIMESHEETS)
        self.assertEqual((sam.name, sam.total_hours, sam.entries, sam.project_count), ('Sam', 24, 4, 2))
        self.assertEqual(sam.avg_hours_per_project, 12)
        self.assertEqual((kai.total_hours, kai.project_count, kai.avg_hours_per_project), (4, 1, 4))

    def test_timesheet_summary(self):
        mine = [entry for entry in TIMESHEETS if entry['designerUid'] == 'u1']
        summary = build_timesheet_summary(mine, now=date(2024, 3, 13), active_projects=2)
        self.assertEqual(summary.this_week_hours, 6)
        self.assertEqual(summary.this_month_hours, 22)
        self.assertEqual(summary.total_hours, 24)
        self.assertEqual(summary.project_count, 2)
        self.assertEqual(summary.entry_count, 4)
        self.assertEqual(summary.to_dict()['activeProjects'], 2)

    def test_designer_projects(self):
        projects = [
            {'id': 'x', 'assignedDesigners': ['u1', 'u7']},
            {'id': 'y', 'assignedDesignerNames': ['Sam']},
            {'id': 'a', 'projectName': 'Atrium'},
            {'id': 'z', 'assignedDesigners': ['u7'], 'assignedDesignerNames': ['Robin']},
        ]
        selected = select_designer_projects(projects, 'u1', TIMESHEETS)
        self.assertEqual([project['id'] for project in selected], ['x', 'y', 'a'])
        self.assertEqual(select_designer_projects(projects, 'u2', TIMESHEETS), [])
        self.assertEqual(len(select_designer_projects(projects, 'u7')), 2)

    def test_filter_by_date_range(self):
        self.assertEqual(len(filter_by_date_range(TIMESHEETS, ('date',))), 5)
        kept = filter_by_date_range(TIMESHEETS, ('date',), date(2024, 3, 5), date(2024, 3, 6))
        self.assertEqual([entry['hours'] for entry in kept], [8, 4])
        self.assertEqual(len(filter_by_date_range(TIMESHEETS, ('date',), start=date(2024, 3, 12))), 1)
        self.assertEqual(
            len(filter_by_date_range(TIMESHEETS, ('date',), end=datetime(2024, 3, 4, 0, 0))),
            1,
        )


if __name__ == '__main__':
    unittest.main()
