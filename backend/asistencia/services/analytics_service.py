"""
Analytics orchestration.

Fetches run concurrently through the injected data source; aggregation
starts only once every fetch it depends on has returned.
"""

import asyncio
import logging
import uuid
from datetime import date, datetime, time, timedelta, timezone

from asistencia.analytics.alerts import generate_alerts
from asistencia.analytics.calendar import week_start
from asistencia.analytics.departments import aggregate_departments
from asistencia.analytics.employee import aggregate_employees
from asistencia.analytics.lateness import analyze_lateness
from asistencia.analytics.organization import aggregate_organization, summarize_period
from asistencia.analytics.report import assemble_report
from asistencia.analytics.trends import build_trend, build_weekly_breakdown
from asistencia.core.config import settings
from asistencia.schemas.analytics import (
    Alert,
    Bucketing,
    DashboardAnalytics,
    EmployeeAnalytics,
    LatenessEntry,
    OrganizationKPIs,
    TrendPoint,
)
from asistencia.schemas.attendance import Employee, PeriodFilter
from asistencia.schemas.report import AttendanceReport, ReportFilters
from asistencia.services.data_access import AttendanceDataSource, default_work_policy

logger = logging.getLogger(__name__)


def _narrow_roster(employees, period: PeriodFilter) -> list[Employee]:
    roster = list(employees)
    if period.employee_id is not None:
        roster = [e for e in roster if e.id == period.employee_id]
    if period.department_id is not None:
        roster = [e for e in roster if e.department_id == period.department_id]
    return roster


class AnalyticsService:
    def __init__(self, source: AttendanceDataSource) -> None:
        self.source = source

    async def kpis(
        self,
        organization_id: uuid.UUID,
        today: date,
        now: datetime | None = None,
    ) -> OrganizationKPIs:
        today_records, yesterday_records, employees = await asyncio.gather(
            self.source.fetch_records_for_day(organization_id, today),
            self.source.fetch_records_for_day(organization_id, today - timedelta(days=1)),
            self.source.fetch_active_employees(organization_id),
        )
        return aggregate_organization(today_records, yesterday_records, len(employees), now)

    async def alerts(
        self,
        organization_id: uuid.UUID,
        today: date,
        now: datetime | None = None,
    ) -> list[Alert]:
        kpis = await self.kpis(organization_id, today, now)
        return generate_alerts(kpis, now)

    async def dashboard(
        self,
        organization_id: uuid.UUID,
        today: date,
        now: datetime | None = None,
    ) -> DashboardAnalytics:
        now = now or datetime.now(timezone.utc)
        week = PeriodFilter(start_date=week_start(today), end_date=today)
        month = PeriodFilter(
            start_date=today - timedelta(days=settings.MONTHLY_TREND_DAYS), end_date=today
        )

        (
            today_records,
            yesterday_records,
            week_records,
            month_records,
            employees,
            department_names,
        ) = await asyncio.gather(
            self.source.fetch_records_for_day(organization_id, today),
            self.source.fetch_records_for_day(organization_id, today - timedelta(days=1)),
            self.source.fetch_records(organization_id, week),
            self.source.fetch_records(organization_id, month),
            self.source.fetch_active_employees(organization_id),
            self.source.fetch_department_names(organization_id),
        )
        headcount = len(employees)

        kpis = aggregate_organization(today_records, yesterday_records, headcount, now)
        aggregation = aggregate_employees(month_records, employees, month, department_names)
        departments = aggregate_departments(
            aggregation.metrics,
            {m.employee_id: m.department_name for m in aggregation.metrics},
        )

        logger.info(
            "Dashboard org=%s día=%s: empleados=%d, presentes=%d, tarde=%d, alertas críticas=%d",
            organization_id, today, headcount,
            kpis.present_today, kpis.late_today, kpis.critical_alerts,
        )
        return DashboardAnalytics(
            kpis=kpis,
            weekly_trend=build_trend(week_records, "day", headcount),
            monthly_trend=build_trend(month_records, "week", headcount),
            department_metrics=departments,
            alerts=generate_alerts(kpis, now),
            skipped=aggregation.skipped,
            last_updated=now,
        )

    async def employee_analytics(
        self, organization_id: uuid.UUID, period: PeriodFilter
    ) -> EmployeeAnalytics:
        records, employees, department_names = await asyncio.gather(
            self.source.fetch_records(organization_id, period),
            self.source.fetch_active_employees(organization_id),
            self.source.fetch_department_names(organization_id),
        )
        roster = _narrow_roster(employees, period)
        aggregation = aggregate_employees(records, roster, period, department_names)
        known = {e.id for e in roster}
        rostered = [r for r in records if r.employee_id in known]

        return EmployeeAnalytics(
            summary=summarize_period(rostered, len(roster), period),
            employees=aggregation.metrics,
            weekly_trends=build_weekly_breakdown(rostered),
            departments=aggregate_departments(
                aggregation.metrics,
                {m.employee_id: m.department_name for m in aggregation.metrics},
            ),
            skipped=aggregation.skipped,
        )

    async def trend(
        self,
        organization_id: uuid.UUID,
        period: PeriodFilter,
        bucketing: Bucketing,
    ) -> list[TrendPoint]:
        records, employees = await asyncio.gather(
            self.source.fetch_records(organization_id, period),
            self.source.fetch_active_employees(organization_id),
        )
        return build_trend(records, bucketing, len(employees))

    async def lateness(
        self, organization_id: uuid.UUID, period: PeriodFilter
    ) -> list[LatenessEntry]:
        records, employees, policy = await asyncio.gather(
            self.source.fetch_records(organization_id, period),
            self.source.fetch_active_employees(organization_id),
            self.source.fetch_work_policy(organization_id),
        )
        return analyze_lateness(
            records,
            policy or default_work_policy(),
            {e.id: e.full_name for e in employees},
        )

    async def report(
        self,
        organization_id: uuid.UUID,
        filters: ReportFilters,
        now: datetime | None = None,
    ) -> AttendanceReport:
        now = now or datetime.now(timezone.utc)
        policy = await self.source.fetch_work_policy(organization_id) or default_work_policy()
        late_cutoff = _late_cutoff(policy.start_time, policy.late_threshold)

        fetches = [
            self.source.fetch_records(organization_id, filters, late_cutoff),
            self.source.fetch_active_employees(organization_id),
            self.source.fetch_department_names(organization_id),
        ]
        if filters.status is not None:
            # rows follow the status filter, employee metrics cover the whole period
            fetches.append(
                self.source.fetch_records(
                    organization_id, filters.model_copy(update={"status": None})
                )
            )
        records, employees, department_names, *unfiltered = await asyncio.gather(*fetches)
        period_records = unfiltered[0] if unfiltered else records

        roster = _narrow_roster(employees, filters)
        aggregation = aggregate_employees(period_records, roster, filters, department_names)

        organization_kpis = None
        if filters.report_type == "general":
            organization_kpis = await self.kpis(organization_id, filters.end_date, now)

        return assemble_report(
            records,
            filters,
            organization_id=organization_id,
            employees=employees,
            department_names=department_names,
            total_employees=len(roster),
            employee_metrics=aggregation.metrics,
            organization_kpis=organization_kpis,
            generated_at=now,
        )


def _late_cutoff(start: time, tolerance_minutes: int) -> time:
    minutes = start.hour * 60 + start.minute + tolerance_minutes
    minutes = min(minutes, 23 * 60 + 59)
    return time(minutes // 60, minutes % 60)
