"""
Organization-wide figures: today's dashboard KPIs and the period summary.
"""

from datetime import datetime
from typing import Iterable, Sequence

from asistencia.analytics.alerts import generate_alerts
from asistencia.analytics.calendar import working_days
from asistencia.analytics.classifier import Outcome, classify_all, deduplicate
from asistencia.analytics.rounding import percentage, round2
from asistencia.schemas.analytics import OrganizationKPIs, PeriodSummary
from asistencia.schemas.attendance import AttendanceRecord, PeriodFilter


def _day_counts(records: Iterable[AttendanceRecord]) -> tuple[int, int]:
    """(on time, late) for one day's records."""
    present = late = 0
    for _, outcome in classify_all(records):
        if outcome is Outcome.LATE:
            late += 1
        elif outcome.on_time:
            present += 1
    return present, late


def aggregate_organization(
    today_records: Sequence[AttendanceRecord],
    yesterday_records: Sequence[AttendanceRecord],
    total_active_employees: int,
    now: datetime | None = None,
) -> OrganizationKPIs:
    """
    Dashboard KPIs for one day.

    Employees without a record today count as absent by omission; an explicit
    ``absent`` row is just one more record. Duplicate (employee, date) rows
    count once.
    """
    total = max(0, total_active_employees)
    today_records, _ = deduplicate(today_records)
    yesterday_records, _ = deduplicate(yesterday_records)
    present_today, late_today = _day_counts(today_records)
    present_yesterday, late_yesterday = _day_counts(yesterday_records)
    absent_today = max(0, total - len(today_records))

    kpis = OrganizationKPIs(
        total_employees=total,
        present_today=present_today,
        absent_today=absent_today,
        late_today=late_today,
        attendance_rate=percentage(present_today + late_today, total),
        punctuality_rate=percentage(present_today, total),
        absenteeism_rate=percentage(absent_today, total),
        attendance_vs_yesterday=present_today - present_yesterday,
        late_vs_yesterday=late_today - late_yesterday,
    )

    alerts = generate_alerts(kpis, now)
    return kpis.model_copy(
        update={
            "critical_alerts": sum(1 for a in alerts if a.severity == "critical"),
            "warning_alerts": sum(1 for a in alerts if a.severity == "warning"),
        }
    )


def summarize_period(
    records: Iterable[AttendanceRecord],
    total_active_employees: int,
    period: PeriodFilter,
) -> PeriodSummary:
    total_hours = 0.0
    overtime = 0.0
    late = absent = attended = 0
    unique, _ = deduplicate(records)

    for record, outcome in classify_all(unique):
        total_hours += record.work_hours or 0.0
        overtime += record.overtime_hours or 0.0
        if outcome is Outcome.LATE:
            late += 1
        elif outcome is Outcome.ABSENT:
            absent += 1
        if outcome.attended:
            attended += 1

    total = max(0, total_active_employees)
    expected = total * working_days(period.start_date, period.end_date)

    return PeriodSummary(
        total_employees=total,
        total_hours_worked=round2(total_hours),
        average_hours_per_employee=round2(total_hours / total) if total else 0.0,
        late_arrivals=late,
        absent_days=absent,
        overtime_hours=round2(overtime),
        attendance_rate=percentage(attended, expected),
        punctuality_rate=percentage(attended - late, attended),
    )
