"""
Time series built from attendance records.

``build_trend`` buckets by day or by ISO week (keyed on the Monday) and
measures each bucket against the active headcount, whatever its width.
``build_weekly_breakdown`` measures each week against its own recorded rows
instead. Duplicate (employee, date) rows are collapsed first.

Both only summarize real rows: sparse input gives a short series.
"""

from datetime import date
from typing import Iterable

from asistencia.analytics.calendar import week_start
from asistencia.analytics.classifier import Outcome, classify_all, deduplicate
from asistencia.analytics.rounding import percentage, round2
from asistencia.schemas.analytics import Bucketing, TrendPoint, WeeklyBreakdown
from asistencia.schemas.attendance import AttendanceRecord


def _bucket_key(d: date, bucketing: Bucketing) -> date:
    if bucketing == "day":
        return d
    if bucketing == "week":
        return week_start(d)
    raise ValueError(f"Unknown bucketing: {bucketing!r}")


def build_trend(
    records: Iterable[AttendanceRecord],
    bucketing: Bucketing,
    total_active_employees: int,
) -> list[TrendPoint]:
    unique, _ = deduplicate(records)
    buckets: dict[date, dict] = {}
    for record, outcome in classify_all(unique):
        key = _bucket_key(record.attendance_date, bucketing)
        stats = buckets.setdefault(key, {"present": 0, "late": 0, "total": 0})
        stats["total"] += 1
        if outcome is Outcome.LATE:
            stats["late"] += 1
        elif outcome.on_time:
            stats["present"] += 1

    headcount = max(0, total_active_employees)
    trend: list[TrendPoint] = []
    for key in sorted(buckets):
        stats = buckets[key]
        trend.append(
            TrendPoint(
                period_label=key.isoformat(),
                period_start=key,
                present_count=stats["present"],
                absent_count=max(0, headcount - stats["total"]),
                late_count=stats["late"],
                total_count=stats["total"],
                attendance_rate=percentage(stats["total"], headcount),
            )
        )
    return trend


def build_weekly_breakdown(records: Iterable[AttendanceRecord]) -> list[WeeklyBreakdown]:
    unique, _ = deduplicate(records)
    weeks: dict[date, dict] = {}
    for record, outcome in classify_all(unique):
        stats = weeks.setdefault(
            week_start(record.attendance_date),
            {"hours": 0.0, "rows": 0, "attended": 0, "late": 0, "absent": 0},
        )
        stats["hours"] += record.work_hours or 0.0
        stats["rows"] += 1
        if outcome is Outcome.LATE:
            stats["late"] += 1
        elif outcome is Outcome.ABSENT:
            stats["absent"] += 1
        if outcome.attended:
            stats["attended"] += 1

    return [
        WeeklyBreakdown(
            week=week,
            total_hours=round2(stats["hours"]),
            attendance_rate=percentage(stats["attended"], stats["rows"]),
            punctuality_rate=percentage(stats["attended"] - stats["late"], stats["attended"]),
            late_arrivals=stats["late"],
            absent_days=stats["absent"],
        )
        for week, stats in sorted(weeks.items())
    ]
