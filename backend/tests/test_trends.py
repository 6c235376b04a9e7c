"""Trend series and weekly breakdown."""

from __future__ import annotations

from datetime import date

import pytest

from asistencia.analytics.trends import build_trend, build_weekly_breakdown


class TestBuildTrend:
    def test_daily_buckets_sorted(self, make_employee, make_record):
        staff = [make_employee(f"E{i}") for i in range(4)]
        records = [
            make_record(staff[0].id, date(2024, 1, 2)),
            make_record(staff[0].id, date(2024, 1, 1)),
            make_record(staff[1].id, date(2024, 1, 1), status="late"),
        ]

        trend = build_trend(records, "day", len(staff))

        assert [p.period_start for p in trend] == [date(2024, 1, 1), date(2024, 1, 2)]
        first = trend[0]
        assert first.period_label == "2024-01-01"
        assert first.present_count == 1
        assert first.late_count == 1
        assert first.total_count == 2
        assert first.absent_count == 2
        assert first.attendance_rate == 50.0

    def test_week_bucket_measured_against_headcount(self, make_employee, make_record):
        staff = [make_employee(f"E{i}") for i in range(2)]
        records = [
            make_record(staff[0].id, date(2024, 1, 1)),
            make_record(staff[1].id, date(2024, 1, 1)),
            make_record(staff[0].id, date(2024, 1, 3)),
            make_record(staff[0].id, date(2024, 1, 8)),
        ]

        trend = build_trend(records, "week", len(staff))

        assert [p.period_start for p in trend] == [date(2024, 1, 1), date(2024, 1, 8)]
        assert trend[0].total_count == 3
        assert trend[0].absent_count == 0
        assert trend[0].attendance_rate == 100.0
        assert trend[1].absent_count == 1
        assert trend[1].attendance_rate == 50.0

    def test_duplicate_rows_count_once(self, make_employee, make_record):
        staff = [make_employee(f"E{i}") for i in range(2)]
        first = make_record(staff[0].id, date(2024, 1, 1))
        repeat = make_record(staff[0].id, date(2024, 1, 1), status="late")

        [point] = build_trend([first, repeat], "day", len(staff))

        assert point.total_count == 1
        assert point.present_count == 1
        assert point.late_count == 0
        assert point.absent_count == 1
        assert point.attendance_rate == 50.0

    def test_zero_headcount(self, make_employee, make_record):
        records = [make_record(make_employee().id, date(2024, 1, 1))]
        [point] = build_trend(records, "day", 0)
        assert point.attendance_rate == 0.0
        assert point.absent_count == 0

    def test_sparse_input_gives_short_series(self):
        assert build_trend([], "day", 10) == []

    def test_unknown_bucketing(self, make_employee, make_record):
        with pytest.raises(ValueError):
            build_trend([make_record(make_employee().id, date(2024, 1, 1))], "month", 1)


class TestWeeklyBreakdown:
    def test_groups_by_iso_week(self, make_employee, make_record):
        emp = make_employee()
        records = [
            make_record(emp.id, date(2024, 1, 1)),
            make_record(emp.id, date(2024, 1, 2), status="late"),
            make_record(emp.id, date(2024, 1, 3), status="absent", work_hours=None),
            make_record(emp.id, date(2024, 1, 9), work_hours=7.5),
        ]

        weeks = build_weekly_breakdown(records)

        assert [w.week for w in weeks] == [date(2024, 1, 1), date(2024, 1, 8)]
        assert weeks[0].total_hours == 16.0
        assert weeks[0].attendance_rate == 66.67
        assert weeks[0].punctuality_rate == 50.0
        assert weeks[0].late_arrivals == 1
        assert weeks[0].absent_days == 1
        assert weeks[1].total_hours == 7.5
        assert weeks[1].attendance_rate == 100.0

    def test_duplicate_rows_count_once(self, make_employee, make_record):
        emp = make_employee()
        records = [
            make_record(emp.id, date(2024, 1, 1)),
            make_record(emp.id, date(2024, 1, 1), work_hours=5.0),
        ]

        [week] = build_weekly_breakdown(records)

        assert week.total_hours == 8.0
        assert week.attendance_rate == 100.0
