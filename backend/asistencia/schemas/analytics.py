from datetime import date, datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel

Severity = Literal["critical", "warning", "info"]
Bucketing = Literal["day", "week"]


class EmployeeMetrics(BaseModel):
    employee_id: UUID | None
    employee_name: str | None = None
    employee_code: str | None = None
    department_name: str | None = None
    total_hours: float
    regular_hours: float
    overtime_hours: float
    late_arrivals: int
    absent_days: int
    present_days: int
    expected_days: int
    expected_hours: float
    hours_deficit: float
    attendance_rate: float
    punctuality_rate: float


class OrganizationKPIs(BaseModel):
    total_employees: int
    present_today: int
    absent_today: int
    late_today: int
    attendance_rate: float
    punctuality_rate: float
    absenteeism_rate: float
    attendance_vs_yesterday: int
    late_vs_yesterday: int
    critical_alerts: int = 0
    warning_alerts: int = 0


class PeriodSummary(BaseModel):
    total_employees: int
    total_hours_worked: float
    average_hours_per_employee: float
    late_arrivals: int
    absent_days: int
    overtime_hours: float
    attendance_rate: float
    punctuality_rate: float


class TrendPoint(BaseModel):
    period_label: str
    period_start: date
    present_count: int
    absent_count: int
    late_count: int
    total_count: int
    attendance_rate: float


class WeeklyBreakdown(BaseModel):
    week: date
    total_hours: float
    attendance_rate: float
    punctuality_rate: float
    late_arrivals: int
    absent_days: int


class DepartmentMetric(BaseModel):
    department_name: str
    employee_count: int
    avg_hours: float
    attendance_rate: float
    punctuality_rate: float
    total_late_arrivals: int


class Alert(BaseModel):
    id: str
    severity: Severity
    title: str
    description: str
    timestamp: datetime


class LatenessEntry(BaseModel):
    employee_id: UUID
    employee_name: str | None
    attendance_date: date
    scheduled_start: str
    actual_arrival: str
    minutes_late: int
    is_late: bool
    penalty_hours: float | None = None


class SkippedRecord(BaseModel):
    """A record left out of aggregation, with the reason."""

    record_id: UUID
    employee_id: UUID
    reason: Literal["missing_employee", "duplicate"]


class EmployeeAggregation(BaseModel):
    metrics: list[EmployeeMetrics]
    skipped: list[SkippedRecord]


class DashboardAnalytics(BaseModel):
    kpis: OrganizationKPIs
    weekly_trend: list[TrendPoint]
    monthly_trend: list[TrendPoint]
    department_metrics: list[DepartmentMetric]
    alerts: list[Alert]
    skipped: list[SkippedRecord]
    last_updated: datetime


class EmployeeAnalytics(BaseModel):
    summary: PeriodSummary
    employees: list[EmployeeMetrics]
    weekly_trends: list[WeeklyBreakdown]
    departments: list[DepartmentMetric]
    skipped: list[SkippedRecord]
