from datetime import date, datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel

from asistencia.schemas.analytics import EmployeeMetrics, OrganizationKPIs, SkippedRecord
from asistencia.schemas.attendance import PeriodFilter

ReportType = Literal["individual", "department", "general", "attendance", "punctuality"]
ReportPeriod = Literal["today", "week", "month", "quarter", "custom"]


class ReportFilters(PeriodFilter):
    report_type: ReportType = "general"
    period: ReportPeriod = "custom"


class ReportRow(BaseModel):
    id: UUID
    employee_id: UUID
    employee_name: str
    employee_code: str
    department_name: str
    attendance_date: date
    clock_in: datetime | None
    clock_out: datetime | None
    status: str
    outcome: Literal["present", "late", "absent", "incomplete"]
    total_hours: float
    overtime_hours: float


class ReportStats(BaseModel):
    total_employees: int
    total_attendances: int
    present_days: int
    absent_days: int
    incomplete_days: int
    late_days: int
    attendance_rate: float
    punctuality_rate: float
    total_hours: float
    overtime_hours: float
    average_hours: float


class ReportMetadata(BaseModel):
    organization_id: UUID
    generated_at: datetime
    report_type: ReportType
    period_label: str
    working_days: int
    record_count: int
    skipped: list[SkippedRecord] = []


class AttendanceReport(BaseModel):
    """Shape handed to the export collaborator; values are final."""

    records: list[ReportRow]
    employee_metrics: list[EmployeeMetrics] | None = None
    organization_kpis: OrganizationKPIs | None = None
    stats: ReportStats
    filters: ReportFilters
    metadata: ReportMetadata
