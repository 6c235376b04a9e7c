"""Report routes: the JSON payload handed to the export collaborator."""

import uuid
from datetime import date

from fastapi import APIRouter, Depends, Query

from asistencia.analytics.calendar import resolve_period
from asistencia.api.deps import (
    default_period,
    get_analytics_service,
    resolve_department_id,
    resolve_employee_id,
)
from asistencia.core.middleware import get_current_user
from asistencia.schemas.attendance import Employee, StatusFilter
from asistencia.schemas.report import AttendanceReport, ReportFilters, ReportPeriod, ReportType
from asistencia.services.analytics_service import AnalyticsService

router = APIRouter()


@router.get(
    "/attendance",
    response_model=AttendanceReport,
    summary="Attendance report with rows, stats and metadata",
)
async def get_attendance_report(
    date_from: str | None = Query(default=None, description="ISO date YYYY-MM-DD"),
    date_to: str | None = Query(default=None, description="ISO date YYYY-MM-DD"),
    employee_id: uuid.UUID | None = Query(default=None),
    department_id: uuid.UUID | None = Query(default=None),
    status: StatusFilter | None = Query(default=None),
    report_type: ReportType = Query(default="general"),
    period: ReportPeriod = Query(default="custom"),
    service: AnalyticsService = Depends(get_analytics_service),
    current_user: Employee = Depends(get_current_user),
) -> AttendanceReport:
    if period == "custom":
        start, end = default_period(date_from, date_to)
    else:
        start, end = resolve_period(period, date.today())

    filters = ReportFilters(
        start_date=start,
        end_date=end,
        employee_id=resolve_employee_id(employee_id, current_user),
        department_id=resolve_department_id(department_id, current_user),
        status=status,
        report_type=report_type,
        period=period,
    )
    return await service.report(current_user.organization_id, filters)
