"""Dependencies and query helpers shared by the analytics and report routes."""

import uuid
from datetime import date, timedelta

from fastapi import Depends

from asistencia.analytics.calendar import to_date
from asistencia.core.config import settings
from asistencia.core.middleware import ADMIN_ROLES
from asistencia.schemas.attendance import Employee
from asistencia.services.analytics_service import AnalyticsService
from asistencia.services.data_access import AttendanceDataSource, get_data_source


def get_analytics_service(
    source: AttendanceDataSource = Depends(get_data_source),
) -> AnalyticsService:
    return AnalyticsService(source)


def parse_date(val: str | None, default: date) -> date:
    if val is None:
        return default
    return to_date(val)


def default_period(date_from: str | None, date_to: str | None) -> tuple[date, date]:
    end = parse_date(date_to, date.today())
    start = parse_date(date_from, end - timedelta(days=settings.DEFAULT_PERIOD_DAYS))
    return start, end


def resolve_employee_id(
    requested: uuid.UUID | None, current_user: Employee
) -> uuid.UUID | None:
    """
    Admin-like roles may query any employee; None means all employees.
    Regular employees always get their own ID.
    """
    if current_user.role in ADMIN_ROLES:
        return requested
    return current_user.id


def resolve_department_id(
    requested: uuid.UUID | None, current_user: Employee
) -> uuid.UUID | None:
    if current_user.role in ADMIN_ROLES:
        return requested
    return None
