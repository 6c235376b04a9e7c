"""
Analytics API routes.

Each route resolves the caller's organization from the authenticated
employee and delegates to ``AnalyticsService``; no aggregation happens here.
"""

import uuid
from datetime import date

from fastapi import APIRouter, Depends, Query

from asistencia.api.deps import (
    default_period,
    get_analytics_service,
    parse_date,
    resolve_department_id,
    resolve_employee_id,
)
from asistencia.core.middleware import ADMIN_ROLES, get_current_user, require_role
from asistencia.schemas.analytics import (
    Alert,
    Bucketing,
    DashboardAnalytics,
    EmployeeAnalytics,
    LatenessEntry,
    TrendPoint,
)
from asistencia.schemas.attendance import Employee, PeriodFilter
from asistencia.services.analytics_service import AnalyticsService

router = APIRouter()


@router.get(
    "/dashboard",
    response_model=DashboardAnalytics,
    summary="Organization dashboard: KPIs, trends, departments and alerts",
)
async def get_dashboard(
    today: str | None = Query(default=None, description="ISO date YYYY-MM-DD"),
    service: AnalyticsService = Depends(get_analytics_service),
    current_user: Employee = Depends(require_role(*ADMIN_ROLES)),
) -> DashboardAnalytics:
    return await service.dashboard(
        current_user.organization_id, parse_date(today, date.today())
    )


@router.get(
    "/employees",
    response_model=EmployeeAnalytics,
    summary="Per-employee metrics over a period",
)
async def get_employee_analytics(
    date_from: str | None = Query(default=None, description="ISO date YYYY-MM-DD"),
    date_to: str | None = Query(default=None, description="ISO date YYYY-MM-DD"),
    employee_id: uuid.UUID | None = Query(default=None),
    department_id: uuid.UUID | None = Query(default=None),
    service: AnalyticsService = Depends(get_analytics_service),
    current_user: Employee = Depends(get_current_user),
) -> EmployeeAnalytics:
    start, end = default_period(date_from, date_to)
    period = PeriodFilter(
        start_date=start,
        end_date=end,
        employee_id=resolve_employee_id(employee_id, current_user),
        department_id=resolve_department_id(department_id, current_user),
    )
    return await service.employee_analytics(current_user.organization_id, period)


@router.get(
    "/trend",
    response_model=list[TrendPoint],
    summary="Attendance trend bucketed by day or ISO week",
)
async def get_trend(
    date_from: str | None = Query(default=None, description="ISO date YYYY-MM-DD"),
    date_to: str | None = Query(default=None, description="ISO date YYYY-MM-DD"),
    bucketing: Bucketing = Query(default="day"),
    service: AnalyticsService = Depends(get_analytics_service),
    current_user: Employee = Depends(require_role(*ADMIN_ROLES)),
) -> list[TrendPoint]:
    start, end = default_period(date_from, date_to)
    period = PeriodFilter(start_date=start, end_date=end)
    return await service.trend(current_user.organization_id, period, bucketing)


@router.get(
    "/alerts",
    response_model=list[Alert],
    summary="Threshold alerts for the given day",
)
async def get_alerts(
    today: str | None = Query(default=None, description="ISO date YYYY-MM-DD"),
    service: AnalyticsService = Depends(get_analytics_service),
    current_user: Employee = Depends(require_role(*ADMIN_ROLES)),
) -> list[Alert]:
    return await service.alerts(
        current_user.organization_id, parse_date(today, date.today())
    )


@router.get(
    "/lateness",
    response_model=list[LatenessEntry],
    summary="Minutes late per check-in against the work policy",
)
async def get_lateness(
    date_from: str | None = Query(default=None, description="ISO date YYYY-MM-DD"),
    date_to: str | None = Query(default=None, description="ISO date YYYY-MM-DD"),
    employee_id: uuid.UUID | None = Query(default=None),
    service: AnalyticsService = Depends(get_analytics_service),
    current_user: Employee = Depends(get_current_user),
) -> list[LatenessEntry]:
    start, end = default_period(date_from, date_to)
    period = PeriodFilter(
        start_date=start,
        end_date=end,
        employee_id=resolve_employee_id(employee_id, current_user),
    )
    return await service.lateness(current_user.organization_id, period)
