"""
Data-access collaborator for the analytics layer.

``AttendanceDataSource`` is the contract the service depends on;
``SqlAttendanceSource`` implements it over the hosted PostgreSQL tables.
Every fetch opens its own session so independent fetches can run
concurrently.
"""

from __future__ import annotations

import logging
import uuid
from datetime import date, time
from typing import Protocol, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from asistencia.analytics.report import matches_status
from asistencia.core.config import settings
from asistencia.db import models
from asistencia.db.session import AsyncSessionLocal
from asistencia.schemas.attendance import (
    AttendanceRecord,
    Employee,
    PeriodFilter,
    WorkPolicy,
)

logger = logging.getLogger(__name__)


def default_work_policy() -> WorkPolicy:
    return WorkPolicy(
        start_time=time.fromisoformat(settings.LATE_THRESHOLD_TIME),
        end_time=time.fromisoformat(settings.WORKDAY_END_TIME),
        late_threshold=settings.LATE_TOLERANCE_MINUTES,
    )


class AttendanceDataSource(Protocol):
    async def fetch_records(
        self,
        organization_id: uuid.UUID,
        period: PeriodFilter,
        late_cutoff: time | None = None,
    ) -> Sequence[AttendanceRecord]:
        """Records inside the period, narrowed by employee, department and status."""
        raise NotImplementedError

    async def fetch_records_for_day(
        self, organization_id: uuid.UUID, day: date
    ) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    async def fetch_active_employees(self, organization_id: uuid.UUID) -> Sequence[Employee]:
        raise NotImplementedError

    async def fetch_department_names(self, organization_id: uuid.UUID) -> dict[uuid.UUID, str]:
        raise NotImplementedError

    async def fetch_work_policy(self, organization_id: uuid.UUID) -> WorkPolicy | None:
        raise NotImplementedError

    async def find_employee_by_email(self, email: str) -> Employee | None:
        raise NotImplementedError


def _to_record(row: models.Attendance) -> AttendanceRecord:
    return AttendanceRecord.model_validate(row)


def _to_employee(row: models.Employee) -> Employee:
    return Employee(
        id=row.id,
        organization_id=row.organization_id,
        full_name=row.full_name or f"{row.first_name} {row.last_name}",
        employee_code=row.employee_code,
        department_id=row.department_id,
        position_id=row.position_id,
        is_active=row.is_active,
        email=row.email,
        role=row.role,
    )


class SqlAttendanceSource:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def fetch_records(
        self,
        organization_id: uuid.UUID,
        period: PeriodFilter,
        late_cutoff: time | None = None,
    ) -> list[AttendanceRecord]:
        stmt = (
            select(models.Attendance)
            .where(
                models.Attendance.organization_id == organization_id,
                models.Attendance.attendance_date.between(period.start_date, period.end_date),
            )
            .order_by(models.Attendance.attendance_date.desc())
        )
        if period.employee_id is not None:
            stmt = stmt.where(models.Attendance.employee_id == period.employee_id)
        if period.department_id is not None:
            stmt = stmt.join(models.Employee).where(
                models.Employee.department_id == period.department_id
            )

        async with self._session_factory() as session:
            result = await session.execute(stmt)
            rows = result.scalars().all()

        records = [_to_record(r) for r in rows]
        if period.status is not None:
            cutoff = late_cutoff or default_work_policy().start_time
            records = [r for r in records if matches_status(r, period.status, cutoff)]

        logger.debug(
            "Asistencias org=%s %s..%s: %d filas",
            organization_id, period.start_date, period.end_date, len(records),
        )
        return records

    async def fetch_records_for_day(
        self, organization_id: uuid.UUID, day: date
    ) -> list[AttendanceRecord]:
        return await self.fetch_records(
            organization_id, PeriodFilter(start_date=day, end_date=day)
        )

    async def fetch_active_employees(self, organization_id: uuid.UUID) -> list[Employee]:
        stmt = (
            select(models.Employee)
            .where(
                models.Employee.organization_id == organization_id,
                models.Employee.is_active == True,  # noqa: E712
            )
            .order_by(models.Employee.full_name)
        )
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return [_to_employee(e) for e in result.scalars().all()]

    async def fetch_department_names(self, organization_id: uuid.UUID) -> dict[uuid.UUID, str]:
        stmt = select(models.Department.id, models.Department.name).where(
            models.Department.organization_id == organization_id
        )
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return {dept_id: name for dept_id, name in result.all()}

    async def fetch_work_policy(self, organization_id: uuid.UUID) -> WorkPolicy | None:
        stmt = select(models.WorkPolicy).where(
            models.WorkPolicy.organization_id == organization_id,
            models.WorkPolicy.is_active == True,  # noqa: E712
        )
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            policy = result.scalars().first()
        if policy is None:
            return None
        return WorkPolicy.model_validate(policy)

    async def find_employee_by_email(self, email: str) -> Employee | None:
        stmt = select(models.Employee).where(models.Employee.email == email)
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            row = result.scalar_one_or_none()
        return _to_employee(row) if row is not None else None


def get_data_source() -> AttendanceDataSource:
    """FastAPI dependency; tests override it with an in-memory source."""
    return SqlAttendanceSource(AsyncSessionLocal)
