"""
conftest.py: shared fixtures for the analytics tests.

Strategy:
- No database: the API is exercised through an in-memory ``FakeDataSource``
  installed with ``app.dependency_overrides[get_data_source]``.
- Records and employees are built through factory fixtures so each test
  states only the fields it cares about.
- Bearer tokens are minted with the same python-jose helper the service
  uses to verify them.
"""

from __future__ import annotations

import uuid
from datetime import date, datetime, time

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from asistencia.analytics.report import matches_status
from asistencia.core.security import create_access_token
from asistencia.main import app
from asistencia.schemas.attendance import AttendanceRecord, Employee, PeriodFilter, WorkPolicy
from asistencia.services.data_access import default_work_policy, get_data_source

ORG_ID = uuid.UUID("550e8400-e29b-41d4-a716-446655440000")


# ---------------------------------------------------------------------------
# In-memory data source
# ---------------------------------------------------------------------------


class FakeDataSource:
    """Implements ``AttendanceDataSource`` over plain lists."""

    def __init__(
        self,
        records: list[AttendanceRecord] | None = None,
        employees: list[Employee] | None = None,
        departments: dict[uuid.UUID, str] | None = None,
        policy: WorkPolicy | None = None,
    ) -> None:
        self.records = list(records or [])
        self.employees = list(employees or [])
        self.departments = dict(departments or {})
        self.policy = policy

    async def fetch_records(self, organization_id, period: PeriodFilter, late_cutoff=None):
        departments = {e.id: e.department_id for e in self.employees}
        cutoff = late_cutoff or default_work_policy().start_time
        return [
            r
            for r in self.records
            if r.organization_id == organization_id
            and period.start_date <= r.attendance_date <= period.end_date
            and (period.employee_id is None or r.employee_id == period.employee_id)
            and (
                period.department_id is None
                or departments.get(r.employee_id) == period.department_id
            )
            and matches_status(r, period.status, cutoff)
        ]

    async def fetch_records_for_day(self, organization_id, day: date):
        return await self.fetch_records(
            organization_id, PeriodFilter(start_date=day, end_date=day)
        )

    async def fetch_active_employees(self, organization_id):
        return [
            e for e in self.employees if e.organization_id == organization_id and e.is_active
        ]

    async def fetch_department_names(self, organization_id):
        return dict(self.departments)

    async def fetch_work_policy(self, organization_id):
        return self.policy

    async def find_employee_by_email(self, email: str):
        return next((e for e in self.employees if e.email == email), None)


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------


@pytest.fixture
def make_employee():
    def _make(
        name: str = "Ana Pérez",
        role: str = "employee",
        department_id: uuid.UUID | None = None,
        is_active: bool = True,
        organization_id: uuid.UUID = ORG_ID,
    ) -> Employee:
        uid = uuid.uuid4()
        return Employee(
            id=uid,
            organization_id=organization_id,
            full_name=name,
            employee_code=f"EMP-{uid.hex[:6]}",
            department_id=department_id,
            is_active=is_active,
            email=f"{uid.hex[:8]}@example.com",
            role=role,
        )

    return _make


@pytest.fixture
def make_record():
    def _make(
        employee_id: uuid.UUID,
        day: date,
        check_in: time | None = time(8, 55),
        check_out: time | None = time(17, 0),
        work_hours: float | None = 8.0,
        overtime_hours: float | None = 0.0,
        status: str = "present",
        organization_id: uuid.UUID = ORG_ID,
    ) -> AttendanceRecord:
        return AttendanceRecord(
            id=uuid.uuid4(),
            employee_id=employee_id,
            organization_id=organization_id,
            attendance_date=day,
            check_in_time=datetime.combine(day, check_in) if check_in else None,
            check_out_time=datetime.combine(day, check_out) if check_out else None,
            work_hours=work_hours,
            overtime_hours=overtime_hours,
            status=status,
        )

    return _make


# ---------------------------------------------------------------------------
# HTTP client + auth
# ---------------------------------------------------------------------------


@pytest.fixture
def fake_source() -> FakeDataSource:
    return FakeDataSource()


@pytest_asyncio.fixture
async def client(fake_source: FakeDataSource) -> AsyncClient:
    """HTTPX async client against the app, wired to ``fake_source``."""
    app.dependency_overrides[get_data_source] = lambda: fake_source
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    """Authorization header dict for an employee known to the data source."""

    def _headers(employee: Employee) -> dict:
        token = create_access_token({"sub": str(employee.id), "email": employee.email})
        return {"Authorization": f"Bearer {token}"}

    return _headers
