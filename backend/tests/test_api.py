"""
HTTP layer: auth, role scoping and error mapping.

The app runs against the in-memory data source installed by the ``client``
fixture; tokens carry the ``sub``/``email``/``aud`` claims of the hosted
auth provider.
"""

from __future__ import annotations

import uuid
from datetime import date, timedelta

import pytest
from httpx import AsyncClient
from jose import jwt

from asistencia.core.config import settings
from asistencia.core.security import create_access_token

TODAY = "2024-01-03"


@pytest.fixture
def people(fake_source, make_employee, make_record):
    admin = make_employee("Admin", role="admin")
    worker = make_employee("Worker")
    other = make_employee("Other")
    fake_source.employees = [admin, worker, other]
    fake_source.records = [
        make_record(worker.id, date(2024, 1, 3)),
        make_record(other.id, date(2024, 1, 3), status="late"),
        make_record(worker.id, date(2024, 1, 2)),
    ]
    return {"admin": admin, "worker": worker, "other": other}


class TestAuth:
    async def test_health(self, client: AsyncClient):
        resp = await client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}

    async def test_missing_token(self, client: AsyncClient, people):
        resp = await client.get("/api/analytics/dashboard")
        assert resp.status_code == 401

    async def test_garbage_token(self, client: AsyncClient, people):
        resp = await client.get(
            "/api/analytics/dashboard", headers={"Authorization": "Bearer not-a-jwt"}
        )
        assert resp.status_code == 401

    async def test_wrong_audience(self, client: AsyncClient, people):
        token = jwt.encode(
            {"sub": "x", "email": people["admin"].email, "aud": "anon"},
            settings.JWT_SECRET,
            algorithm=settings.ALGORITHM,
        )
        resp = await client.get(
            "/api/analytics/dashboard", headers={"Authorization": f"Bearer {token}"}
        )
        assert resp.status_code == 401

    async def test_expired_token(self, client: AsyncClient, people):
        token = create_access_token(
            {"sub": str(people["admin"].id), "email": people["admin"].email},
            expires_delta=timedelta(minutes=-1),
        )
        resp = await client.get(
            "/api/analytics/dashboard", headers={"Authorization": f"Bearer {token}"}
        )
        assert resp.status_code == 401

    async def test_unknown_email(self, client: AsyncClient, people):
        token = create_access_token({"sub": str(uuid.uuid4()), "email": "nobody@example.com"})
        resp = await client.get(
            "/api/analytics/employees", headers={"Authorization": f"Bearer {token}"}
        )
        assert resp.status_code == 401

    async def test_inactive_employee(self, client: AsyncClient, fake_source, make_employee, auth_headers):
        gone = make_employee("Gone", is_active=False)
        fake_source.employees = [gone]
        resp = await client.get("/api/analytics/employees", headers=auth_headers(gone))
        assert resp.status_code == 403

    async def test_employee_cannot_open_dashboard(self, client: AsyncClient, people, auth_headers):
        resp = await client.get("/api/analytics/dashboard", headers=auth_headers(people["worker"]))
        assert resp.status_code == 403


class TestAnalyticsRoutes:
    async def test_dashboard(self, client: AsyncClient, people, auth_headers):
        resp = await client.get(
            "/api/analytics/dashboard", params={"today": TODAY}, headers=auth_headers(people["admin"])
        )
        assert resp.status_code == 200
        body = resp.json()
        assert body["kpis"]["total_employees"] == 3
        assert body["kpis"]["present_today"] == 1
        assert body["kpis"]["late_today"] == 1
        assert "weekly_trend" in body
        assert "monthly_trend" in body
        assert "department_metrics" in body
        assert "last_updated" in body

    async def test_employee_sees_only_self(self, client: AsyncClient, people, auth_headers):
        worker = people["worker"]
        resp = await client.get(
            "/api/analytics/employees",
            params={
                "date_from": "2024-01-01",
                "date_to": TODAY,
                "employee_id": str(people["other"].id),
            },
            headers=auth_headers(worker),
        )
        assert resp.status_code == 200
        employees = resp.json()["employees"]
        assert [e["employee_id"] for e in employees] == [str(worker.id)]
        assert employees[0]["present_days"] == 2

    async def test_admin_may_pick_employee(self, client: AsyncClient, people, auth_headers):
        other = people["other"]
        resp = await client.get(
            "/api/analytics/employees",
            params={"date_from": "2024-01-01", "date_to": TODAY, "employee_id": str(other.id)},
            headers=auth_headers(people["admin"]),
        )
        assert resp.status_code == 200
        [metrics] = resp.json()["employees"]
        assert metrics["employee_id"] == str(other.id)
        assert metrics["late_arrivals"] == 1

    async def test_trend(self, client: AsyncClient, people, auth_headers):
        resp = await client.get(
            "/api/analytics/trend",
            params={"date_from": "2024-01-01", "date_to": TODAY, "bucketing": "day"},
            headers=auth_headers(people["admin"]),
        )
        assert resp.status_code == 200
        assert [p["period_label"] for p in resp.json()] == ["2024-01-02", "2024-01-03"]

    async def test_alerts(self, client: AsyncClient, people, auth_headers):
        resp = await client.get(
            "/api/analytics/alerts", params={"today": TODAY}, headers=auth_headers(people["admin"])
        )
        assert resp.status_code == 200
        assert resp.json()[0]["title"] == "Ausentismo Crítico"

    async def test_lateness(self, client: AsyncClient, people, auth_headers):
        resp = await client.get(
            "/api/analytics/lateness",
            params={"date_from": "2024-01-01", "date_to": TODAY},
            headers=auth_headers(people["worker"]),
        )
        assert resp.status_code == 200
        assert {e["employee_id"] for e in resp.json()} == {str(people["worker"].id)}

    async def test_reversed_range_is_422(self, client: AsyncClient, people, auth_headers):
        resp = await client.get(
            "/api/analytics/employees",
            params={"date_from": "2024-02-01", "date_to": "2024-01-01"},
            headers=auth_headers(people["admin"]),
        )
        assert resp.status_code == 422

    async def test_bad_date_is_422(self, client: AsyncClient, people, auth_headers):
        resp = await client.get(
            "/api/analytics/dashboard",
            params={"today": "03/01/2024"},
            headers=auth_headers(people["admin"]),
        )
        assert resp.status_code == 422

    async def test_unknown_bucketing_is_422(self, client: AsyncClient, people, auth_headers):
        resp = await client.get(
            "/api/analytics/trend",
            params={"bucketing": "month"},
            headers=auth_headers(people["admin"]),
        )
        assert resp.status_code == 422


class TestReportRoute:
    async def test_attendance_report(self, client: AsyncClient, people, auth_headers):
        resp = await client.get(
            "/api/reports/attendance",
            params={"date_from": "2024-01-01", "date_to": TODAY},
            headers=auth_headers(people["admin"]),
        )
        assert resp.status_code == 200
        body = resp.json()
        assert body["metadata"]["record_count"] == 3
        assert body["metadata"]["period_label"] == "2024-01-01/2024-01-03"
        assert body["filters"]["report_type"] == "general"
        assert body["organization_kpis"] is not None

    async def test_status_filter(self, client: AsyncClient, people, auth_headers):
        resp = await client.get(
            "/api/reports/attendance",
            params={"date_from": "2024-01-01", "date_to": TODAY, "status": "late"},
            headers=auth_headers(people["admin"]),
        )
        assert resp.status_code == 200
        assert [r["employee_name"] for r in resp.json()["records"]] == ["Other"]

    async def test_employee_report_is_scoped(self, client: AsyncClient, people, auth_headers):
        resp = await client.get(
            "/api/reports/attendance",
            params={"date_from": "2024-01-01", "date_to": TODAY, "report_type": "individual"},
            headers=auth_headers(people["worker"]),
        )
        assert resp.status_code == 200
        names = {r["employee_name"] for r in resp.json()["records"]}
        assert names == {"Worker"}
