"""
Seed script: inserts generated attendance rows for an organization's active
employees. Never called by the analytics path.

Usage:
    python -m asistencia.db.seed <organization_id> [days]
"""

import asyncio
import logging
import random
import sys
import uuid
from datetime import date, datetime, time, timedelta
from typing import Iterable

from asistencia.analytics.rounding import round2
from asistencia.db.models import Attendance
from asistencia.db.session import AsyncSessionLocal
from asistencia.schemas.attendance import AttendanceRecord, Employee
from asistencia.services.data_access import SqlAttendanceSource, default_work_policy

logger = logging.getLogger(__name__)

ABSENCE_PROBABILITY = 0.1
INCOMPLETE_PROBABILITY = 0.08


def generate_sample_attendance(
    employees: Iterable[Employee],
    start: date,
    end: date,
    rng: random.Random,
) -> list[AttendanceRecord]:
    """
    One record per employee and weekday in [start, end].

    Check-ins fall between 08:00 and 10:00, check-outs between 16:00 and
    20:00; roughly 10% of days are absences and 8% lack a check-out.
    """
    policy = default_work_policy()
    cutoff = datetime.combine(date.min, policy.start_time) + timedelta(
        minutes=policy.late_threshold
    )
    employees = list(employees)
    records: list[AttendanceRecord] = []

    day = start
    while day <= end:
        if day.weekday() < 5:
            for employee in employees:
                records.append(_sample_record(employee, day, cutoff.time(), rng))
        day += timedelta(days=1)

    return records


def _sample_record(
    employee: Employee, day: date, late_cutoff: time, rng: random.Random
) -> AttendanceRecord:
    base = {
        "id": uuid.uuid4(),
        "employee_id": employee.id,
        "organization_id": employee.organization_id,
        "attendance_date": day,
    }
    if rng.random() < ABSENCE_PROBABILITY:
        return AttendanceRecord(**base, status="absent")

    check_in = datetime.combine(day, time(8, 0)) + timedelta(minutes=rng.randint(0, 120))
    status = "late" if check_in.time() > late_cutoff else "present"
    if rng.random() < INCOMPLETE_PROBABILITY:
        return AttendanceRecord(**base, check_in_time=check_in, status=status)

    check_out = datetime.combine(day, time(16, 0)) + timedelta(minutes=rng.randint(0, 240))
    hours = (check_out - check_in).total_seconds() / 3600
    return AttendanceRecord(
        **base,
        check_in_time=check_in,
        check_out_time=check_out,
        work_hours=round2(hours),
        overtime_hours=round2(max(0.0, hours - 8)),
        status=status,
    )


async def seed(organization_id: uuid.UUID, days: int) -> int:
    source = SqlAttendanceSource(AsyncSessionLocal)
    employees = await source.fetch_active_employees(organization_id)
    if not employees:
        logger.warning("Organización %s sin empleados activos, nada que sembrar", organization_id)
        return 0

    end = date.today()
    records = generate_sample_attendance(
        employees, end - timedelta(days=days), end, random.Random()
    )
    async with AsyncSessionLocal() as session:
        async with session.begin():
            session.add_all(Attendance(**r.model_dump()) for r in records)

    logger.info(
        "Insertadas %d asistencias para %d empleados de %s",
        len(records), len(employees), organization_id,
    )
    return len(records)


async def main(argv: list[str]) -> None:
    if not argv:
        print("Usage: python -m asistencia.db.seed <organization_id> [days]")
        sys.exit(1)
    organization_id = uuid.UUID(argv[0])
    days = int(argv[1]) if len(argv) > 1 else 30
    count = await seed(organization_id, days)
    print(f"Seed complete. {count} attendance rows.")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(main(sys.argv[1:]))
