"""
Per-employee metrics over a period.

``aggregate_employee`` folds one employee's records; ``aggregate_employees``
runs it for a whole roster and reports the records it had to leave out.
"""

import logging
from typing import Iterable, Mapping
from uuid import UUID

from asistencia.analytics.calendar import expected_hours, working_days
from asistencia.analytics.classifier import Outcome, classify_all, deduplicate
from asistencia.analytics.errors import MissingEmployeeReferenceError
from asistencia.analytics.rounding import percentage, round2
from asistencia.schemas.analytics import EmployeeAggregation, EmployeeMetrics, SkippedRecord
from asistencia.schemas.attendance import AttendanceRecord, Employee, PeriodFilter

logger = logging.getLogger(__name__)

NO_DEPARTMENT = "Sin Departamento"


def aggregate_employee(
    records: Iterable[AttendanceRecord],
    period: PeriodFilter,
    employee: Employee | None = None,
    department_name: str | None = None,
) -> EmployeeMetrics:
    """
    Fold the records of a single employee into ``EmployeeMetrics``.

    Expected days come from the working-day calendar of the period, so days
    with no record at all lower the attendance rate.
    """
    total_hours = 0.0
    overtime = 0.0
    regular = 0.0
    late = 0
    absent = 0
    present = 0

    for record, outcome in classify_all(records):
        worked = record.work_hours or 0.0
        extra = record.overtime_hours or 0.0
        total_hours += worked
        overtime += extra
        regular += max(0.0, worked - extra)

        if outcome is Outcome.LATE:
            late += 1
        elif outcome is Outcome.ABSENT:
            absent += 1
        if outcome.attended:
            present += 1

    expected_days = working_days(period.start_date, period.end_date)
    hours_expected = expected_hours(expected_days)

    return EmployeeMetrics(
        employee_id=employee.id if employee else None,
        employee_name=employee.full_name if employee else None,
        employee_code=employee.employee_code if employee else None,
        department_name=department_name,
        total_hours=round2(total_hours),
        regular_hours=round2(regular),
        overtime_hours=round2(overtime),
        late_arrivals=late,
        absent_days=absent,
        present_days=present,
        expected_days=expected_days,
        expected_hours=round2(hours_expected),
        hours_deficit=round2(total_hours - hours_expected),
        attendance_rate=percentage(present, expected_days),
        punctuality_rate=percentage(present - late, present),
    )


def aggregate_employees(
    records: Iterable[AttendanceRecord],
    roster: Iterable[Employee],
    period: PeriodFilter,
    department_names: Mapping[UUID, str] | None = None,
) -> EmployeeAggregation:
    """
    Per-employee metrics for every roster employee.

    Records whose employee is not in the roster are skipped and returned in
    ``skipped``; duplicated (employee, date) rows are collapsed the same way.
    """
    department_names = department_names or {}
    employees = {e.id: e for e in roster}
    unique, duplicates = deduplicate(records)

    skipped = [
        SkippedRecord(record_id=r.id, employee_id=r.employee_id, reason="duplicate")
        for r in duplicates
    ]
    grouped: dict[UUID, list[AttendanceRecord]] = {emp_id: [] for emp_id in employees}

    for record in unique:
        bucket = grouped.get(record.employee_id)
        if bucket is None:
            orphan = MissingEmployeeReferenceError(record.id, record.employee_id)
            logger.warning("Registro omitido: %s", orphan)
            skipped.append(
                SkippedRecord(
                    record_id=record.id,
                    employee_id=record.employee_id,
                    reason="missing_employee",
                )
            )
            continue
        bucket.append(record)

    metrics = [
        aggregate_employee(
            emp_records,
            period,
            employees[emp_id],
            department_name_for(employees[emp_id], department_names),
        )
        for emp_id, emp_records in grouped.items()
    ]
    logger.debug(
        "Métricas por empleado: empleados=%d, omitidos=%d", len(metrics), len(skipped)
    )
    return EmployeeAggregation(metrics=metrics, skipped=skipped)


def department_name_for(employee: Employee, department_names: Mapping[UUID, str]) -> str:
    if employee.department_id is None:
        return NO_DEPARTMENT
    return department_names.get(employee.department_id) or NO_DEPARTMENT
