from typing import Iterable, Mapping
from uuid import UUID

from asistencia.analytics.employee import NO_DEPARTMENT
from asistencia.analytics.rounding import percentage, round2
from asistencia.schemas.analytics import DepartmentMetric, EmployeeMetrics


def aggregate_departments(
    employee_metrics: Iterable[EmployeeMetrics],
    department_of: Mapping[UUID | None, str | None],
) -> list[DepartmentMetric]:
    """
    Roll per-employee metrics up by department name.

    Employees missing from ``department_of`` (or mapped to ``None``) land in
    the "Sin Departamento" bucket. Groups keep first-seen order.
    """
    groups: dict[str, list[EmployeeMetrics]] = {}
    for metrics in employee_metrics:
        name = department_of.get(metrics.employee_id) or NO_DEPARTMENT
        groups.setdefault(name, []).append(metrics)

    result: list[DepartmentMetric] = []
    for name, members in groups.items():
        count = len(members)
        hours = sum(m.total_hours for m in members)
        present = sum(m.present_days for m in members)
        expected = sum(m.expected_days for m in members)
        late = sum(m.late_arrivals for m in members)
        result.append(
            DepartmentMetric(
                department_name=name,
                employee_count=count,
                avg_hours=round2(hours / count) if count else 0.0,
                attendance_rate=percentage(present, expected),
                punctuality_rate=percentage(present - late, present),
                total_late_arrivals=late,
            )
        )
    return result
