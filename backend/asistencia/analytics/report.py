"""
Report assembly for the export collaborator.

The assembler joins records with employee/department names and attaches
aggregates computed elsewhere; it never recomputes or rounds those again.
"""

import logging
from datetime import datetime, time, timezone
from typing import Iterable, Mapping, Sequence
from uuid import UUID

from asistencia.analytics.calendar import working_days
from asistencia.analytics.classifier import ClassifiedRecord, Outcome, classify_all, deduplicate
from asistencia.analytics.employee import NO_DEPARTMENT, department_name_for
from asistencia.analytics.rounding import percentage, round2
from asistencia.schemas.analytics import EmployeeMetrics, OrganizationKPIs, SkippedRecord
from asistencia.schemas.attendance import AttendanceRecord, Employee, StatusFilter
from asistencia.schemas.report import (
    AttendanceReport,
    ReportFilters,
    ReportMetadata,
    ReportRow,
    ReportStats,
)

logger = logging.getLogger(__name__)

UNKNOWN_EMPLOYEE_NAME = "Empleado Sin Nombre"
UNKNOWN_EMPLOYEE_CODE = "N/A"


def matches_status(record: AttendanceRecord, status: StatusFilter | None, late_cutoff: time) -> bool:
    """
    Report status filter.

    ``late`` matches rows flagged late as well as check-ins after the cut-off.
    """
    if status is None:
        return True
    checked_in = record.check_in_time is not None
    if status == "present":
        return checked_in
    if status == "absent":
        return not checked_in
    if status == "incomplete":
        return checked_in and record.check_out_time is None
    if status == "late":
        return record.status == "late" or (
            checked_in and record.check_in_time.time() > late_cutoff
        )
    raise ValueError(f"Unknown status filter: {status!r}")


def record_hours(record: AttendanceRecord) -> float:
    """Stored work hours, or the check-in/check-out span when none were stored."""
    if record.work_hours:
        return record.work_hours
    if record.check_in_time and record.check_out_time:
        span = (record.check_out_time - record.check_in_time).total_seconds() / 3600
        return max(0.0, span)
    return 0.0


def compute_report_stats(
    classified: Sequence[ClassifiedRecord],
    total_employees: int,
    filters: ReportFilters,
) -> ReportStats:
    """Totals over already deduplicated rows; orphan rows still count."""
    outcomes = [outcome for _, outcome in classified]
    attended = sum(1 for o in outcomes if o.attended)
    late = outcomes.count(Outcome.LATE)
    total_hours = sum(record_hours(r) for r, _ in classified)
    overtime = sum(r.overtime_hours or 0.0 for r, _ in classified)
    expected = working_days(filters.start_date, filters.end_date) * max(0, total_employees)

    return ReportStats(
        total_employees=max(0, total_employees),
        total_attendances=len(classified),
        present_days=attended,
        absent_days=outcomes.count(Outcome.ABSENT),
        incomplete_days=outcomes.count(Outcome.INCOMPLETE),
        late_days=late,
        attendance_rate=percentage(attended, expected),
        punctuality_rate=percentage(attended - late, attended),
        total_hours=round2(total_hours),
        overtime_hours=round2(overtime),
        average_hours=round2(total_hours / attended) if attended else 0.0,
    )


def assemble_report(
    records: Iterable[AttendanceRecord],
    filters: ReportFilters,
    *,
    organization_id: UUID,
    employees: Iterable[Employee],
    department_names: Mapping[UUID, str],
    total_employees: int,
    employee_metrics: list[EmployeeMetrics] | None = None,
    organization_kpis: OrganizationKPIs | None = None,
    generated_at: datetime | None = None,
) -> AttendanceReport:
    roster = {e.id: e for e in employees}
    unique, duplicates = deduplicate(records)
    classified = classify_all(unique)
    skipped = [
        SkippedRecord(record_id=r.id, employee_id=r.employee_id, reason="duplicate")
        for r in duplicates
    ]
    rows: list[ReportRow] = []

    for record, outcome in classified:
        employee = roster.get(record.employee_id)
        if employee is None:
            skipped.append(
                SkippedRecord(
                    record_id=record.id,
                    employee_id=record.employee_id,
                    reason="missing_employee",
                )
            )
        rows.append(
            ReportRow(
                id=record.id,
                employee_id=record.employee_id,
                employee_name=employee.full_name if employee else UNKNOWN_EMPLOYEE_NAME,
                employee_code=employee.employee_code if employee else UNKNOWN_EMPLOYEE_CODE,
                department_name=(
                    department_name_for(employee, department_names) if employee else NO_DEPARTMENT
                ),
                attendance_date=record.attendance_date,
                clock_in=record.check_in_time,
                clock_out=record.check_out_time,
                status=record.status,
                outcome=outcome.value,
                total_hours=round2(record_hours(record)),
                overtime_hours=round2(record.overtime_hours),
            )
        )

    orphans = sum(1 for s in skipped if s.reason == "missing_employee")
    if orphans:
        logger.warning("Reporte con %d registros sin empleado en el padrón", orphans)

    rows.sort(key=lambda r: (-r.attendance_date.toordinal(), r.employee_name))

    metadata = ReportMetadata(
        organization_id=organization_id,
        generated_at=generated_at or datetime.now(timezone.utc),
        report_type=filters.report_type,
        period_label=f"{filters.start_date.isoformat()}/{filters.end_date.isoformat()}",
        working_days=working_days(filters.start_date, filters.end_date),
        record_count=len(rows),
        skipped=skipped,
    )

    return AttendanceReport(
        records=rows,
        employee_metrics=employee_metrics,
        organization_kpis=organization_kpis,
        stats=compute_report_stats(classified, total_employees, filters),
        filters=filters,
        metadata=metadata,
    )
