"""
Lateness against the organization's work policy.

A check-in is late when it falls more than ``late_threshold`` minutes after
the scheduled start. Only records with a check-in are analysed.
"""

from typing import Iterable, Mapping
from uuid import UUID

from asistencia.analytics.rounding import round2
from asistencia.schemas.analytics import LatenessEntry
from asistencia.schemas.attendance import AttendanceRecord, WorkPolicy


def analyze_lateness(
    records: Iterable[AttendanceRecord],
    policy: WorkPolicy,
    employee_names: Mapping[UUID, str] | None = None,
) -> list[LatenessEntry]:
    employee_names = employee_names or {}
    scheduled = policy.start_time.hour * 60 + policy.start_time.minute
    entries: list[LatenessEntry] = []

    for record in records:
        if record.check_in_time is None:
            continue
        arrival = record.check_in_time.time()
        minutes_late = max(0, arrival.hour * 60 + arrival.minute - scheduled)
        is_late = minutes_late > policy.late_threshold
        entries.append(
            LatenessEntry(
                employee_id=record.employee_id,
                employee_name=employee_names.get(record.employee_id),
                attendance_date=record.attendance_date,
                scheduled_start=policy.start_time.strftime("%H:%M"),
                actual_arrival=arrival.strftime("%H:%M"),
                minutes_late=minutes_late,
                is_late=is_late,
                penalty_hours=round2(minutes_late / 60) if is_late else None,
            )
        )
    return entries
