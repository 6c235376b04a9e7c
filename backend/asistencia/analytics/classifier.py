"""
Record classification.

Every aggregator consumes attendance rows through ``classify`` /
``classify_all``; nothing else looks at nullable check-in/check-out fields.
"""

import enum
import logging
from typing import Iterable, NamedTuple

from asistencia.schemas.attendance import AttendanceRecord

logger = logging.getLogger(__name__)


class Outcome(str, enum.Enum):
    PRESENT = "present"
    LATE = "late"
    ABSENT = "absent"
    INCOMPLETE = "incomplete"

    @property
    def attended(self) -> bool:
        """Any attendance signal for the day."""
        return self is not Outcome.ABSENT

    @property
    def on_time(self) -> bool:
        """Attended and not flagged late."""
        return self in (Outcome.PRESENT, Outcome.INCOMPLETE)


class ClassifiedRecord(NamedTuple):
    record: AttendanceRecord
    outcome: Outcome


def classify(record: AttendanceRecord) -> Outcome:
    if record.status == "late":
        return Outcome.LATE
    if record.status == "absent" or record.check_in_time is None:
        return Outcome.ABSENT
    if record.check_out_time is None:
        return Outcome.INCOMPLETE
    return Outcome.PRESENT


def deduplicate(
    records: Iterable[AttendanceRecord],
) -> tuple[list[AttendanceRecord], list[AttendanceRecord]]:
    """
    Keep the first record per (employee_id, attendance_date).

    Returns (unique, duplicates); the store should already guarantee
    uniqueness, so duplicates are logged.
    """
    seen: set[tuple] = set()
    unique: list[AttendanceRecord] = []
    duplicates: list[AttendanceRecord] = []
    for record in records:
        key = (record.employee_id, record.attendance_date)
        if key in seen:
            duplicates.append(record)
            continue
        seen.add(key)
        unique.append(record)

    if duplicates:
        logger.warning(
            "Registros duplicados por (empleado, fecha): %d descartados", len(duplicates)
        )
    return unique, duplicates


def classify_all(records: Iterable[AttendanceRecord]) -> list[ClassifiedRecord]:
    return [ClassifiedRecord(r, classify(r)) for r in records]
