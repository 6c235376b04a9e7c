"""Error taxonomy of the analytics engine."""

from datetime import date
from uuid import UUID


class AnalyticsError(Exception):
    """Base class for input contract violations detected by the engine."""


class InvalidDateError(AnalyticsError):
    """A value that should be a calendar date could not be parsed."""


class InvalidRangeError(AnalyticsError):
    """A period was requested with start_date after end_date."""

    def __init__(self, start_date: date, end_date: date) -> None:
        self.start_date = start_date
        self.end_date = end_date
        super().__init__(f"start_date {start_date} is after end_date {end_date}")


class MissingEmployeeReferenceError(AnalyticsError):
    """
    A record references an employee that is not in the supplied roster.

    Aggregators never raise this: they collect instances next to their
    results so the skip stays observable.
    """

    def __init__(self, record_id: UUID | str, employee_id: UUID | str) -> None:
        self.record_id = record_id
        self.employee_id = employee_id
        super().__init__(
            f"attendance {record_id} references unknown employee {employee_id}"
        )
