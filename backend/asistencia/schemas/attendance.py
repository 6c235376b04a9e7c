from datetime import date, datetime, time
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, field_validator, model_validator

from asistencia.analytics.errors import InvalidRangeError

AttendanceStatus = Literal[
    "present",
    "late",
    "absent",
    "incomplete",
    "early_leave",
    "sick_leave",
    "vacation",
    "remote",
    "overtime",
]

StatusFilter = Literal["present", "absent", "incomplete", "late"]

EmployeeRole = Literal["employee", "manager", "hr", "admin", "super_admin"]


class AttendanceRecord(BaseModel):
    model_config = {"frozen": True, "from_attributes": True}

    id: UUID
    employee_id: UUID
    organization_id: UUID
    attendance_date: date
    check_in_time: datetime | None = None
    check_out_time: datetime | None = None
    work_hours: float | None = None
    overtime_hours: float | None = None
    status: AttendanceStatus = "present"

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, v: str | None) -> str:
        if v is None:
            return "present"
        return str(v).strip().lower()


class Employee(BaseModel):
    model_config = {"frozen": True, "from_attributes": True}

    id: UUID
    organization_id: UUID
    full_name: str
    employee_code: str
    department_id: UUID | None = None
    position_id: UUID | None = None
    is_active: bool = True
    email: str | None = None
    role: EmployeeRole = "employee"


class Department(BaseModel):
    model_config = {"frozen": True, "from_attributes": True}

    id: UUID
    name: str


class WorkPolicy(BaseModel):
    """Scheduled start/end of the working day and the late tolerance in minutes."""

    model_config = {"frozen": True, "from_attributes": True}

    start_time: time = time(9, 0)
    end_time: time = time(17, 0)
    late_threshold: int = 15


class PeriodFilter(BaseModel):
    model_config = {"frozen": True}

    start_date: date
    end_date: date
    employee_id: UUID | None = None
    department_id: UUID | None = None
    status: StatusFilter | None = None

    @model_validator(mode="after")
    def check_range(self) -> "PeriodFilter":
        if self.start_date > self.end_date:
            raise InvalidRangeError(self.start_date, self.end_date)
        return self
