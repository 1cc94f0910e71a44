"""Pydantic schemas for Employee / Attendance."""

from __future__ import annotations

import re

from pydantic import field_validator

from pharmahr.core.enums import AttendanceStatus, EmployeeStatus, Shift
from pharmahr.schemas.base import CamelModel, ClockTime, IsoDate

_EMPLOYEE_ID_RE = re.compile(r"^NV\d{3,}$")


# ── Employee ────────────────────────────────────────────────────────
class EmployeeSchema(CamelModel):
    id: str
    full_name: str
    department: str | None = None
    position: str | None = None
    status: EmployeeStatus = EmployeeStatus.ACTIVE
    dob: str | None = None
    gender: str | None = None
    qualification: str | None = None
    phone: str | None = None
    email: str | None = None
    join_date: str | None = None
    notes: str | None = None

    @field_validator("id")
    @classmethod
    def _id(cls, v: str) -> str:
        v = v.strip().upper()
        if not _EMPLOYEE_ID_RE.match(v):
            raise ValueError("Employee id must look like NV001")
        return v

    @field_validator("full_name")
    @classmethod
    def _name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name must not be empty")
        if len(v) > 200:
            raise ValueError("Name must not exceed 200 characters")
        return v


# ── Attendance ──────────────────────────────────────────────────────
class AttendanceKey(CamelModel):
    employee_id: str
    date: IsoDate
    shift: Shift

    @property
    def record_id(self) -> str:
        return attendance_record_id(self.employee_id, self.date, self.shift)


class AttendanceRecordSchema(AttendanceKey):
    id: str | None = None
    employee_name: str | None = None
    time_in: ClockTime = None
    status: AttendanceStatus
    notes: str | None = None

    @field_validator("status")
    @classmethod
    def _persistable(cls, v: AttendanceStatus) -> AttendanceStatus:
        if v is AttendanceStatus.UNSCANNED:
            raise ValueError("Unscanned slots are never persisted")
        return v


def attendance_record_id(employee_id: str, day: str, shift: Shift) -> str:
    """Deterministic id of the single record a slot may hold."""
    return f"{employee_id}-{day}-{Shift(shift).value}"
