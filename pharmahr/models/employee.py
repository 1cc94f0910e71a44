"""
Employee & AttendanceRecord models: core business domain.

Attendance rows are append-only like spreadsheet rows: ``row`` is the
insertion order and ``id`` (``{employee}-{date}-{shift}``) is *not* unique at
the storage level.  One-row-per-slot is kept by the check-in engine, which
deletes a slot before appending it again.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Index, Integer, String

from pharmahr.db.base import Base


class Employee(Base):
    __tablename__ = "employees"

    id: str = Column(String(20), primary_key=True)  # type: ignore[assignment]  # NV###
    full_name: str = Column(String(200), nullable=False)  # type: ignore[assignment]
    department: str | None = Column(String(100), nullable=True)  # type: ignore[assignment]
    position: str | None = Column(String(100), nullable=True)  # type: ignore[assignment]
    status: str = Column(  # type: ignore[assignment]
        String(20),
        nullable=False,
        default="Active",
        server_default="Active",
    )  # Active | OnLeave | Terminated
    dob: str | None = Column(String(10), nullable=True)  # type: ignore[assignment]
    gender: str | None = Column(String(10), nullable=True)  # type: ignore[assignment]
    qualification: str | None = Column(String(100), nullable=True)  # type: ignore[assignment]
    phone: str | None = Column(String(30), nullable=True)  # type: ignore[assignment]
    email: str | None = Column(String(320), nullable=True)  # type: ignore[assignment]
    join_date: str | None = Column(String(10), nullable=True)  # type: ignore[assignment]
    notes: str | None = Column(String(500), nullable=True)  # type: ignore[assignment]
    created_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )


class AttendanceRecord(Base):
    __tablename__ = "attendance"
    __table_args__ = (
        Index("ix_attendance_slot", "employee_id", "date", "shift"),
    )

    row: int = Column(Integer, primary_key=True, autoincrement=True)  # type: ignore[assignment]
    id: str = Column(String(80), nullable=False, index=True)  # type: ignore[assignment]
    employee_id: str = Column(String(20), nullable=False)  # type: ignore[assignment]
    employee_name: str | None = Column(String(200), nullable=True)  # type: ignore[assignment]
    date: str = Column(String(10), nullable=False, index=True)  # type: ignore[assignment]  # YYYY-MM-DD
    time_in: str | None = Column(String(8), nullable=True)  # type: ignore[assignment]  # HH:MM:SS
    shift: str = Column(String(20), nullable=False)  # type: ignore[assignment]
    # Morning | Afternoon
    status: str = Column(String(20), nullable=False)  # type: ignore[assignment]
    notes: str | None = Column(String(500), nullable=True)  # type: ignore[assignment]
