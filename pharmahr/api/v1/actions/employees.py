"""
Employee and attendance actions.

Attendance writes are plain appends, like rows added to a sheet; keeping a
single row per (employee, date, shift) is the caller's job, done by deleting
the slot before saving it again.
"""

from __future__ import annotations

import logging

from sqlalchemy import delete as sa_delete
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pharmahr.core.enums import EmployeeStatus
from pharmahr.core.exceptions import ConflictError, NotFoundError
from pharmahr.models.employee import AttendanceRecord, Employee
from pharmahr.schemas.employee import AttendanceRecordSchema, EmployeeSchema
from pharmahr.schemas.gateway import (AddEmployee, DeleteAttendance,
                                      DeleteEmployee, GetAttendance,
                                      SaveAttendance, UpdateEmployee)

logger = logging.getLogger(__name__)


# ── Employees ───────────────────────────────────────────────────────
async def list_employees(db: AsyncSession) -> list[dict]:
    result = await db.execute(select(Employee).order_by(Employee.id))
    return [EmployeeSchema.model_validate(e).to_wire() for e in result.scalars().all()]


async def add_employee(db: AsyncSession, req: AddEmployee) -> dict:
    if await db.get(Employee, req.id) is not None:
        raise ConflictError(f"Employee id '{req.id}' already exists")

    employee = Employee(**req.model_dump(mode="json", exclude={"action"}))
    db.add(employee)
    await db.commit()
    logger.info("Created employee %s (%s)", employee.id, employee.full_name)
    return {"success": True, "id": employee.id}


async def update_employee(db: AsyncSession, req: UpdateEmployee) -> dict:
    employee = await db.get(Employee, req.id)
    if employee is None:
        raise NotFoundError(f"Employee '{req.id}' not found")

    changes = req.model_dump(mode="json", exclude={"action", "id"}, exclude_unset=True)
    for field, value in changes.items():
        setattr(employee, field, value)

    await db.commit()
    logger.info("Updated employee %s", req.id)
    return {"success": True, "id": employee.id}


async def delete_employee(db: AsyncSession, req: DeleteEmployee) -> dict:
    """Soft-delete: the employee becomes Terminated, history stays."""
    employee = await db.get(Employee, req.id.strip().upper())
    if employee is None:
        raise NotFoundError(f"Employee '{req.id}' not found")

    employee.status = EmployeeStatus.TERMINATED.value
    await db.commit()
    logger.info("Terminated employee %s (%s)", employee.id, employee.full_name)
    return {"success": True, "id": employee.id}


# ── Attendance ──────────────────────────────────────────────────────
async def list_attendance(db: AsyncSession, req: GetAttendance) -> list[dict]:
    query = select(AttendanceRecord).order_by(AttendanceRecord.row)
    if req.date:
        query = query.where(AttendanceRecord.date == req.date)
    result = await db.execute(query)
    return [
        AttendanceRecordSchema.model_validate(rec).to_wire()
        for rec in result.scalars().all()
    ]


async def save_attendance(db: AsyncSession, req: SaveAttendance) -> dict:
    """Append every record of the batch, in order."""
    missing_names = {r.employee_id for r in req.records if not r.employee_name}
    names: dict[str, str] = {}
    if missing_names:
        result = await db.execute(
            select(Employee.id, Employee.full_name).where(Employee.id.in_(missing_names))
        )
        names = {emp_id: name for emp_id, name in result.all()}

    for rec in req.records:
        db.add(
            AttendanceRecord(
                id=rec.id or rec.record_id,
                employee_id=rec.employee_id,
                employee_name=rec.employee_name or names.get(rec.employee_id),
                date=rec.date,
                time_in=rec.time_in,
                shift=rec.shift.value,
                status=rec.status.value,
                notes=rec.notes,
            )
        )
    await db.commit()
    logger.info("Appended %d attendance rows", len(req.records))
    return {"success": True, "saved": len(req.records)}


async def delete_attendance(db: AsyncSession, req: DeleteAttendance) -> dict:
    """Remove every row of each (employee, date, shift) slot."""
    deleted = 0
    for key in req.keys:
        result = await db.execute(
            sa_delete(AttendanceRecord).where(
                AttendanceRecord.employee_id == key.employee_id,
                AttendanceRecord.date == key.date,
                AttendanceRecord.shift == key.shift.value,
            )
        )
        deleted += result.rowcount or 0
    await db.commit()
    logger.info("Deleted %d attendance rows for %d slots", deleted, len(req.keys))
    return {"success": True, "deleted": deleted}
