"""
Attendance check-in engine and the daily grid.

The grid holds two cells (morning, afternoon) per employee for one selected
date.  Every write to a slot goes through :meth:`AttendanceDesk._upsert`:
delete whatever the slot holds, then append the new record.  Since the
gateway appends attendance unconditionally, this is what keeps one record
per (employee, date, shift).

Writes are pessimistic: a cell changes only after the gateway confirms.
A save that fails after its delete went through leaves the cell Unscanned,
matching the now empty slot.  Removing a check-in is the exception; the cell goes back to Unscanned even
if the gateway call fails, and the failure is re-raised afterwards.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime

from pharmahr.core.clock import local_now, time_of_day
from pharmahr.core.enums import AttendanceStatus, EmployeeStatus, Shift
from pharmahr.core.exceptions import EmployeeNotFound
from pharmahr.schemas.employee import (AttendanceKey, AttendanceRecordSchema,
                                       EmployeeSchema, attendance_record_id)
from pharmahr.services.gateway_client import GatewayClient
from pharmahr.services.qr import QrPayload, parse_qr

logger = logging.getLogger(__name__)

QR_NOTE = "Scanned via QR"

# Statuses an operator may pick for a pending QR check-in.
PENDING_STATUSES = frozenset({AttendanceStatus.PRESENT, AttendanceStatus.LATE, AttendanceStatus.OTHER})


def derive_shift(moment: datetime) -> Shift:
    """Before noon local time is the morning shift, anything later the afternoon."""
    return Shift.MORNING if moment.hour < 12 else Shift.AFTERNOON


# ── Grid ────────────────────────────────────────────────────────────
@dataclass
class GridCell:
    employee_id: str
    shift: Shift
    status: AttendanceStatus = AttendanceStatus.UNSCANNED
    time_in: str | None = None
    notes: str | None = None
    dirty: bool = False

    def apply(self, record: AttendanceRecordSchema) -> None:
        self.status = record.status
        self.time_in = record.time_in
        self.notes = record.notes
        self.dirty = False

    def reset(self) -> None:
        self.status = AttendanceStatus.UNSCANNED
        self.time_in = None
        self.notes = None
        self.dirty = False

    @property
    def scanned(self) -> bool:
        return self.status is not AttendanceStatus.UNSCANNED


@dataclass
class GridRow:
    employee: EmployeeSchema
    morning: GridCell
    afternoon: GridCell

    def cell(self, shift: Shift) -> GridCell:
        return self.morning if Shift(shift) is Shift.MORNING else self.afternoon

    @property
    def cells(self) -> tuple[GridCell, GridCell]:
        return (self.morning, self.afternoon)


def build_grid(
    employees: Iterable[EmployeeSchema],
    records: Iterable[AttendanceRecordSchema],
    day: str,
) -> dict[str, GridRow]:
    """Two cells per active employee for ``day``, filled from persisted records.

    Employees who are no longer active still get a row when they own a record
    on that date, so historical days stay complete.  When storage holds more
    than one row for a slot, the last appended one wins.
    """
    day_records = [r for r in records if r.date == day]
    with_records = {r.employee_id for r in day_records}

    rows: dict[str, GridRow] = {}
    for emp in employees:
        if emp.status is not EmployeeStatus.ACTIVE and emp.id not in with_records:
            continue
        rows[emp.id] = GridRow(
            employee=emp,
            morning=GridCell(emp.id, Shift.MORNING),
            afternoon=GridCell(emp.id, Shift.AFTERNOON),
        )

    for rec in day_records:
        row = rows.get(rec.employee_id)
        if row is not None:
            row.cell(rec.shift).apply(rec)
    return rows


# ── Pending QR check-in ─────────────────────────────────────────────
@dataclass
class PendingCheckin:
    """A resolved scan waiting for the operator to confirm it."""

    employee: EmployeeSchema
    date: str
    shift: Shift
    time_in: str
    status: AttendanceStatus = AttendanceStatus.PRESENT
    notes: str = QR_NOTE
    qr: QrPayload | None = field(default=None, repr=False)

    def adjust(self, status: AttendanceStatus | str, notes: str | None = None) -> None:
        status = AttendanceStatus(status)
        if status not in PENDING_STATUSES:
            raise ValueError(f"A scan cannot be recorded as {status.value}")
        self.status = status
        if notes is not None:
            self.notes = notes

    def to_record(self) -> AttendanceRecordSchema:
        return AttendanceRecordSchema(
            id=attendance_record_id(self.employee.id, self.date, self.shift),
            employee_id=self.employee.id,
            employee_name=self.employee.full_name,
            date=self.date,
            shift=self.shift,
            time_in=self.time_in,
            status=self.status,
            notes=self.notes,
        )


# ── Engine ──────────────────────────────────────────────────────────
class AttendanceDesk:
    """Check-in desk for one selected date."""

    def __init__(self, gateway: GatewayClient) -> None:
        self._gateway = gateway
        self.date: str | None = None
        self.employees: list[EmployeeSchema] = []
        self.rows: dict[str, GridRow] = {}
        self.pending: PendingCheckin | None = None

    async def load(self, day: str) -> dict[str, GridRow]:
        """Select ``day`` and rebuild the grid from the gateway."""
        employees = await self._gateway.call("getEmployees")
        records = await self._gateway.call("getAttendance", date=day)
        self.employees = [EmployeeSchema.model_validate(e) for e in employees or []]
        parsed = [AttendanceRecordSchema.model_validate(r) for r in records or []]
        self.date = day
        self.rows = build_grid(self.employees, parsed, day)
        self.pending = None
        logger.debug("Grid for %s: %d employees, %d records", day, len(self.rows), len(parsed))
        return self.rows

    @property
    def roster(self) -> dict[str, EmployeeSchema]:
        """Active employees, the ones a badge scan may resolve to."""
        return {e.id: e for e in self.employees if e.status is EmployeeStatus.ACTIVE}

    def cell(self, employee_id: str, shift: Shift) -> GridCell:
        row = self.rows.get(employee_id)
        if row is None:
            raise EmployeeNotFound(employee_id)
        return row.cell(shift)

    # ── QR flow ─────────────────────────────────────────────────────
    def resolve_scan(self, raw: str, now: datetime | None = None) -> PendingCheckin:
        """Turn scanned text into a pending check-in for the selected date.

        The shift comes from the current wall clock, not from the date being
        viewed.  Nothing is persisted until :meth:`commit`.
        """
        payload = parse_qr(raw)
        employee = self.roster.get(payload.employee_id)
        if employee is None:
            raise EmployeeNotFound(payload.employee_id)

        moment = now or local_now()
        self.pending = PendingCheckin(
            employee=employee,
            date=self._selected_date(),
            shift=derive_shift(moment),
            time_in=time_of_day(moment),
            qr=payload,
        )
        return self.pending

    async def commit(self, pending: PendingCheckin | None = None) -> AttendanceRecordSchema:
        """Persist a pending check-in, overwriting the slot.

        On failure the gateway error propagates and the pending check-in is
        kept so the operator can retry.
        """
        pending = pending or self.pending
        if pending is None:
            raise ValueError("No pending check-in to commit")
        record = await self._upsert(pending.to_record())
        if pending is self.pending:
            self.pending = None
        logger.info(
            "Checked in %s for %s %s at %s",
            record.employee_id, record.date, record.shift.value, record.time_in,
        )
        return record

    # ── Manual edits ────────────────────────────────────────────────
    async def manual_checkin(
        self, employee_id: str, shift: Shift, now: datetime | None = None
    ) -> AttendanceRecordSchema:
        """Mark a grid cell Present at the current time."""
        row = self.rows.get(employee_id)
        if row is None:
            raise EmployeeNotFound(employee_id)
        day = self._selected_date()
        shift = Shift(shift)
        record = AttendanceRecordSchema(
            id=attendance_record_id(employee_id, day, shift),
            employee_id=employee_id,
            employee_name=row.employee.full_name,
            date=day,
            shift=shift,
            time_in=time_of_day(now or local_now()),
            status=AttendanceStatus.PRESENT,
        )
        return await self._upsert(record)

    async def remove(self, employee_id: str, shift: Shift) -> None:
        """Delete a slot's check-in; the cell is reset whatever the outcome."""
        cell = self.cell(employee_id, shift)
        key = AttendanceKey(employee_id=employee_id, date=self._selected_date(), shift=shift)
        try:
            await self._gateway.call("deleteAttendance", keys=[key.to_wire()])
        finally:
            cell.reset()
        logger.info("Removed check-in %s", key.record_id)

    def set_cell(
        self,
        employee_id: str,
        shift: Shift,
        status: AttendanceStatus,
        *,
        notes: str | None = None,
        time_in: str | None = None,
    ) -> GridCell:
        """Edit a cell locally; it is sent by the next :meth:`save_all`."""
        cell = self.cell(employee_id, shift)
        cell.status = AttendanceStatus(status)
        if notes is not None:
            cell.notes = notes
        if time_in is not None:
            cell.time_in = time_in
        cell.dirty = True
        return cell

    async def save_all(self) -> int:
        """Send every edited cell: one delete batch, then one save batch.

        Edited cells that went back to Unscanned are only deleted, so storage
        follows the grid.  Returns the number of records saved.
        """
        day = self._selected_date()
        edited = [
            (row, cell)
            for row in self.rows.values()
            for cell in row.cells
            if cell.dirty
        ]
        if not edited:
            return 0

        to_save = [(row, cell) for row, cell in edited if cell.scanned]
        cleared = [cell for _row, cell in edited if not cell.scanned]
        records = [
            AttendanceRecordSchema(
                id=attendance_record_id(cell.employee_id, day, cell.shift),
                employee_id=cell.employee_id,
                employee_name=row.employee.full_name,
                date=day,
                shift=cell.shift,
                time_in=cell.time_in,
                status=cell.status,
                notes=cell.notes,
            )
            for row, cell in to_save
        ]
        keys = [
            AttendanceKey(employee_id=cell.employee_id, date=day, shift=cell.shift).to_wire()
            for _row, cell in edited
        ]
        await self._gateway.call("deleteAttendance", keys=keys)
        for cell in cleared:
            cell.reset()

        if records:
            await self._gateway.call("saveAttendance", records=[r.to_wire() for r in records])
            for _row, cell in to_save:
                cell.dirty = False
        logger.info(
            "Saved %d attendance cells for %s, cleared %d", len(records), day, len(cleared)
        )
        return len(records)

    # ── Internals ───────────────────────────────────────────────────
    def _selected_date(self) -> str:
        if self.date is None:
            raise ValueError("No date selected; call load() first")
        return self.date

    async def _upsert(self, record: AttendanceRecordSchema) -> AttendanceRecordSchema:
        row = self.rows.get(record.employee_id)
        cell = row.cell(record.shift) if row is not None else None

        await self._gateway.call("deleteAttendance", keys=[_key_wire(record)])
        try:
            await self._gateway.call("saveAttendance", records=[record.to_wire()])
        except Exception:
            # The slot is empty in storage now
            if cell is not None:
                cell.reset()
            raise
        if cell is not None:
            cell.apply(record)
        return record


def _key_wire(record: AttendanceRecordSchema) -> dict:
    return AttendanceKey(
        employee_id=record.employee_id, date=record.date, shift=record.shift
    ).to_wire()
