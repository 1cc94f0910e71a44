"""Tests for the daily attendance grid and its bulk save."""

import pytest
from sqlalchemy import select

from pharmahr.core.enums import AttendanceStatus, EmployeeStatus, Shift
from pharmahr.models.employee import AttendanceRecord
from pharmahr.schemas.employee import AttendanceRecordSchema, EmployeeSchema
from pharmahr.services.checkin import AttendanceDesk, build_grid

DAY = "2025-03-11"


def _emp(emp_id: str, status: EmployeeStatus = EmployeeStatus.ACTIVE) -> EmployeeSchema:
    return EmployeeSchema(id=emp_id, full_name=f"Employee {emp_id}", status=status)


def _rec(emp_id: str, shift: Shift, status: AttendanceStatus, day: str = DAY, time_in=None):
    return AttendanceRecordSchema(
        employee_id=emp_id, date=day, shift=shift, status=status, time_in=time_in
    )


def test_two_cells_per_active_employee():
    grid = build_grid([_emp("NV001"), _emp("NV002"), _emp("NV003", EmployeeStatus.ON_LEAVE)], [], DAY)
    assert list(grid) == ["NV001", "NV002"]
    for row in grid.values():
        assert [c.shift for c in row.cells] == [Shift.MORNING, Shift.AFTERNOON]
        assert all(c.status is AttendanceStatus.UNSCANNED and c.time_in is None for c in row.cells)


def test_grid_prefilled_from_records_of_that_day_only():
    records = [
        _rec("NV001", Shift.MORNING, AttendanceStatus.PRESENT, time_in="07:45"),
        _rec("NV001", Shift.AFTERNOON, AttendanceStatus.SICK, day="2025-03-10"),
    ]
    grid = build_grid([_emp("NV001")], records, DAY)
    assert grid["NV001"].morning.status is AttendanceStatus.PRESENT
    assert grid["NV001"].morning.time_in == "07:45:00"
    assert grid["NV001"].afternoon.status is AttendanceStatus.UNSCANNED


def test_last_appended_record_wins():
    records = [
        _rec("NV001", Shift.MORNING, AttendanceStatus.PRESENT),
        _rec("NV001", Shift.MORNING, AttendanceStatus.LATE),
    ]
    grid = build_grid([_emp("NV001")], records, DAY)
    assert grid["NV001"].morning.status is AttendanceStatus.LATE


def test_terminated_employee_with_history_stays_visible():
    terminated = _emp("NV009", EmployeeStatus.TERMINATED)
    records = [_rec("NV009", Shift.AFTERNOON, AttendanceStatus.PRESENT)]
    assert "NV009" in build_grid([terminated], records, DAY)
    assert "NV009" not in build_grid([terminated], records, "2025-03-12")


@pytest.mark.asyncio
async def test_sparse_save_sends_only_touched_cells(gateway, db_session):
    """Ten employees, two edited: only the edited non-Unscanned cells are stored."""
    for n in range(1, 11):
        await gateway.call("addEmployee", id=f"NV{n:03d}", fullName=f"Employee {n}")

    desk = AttendanceDesk(gateway)
    await desk.load(DAY)
    assert len(desk.rows) == 10

    desk.set_cell("NV001", Shift.MORNING, AttendanceStatus.PRESENT, time_in="07:30:00")
    desk.set_cell("NV001", Shift.AFTERNOON, AttendanceStatus.LATE, notes="Clinic run")
    desk.set_cell("NV002", Shift.MORNING, AttendanceStatus.SICK)
    # Touched but left Unscanned: never persisted
    desk.set_cell("NV003", Shift.MORNING, AttendanceStatus.UNSCANNED)

    assert await desk.save_all() == 3
    rows = (await db_session.execute(select(AttendanceRecord))).scalars().all()
    assert sorted((r.employee_id, r.shift, r.status) for r in rows) == [
        ("NV001", "Afternoon", "Late"),
        ("NV001", "Morning", "Present"),
        ("NV002", "Morning", "Sick"),
    ]
    assert not any(c.dirty for row in desk.rows.values() for c in row.cells)


@pytest.mark.asyncio
async def test_save_all_overwrites_and_skips_clean_cells(gateway, seeded_staff, db_session):
    desk = AttendanceDesk(gateway)
    await desk.load(DAY)
    desk.set_cell("NV001", Shift.MORNING, AttendanceStatus.PRESENT)
    await desk.save_all()

    # Nothing edited since: nothing sent
    assert await desk.save_all() == 0

    desk.set_cell("NV001", Shift.MORNING, AttendanceStatus.OTHER, notes="Training")
    assert await desk.save_all() == 1

    rows = (await db_session.execute(select(AttendanceRecord))).scalars().all()
    assert [(r.id, r.status, r.notes) for r in rows] == [(f"NV001-{DAY}-Morning", "Other", "Training")]


@pytest.mark.asyncio
async def test_reload_rebuilds_from_storage(gateway, seeded_staff):
    desk = AttendanceDesk(gateway)
    await desk.load(DAY)
    await desk.manual_checkin("NV002", Shift.MORNING)

    other = AttendanceDesk(gateway)
    await other.load(DAY)
    assert other.rows["NV002"].morning.status is AttendanceStatus.PRESENT
    await other.load("2025-03-12")
    assert other.rows["NV002"].morning.status is AttendanceStatus.UNSCANNED


@pytest.mark.asyncio
async def test_save_all_deletes_cells_set_back_to_unscanned(gateway, seeded_staff, db_session):
    """A stored check-in edited back to Unscanned is removed by the next save."""
    desk = AttendanceDesk(gateway)
    await desk.load(DAY)
    await desk.manual_checkin("NV001", Shift.MORNING)

    cell = desk.set_cell("NV001", Shift.MORNING, AttendanceStatus.UNSCANNED)
    assert await desk.save_all() == 0
    assert (cell.dirty, cell.time_in) == (False, None)
    assert (await db_session.execute(select(AttendanceRecord))).scalars().all() == []

    other = AttendanceDesk(gateway)
    await other.load(DAY)
    assert other.rows["NV001"].morning.status is AttendanceStatus.UNSCANNED


@pytest.mark.asyncio
async def test_save_all_mixes_cleared_and_saved_cells(gateway, seeded_staff, db_session):
    desk = AttendanceDesk(gateway)
    await desk.load(DAY)
    await desk.manual_checkin("NV001", Shift.AFTERNOON)

    desk.set_cell("NV001", Shift.AFTERNOON, AttendanceStatus.UNSCANNED)
    desk.set_cell("NV002", Shift.MORNING, AttendanceStatus.ON_LEAVE)
    assert await desk.save_all() == 1

    rows = (await db_session.execute(select(AttendanceRecord))).scalars().all()
    assert [(r.employee_id, r.shift, r.status) for r in rows] == [("NV002", "Morning", "OnLeave")]
    assert not any(c.dirty for row in desk.rows.values() for c in row.cells)
