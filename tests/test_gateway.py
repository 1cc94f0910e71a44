"""Tests for the gateway endpoint: parsing, access control, locking, CRUD actions."""

import pytest
from httpx import AsyncClient

from pharmahr.models.dropdown import Dropdown
from pharmahr.models.report import PrescriptionReport


# ── Envelope & parsing ─────────────────────────────────────────────
@pytest.mark.asyncio
async def test_ping_is_public(exec_action, act_as):
    act_as(None)
    resp = await exec_action("test")
    assert resp.status_code == 200
    assert resp.json()["success"] is True


@pytest.mark.asyncio
async def test_unknown_action(exec_action):
    resp = await exec_action("launchRockets")
    assert resp.status_code == 400
    assert resp.json() == {"error": "Unknown action 'launchRockets'", "success": False}


@pytest.mark.asyncio
async def test_missing_action(async_client: AsyncClient):
    resp = await async_client.post("/api/v1/exec", json={"id": "NV001"})
    assert resp.status_code == 400
    assert resp.json()["error"] == "Missing 'action'"


@pytest.mark.asyncio
async def test_non_object_and_non_json_bodies(async_client: AsyncClient):
    resp = await async_client.post("/api/v1/exec", json=["test"])
    assert resp.status_code == 400
    assert resp.json()["error"] == "Request body must be a JSON object"

    resp = await async_client.post(
        "/api/v1/exec", content=b"action=test", headers={"Content-Type": "application/json"}
    )
    assert resp.status_code == 400
    assert resp.json()["success"] is False


@pytest.mark.asyncio
async def test_field_errors_name_the_field(exec_action):
    resp = await exec_action("addEmployee", id="X1", fullName="Bad Id")
    assert resp.status_code == 400
    assert resp.json()["error"].startswith("addEmployee: id:")


# ── Access control ─────────────────────────────────────────────────
@pytest.mark.asyncio
async def test_protected_action_requires_token(exec_action, act_as):
    act_as(None)
    resp = await exec_action("getEmployees")
    assert resp.status_code == 401
    assert resp.json()["error"] == "Not authenticated"


@pytest.mark.asyncio
async def test_staff_cannot_list_accounts(exec_action, act_as):
    act_as("staff")
    resp = await exec_action("getUsers")
    assert resp.status_code == 403

    resp = await exec_action("getEmployees")
    assert resp.status_code == 200


# ── Write lock ─────────────────────────────────────────────────────
@pytest.mark.asyncio
async def test_write_rejected_while_lock_is_busy(exec_action, write_lock):
    write_lock.timeout = 0.05
    async with write_lock.hold("test"):
        resp = await exec_action("addEmployee", id="NV001", fullName="Nguyen Van An")
    assert resp.status_code == 503
    assert "addEmployee" in resp.json()["error"]

    # Nothing was written
    assert (await exec_action("getEmployees")).json() == []


@pytest.mark.asyncio
async def test_reads_do_not_wait_for_the_lock(exec_action, write_lock):
    async with write_lock.hold("test"):
        resp = await exec_action("getFunds")
    assert resp.status_code == 200


# ── Employees ──────────────────────────────────────────────────────
@pytest.mark.asyncio
async def test_employee_lifecycle(exec_action):
    resp = await exec_action(
        "addEmployee", id="nv007", fullName="  Vo Thi Hoa ", department="Outpatient Pharmacy",
        qualification="Pharmacist (University)", joinDate="2020-06-01",
    )
    assert resp.json() == {"success": True, "id": "NV007"}

    dup = await exec_action("addEmployee", id="NV007", fullName="Someone Else")
    assert dup.status_code == 409

    await exec_action("updateEmployee", id="NV007", fullName="Vo Thi Hoa", position="Head Pharmacist")
    [emp] = (await exec_action("getEmployees")).json()
    assert emp["fullName"] == "Vo Thi Hoa"
    assert emp["position"] == "Head Pharmacist"
    assert emp["department"] == "Outpatient Pharmacy"
    assert emp["status"] == "Active"

    await exec_action("deleteEmployee", id="NV007")
    [emp] = (await exec_action("getEmployees")).json()
    assert emp["status"] == "Terminated"


@pytest.mark.asyncio
async def test_update_missing_employee(exec_action):
    resp = await exec_action("updateEmployee", id="NV404", fullName="Ghost")
    assert resp.status_code == 404


# ── Attendance storage ─────────────────────────────────────────────
@pytest.mark.asyncio
async def test_save_attendance_appends_and_delete_clears_slot(exec_action, seeded_staff):
    record = {"employeeId": "NV001", "date": "2025-03-10", "shift": "Morning", "status": "Present", "timeIn": "07:58"}
    for _ in range(2):
        resp = await exec_action("saveAttendance", records=[record])
        assert resp.json() == {"success": True, "saved": 1}

    rows = (await exec_action("getAttendance", date="2025-03-10")).json()
    assert len(rows) == 2  # plain appends
    assert rows[0]["id"] == "NV001-2025-03-10-Morning"
    assert rows[0]["employeeName"] == "Nguyen Van An"
    assert rows[0]["timeIn"] == "07:58:00"

    resp = await exec_action(
        "deleteAttendance", keys=[{"employeeId": "NV001", "date": "2025-03-10", "shift": "Morning"}]
    )
    assert resp.json() == {"success": True, "deleted": 2}
    assert (await exec_action("getAttendance", date="2025-03-10")).json() == []


@pytest.mark.asyncio
async def test_unscanned_records_are_refused(exec_action):
    resp = await exec_action(
        "saveAttendance",
        records=[{"employeeId": "NV001", "date": "2025-03-10", "shift": "Morning", "status": "Unscanned"}],
    )
    assert resp.status_code == 400


# ── Reports, proposals, roster, dropdowns ──────────────────────────
@pytest.mark.asyncio
async def test_report_add_update_delete(exec_action, db_session):
    resp = await exec_action(
        "addReport", date="2025-03-10", totalIssued=120, notReceived=3, reason="Out of stock",
        attachmentUrls=["https://files.example/a.jpg", "https://files.example/b.jpg"],
    )
    report_id = resp.json()["id"]
    assert report_id.startswith("R-")

    await exec_action("addReport", id=report_id, date="2025-03-10", totalIssued=125, notReceived=2)
    [report] = (await exec_action("getReports")).json()
    assert report["totalIssued"] == 125
    assert report["attachmentUrls"] == []

    stored = await db_session.get(PrescriptionReport, report_id)
    assert stored.total_issued == 125

    assert (await exec_action("deleteReport", id=report_id)).json()["success"] is True
    assert (await exec_action("deleteReport", id=report_id)).status_code == 404


@pytest.mark.asyncio
async def test_report_attachments_keep_order(exec_action):
    urls = ["https://x/3.png", "https://x/1.png", "https://x/2.png"]
    await exec_action("addReport", date="2025-03-10", totalIssued=1, attachmentUrls=urls)
    [report] = (await exec_action("getReports")).json()
    assert report["attachmentUrls"] == urls


@pytest.mark.asyncio
async def test_negative_report_counts_rejected(exec_action):
    resp = await exec_action("addReport", date="2025-03-10", totalIssued=-1)
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_proposal_add_and_edit(exec_action):
    resp = await exec_action("addProposal", date="2025-03-01", title="New fridge", submitter="An")
    proposal_id = resp.json()["id"]

    await exec_action("addProposal", id=proposal_id, date="2025-03-01", title="New fridge", status="Approved")
    [proposal] = (await exec_action("getProposals")).json()
    assert proposal["status"] == "Approved"


@pytest.mark.asyncio
async def test_save_shift_overwrites_week_row(exec_action):
    row = {"weekStart": "2025-03-10", "weekEnd": "2025-03-16", "ca": "Night", "mon": "An"}
    assert (await exec_action("saveShift", **row)).json()["id"] == "2025-03-10-Night"
    await exec_action("saveShift", **{**row, "mon": "Binh", "sat": "Cuong"})

    [saved] = (await exec_action("getShifts")).json()
    assert (saved["mon"], saved["sat"], saved["tue"]) == ("Binh", "Cuong", "")


@pytest.mark.asyncio
async def test_get_dropdowns(exec_action, db_session):
    db_session.add_all([Dropdown(type="Department", value="Drug Warehouse"), Dropdown(type="Qualification", value="Pharmacist (College)")])
    await db_session.commit()
    rows = (await exec_action("getDropdowns")).json()
    assert {"type": "Qualification", "value": "Pharmacist (College)"} in rows


# ── Health & status ────────────────────────────────────────────────
@pytest.mark.asyncio
async def test_health(async_client: AsyncClient):
    resp = await async_client.get("/api/v1/health")
    assert resp.status_code == 200
    assert resp.json() == {"db": True}


@pytest.mark.asyncio
async def test_status_dashboard(async_client: AsyncClient, exec_action, seeded_staff):
    await exec_action("addFund", date="2025-03-01", type="Income", amount=500_000, content="Dues")
    await exec_action("addFund", date="2025-03-02", type="Expense", amount=120_000, content="Tea")
    await exec_action("addReport", date="2025-03-10", totalIssued=100, notReceived=4)
    await exec_action("addReport", date="2025-03-11", totalIssued=80, notReceived=1)

    data = (await async_client.get("/api/v1/status")).json()
    assert data == {
        "activeEmployees": 2,
        "fundBalance": 380_000,
        "totalIssued": 180,
        "totalNotReceived": 5,
        "status": "operational",
    }


@pytest.mark.asyncio
async def test_status_requires_login(async_client: AsyncClient, act_as):
    act_as(None)
    assert (await async_client.get("/api/v1/status")).status_code == 401
