"""Tests for annual evaluations and the weekly duty roster."""

from datetime import date

import pytest

from pharmahr.core.enums import DutyShift
from pharmahr.core.exceptions import DuplicateEvaluation, GatewayError
from pharmahr.schemas.employee import EmployeeSchema
from pharmahr.services.evaluations import EvaluationBook, average_score
from pharmahr.services.roster import DutyRosterBook, week_range


class RecordingGateway:
    """Stands in for GatewayClient and remembers every call."""

    def __init__(self, responses=None):
        self.calls = []
        self.responses = responses or {}

    async def call(self, action, **fields):
        self.calls.append((action, fields))
        return self.responses.get(action, {"success": True})


AN = EmployeeSchema(id="NV001", full_name="Nguyen Van An", position="Pharmacist")


def test_average_score_rounds_to_one_decimal():
    assert average_score(8, 9, 7) == 8.0
    assert average_score(8, 8.5, 9.5) == 8.7
    assert average_score() == 0.0


@pytest.mark.asyncio
async def test_submit_builds_id_and_average(gateway):
    book = EvaluationBook(gateway)
    await book.load()
    evaluation = await book.submit(AN, 2024, professional=9, attitude=8, discipline=8, rank="Excellent")
    assert evaluation.id == "E-2024-NV001"
    assert evaluation.average_score == 8.3

    await book.load()
    [stored] = book.for_year(2024)
    assert stored.full_name == "Nguyen Van An"
    assert stored.rank == "Excellent"


@pytest.mark.asyncio
async def test_duplicate_is_rejected_without_calling_gateway():
    fake = RecordingGateway({"getEvaluations": [{"year": 2024, "employeeId": "NV001", "id": "E-2024-NV001"}]})
    book = EvaluationBook(fake)
    await book.load()

    with pytest.raises(DuplicateEvaluation):
        await book.submit(AN, 2024, professional=5, attitude=5, discipline=5)
    assert [action for action, _ in fake.calls] == ["getEvaluations"]

    # Another year is fine
    await book.submit(AN, 2025, professional=5, attitude=5, discipline=5)
    assert fake.calls[-1][0] == "addEvaluation"
    assert fake.calls[-1][1]["id"] == "E-2025-NV001"


@pytest.mark.asyncio
async def test_storage_still_refuses_a_second_row(gateway, exec_action):
    """A duplicate that slips past the client is refused by storage."""
    await EvaluationBook(gateway).submit(AN, 2023, professional=7, attitude=7, discipline=7)
    with pytest.raises(GatewayError) as exc_info:
        await EvaluationBook(gateway).submit(AN, 2023, professional=6, attitude=6, discipline=6)
    assert exc_info.value.status_code == 409

    assert (await exec_action("deleteEvaluation", id="E-2023-NV001")).json()["success"] is True
    assert (await exec_action("getEvaluations")).json() == []


@pytest.mark.asyncio
async def test_scores_outside_range_rejected(exec_action):
    resp = await exec_action("addEvaluation", year=2024, employeeId="NV001", scoreProfessional=11)
    assert resp.status_code == 400


# ── Duty roster ────────────────────────────────────────────────────
@pytest.mark.parametrize(
    "day, monday, sunday",
    [
        ("2025-03-10", date(2025, 3, 10), date(2025, 3, 16)),
        ("2025-03-16", date(2025, 3, 10), date(2025, 3, 16)),
        (date(2025, 1, 1), date(2024, 12, 30), date(2025, 1, 5)),
    ],
)
def test_week_range(day, monday, sunday):
    assert week_range(day) == (monday, sunday)


@pytest.mark.asyncio
async def test_roster_week_template_and_save(gateway):
    book = DutyRosterBook(gateway)
    await book.load()
    week = book.week("2025-03-12")
    assert [r.ca for r in week] == [DutyShift.MORNING, DutyShift.AFTERNOON, DutyShift.NIGHT]
    assert all(r.week_start == "2025-03-10" and r.mon == "" for r in week)

    night = week[2].model_copy(update={"wed": "Binh"})
    await book.save(night)

    fresh = DutyRosterBook(gateway)
    await fresh.load()
    assert fresh.week("2025-03-16")[2].wed == "Binh"
    assert fresh.week("2025-03-17")[2].wed == ""
