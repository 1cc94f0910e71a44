"""Prescription report, evaluation, proposal, duty roster and dropdown actions."""

from __future__ import annotations

import logging
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pharmahr.core.exceptions import NotFoundError
from pharmahr.models.dropdown import Dropdown
from pharmahr.models.evaluation import Evaluation
from pharmahr.models.proposal import Proposal
from pharmahr.models.report import PrescriptionReport
from pharmahr.models.roster import DutyRoster
from pharmahr.schemas.gateway import (AddEvaluation, AddProposal, AddReport,
                                      DeleteEvaluation, DeleteReport,
                                      SaveShift)
from pharmahr.schemas.records import (DropdownSchema, DutyRosterSchema,
                                      EvaluationSchema,
                                      PrescriptionReportSchema, ProposalSchema)

logger = logging.getLogger(__name__)

# Reports whose id carries this prefix were created by the client and may
# be edited in place.
_EDITABLE_REPORT_PREFIX = "R-"


def _new_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


# ── Prescription reports ───────────────────────────────────────────
async def list_reports(db: AsyncSession) -> list[dict]:
    result = await db.execute(
        select(PrescriptionReport).order_by(PrescriptionReport.date, PrescriptionReport.id)
    )
    return [PrescriptionReportSchema.model_validate(r).to_wire() for r in result.scalars().all()]


async def add_report(db: AsyncSession, req: AddReport) -> dict:
    """Update an ``R-`` report in place if it exists, otherwise add it."""
    values = req.model_dump(mode="json", exclude={"action", "attachment_urls"})
    values["attachment_urls"] = ";".join(req.attachment_urls)

    existing = None
    if req.id and req.id.startswith(_EDITABLE_REPORT_PREFIX):
        existing = await db.get(PrescriptionReport, req.id)

    if existing is not None:
        for field, value in values.items():
            setattr(existing, field, value)
        logger.info("Updated prescription report %s", req.id)
    else:
        values["id"] = req.id or _new_id("R")
        db.add(PrescriptionReport(**values))
        logger.info("Added prescription report %s", values["id"])

    await db.commit()
    return {"success": True, "id": values.get("id", req.id)}


async def delete_report(db: AsyncSession, req: DeleteReport) -> dict:
    report = await db.get(PrescriptionReport, req.id)
    if report is None:
        raise NotFoundError(f"Report '{req.id}' not found")
    await db.delete(report)
    await db.commit()
    return {"success": True, "id": req.id}


# ── Evaluations ────────────────────────────────────────────────────
async def list_evaluations(db: AsyncSession) -> list[dict]:
    result = await db.execute(
        select(Evaluation).order_by(Evaluation.year.desc(), Evaluation.employee_id)
    )
    return [EvaluationSchema.model_validate(e).to_wire() for e in result.scalars().all()]


async def add_evaluation(db: AsyncSession, req: AddEvaluation) -> dict:
    evaluation = Evaluation(**req.model_dump(mode="json", exclude={"action"}))
    db.add(evaluation)
    await db.commit()
    logger.info("Added evaluation %s", evaluation.id)
    return {"success": True, "id": evaluation.id}


async def delete_evaluation(db: AsyncSession, req: DeleteEvaluation) -> dict:
    evaluation = await db.get(Evaluation, req.id)
    if evaluation is None:
        raise NotFoundError(f"Evaluation '{req.id}' not found")
    await db.delete(evaluation)
    await db.commit()
    return {"success": True, "id": req.id}


# ── Proposals ──────────────────────────────────────────────────────
async def list_proposals(db: AsyncSession) -> list[dict]:
    result = await db.execute(select(Proposal).order_by(Proposal.date.desc()))
    return [ProposalSchema.model_validate(p).to_wire() for p in result.scalars().all()]


async def add_proposal(db: AsyncSession, req: AddProposal) -> dict:
    """Add a proposal, or overwrite the one with the same id when editing."""
    values = req.model_dump(mode="json", exclude={"action"})
    values["id"] = req.id or _new_id("P")
    await db.merge(Proposal(**values))
    await db.commit()
    logger.info("Saved proposal %s", values["id"])
    return {"success": True, "id": values["id"]}


# ── Duty roster ────────────────────────────────────────────────────
async def list_shifts(db: AsyncSession) -> list[dict]:
    result = await db.execute(select(DutyRoster).order_by(DutyRoster.week_start, DutyRoster.ca))
    return [DutyRosterSchema.model_validate(s).to_wire() for s in result.scalars().all()]


async def save_shift(db: AsyncSession, req: SaveShift) -> dict:
    """Overwrite the roster row of one (week, duty shift)."""
    await db.merge(DutyRoster(**req.model_dump(mode="json", exclude={"action"})))
    await db.commit()
    logger.info("Saved duty roster %s", req.id)
    return {"success": True, "id": req.id}


# ── Dropdowns ──────────────────────────────────────────────────────
async def list_dropdowns(db: AsyncSession) -> list[dict]:
    result = await db.execute(select(Dropdown).order_by(Dropdown.type, Dropdown.row))
    return [DropdownSchema.model_validate(d).to_wire() for d in result.scalars().all()]
