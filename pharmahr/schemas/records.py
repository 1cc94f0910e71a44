"""Pydantic schemas for reports, evaluations, proposals, roster and dropdowns."""

from __future__ import annotations

from pydantic import Field, field_validator, model_validator

from pharmahr.core.enums import DutyShift
from pharmahr.schemas.base import CamelModel, IsoDate


# ── Prescription report ────────────────────────────────────────────
class PrescriptionReportSchema(CamelModel):
    id: str | None = None
    date: IsoDate
    total_issued: int = Field(default=0, ge=0)
    not_received: int = Field(default=0, ge=0)
    reason: str | None = None
    reporter: str | None = None
    reporter_id: str | None = None
    department: str | None = None
    attachment_urls: list[str] = Field(default_factory=list)

    @field_validator("attachment_urls", mode="before")
    @classmethod
    def _split(cls, v: object) -> object:
        # Stored ';'-joined
        if v is None:
            return []
        if isinstance(v, str):
            return [part for part in v.split(";") if part]
        return v


# ── Annual evaluation ──────────────────────────────────────────────
class EvaluationSchema(CamelModel):
    id: str | None = None
    year: int = Field(ge=2000, le=2100)
    employee_id: str
    full_name: str | None = None
    position: str | None = None
    score_professional: float = Field(default=0, ge=0, le=10)
    score_attitude: float = Field(default=0, ge=0, le=10)
    score_discipline: float = Field(default=0, ge=0, le=10)
    average_score: float = 0
    rank: str | None = None
    reward_proposal: str | None = None
    reward_title: str | None = None
    notes: str | None = None

    @model_validator(mode="after")
    def _default_id(self) -> "EvaluationSchema":
        if not self.id:
            self.id = evaluation_id(self.year, self.employee_id)
        return self


def evaluation_id(year: int, employee_id: str) -> str:
    return f"E-{year}-{employee_id}"


# ── Proposal ───────────────────────────────────────────────────────
class ProposalSchema(CamelModel):
    id: str | None = None
    date: IsoDate
    title: str
    proposal_number: str | None = None
    content: str | None = None
    submitter: str | None = None
    status: str = "Pending"
    file_url: str | None = None

    @field_validator("title")
    @classmethod
    def _title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Title must not be empty")
        return v


# ── Duty roster ────────────────────────────────────────────────────
class DutyRosterSchema(CamelModel):
    id: str | None = None
    week_start: IsoDate
    week_end: IsoDate
    ca: DutyShift
    mon: str = ""
    tue: str = ""
    wed: str = ""
    thu: str = ""
    fri: str = ""
    sat: str = ""
    sun: str = ""

    @model_validator(mode="after")
    def _default_id(self) -> "DutyRosterSchema":
        if not self.id:
            self.id = roster_id(self.week_start, self.ca)
        return self


def roster_id(week_start: str, ca: DutyShift) -> str:
    return f"{week_start}-{DutyShift(ca).value}"


# ── Dropdown ───────────────────────────────────────────────────────
class DropdownSchema(CamelModel):
    type: str
    value: str
