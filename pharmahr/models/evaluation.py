"""Evaluation model: one annual evaluation per employee and year."""

from __future__ import annotations

from sqlalchemy import Column, Float, Integer, String

from pharmahr.db.base import Base


class Evaluation(Base):
    __tablename__ = "evaluations"

    id: str = Column(String(40), primary_key=True)  # type: ignore[assignment]  # E-{year}-{employee}
    year: int = Column(Integer, nullable=False, index=True)  # type: ignore[assignment]
    employee_id: str = Column(String(20), nullable=False, index=True)  # type: ignore[assignment]
    full_name: str | None = Column(String(200), nullable=True)  # type: ignore[assignment]
    position: str | None = Column(String(100), nullable=True)  # type: ignore[assignment]
    score_professional: float = Column(Float, nullable=False, default=0)  # type: ignore[assignment]
    score_attitude: float = Column(Float, nullable=False, default=0)  # type: ignore[assignment]
    score_discipline: float = Column(Float, nullable=False, default=0)  # type: ignore[assignment]
    average_score: float = Column(Float, nullable=False, default=0)  # type: ignore[assignment]
    rank: str | None = Column(String(50), nullable=True)  # type: ignore[assignment]
    reward_proposal: str | None = Column(String(200), nullable=True)  # type: ignore[assignment]
    reward_title: str | None = Column(String(200), nullable=True)  # type: ignore[assignment]
    notes: str | None = Column(String(500), nullable=True)  # type: ignore[assignment]
