"""PrescriptionReport model: daily prescription issuance counts."""

from __future__ import annotations

from sqlalchemy import Column, Integer, String, Text

from pharmahr.db.base import Base


class PrescriptionReport(Base):
    __tablename__ = "prescription_reports"

    id: str = Column(String(40), primary_key=True)  # type: ignore[assignment]
    date: str = Column(String(10), nullable=False, index=True)  # type: ignore[assignment]
    total_issued: int = Column(Integer, nullable=False, default=0)  # type: ignore[assignment]
    not_received: int = Column(Integer, nullable=False, default=0)  # type: ignore[assignment]
    reason: str | None = Column(String(1000), nullable=True)  # type: ignore[assignment]
    reporter: str | None = Column(String(200), nullable=True)  # type: ignore[assignment]
    reporter_id: str | None = Column(String(50), nullable=True)  # type: ignore[assignment]
    department: str | None = Column(String(100), nullable=True)  # type: ignore[assignment]
    # ';'-joined, order preserved
    attachment_urls: str | None = Column(Text, nullable=True)  # type: ignore[assignment]
