"""Proposal model: internal proposals submitted to management."""

from __future__ import annotations

from sqlalchemy import Column, String, Text

from pharmahr.db.base import Base


class Proposal(Base):
    __tablename__ = "proposals"

    id: str = Column(String(40), primary_key=True)  # type: ignore[assignment]
    date: str = Column(String(10), nullable=False)  # type: ignore[assignment]
    title: str = Column(String(300), nullable=False)  # type: ignore[assignment]
    proposal_number: str | None = Column(String(50), nullable=True)  # type: ignore[assignment]
    content: str | None = Column(Text, nullable=True)  # type: ignore[assignment]
    submitter: str | None = Column(String(200), nullable=True)  # type: ignore[assignment]
    status: str = Column(String(30), nullable=False, default="Pending")  # type: ignore[assignment]
    file_url: str | None = Column(Text, nullable=True)  # type: ignore[assignment]
