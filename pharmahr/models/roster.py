"""
Duty roster model: one row per (week, duty shift).

Each weekday column holds free text (usually the names on duty).
"""

from __future__ import annotations

from sqlalchemy import Column, String

from pharmahr.db.base import Base


class DutyRoster(Base):
    __tablename__ = "duty_roster"

    id: str = Column(String(40), primary_key=True)  # type: ignore[assignment]  # {week_start}-{ca}
    week_start: str = Column(String(10), nullable=False, index=True)  # type: ignore[assignment]
    week_end: str = Column(String(10), nullable=False)  # type: ignore[assignment]
    ca: str = Column(String(20), nullable=False)  # type: ignore[assignment]  # Morning | Afternoon | Night
    mon: str = Column(String(300), nullable=False, default="")  # type: ignore[assignment]
    tue: str = Column(String(300), nullable=False, default="")  # type: ignore[assignment]
    wed: str = Column(String(300), nullable=False, default="")  # type: ignore[assignment]
    thu: str = Column(String(300), nullable=False, default="")  # type: ignore[assignment]
    fri: str = Column(String(300), nullable=False, default="")  # type: ignore[assignment]
    sat: str = Column(String(300), nullable=False, default="")  # type: ignore[assignment]
    sun: str = Column(String(300), nullable=False, default="")  # type: ignore[assignment]
