"""Dropdown model: dynamic option lists (qualifications, departments, ...)."""

from __future__ import annotations

from sqlalchemy import Column, Integer, String

from pharmahr.db.base import Base


class Dropdown(Base):
    __tablename__ = "dropdowns"

    row: int = Column(Integer, primary_key=True, autoincrement=True)  # type: ignore[assignment]
    type: str = Column(String(50), nullable=False, index=True)  # type: ignore[assignment]
    value: str = Column(String(200), nullable=False)  # type: ignore[assignment]


DEFAULT_DROPDOWNS: list[tuple[str, str]] = [
    ("Qualification", "Pharmacist, Specialist II"),
    ("Qualification", "Pharmacist, Specialist I"),
    ("Qualification", "Pharmacist (University)"),
    ("Qualification", "Pharmacist (College)"),
    ("Department", "Outpatient Pharmacy"),
    ("Department", "Inpatient Pharmacy"),
    ("Department", "Drug Warehouse"),
]
