"""
FundTransaction model: the department's petty-cash ledger.

``row`` records append order; ``balance_after`` is written once at append
time from the previous row and never recomputed.
"""

from __future__ import annotations

from sqlalchemy import BigInteger, Column, Integer, String

from pharmahr.db.base import Base


class FundTransaction(Base):
    __tablename__ = "fund_ledger"

    row: int = Column(Integer, primary_key=True, autoincrement=True)  # type: ignore[assignment]
    id: str = Column(String(40), nullable=False, index=True)  # type: ignore[assignment]
    date: str = Column(String(10), nullable=False, index=True)  # type: ignore[assignment]
    type: str = Column(String(10), nullable=False)  # type: ignore[assignment]  # Income | Expense
    content: str = Column(String(500), nullable=False)  # type: ignore[assignment]
    performer: str | None = Column(String(200), nullable=True)  # type: ignore[assignment]
    amount: int = Column(BigInteger, nullable=False)  # type: ignore[assignment]
    balance_after: int = Column(BigInteger, nullable=False)  # type: ignore[assignment]
