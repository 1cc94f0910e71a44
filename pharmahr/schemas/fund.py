"""Pydantic schemas for the fund ledger."""

from __future__ import annotations

from pydantic import Field, field_validator

from pharmahr.core.enums import TransactionType
from pharmahr.schemas.base import CamelModel, IsoDate


def parse_amount(v: object) -> object:
    """Accept ``1.500.000`` style input (dots as thousand separators)."""
    if isinstance(v, str):
        # A comma is a decimal mark in vi-VN input, never a separator here
        cleaned = v.strip().replace(".", "").replace(" ", "")
        if not cleaned.isdigit():
            raise ValueError("Amount must be a whole number of VND")
        return int(cleaned)
    return v


class FundTransactionIn(CamelModel):
    id: str | None = None
    date: IsoDate
    type: TransactionType
    amount: int = Field(gt=0)
    content: str
    performer: str | None = None

    @field_validator("amount", mode="before")
    @classmethod
    def _amount(cls, v: object) -> object:
        return parse_amount(v)

    @field_validator("content")
    @classmethod
    def _content(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Content must not be empty")
        return v


class FundTransactionRead(FundTransactionIn):
    id: str
    balance_after: int
