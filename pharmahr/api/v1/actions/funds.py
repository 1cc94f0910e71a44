"""
Fund ledger actions.

``addFund`` must run under the gateway write lock: it reads the last row's
balance and appends the next one, and two interleaved appends would both
read the same balance.
"""

from __future__ import annotations

import logging
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pharmahr.models.fund import FundTransaction
from pharmahr.models.user import User
from pharmahr.schemas.fund import FundTransactionRead
from pharmahr.schemas.gateway import AddFund
from pharmahr.services.ledger import next_balance

logger = logging.getLogger(__name__)


async def list_funds(db: AsyncSession) -> list[dict]:
    """All transactions in append order."""
    result = await db.execute(select(FundTransaction).order_by(FundTransaction.row))
    return [FundTransactionRead.model_validate(t).to_wire() for t in result.scalars().all()]


async def _last_balance(db: AsyncSession) -> int:
    result = await db.execute(
        select(FundTransaction.balance_after).order_by(FundTransaction.row.desc()).limit(1)
    )
    return result.scalar_one_or_none() or 0


async def add_fund(db: AsyncSession, req: AddFund, user: User) -> dict:
    balance = next_balance(await _last_balance(db), req.type, req.amount)
    tx = FundTransaction(
        id=req.id or f"T-{uuid.uuid4().hex[:12]}",
        date=req.date,
        type=req.type.value,
        content=req.content,
        performer=req.performer or user.name or user.username,
        amount=req.amount,
        balance_after=balance,
    )
    db.add(tx)
    await db.commit()
    logger.info(
        "Fund %s %s %d VND by %s, balance now %d",
        tx.id, tx.type, tx.amount, tx.performer, balance,
    )
    return {"success": True, "id": tx.id, "balanceAfter": balance}
