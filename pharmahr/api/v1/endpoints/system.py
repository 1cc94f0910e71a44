"""
Health and dashboard status endpoints.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from pharmahr.api.v1.deps import get_db, get_optional_user
from pharmahr.core.enums import EmployeeStatus
from pharmahr.core.exceptions import AuthenticationFailed
from pharmahr.models.employee import Employee
from pharmahr.models.fund import FundTransaction
from pharmahr.models.report import PrescriptionReport
from pharmahr.models.user import User
from pharmahr.schemas.system import HealthResponse, StatusResponse

router = APIRouter(tags=["system"])
logger = logging.getLogger(__name__)


@router.get("/health", response_model=HealthResponse)
async def health(db: AsyncSession = Depends(get_db)) -> HealthResponse:
    """Public health check: database connectivity."""
    result = HealthResponse(db=False)
    try:
        await db.execute(select(1))
        result.db = True
    except Exception as e:
        logger.error("Health check DB failure: %s", e)
    return result


@router.get("/status", response_model=StatusResponse)
async def system_status(
    db: AsyncSession = Depends(get_db),
    user: Optional[User] = Depends(get_optional_user),
) -> StatusResponse:
    """Dashboard figures: headcount, cash on hand and prescription totals."""
    if user is None:
        raise AuthenticationFailed("Not authenticated")

    emp_count = await db.execute(
        select(func.count(Employee.id)).where(Employee.status == EmployeeStatus.ACTIVE.value)
    )
    last_balance = await db.execute(
        select(FundTransaction.balance_after).order_by(FundTransaction.row.desc()).limit(1)
    )
    totals = await db.execute(
        select(
            func.coalesce(func.sum(PrescriptionReport.total_issued), 0),
            func.coalesce(func.sum(PrescriptionReport.not_received), 0),
        )
    )
    issued, not_received = totals.one()

    return StatusResponse(
        active_employees=emp_count.scalar() or 0,
        fund_balance=last_balance.scalar_one_or_none() or 0,
        total_issued=issued,
        total_not_received=not_received,
    )
