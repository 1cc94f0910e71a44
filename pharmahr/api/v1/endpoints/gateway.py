"""
The persistence gateway: ``POST /exec`` with ``{"action": ..., ...fields}``.

The body is parsed into its action variant, the caller is checked against
the variant's access flags, and the variant is dispatched to its handler.
Mutating actions run while holding the process-wide write lock; reads never
take it.
"""

from __future__ import annotations

import logging
from typing import Optional, assert_never

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.util import get_remote_address
from sqlalchemy.ext.asyncio import AsyncSession

from pharmahr.api.v1.actions import accounts, employees, funds, records
from pharmahr.api.v1.deps import get_db, get_optional_user, get_write_lock
from pharmahr.core.config import settings
from pharmahr.core.exceptions import (AuthenticationFailed, InvalidPayload,
                                      PermissionDenied)
from pharmahr.core.locking import WriteLock
from pharmahr.models.user import User
from pharmahr.schemas.gateway import (AddEmployee, AddEvaluation, AddFund,
                                      AddProposal, AddReport, AddUser,
                                      DeleteAttendance, DeleteEmployee,
                                      DeleteEvaluation, DeleteReport,
                                      DeleteUser, GatewayRequest,
                                      GetAttendance, GetDropdowns,
                                      GetEmployees, GetEvaluations, GetFunds,
                                      GetProposals, GetReports, GetShifts,
                                      GetUsers, Login, Ping, SaveAttendance,
                                      SaveShift, UpdateEmployee, UpdateUser,
                                      parse_request)

# Rate limiter, keyed by client IP
limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)

router = APIRouter(tags=["gateway"])
logger = logging.getLogger(__name__)


def _authorize(req: GatewayRequest, user: User | None) -> None:
    if req.public:
        return
    if user is None:
        raise AuthenticationFailed("Not authenticated")
    if req.roles is not None and user.role not in {r.value for r in req.roles}:
        raise PermissionDenied(f"Role '{user.role}' may not call '{req.action}'")


async def _dispatch(req: GatewayRequest, db: AsyncSession, user: User) -> dict | list:
    match req:
        case Ping():
            return {"success": True, "message": "Connection successful"}
        case Login():
            return await accounts.login(db, req)

        case GetEmployees():
            return await employees.list_employees(db)
        case GetAttendance():
            return await employees.list_attendance(db, req)
        case GetFunds():
            return await funds.list_funds(db)
        case GetReports():
            return await records.list_reports(db)
        case GetEvaluations():
            return await records.list_evaluations(db)
        case GetProposals():
            return await records.list_proposals(db)
        case GetShifts():
            return await records.list_shifts(db)
        case GetDropdowns():
            return await records.list_dropdowns(db)
        case GetUsers():
            return await accounts.list_users(db)

        case AddEmployee():
            return await employees.add_employee(db, req)
        case UpdateEmployee():
            return await employees.update_employee(db, req)
        case DeleteEmployee():
            return await employees.delete_employee(db, req)
        case SaveAttendance():
            return await employees.save_attendance(db, req)
        case DeleteAttendance():
            return await employees.delete_attendance(db, req)
        case AddFund():
            return await funds.add_fund(db, req, user)
        case AddReport():
            return await records.add_report(db, req)
        case DeleteReport():
            return await records.delete_report(db, req)
        case AddEvaluation():
            return await records.add_evaluation(db, req)
        case DeleteEvaluation():
            return await records.delete_evaluation(db, req)
        case AddProposal():
            return await records.add_proposal(db, req)
        case SaveShift():
            return await records.save_shift(db, req)

        case AddUser():
            return await accounts.add_user(db, req, user)
        case UpdateUser():
            return await accounts.update_user(db, req, user)
        case DeleteUser():
            return await accounts.delete_user(db, req, user)

        case _:
            assert_never(req)


@router.post("/exec")
@limiter.limit(settings.GATEWAY_RATE_LIMIT)
async def execute(
    request: Request,
    db: AsyncSession = Depends(get_db),
    user: Optional[User] = Depends(get_optional_user),
    lock: WriteLock = Depends(get_write_lock),
) -> JSONResponse:
    """Run one gateway action and return its result as JSON."""
    try:
        body = await request.json()
    except ValueError:
        raise InvalidPayload("Request body is not valid JSON") from None

    req = parse_request(body)
    _authorize(req, user)

    if req.mutates:
        async with lock.hold(req.action):
            result = await _dispatch(req, db, user)  # type: ignore[arg-type]
    else:
        result = await _dispatch(req, db, user)  # type: ignore[arg-type]

    logger.debug("%s by %s", req.action, user.username if user else "anonymous")
    return JSONResponse(content=result)
