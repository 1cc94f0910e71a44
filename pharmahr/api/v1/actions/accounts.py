"""
Login and account administration actions.

Only admins and operators reach the account-management handlers; on top of
that an operator may not touch an admin account and nobody may delete the
account they are signed in with.
"""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pharmahr.core.enums import Role
from pharmahr.core.exceptions import (AuthenticationFailed, ConflictError,
                                      NotFoundError, PermissionDenied)
from pharmahr.core.security import (create_access_token, get_password_hash,
                                    verify_password)
from pharmahr.models.user import User
from pharmahr.schemas.gateway import AddUser, DeleteUser, Login, UpdateUser
from pharmahr.schemas.user import SessionUser, UserRead

logger = logging.getLogger(__name__)


def _guard_admin_target(caller: User, target_role: str | Role | None, verb: str) -> None:
    if caller.role != Role.ADMIN.value and target_role in (Role.ADMIN, Role.ADMIN.value):
        raise PermissionDenied(f"Only an admin may {verb} an admin account")


async def login(db: AsyncSession, req: Login) -> dict:
    result = await db.execute(select(User).where(User.username == req.username.strip().lower()))
    user = result.scalar_one_or_none()

    if user is None or not verify_password(req.password, user.hashed_password):
        logger.warning("Failed login for %r", req.username)
        raise AuthenticationFailed("Incorrect username or password")
    if not user.is_active:
        raise AuthenticationFailed("User account is inactive")

    token = create_access_token(user.username, role=user.role)
    logger.info("User %s signed in (%s)", user.username, user.role)
    return {
        "success": True,
        "user": SessionUser.model_validate(user).to_wire(),
        "token": token,
    }


async def list_users(db: AsyncSession) -> list[dict]:
    result = await db.execute(select(User).order_by(User.username))
    return [UserRead.model_validate(u).to_wire() for u in result.scalars().all()]


async def add_user(db: AsyncSession, req: AddUser, caller: User) -> dict:
    _guard_admin_target(caller, req.role, "create")
    if await db.get(User, req.username) is not None:
        raise ConflictError(f"Username '{req.username}' already exists")

    user = User(
        username=req.username,
        hashed_password=get_password_hash(req.password),
        name=req.name,
        role=req.role.value,
        employee_id=req.employee_id,
        department=req.department,
    )
    db.add(user)
    await db.commit()
    logger.info("%s created account %s (%s)", caller.username, user.username, user.role)
    return {"success": True, "username": user.username}


async def update_user(db: AsyncSession, req: UpdateUser, caller: User) -> dict:
    user = await db.get(User, req.username)
    if user is None:
        raise NotFoundError(f"User '{req.username}' not found")
    _guard_admin_target(caller, user.role, "modify")
    _guard_admin_target(caller, req.role, "grant admin to")

    changes = req.model_dump(mode="json", exclude={"action", "username", "password"},
                             exclude_unset=True)
    for field, value in changes.items():
        setattr(user, field, value)
    if req.password:
        user.hashed_password = get_password_hash(req.password)

    await db.commit()
    logger.info("%s updated account %s", caller.username, user.username)
    return {"success": True, "username": user.username}


async def delete_user(db: AsyncSession, req: DeleteUser, caller: User) -> dict:
    username = req.username.strip().lower()
    if username == caller.username:
        raise PermissionDenied("You cannot delete your own account")
    user = await db.get(User, username)
    if user is None:
        raise NotFoundError(f"User '{username}' not found")
    _guard_admin_target(caller, user.role, "delete")

    await db.delete(user)
    await db.commit()
    logger.info("%s deleted account %s", caller.username, username)
    return {"success": True, "username": username}
