"""
FastAPI dependencies: database session, caller identity and write lock.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from typing import Optional

from fastapi import Cookie, Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pharmahr.core.config import settings
from pharmahr.core.locking import WriteLock
from pharmahr.core.security import decode_access_token
from pharmahr.db.session import async_session_factory
from pharmahr.models.user import User

# auto_error=False: the gateway decides per action whether a token is needed
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/exec", auto_error=False)

_write_lock = WriteLock(timeout=settings.GATEWAY_LOCK_TIMEOUT_SECONDS)


# ── Database session ────────────────────────────────────────────────
async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with async_session_factory() as session:
        try:
            yield session
        finally:
            await session.close()


# ── Write lock ──────────────────────────────────────────────────────
def get_write_lock() -> WriteLock:
    """The process-wide lock serialising every mutating gateway action."""
    return _write_lock


# ── Caller identity ─────────────────────────────────────────────────
async def get_optional_user(
    token: Optional[str] = Depends(oauth2_scheme),
    access_token: Optional[str] = Cookie(default=None),
    db: AsyncSession = Depends(get_db),
) -> User | None:
    """Decode JWT from Header OR Cookie and look up the user.

    Returns ``None`` instead of raising so that public actions (``login``,
    ``test``) share the endpoint with protected ones.
    """
    # Priority: Header > Cookie
    final_token = token
    if not final_token and access_token:
        if access_token.startswith("Bearer "):
            final_token = access_token.split(" ", 1)[1]
        else:
            final_token = access_token

    if not final_token:
        return None

    payload = decode_access_token(final_token)
    if payload is None:
        return None

    username: str | None = payload.get("sub")
    if username is None:
        return None

    result = await db.execute(select(User).where(User.username == username))
    user = result.scalar_one_or_none()
    if user is None or not user.is_active:
        return None
    return user
