"""Pydantic schemas for User accounts."""

from __future__ import annotations

from pydantic import field_validator

from pharmahr.core.enums import Role
from pharmahr.schemas.base import CamelModel


class UserCreate(CamelModel):
    username: str
    password: str
    name: str | None = None
    role: Role = Role.STAFF
    employee_id: str | None = None
    department: str | None = None

    @field_validator("username")
    @classmethod
    def _normalise_username(cls, v: str) -> str:
        v = v.strip().lower()
        if not v:
            raise ValueError("Username must not be empty")
        return v

    @field_validator("password")
    @classmethod
    def _password(cls, v: str) -> str:
        if not v:
            raise ValueError("Password must not be empty")
        return v


class UserRead(CamelModel):
    username: str
    name: str | None
    role: Role
    employee_id: str | None = None
    department: str | None = None
    is_active: bool = True


class UserUpdate(CamelModel):
    username: str
    password: str | None = None
    name: str | None = None
    role: Role | None = None
    employee_id: str | None = None
    department: str | None = None
    is_active: bool | None = None

    @field_validator("username")
    @classmethod
    def _normalise_username(cls, v: str) -> str:
        return v.strip().lower()


class SessionUser(CamelModel):
    """What the login action hands back to the client."""

    username: str
    role: Role
    name: str | None = None
    employee_id: str | None = None
