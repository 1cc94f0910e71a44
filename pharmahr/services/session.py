"""
Operator session.

Built once from the ``login`` response and handed to every engine that
needs to know who is operating (the ledger's default performer, account
screens, ...).  Nothing reads the signed-in user from a global.
"""

from __future__ import annotations

from dataclasses import dataclass

from pharmahr.core.enums import ACCOUNT_MANAGER_ROLES, Role


@dataclass(frozen=True)
class OperatorSession:
    username: str
    name: str
    role: Role
    employee_id: str | None = None
    token: str | None = None

    @classmethod
    def from_login(cls, payload: dict) -> "OperatorSession":
        user = payload.get("user") or {}
        username = user.get("username", "")
        return cls(
            username=username,
            name=user.get("name") or username,
            role=Role(user.get("role", Role.STAFF.value)),
            employee_id=user.get("employeeId"),
            token=payload.get("token"),
        )

    def has_role(self, *roles: Role) -> bool:
        return self.role in roles

    @property
    def can_manage_accounts(self) -> bool:
        return self.role in ACCOUNT_MANAGER_ROLES
