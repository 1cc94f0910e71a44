"""Closed value sets shared by the store, the gateway and the engines."""

from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    ADMIN = "admin"
    OPERATOR = "operator"
    STAFF = "staff"


class EmployeeStatus(str, Enum):
    ACTIVE = "Active"
    ON_LEAVE = "OnLeave"
    TERMINATED = "Terminated"


class Shift(str, Enum):
    """Half-day attendance slot."""

    MORNING = "Morning"
    AFTERNOON = "Afternoon"


class AttendanceStatus(str, Enum):
    UNSCANNED = "Unscanned"
    PRESENT = "Present"
    LATE = "Late"
    ON_LEAVE = "OnLeave"
    SICK = "Sick"
    OTHER = "Other"


class TransactionType(str, Enum):
    INCOME = "Income"
    EXPENSE = "Expense"


class DutyShift(str, Enum):
    """Rows of the weekly duty roster."""

    MORNING = "Morning"
    AFTERNOON = "Afternoon"
    NIGHT = "Night"


# Roles allowed to manage accounts.
ACCOUNT_MANAGER_ROLES = frozenset({Role.ADMIN, Role.OPERATOR})
