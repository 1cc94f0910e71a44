"""
Gateway request variants: one pydantic model per ``action``.

The single gateway endpoint accepts ``{"action": <name>, ...fields}``.  The
``action`` literal is the discriminator of :data:`GatewayRequest`, so a body
is parsed straight into its variant and the dispatcher can ``match`` on the
class.  Class-level flags describe how the dispatcher must treat a variant:

* ``public``: callable without an access token
* ``mutates``: runs under the write lock
* ``roles``: restricts the caller's role (``None`` = any signed-in user)
"""

from __future__ import annotations

from typing import Annotated, ClassVar, Literal, Union

from pydantic import Field, TypeAdapter, ValidationError

from pharmahr.core.enums import ACCOUNT_MANAGER_ROLES, Role
from pharmahr.core.exceptions import InvalidPayload
from pharmahr.schemas.base import CamelModel
from pharmahr.schemas.employee import (AttendanceKey, AttendanceRecordSchema,
                                       EmployeeSchema)
from pharmahr.schemas.fund import FundTransactionIn
from pharmahr.schemas.records import (DutyRosterSchema, EvaluationSchema,
                                      PrescriptionReportSchema, ProposalSchema)
from pharmahr.schemas.user import UserCreate, UserUpdate


class _Action(CamelModel):
    public: ClassVar[bool] = False
    mutates: ClassVar[bool] = False
    roles: ClassVar[frozenset[Role] | None] = None


class _Write(_Action):
    mutates: ClassVar[bool] = True


# ── Connectivity & auth ─────────────────────────────────────────────
class Ping(_Action):
    action: Literal["test"]
    public: ClassVar[bool] = True


class Login(_Action):
    action: Literal["login"]
    public: ClassVar[bool] = True
    username: str
    password: str


# ── Reads ───────────────────────────────────────────────────────────
class GetEmployees(_Action):
    action: Literal["getEmployees"]


class GetAttendance(_Action):
    action: Literal["getAttendance"]
    date: str | None = None


class GetFunds(_Action):
    action: Literal["getFunds"]


class GetReports(_Action):
    action: Literal["getReports"]


class GetEvaluations(_Action):
    action: Literal["getEvaluations"]


class GetProposals(_Action):
    action: Literal["getProposals"]


class GetShifts(_Action):
    action: Literal["getShifts"]


class GetDropdowns(_Action):
    action: Literal["getDropdowns"]


class GetUsers(_Action):
    action: Literal["getUsers"]
    roles: ClassVar[frozenset[Role] | None] = ACCOUNT_MANAGER_ROLES


# ── Employees ───────────────────────────────────────────────────────
class AddEmployee(_Write, EmployeeSchema):
    action: Literal["addEmployee"]


class UpdateEmployee(_Write, EmployeeSchema):
    action: Literal["updateEmployee"]


class DeleteEmployee(_Write):
    action: Literal["deleteEmployee"]
    id: str


# ── Attendance ──────────────────────────────────────────────────────
class SaveAttendance(_Write):
    action: Literal["saveAttendance"]
    records: list[AttendanceRecordSchema]


class DeleteAttendance(_Write):
    action: Literal["deleteAttendance"]
    keys: list[AttendanceKey] = Field(min_length=1)


# ── Fund ledger ─────────────────────────────────────────────────────
class AddFund(_Write, FundTransactionIn):
    action: Literal["addFund"]


# ── Reports / evaluations / proposals / roster ─────────────────────
class AddReport(_Write, PrescriptionReportSchema):
    action: Literal["addReport"]


class DeleteReport(_Write):
    action: Literal["deleteReport"]
    id: str


class AddEvaluation(_Write, EvaluationSchema):
    action: Literal["addEvaluation"]


class DeleteEvaluation(_Write):
    action: Literal["deleteEvaluation"]
    id: str


class AddProposal(_Write, ProposalSchema):
    action: Literal["addProposal"]


class SaveShift(_Write, DutyRosterSchema):
    action: Literal["saveShift"]


# ── Accounts ────────────────────────────────────────────────────────
class AddUser(_Write, UserCreate):
    action: Literal["addUser"]
    roles: ClassVar[frozenset[Role] | None] = ACCOUNT_MANAGER_ROLES


class UpdateUser(_Write, UserUpdate):
    action: Literal["updateUser"]
    roles: ClassVar[frozenset[Role] | None] = ACCOUNT_MANAGER_ROLES


class DeleteUser(_Write):
    action: Literal["deleteUser"]
    roles: ClassVar[frozenset[Role] | None] = ACCOUNT_MANAGER_ROLES
    username: str


GatewayRequest = Annotated[
    Union[
        Ping,
        Login,
        GetEmployees,
        GetAttendance,
        GetFunds,
        GetReports,
        GetEvaluations,
        GetProposals,
        GetShifts,
        GetDropdowns,
        GetUsers,
        AddEmployee,
        UpdateEmployee,
        DeleteEmployee,
        SaveAttendance,
        DeleteAttendance,
        AddFund,
        AddReport,
        DeleteReport,
        AddEvaluation,
        DeleteEvaluation,
        AddProposal,
        SaveShift,
        AddUser,
        UpdateUser,
        DeleteUser,
    ],
    Field(discriminator="action"),
]

_adapter: TypeAdapter[GatewayRequest] = TypeAdapter(GatewayRequest)


def parse_request(body: object) -> GatewayRequest:
    """Validate a raw JSON body into its action variant.

    Raises :class:`InvalidPayload` with a readable message instead of the
    pydantic error list.
    """
    if not isinstance(body, dict):
        raise InvalidPayload("Request body must be a JSON object")
    try:
        return _adapter.validate_python(body)
    except ValidationError as exc:
        first = exc.errors(include_url=False)[0]
        if first["type"] == "union_tag_not_found":
            raise InvalidPayload("Missing 'action'") from None
        if first["type"] == "union_tag_invalid":
            raise InvalidPayload(f"Unknown action '{body.get('action')}'") from None
        # loc starts with the action tag; the rest is the field path
        field = ".".join(str(p) for p in first["loc"][1:]) or "body"
        raise InvalidPayload(f"{body.get('action')}: {field}: {first['msg']}") from None
