"""Response bodies of the health and dashboard status endpoints."""

from __future__ import annotations

from pharmahr.schemas.base import CamelModel


class HealthResponse(CamelModel):
    db: bool


class StatusResponse(CamelModel):
    active_employees: int
    fund_balance: int
    total_issued: int
    total_not_received: int
    status: str = "operational"
