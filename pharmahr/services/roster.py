"""Weekly duty roster helpers."""

from __future__ import annotations

from datetime import date, timedelta

from pharmahr.core.enums import DutyShift
from pharmahr.schemas.records import DutyRosterSchema, roster_id
from pharmahr.services.gateway_client import GatewayClient

WEEKDAYS = ("mon", "tue", "wed", "thu", "fri", "sat", "sun")


def week_range(day: date | str) -> tuple[date, date]:
    """Monday and Sunday of the week containing ``day``."""
    if isinstance(day, str):
        day = date.fromisoformat(day)
    monday = day - timedelta(days=day.weekday())
    return monday, monday + timedelta(days=6)


def empty_week(day: date | str, ca: DutyShift) -> DutyRosterSchema:
    monday, sunday = week_range(day)
    return DutyRosterSchema(week_start=monday.isoformat(), week_end=sunday.isoformat(), ca=ca)


class DutyRosterBook:
    def __init__(self, gateway: GatewayClient) -> None:
        self._gateway = gateway
        self.rows: dict[str, DutyRosterSchema] = {}

    async def load(self) -> dict[str, DutyRosterSchema]:
        rows = await self._gateway.call("getShifts")
        parsed = [DutyRosterSchema.model_validate(r) for r in rows or []]
        self.rows = {r.id: r for r in parsed}
        return self.rows

    def week(self, day: date | str) -> list[DutyRosterSchema]:
        """The three duty rows of a week; missing rows come back empty."""
        monday, _ = week_range(day)
        return [
            self.rows.get(roster_id(monday.isoformat(), ca)) or empty_week(monday, ca)
            for ca in DutyShift
        ]

    async def save(self, row: DutyRosterSchema) -> DutyRosterSchema:
        await self._gateway.call("saveShift", **row.to_wire())
        self.rows[row.id] = row
        return row
