"""Shared pydantic base and field types for the camelCase wire format."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated

from pydantic import AfterValidator, BaseModel
from pydantic.alias_generators import to_camel


def _iso_date(v: str) -> str:
    v = v.strip()
    try:
        datetime.strptime(v, "%Y-%m-%d")
    except ValueError:
        raise ValueError("Date must be YYYY-MM-DD") from None
    return v


def _clock_time(v: str | None) -> str | None:
    if v is None or not v.strip():
        return None
    v = v.strip()
    for fmt in ("%H:%M:%S", "%H:%M"):
        try:
            return datetime.strptime(v, fmt).strftime("%H:%M:%S")
        except ValueError:
            continue
    raise ValueError("Time must be HH:MM or HH:MM:SS")


IsoDate = Annotated[str, AfterValidator(_iso_date)]
ClockTime = Annotated[str | None, AfterValidator(_clock_time)]


class CamelModel(BaseModel):
    """Snake_case attributes, camelCase JSON keys (``fullName``, ``employeeId``)."""

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "from_attributes": True,
    }

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, mode="json", exclude={"action"})
