"""
Employee QR code parsing.

Badges have been printed in three layouts over time.  They are tried in a
fixed order by :data:`STRATEGIES`; a strategy returns ``None`` when the text
is not in its layout and raises :class:`InvalidQrFormat` when it is in its
layout but broken.  A JSON-looking code that fails to parse is therefore
rejected outright instead of being read as a pipe-delimited one.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from dataclasses import dataclass, field

from pharmahr.core.exceptions import InvalidQrFormat


@dataclass(frozen=True)
class QrPayload:
    employee_id: str
    full_name: str | None = None
    extras: tuple[str, ...] = field(default_factory=tuple)
    layout: str = "pipe"


Strategy = Callable[[str], "QrPayload | None"]


def _clean_id(value: object) -> str:
    return str(value if value is not None else "").strip().upper()


def parse_json_layout(text: str) -> QrPayload | None:
    """``{"id": "NV001", "name": "...", "phone": "..."}``"""
    if not text.startswith("{"):
        return None
    try:
        data = json.loads(text)
    except ValueError:
        raise InvalidQrFormat("QR code looks like JSON but cannot be parsed") from None
    if not isinstance(data, dict):
        raise InvalidQrFormat("QR code JSON must be an object")

    extras = tuple(
        f"{k}: {v}" for k, v in data.items() if k not in ("id", "name") and v not in (None, "")
    )
    name = data.get("name")
    return QrPayload(
        employee_id=_clean_id(data.get("id")),
        full_name=str(name).strip() if name else None,
        extras=extras,
        layout="json",
    )


def parse_line_layout(text: str) -> QrPayload | None:
    """One field per line: id, name, then free display lines."""
    if "\n" not in text:
        return None
    lines = [line.strip() for line in text.splitlines()]
    return QrPayload(
        employee_id=_clean_id(lines[0]),
        full_name=lines[1] or None,
        extras=tuple(line for line in lines[2:] if line),
        layout="lines",
    )


def parse_pipe_layout(text: str) -> QrPayload | None:
    """``NV001|Full Name``; a bare id is accepted too."""
    emp_id, _, name = text.partition("|")
    return QrPayload(
        employee_id=_clean_id(emp_id),
        full_name=name.strip() or None,
        layout="pipe",
    )


STRATEGIES: tuple[Strategy, ...] = (parse_json_layout, parse_line_layout, parse_pipe_layout)


def parse_qr(raw: str) -> QrPayload:
    """Parse scanned text into a :class:`QrPayload`.

    Raises :class:`InvalidQrFormat` when no employee id can be read.
    """
    text = (raw or "").strip()
    payload = None
    for strategy in STRATEGIES:
        payload = strategy(text)
        if payload is not None:
            break
    if payload is None or not payload.employee_id:
        raise InvalidQrFormat("QR code does not contain an employee id")
    return payload
