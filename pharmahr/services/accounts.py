"""Account and employee-id helpers used by the administration screens."""

from __future__ import annotations

import re
import unicodedata
from collections.abc import Iterable

_PUNCTUATION = re.compile(r"[^\w\s]|_")
_EMPLOYEE_NUMBER = re.compile(r"^NV(\d+)$")


def strip_tones(text: str) -> str:
    """Remove Vietnamese tone marks and diacritics (``Đ`` becomes ``D``)."""
    text = text.replace("đ", "d").replace("Đ", "D")
    decomposed = unicodedata.normalize("NFD", text)
    return "".join(ch for ch in decomposed if unicodedata.category(ch) != "Mn")


def generate_username(full_name: str) -> str:
    """Given name followed by the initials of the other names.

    >>> generate_username("Nguyễn Văn An")
    'annv'
    """
    plain = _PUNCTUATION.sub(" ", strip_tones(full_name.lower()))
    parts = plain.split()
    if not parts:
        return ""
    if len(parts) == 1:
        return parts[0]
    return parts[-1] + "".join(p[0] for p in parts[:-1])


def next_employee_id(existing_ids: Iterable[str]) -> str:
    """``NV`` plus the next number after the highest one in use."""
    numbers = [
        int(m.group(1))
        for m in (_EMPLOYEE_NUMBER.match(i.strip().upper()) for i in existing_ids)
        if m
    ]
    return f"NV{max(numbers, default=0) + 1:03d}"
