"""Unique name resolution for states and layers."""

from __future__ import annotations

import re
from typing import Iterable

_TRAILING_DIGITS = re.compile(r"\d+$")


def get_unique_name(name: str, existing: Iterable[str]) -> str:
    """Return *name*, or *name* with an incremented numeric suffix if taken.

    The suffix continues from the highest suffix already in use, so adding
    ``idle`` to ``["idle", "idle3"]`` yields ``idle4``.
    """
    existing = set(existing)
    if name not in existing:
        return name

    base = _TRAILING_DIGITS.sub("", name)
    pattern = re.compile(rf"^{re.escape(base)}(\d*)$")
    highest = 0
    for other in existing:
        match = pattern.match(other)
        if match and match.group(1):
            highest = max(highest, int(match.group(1)))

    return f"{base}{highest + 1}"
