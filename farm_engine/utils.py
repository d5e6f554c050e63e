"""Small helpers shared by the farm engine modules."""

from __future__ import annotations

import uuid
from collections.abc import Container
from datetime import UTC, date, datetime

__all__ = ["new_id", "parse_date", "utcnow"]


def utcnow() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(tz=UTC)


def new_id(existing: Container[str] = ()) -> str:
    """Return a short random identifier not contained in ``existing``."""

    while True:
        candidate = uuid.uuid4().hex[:12]
        if candidate not in existing:
            return candidate


def parse_date(value: object) -> date | None:
    """Return ``value`` as a :class:`date` or ``None`` when it cannot be parsed.

    Accepts ``date``/``datetime`` objects, ``YYYY-MM-DD`` strings and full ISO
    timestamps (a trailing ``Z`` is understood as UTC).
    """

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None
    text = value.strip()
    if not text:
        return None
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        pass
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return None
