from __future__ import annotations

import calendar
import re
from datetime import date, datetime, time
from typing import Union

from ..core.exceptions import InvalidShiftError

_HHMM = re.compile(r"^([0-1]?[0-9]|2[0-3]):([0-5][0-9])$")


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_clock(value: Union[str, time]) -> time:
    """Accept a ``time`` or an ``HH:mm`` string (24h)."""
    if isinstance(value, time):
        return value.replace(second=0, microsecond=0)
    match = _HHMM.match(str(value).strip()) if value is not None else None
    if not match:
        raise InvalidShiftError(f"Invalid time format (HH:mm): {value!r}")
    return time(hour=int(match.group(1)), minute=int(match.group(2)))


def format_clock(value: time) -> str:
    return value.strftime("%H:%M")


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """First and last calendar day of a month."""
    _, last_day = calendar.monthrange(int(year), int(month))
    return date(int(year), int(month), 1), date(int(year), int(month), last_day)


def month_key(value: date) -> str:
    return f"{value.year:04d}-{value.month:02d}"


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()
