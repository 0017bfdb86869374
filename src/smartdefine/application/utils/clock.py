"""Time helpers shared by the scheduling modules."""

import math
from datetime import date, datetime, timezone, tzinfo


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes; convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def local_date(value: datetime, tz: tzinfo | None = None) -> date:
    """
    Calendar date of `value` in `tz`.

    With tz=None the process-local timezone is used.
    """
    return as_utc(value).astimezone(tz).date()


def round_half_up(value: float, digits: int = 0) -> float:
    """Round halves away from zero for positive values (2.5 -> 3, not 2)."""
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor
