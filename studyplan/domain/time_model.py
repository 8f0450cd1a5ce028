"""Wall-clock time-of-day arithmetic on ``HH:MM`` values.

Times carry no date. Adding minutes wraps around midnight, and the distance
between two times is measured inside a single day, so ``minutes_between``
never goes negative.
"""

from __future__ import annotations

from datetime import datetime, time
from typing import Optional

TIME_FORMAT = "%H:%M"
MINUTES_PER_DAY = 24 * 60


def parse_time_of_day(value: str) -> time:
    """Parse ``HH:MM``; raises ``ValueError`` on anything else."""
    return datetime.strptime(value.strip(), TIME_FORMAT).time()


def parse_time_or_default(value: Optional[str], default: time) -> time:
    if value is None:
        return default
    try:
        return parse_time_of_day(value)
    except ValueError:
        return default


def format_time_of_day(value: time) -> str:
    return value.strftime(TIME_FORMAT)


def _to_minutes(value: time) -> int:
    return value.hour * 60 + value.minute


def add_minutes(value: time, minutes: int) -> time:
    total = (_to_minutes(value) + minutes) % MINUTES_PER_DAY
    return time(hour=total // 60, minute=total % 60)


def minutes_between(start: time, end: time) -> int:
    return max(0, _to_minutes(end) - _to_minutes(start))
