# src/issue_engagement/utils/helpers.py

import math
from datetime import datetime, timezone

SECONDS_PER_DAY = 86400


def now_utc() -> datetime:
    """Returns the current time in UTC."""
    return datetime.now(timezone.utc)


def days_since(then: datetime, now: datetime) -> int:
    """Whole days from `then` to `now`, rounded up and never below 1."""
    elapsed = (now - then).total_seconds() / SECONDS_PER_DAY
    return max(1, math.ceil(elapsed))


def round_half_up(value: float) -> int:
    """Rounds to the nearest integer, with halves going up."""
    return math.floor(value + 0.5)
