# fintrack/utils/bucketing.py
import calendar
import math
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Iterator, Optional


class Granularity(str, Enum):
    day = "day"
    week = "week"
    month = "month"
    year = "year"


def to_datetime(timestamp_ms) -> datetime:
    """Milliseconds since epoch -> aware UTC datetime."""
    return datetime.fromtimestamp(timestamp_ms / 1000, tz=timezone.utc)


def to_timestamp(moment: datetime) -> int:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return int(moment.timestamp() * 1000)


def now_ms() -> int:
    return to_timestamp(datetime.now(timezone.utc))


# ────────────────────────────────────────────────────────────────────────────────
# BUCKET KEYS
# ────────────────────────────────────────────────────────────────────────────────
def bucket_key(timestamp_ms, granularity) -> str:
    """
    Sortable bucket key for a timestamp.

    day   -> 2024-03-09
    week  -> 2024-03-W2   (week of the month: ceil(day / 7), resets monthly)
    month -> 2024-03
    year  -> 2024
    """
    moment = to_datetime(timestamp_ms)
    granularity = Granularity(granularity)

    if granularity == Granularity.day:
        return moment.strftime("%Y-%m-%d")
    if granularity == Granularity.week:
        return f"{moment:%Y-%m}-W{math.ceil(moment.day / 7)}"
    if granularity == Granularity.month:
        return moment.strftime("%Y-%m")
    return moment.strftime("%Y")


def day_key(timestamp_ms) -> str:
    return bucket_key(timestamp_ms, Granularity.day)


def bucket_label(key: str, granularity) -> str:
    """Human label for a key; weeks show as "Week N"."""
    if Granularity(granularity) == Granularity.week:
        return f"Week {key.rsplit('-W', 1)[-1]}"
    return key


def shift_day_key(key: str, days: int) -> str:
    """Day key moved by a number of days, clamped to the representable range."""
    try:
        return (datetime.strptime(key, "%Y-%m-%d").date() + timedelta(days=days)).isoformat()
    except OverflowError:
        return "0001-01-01" if days < 0 else "9999-12-31"


def iter_day_keys(start: str, end: str) -> Iterator[str]:
    """Every day key from start to end inclusive (both YYYY-MM-DD)."""
    current = datetime.strptime(start, "%Y-%m-%d").date()
    last = datetime.strptime(end, "%Y-%m-%d").date()
    while current <= last:
        yield current.isoformat()
        if current == last:
            break
        current += timedelta(days=1)


# ────────────────────────────────────────────────────────────────────────────────
# RELATIVE PERIODS
# ────────────────────────────────────────────────────────────────────────────────
def _shift_months(moment: datetime, months: int) -> datetime:
    month_index = moment.month - 1 + months
    year = moment.year + month_index // 12
    month = month_index % 12 + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def start_of_relative_period(now: Optional[datetime], period) -> int:
    """
    Start of the window ending at ``now``, in ms.

    Only ``day`` is calendar aligned (midnight UTC); week/month/year are
    rolling windows reaching back 7 days, one month and one year.
    """
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    period = Granularity(period)

    if period == Granularity.day:
        start = now.replace(hour=0, minute=0, second=0, microsecond=0)
    elif period == Granularity.week:
        start = now - timedelta(days=7)
    elif period == Granularity.month:
        start = _shift_months(now, -1)
    else:
        start = _shift_months(now, -12)
    return to_timestamp(start)
