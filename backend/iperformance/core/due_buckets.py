"""Due Buckets — resolves "Due today / this week / this month" to concrete millisecond bounds.

Invariants:
    - resolve_due_window is PURE: the current instant is an argument, never read here
    - Bounds are local-day aligned: start at 00:00:00.000, end at 23:59:59.999
    - Both bounds are inclusive and returned as epoch milliseconds
    - "Due for review" has no date window (returns None)

Design Decisions:
    - Timezone comes from the aware `now` value: callers decide which local calendar applies
    - first_weekday uses Python numbering (0=Monday … 6=Sunday); the default Sunday
      start matches the week layout of the web client
"""

from datetime import datetime, time, timedelta

from iperformance.core.domain_types import DueBucket, EpochMillis

SUNDAY: int = 6
DAY_MS: int = 86_400_000
_MAX_MILLIS: int = 2 ** 63 - 1
_END_OF_DAY = time(23, 59, 59, 999_000)


def to_epoch_millis(moment: datetime) -> EpochMillis:
    """Aware datetime → integer epoch milliseconds."""
    return EpochMillis(int(moment.timestamp() * 1000))


def end_of_utc_day(millis: int) -> EpochMillis:
    """Last millisecond of the UTC calendar day containing millis."""
    return EpochMillis(min(millis - millis % DAY_MS + DAY_MS - 1, _MAX_MILLIS))


def _start_of_day(moment: datetime) -> datetime:
    return datetime.combine(moment.date(), time.min, tzinfo=moment.tzinfo)


def _end_of_day(moment: datetime) -> datetime:
    return datetime.combine(moment.date(), _END_OF_DAY, tzinfo=moment.tzinfo)


def day_window(now: datetime) -> tuple[datetime, datetime]:
    return _start_of_day(now), _end_of_day(now)


def week_window(now: datetime, first_weekday: int = SUNDAY) -> tuple[datetime, datetime]:
    offset = (now.weekday() - first_weekday) % 7
    start = _start_of_day(now - timedelta(days=offset))
    end = _end_of_day(start + timedelta(days=6))
    return start, end


def month_window(now: datetime) -> tuple[datetime, datetime]:
    start = _start_of_day(now.replace(day=1))
    if now.month == 12:
        next_month = start.replace(year=now.year + 1, month=1)
    else:
        next_month = start.replace(month=now.month + 1)
    end = _end_of_day(next_month - timedelta(days=1))
    return start, end


def resolve_due_window(
    bucket: DueBucket, now: datetime, first_weekday: int = SUNDAY,
) -> tuple[EpochMillis, EpochMillis] | None:
    """Concrete [start, end] millisecond bounds for a due bucket, relative to now."""
    if bucket is DueBucket.TODAY:
        start, end = day_window(now)
    elif bucket is DueBucket.THIS_WEEK:
        start, end = week_window(now, first_weekday)
    elif bucket is DueBucket.THIS_MONTH:
        start, end = month_window(now)
    else:
        return None
    return to_epoch_millis(start), to_epoch_millis(end)
