"""Due Buckets — verifies day/week/month windows in the caller's timezone.

Tests:
    - Day window spans local midnight to 23:59:59.999
    - Week window starts on the configured first weekday (Sunday by default)
    - Month window handles December rollover
    - Windows follow the tzinfo of `now`, not UTC
"""

from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from iperformance.core.domain_types import DueBucket
from iperformance.core.due_buckets import (
    DAY_MS, day_window, end_of_utc_day, month_window, resolve_due_window,
    to_epoch_millis, week_window,
)

# Wednesday
NOW = datetime(2024, 5, 15, 14, 0, tzinfo=timezone.utc)


def test_day_window_bounds():
    start, end = day_window(NOW)
    assert start == datetime(2024, 5, 15, tzinfo=timezone.utc)
    assert end == datetime(2024, 5, 15, 23, 59, 59, 999_000, tzinfo=timezone.utc)


def test_week_starts_on_sunday_by_default():
    start, end = week_window(NOW)
    assert start.date().isoformat() == "2024-05-12"
    assert end.date().isoformat() == "2024-05-18"


def test_week_can_start_on_monday():
    start, end = week_window(NOW, first_weekday=0)
    assert start.date().isoformat() == "2024-05-13"
    assert end.date().isoformat() == "2024-05-19"


def test_sunday_is_its_own_week_start():
    sunday = datetime(2024, 5, 12, 8, 0, tzinfo=timezone.utc)
    start, _ = week_window(sunday)
    assert start.date() == sunday.date()


def test_month_window():
    start, end = month_window(NOW)
    assert start.date().isoformat() == "2024-05-01"
    assert end.date().isoformat() == "2024-05-31"


def test_december_rolls_into_next_year():
    start, end = month_window(datetime(2024, 12, 20, tzinfo=timezone.utc))
    assert start.date().isoformat() == "2024-12-01"
    assert end.date().isoformat() == "2024-12-31"


def test_window_follows_local_timezone():
    local = datetime(2024, 5, 15, 1, 0, tzinfo=ZoneInfo("America/Sao_Paulo"))
    start, _ = resolve_due_window(DueBucket.TODAY, local)
    # 2024-05-15 00:00 in São Paulo is 03:00 UTC
    assert start == to_epoch_millis(datetime(2024, 5, 15, 3, 0, tzinfo=timezone.utc))


def test_review_bucket_has_no_window():
    assert resolve_due_window(DueBucket.FOR_REVIEW, NOW) is None


def test_end_of_utc_day():
    midnight = to_epoch_millis(datetime(2024, 5, 15, tzinfo=timezone.utc))
    assert end_of_utc_day(midnight) == midnight + DAY_MS - 1
    assert end_of_utc_day(midnight + DAY_MS - 1) == midnight + DAY_MS - 1
    assert end_of_utc_day(midnight + DAY_MS) == midnight + 2 * DAY_MS - 1
