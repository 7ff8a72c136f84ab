"""Period Schedule — verifies days-left counting from today or a future start."""

from iperformance.core.period_schedule import DAY_MS, compute_days_left

TODAY = 1_700_000_000_000


def test_running_period_counts_from_today():
    assert compute_days_left(TODAY - 5 * DAY_MS, TODAY + 10 * DAY_MS, TODAY) == 10


def test_future_period_counts_from_its_start():
    assert compute_days_left(TODAY + 3 * DAY_MS, TODAY + 10 * DAY_MS, TODAY) == 7


def test_partial_day_floors():
    assert compute_days_left(TODAY, TODAY + DAY_MS + 1000, TODAY) == 1


def test_ended_period_is_negative():
    assert compute_days_left(TODAY - 9 * DAY_MS, TODAY - 2 * DAY_MS, TODAY) == -2
