"""Period Schedule — days remaining in a period relative to today.

Invariants:
    - compute_days_left is PURE: today's start is an argument
    - Counting starts at the period's start when it lies in the future, else today
    - Result is whole days (floor), negative once the period has ended
"""

from iperformance.core.domain_types import EpochMillis

DAY_MS: int = 86_400_000


def compute_days_left(
    start_date: EpochMillis, end_date: EpochMillis, today_start: EpochMillis,
) -> int:
    reference = start_date if start_date > today_start else today_start
    return (end_date - reference) // DAY_MS
