"""Status Rollup — verifies objective/goal status and progress derivation.

Tests:
    - Empty → Not started / 0
    - Uniform children → that status
    - In review only when no open work remains
    - Progress mean, clamping, and Completed-without-progress = 100
"""

from iperformance.core.domain_types import RecordStatus
from iperformance.core.status_rollup import Rollup, compute_rollup

NS, IP, IR, DONE = (s.value for s in RecordStatus)


def test_no_children():
    assert compute_rollup([]) == Rollup(RecordStatus.NOT_STARTED, 0)


def test_all_completed():
    assert compute_rollup([(DONE, 100), (DONE, 100)]).status is RecordStatus.COMPLETED


def test_all_not_started_including_null_status():
    assert compute_rollup([(NS, 0), (None, None)]).status is RecordStatus.NOT_STARTED


def test_review_without_open_work():
    assert compute_rollup([(IR, 90), (DONE, 100)]).status is RecordStatus.IN_REVIEW


def test_review_with_open_work_is_in_progress():
    assert compute_rollup([(IR, 90), (NS, 0)]).status is RecordStatus.IN_PROGRESS


def test_mixed_completed_and_not_started():
    assert compute_rollup([(DONE, 100), (NS, 0)]).status is RecordStatus.IN_PROGRESS


def test_progress_is_rounded_mean():
    assert compute_rollup([(IP, 10), (IP, 25)]).progress == 18


def test_completed_without_progress_counts_full():
    assert compute_rollup([(DONE, None), (NS, None)]).progress == 50


def test_progress_clamped():
    assert compute_rollup([(IP, 250), (IP, -40)]).progress == 50
