"""Status Rollup — derives a parent's status and progress from its children.

Invariants:
    - compute_rollup is PURE: children are plain (status, progress) pairs
    - No children → Not started with progress 0
    - All Completed → Completed; all Not started → Not started
    - Some In review with nothing still Not started / In progress → In review
    - Anything else → In progress
    - Progress is the rounded mean of child progress, clamped to 0–100;
      a Completed child without progress counts as 100

Design Decisions:
    - Used for objective (from tasks) and goal (from objectives) recomputation.
      Parent TASK status is not recomputed: the caller-supplied parentStatus
      and progress are written as-is (see services/task_service.py)
"""

from collections.abc import Iterable
from dataclasses import dataclass

from iperformance.core.domain_types import RecordStatus


@dataclass(frozen=True)
class Rollup:
    """Derived parent state."""
    status: RecordStatus
    progress: int


def _child_progress(status: str | None, progress: float | None) -> float:
    if progress is not None:
        return min(max(float(progress), 0.0), 100.0)
    return 100.0 if status == RecordStatus.COMPLETED.value else 0.0


def _derive_status(statuses: list[str | None]) -> RecordStatus:
    normalized = [s or RecordStatus.NOT_STARTED.value for s in statuses]
    if all(s == RecordStatus.COMPLETED.value for s in normalized):
        return RecordStatus.COMPLETED
    if all(s == RecordStatus.NOT_STARTED.value for s in normalized):
        return RecordStatus.NOT_STARTED
    open_work = {RecordStatus.NOT_STARTED.value, RecordStatus.IN_PROGRESS.value}
    if (
        RecordStatus.IN_REVIEW.value in normalized
        and not open_work.intersection(normalized)
    ):
        return RecordStatus.IN_REVIEW
    return RecordStatus.IN_PROGRESS


def compute_rollup(children: Iterable[tuple[str | None, float | None]]) -> Rollup:
    """Parent status/progress from (status, progress) of each child."""
    pairs = list(children)
    if not pairs:
        return Rollup(RecordStatus.NOT_STARTED, 0)
    progress = sum(_child_progress(s, p) for s, p in pairs) / len(pairs)
    return Rollup(_derive_status([s for s, _ in pairs]), round(progress))
