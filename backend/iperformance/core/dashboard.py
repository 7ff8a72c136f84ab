"""Dashboard Figures — completion rates, status breakdown, and top plan records.

Invariants:
    - Every figure is PURE arithmetic over (status → count) maps; the shell does the counting
    - Percentages are floored integers; an empty population is 0, never a division error
    - "In review" counts as in progress in the status breakdown
    - The dashboard window never implies a period: no period means every period

Design Decisions:
    - Only top-level tasks feed task figures (subtasks are part of their parent's work)
    - Top goals/objectives are the "Urgent" ones, at most TOP_LIMIT, each with the
      share of its matching tasks that are Completed
"""

from collections.abc import Mapping
from dataclasses import dataclass
from uuid import UUID

from iperformance.core.domain_types import EpochMillis, RecordStatus
from iperformance.core.filter_criteria import parse_optional_int, parse_optional_text
from iperformance.core.predicates import to_uuid

TOP_LIMIT: int = 10
TOP_PRIORITY = "Urgent"


@dataclass(frozen=True)
class DashboardWindow:
    """Which tasks the dashboard looks at."""
    period_id: UUID | None = None
    start_date: EpochMillis | None = None
    end_date: EpochMillis | None = None


def parse_dashboard_window(params: Mapping[str, str | None]) -> DashboardWindow:
    """Raw `period`, `startDate`, `endDate` query values → DashboardWindow."""
    period = parse_optional_text(params.get("period"))
    start_date = parse_optional_int(params.get("startDate"), "startDate")
    end_date = parse_optional_int(params.get("endDate"), "endDate")
    return DashboardWindow(
        period_id=to_uuid(period, "period") if period is not None else None,
        start_date=EpochMillis(start_date) if start_date is not None else None,
        end_date=EpochMillis(end_date) if end_date is not None else None,
    )


def completion_percent(total: int, completed: int) -> int:
    if total <= 0:
        return 0
    return completed * 100 // total


def completed_count(counts: Mapping[str | None, int]) -> int:
    return counts.get(RecordStatus.COMPLETED.value, 0)


def summary_items(
    tasks: Mapping[str | None, int],
    challenges: Mapping[str | None, int],
    risks: Mapping[str | None, int],
) -> list[dict]:
    """Summary cards: population size and completion rate per record kind."""
    cards = (
        ("Tasks Completion Rate", tasks),
        ("Resolved / Challenges", challenges),
        ("Mitigated / Risks", risks),
    )
    items = []
    for index, (name, counts) in enumerate(cards, start=1):
        total = sum(counts.values())
        rate = completion_percent(total, completed_count(counts))
        items.append({"id": index, "name": name, "count": total, "progress": f"{rate}%"})
    return items


_BREAKDOWN = (
    ("notStarted", "Not Started", (RecordStatus.NOT_STARTED,)),
    ("inProgress", "In Progress", (RecordStatus.IN_PROGRESS, RecordStatus.IN_REVIEW)),
    ("completed", "Completed", (RecordStatus.COMPLETED,)),
)


def status_breakdown(counts: Mapping[str | None, int]) -> dict:
    """Share of tasks per status bucket; tasks without a status count toward the total only."""
    total = sum(counts.values())
    breakdown = {}
    for key, name, statuses in _BREAKDOWN:
        value = sum(
            completion_percent(total, counts.get(status.value, 0)) for status in statuses
        )
        breakdown[key] = {"name": name, "value": value}
    return breakdown


def top_record(
    record_id: UUID, title: str, priority: str | None, counts: Mapping[str | None, int],
) -> dict:
    """One top goal/objective entry with its task completion percentage."""
    return {
        "id": str(record_id),
        "title": title,
        "priority": priority,
        "progress": completion_percent(sum(counts.values()), completed_count(counts)),
    }
