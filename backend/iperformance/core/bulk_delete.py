"""Bulk Delete Classification — per-id outcome summary for non-atomic bulk deletes.

Invariants:
    - Every distinct requested id yields exactly one detail entry, in first-seen order
    - Status is one of: "deleted", "not found", "error"
    - Malformed ids are "error" entries, not request failures
    - summary counts always add up to len(details)

Design Decisions:
    - One response contract for every record kind (summary + details)
    - Pure split/summarize helpers; the shell performs the single set-based delete
"""

from dataclasses import dataclass, field
from uuid import UUID

from iperformance.core.errors import InvalidFilterError
from iperformance.core.filter_criteria import parse_json_list

DELETED = "deleted"
NOT_FOUND = "not found"
ERROR = "error"


@dataclass
class DeleteOutcome:
    """Per-id results of a bulk delete."""
    details: list[dict] = field(default_factory=list)

    @property
    def deleted_ids(self) -> list[str]:
        return [d["id"] for d in self.details if d["status"] == DELETED]

    def summary(self) -> dict:
        return {
            "deleted": sum(1 for d in self.details if d["status"] == DELETED),
            "notFound": sum(1 for d in self.details if d["status"] == NOT_FOUND),
            "errors": sum(1 for d in self.details if d["status"] == ERROR),
        }

    def to_response(self) -> dict:
        return {
            "message": "Deletion operation completed",
            "summary": self.summary(),
            "details": self.details,
        }


def resolve_requested_ids(
    body_ids: list | None, query_ids: str | None,
) -> list:
    """Ids from the request body, falling back to a JSON array in the query string."""
    ids = body_ids if body_ids is not None else parse_json_list(query_ids, "ids")
    if not ids:
        raise InvalidFilterError("No ids provided for bulk delete", "ids")
    return list(ids)


def split_ids(raw_ids: list) -> tuple[dict[str, UUID], list[str]]:
    """Raw ids → ({raw: uuid} for well-formed ids, [raw] for malformed ones)."""
    valid: dict[str, UUID] = {}
    malformed: list[str] = []
    for raw in raw_ids:
        try:
            valid[str(raw)] = UUID(str(raw))
        except ValueError:
            malformed.append(str(raw))
    return valid, malformed


def unique_ids(raw_ids: list) -> list[str]:
    """String forms of the requested ids with repeats dropped, order kept."""
    return list(dict.fromkeys(str(raw) for raw in raw_ids))


def classify(
    raw_ids: list, valid: dict[str, UUID], existing: set[UUID],
) -> DeleteOutcome:
    """Build the per-id outcome given which well-formed ids existed (and were deleted)."""
    outcome = DeleteOutcome()
    seen: set[UUID] = set()
    for key in unique_ids(raw_ids):
        if key not in valid:
            outcome.details.append(
                {"id": key, "status": ERROR, "error": f"Invalid id '{key}'"},
            )
            continue
        # differently spelled copies of one uuid (e.g. upper case)
        if valid[key] in seen:
            continue
        seen.add(valid[key])
        if valid[key] in existing:
            outcome.details.append({"id": key, "status": DELETED})
        else:
            outcome.details.append({"id": key, "status": NOT_FOUND})
    return outcome
