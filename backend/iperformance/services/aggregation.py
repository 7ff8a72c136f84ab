"""Aggregation Composer — attaches child collections to a page of records in one batched query.

Invariants:
    - One SELECT per ChildJoin per page (never per parent row)
    - Children are tenant-scoped and ordered like pages (created_at DESC, id DESC)
    - Every parent gets the join field; no matching children → [] (never null/absent)
    - Stored rows are never mutated; children are attached to serialized dicts only

Design Decisions:
    - ChildJoin.extra carries engine-neutral clauses (e.g. top-level tasks only) so the
      same compiler handles join filters and list filters
"""

from collections.abc import Callable
from dataclasses import dataclass
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from iperformance.core.predicates import Clause
from iperformance.services.query_compiler import compile_clause, ordering


@dataclass(frozen=True)
class ChildJoin:
    """Child collection keyed by a back-reference column on the child model."""
    as_field: str
    model: type
    foreign_key: str
    serialize: Callable[[object], dict]
    extra: tuple[Clause, ...] = ()


async def fetch_children(
    db: AsyncSession, company_domain: str, parent_ids: list[UUID], join: ChildJoin,
) -> dict[UUID, list[dict]]:
    """Serialized children grouped by parent id."""
    if not parent_ids:
        return {}
    model = join.model
    key = getattr(model, join.foreign_key)
    stmt = (
        select(model)
        .where(
            model.company_domain == company_domain,
            key.in_(parent_ids),
            *(compile_clause(model, c) for c in join.extra),
        )
        .order_by(*ordering(model))
    )
    rows = (await db.execute(stmt)).scalars().all()
    grouped: dict[UUID, list[dict]] = {}
    for row in rows:
        grouped.setdefault(getattr(row, join.foreign_key), []).append(
            join.serialize(row),
        )
    return grouped


async def attach_children(
    db: AsyncSession,
    company_domain: str,
    parents: list,
    items: list[dict],
    joins: tuple[ChildJoin, ...],
) -> list[dict]:
    """Attach every join field to items (aligned with parents by position)."""
    parent_ids = [p.id for p in parents]
    for join in joins:
        grouped = await fetch_children(db, company_domain, parent_ids, join)
        for parent, item in zip(parents, items):
            item[join.as_field] = grouped.get(parent.id, [])
    return items
