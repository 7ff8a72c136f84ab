"""Counter Service — atomic per-tenant, per-kind sequences for human-readable codes.

Invariants:
    - next_code issues exactly ONE statement: an upsert-increment returning the new seq
    - Concurrent creators never receive the same seq (the store serializes the upsert)
    - Sequences are never decremented; an increment commits or rolls back with its insert

Design Decisions:
    - INSERT … ON CONFLICT DO UPDATE SET seq = seq + 1 RETURNING seq on both PostgreSQL
      and SQLite (3.35+), via each dialect's insert construct
"""

import logging

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from iperformance.core.domain_types import EntityKind, TenantContext, format_code
from iperformance.models.counter import Counter

logger = logging.getLogger(__name__)

_INSERTS = {"postgresql": postgresql.insert, "sqlite": sqlite.insert}


def counter_id(kind: EntityKind) -> str:
    return f"{kind.value}sId"


async def next_seq(db: AsyncSession, company_domain: str, kind: EntityKind) -> int:
    """Atomically increment and return the tenant's sequence for a kind."""
    dialect = db.get_bind().dialect.name
    insert = _INSERTS.get(dialect)
    if insert is None:
        raise RuntimeError(f"Atomic counters not supported on dialect '{dialect}'")
    table = Counter.__table__
    stmt = (
        insert(table)
        .values(company_domain=company_domain, counter_id=counter_id(kind), seq=1)
        .on_conflict_do_update(
            index_elements=[table.c.company_domain, table.c.counter_id],
            set_={"seq": table.c.seq + 1},
        )
        .returning(table.c.seq)
    )
    result = await db.execute(stmt)
    return result.scalar_one()


async def next_code(db: AsyncSession, tenant: TenantContext, kind: EntityKind) -> str:
    """Mint the next human code (e.g. TS-42) for a record kind in the tenant."""
    seq = await next_seq(db, tenant.company_domain, kind)
    code = format_code(kind, seq)
    logger.debug(
        f"Minted code {code}",
        extra={"company_domain": tenant.company_domain, "entity": kind.value},
    )
    return code
