"""Predicate Compiler — engine-neutral Predicate → SQLAlchemy WHERE conditions.

Invariants:
    - The tenant condition is always the first condition emitted
    - Member-backed fields (owners, collaborators, teams, reviewers) compile to an
      "id IN (member subquery)" condition; scalar fields compile to column operators
    - ICONTAINS escapes LIKE wildcards: the search term is matched literally
    - Unknown fields raise ValueError (programming error, not a client error)

Design Decisions:
    - ilike(): ILIKE on PostgreSQL, lower() LIKE lower() on SQLite
"""

from sqlalchemy import ColumnElement, or_, select

from iperformance.core.pagination import ORDERING
from iperformance.core.predicates import AnyOf, Clause, Op, Predicate

LIKE_ESCAPE = "\\"


def escape_like(term: str) -> str:
    """Escape LIKE wildcards so the term is matched as a literal substring."""
    return (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


def _member_condition(model, clause: Clause) -> ColumnElement[bool]:
    if clause.op is not Op.IN:
        raise ValueError(f"Member field '{clause.field}' only supports IN")
    member = model.__member_model__
    role = model.__member_roles__[clause.field]
    subquery = select(member.record_id).where(
        member.role == role, member.member_id.in_(clause.value),
    )
    return model.id.in_(subquery)


def _column_condition(model, clause: Clause) -> ColumnElement[bool]:
    column = getattr(model, clause.field, None)
    if column is None:
        raise ValueError(f"{model.__name__} has no field '{clause.field}'")
    if clause.op is Op.EQ:
        return column == clause.value
    if clause.op is Op.IS_NULL:
        return column.is_(None)
    if clause.op is Op.GTE:
        return column >= clause.value
    if clause.op is Op.LTE:
        return column <= clause.value
    if clause.op is Op.IN:
        return column.in_(clause.value)
    if clause.op is Op.ICONTAINS:
        return column.ilike(f"%{escape_like(str(clause.value))}%", escape=LIKE_ESCAPE)
    raise ValueError(f"Unsupported operator {clause.op}")


def compile_clause(model, clause: Clause | AnyOf) -> ColumnElement[bool]:
    if isinstance(clause, AnyOf):
        return or_(*(compile_clause(model, c) for c in clause.clauses))
    if clause.field in model.__member_roles__:
        return _member_condition(model, clause)
    return _column_condition(model, clause)


def compile_predicate(model, predicate: Predicate) -> list[ColumnElement[bool]]:
    """Tenant condition followed by one condition per clause (ANDed by the caller)."""
    conditions = [model.company_domain == predicate.tenant]
    conditions.extend(compile_clause(model, c) for c in predicate.clauses)
    return conditions


def ordering(model) -> list:
    """Deterministic page ordering: created_at DESC, id DESC."""
    columns = []
    for field, direction in ORDERING:
        column = getattr(model, field)
        columns.append(column.desc() if direction == "desc" else column.asc())
    return columns
