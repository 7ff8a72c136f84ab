"""Predicate Compiler — verifies SQL conditions produced from engine-neutral clauses."""

from uuid import uuid4

import pytest
from sqlalchemy.dialects import sqlite

from iperformance.core.predicates import AnyOf, Clause, Op, Predicate
from iperformance.models import Goal, Risk, Task
from iperformance.services.query_compiler import (
    compile_clause, compile_predicate, escape_like,
)


def _sql(condition) -> str:
    return str(condition.compile(dialect=sqlite.dialect()))


def test_escape_like_wildcards():
    assert escape_like("50%_off\\") == "50\\%\\_off\\\\"


def test_tenant_condition_first():
    conditions = compile_predicate(Goal, Predicate(tenant="acme.com"))
    assert "goals.company_domain" in _sql(conditions[0])


def test_member_field_compiles_to_subquery():
    sql = _sql(compile_clause(Task, Clause("owners", Op.IN, (uuid4(),))))
    assert "task_members" in sql
    assert "goals" not in sql


def test_scalar_in_on_risk():
    sql = _sql(compile_clause(Risk, Clause("reported_by", Op.IN, (uuid4(),))))
    assert "risks.reported_by IN" in sql


def test_search_is_disjunction():
    sql = _sql(compile_clause(Goal, AnyOf((
        Clause("code", Op.ICONTAINS, "x"), Clause("title", Op.ICONTAINS, "x"),
    ))))
    assert " OR " in sql


def test_member_field_rejects_other_ops():
    with pytest.raises(ValueError):
        compile_clause(Goal, Clause("teams", Op.EQ, uuid4()))


def test_unknown_field_is_programming_error():
    with pytest.raises(ValueError):
        compile_clause(Goal, Clause("nonexistent", Op.EQ, 1))
