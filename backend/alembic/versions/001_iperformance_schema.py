"""iPerformance schema — counters, periods, goals, objectives, tasks, risks, challenges.

Revision ID: 001_iperformance
Revises: None
Create Date: 2026-10-19

Cross-record references (goal_id, objective_id, period_id, parent_id, task_id) carry
no foreign keys: services unlink or delete dependents explicitly. Only member tables
reference their owning record.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_iperformance"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

_LISTABLE_TABLES = ("goals", "objectives", "tasks", "risks", "challenges")


def _listable_columns() -> list[sa.Column]:
    """Columns shared by every listable record table."""
    return [
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("company_domain", sa.String(255), nullable=False),
        sa.Column("user_id", sa.Uuid, nullable=True),
        sa.Column("code", sa.String(32), nullable=False),
        sa.Column("title", sa.String(500), nullable=False),
        sa.Column("status", sa.String(20), nullable=True, server_default="Not started"),
        sa.Column("start_date", sa.BigInteger, nullable=True),
        sa.Column("end_date", sa.BigInteger, nullable=True),
        sa.Column("archived", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.BigInteger, nullable=False),
    ]


def _tenant_constraints(table: str) -> list:
    return [
        sa.UniqueConstraint("company_domain", "code", name=f"uq_{table}_tenant_code"),
        sa.UniqueConstraint("company_domain", "title", name=f"uq_{table}_tenant_title"),
    ]


def _member_table(table: str, parent: str) -> None:
    op.create_table(
        table,
        sa.Column("record_id", sa.Uuid, sa.ForeignKey(f"{parent}.id"), primary_key=True),
        sa.Column("role", sa.String(20), primary_key=True),
        sa.Column("member_id", sa.Uuid, primary_key=True),
    )
    op.create_index(f"ix_{table}_role_member", table, ["role", "member_id"])


def upgrade() -> None:
    op.create_table(
        "counters",
        sa.Column("company_domain", sa.String(255), primary_key=True),
        sa.Column("counter_id", sa.String(50), primary_key=True),
        sa.Column("seq", sa.BigInteger, nullable=False, server_default="0"),
    )

    op.create_table(
        "periods",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("company_domain", sa.String(255), nullable=False),
        sa.Column("user_id", sa.Uuid, nullable=True),
        sa.Column("code", sa.String(32), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        sa.Column("status", sa.String(20), nullable=False, server_default="Not started"),
        sa.Column("date_range", sa.String(100), nullable=False, server_default=""),
        sa.Column("start_date", sa.BigInteger, nullable=True),
        sa.Column("end_date", sa.BigInteger, nullable=True),
        sa.Column("days_left", sa.Integer, nullable=True),
        sa.Column("created_at", sa.BigInteger, nullable=False),
        sa.Column("updated_at", sa.BigInteger, nullable=True),
        sa.UniqueConstraint("company_domain", "name", name="uq_periods_tenant_name"),
        sa.UniqueConstraint("company_domain", "code", name="uq_periods_tenant_code"),
    )

    op.create_table(
        "goals",
        *_listable_columns(),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("category_id", sa.Uuid, nullable=True),
        sa.Column("priority", sa.String(50), nullable=True),
        sa.Column("progress", sa.Float, nullable=False, server_default="0"),
        *_tenant_constraints("goals"),
    )
    _member_table("goal_members", "goals")

    op.create_table(
        "objectives",
        *_listable_columns(),
        sa.Column("goal_id", sa.Uuid, nullable=True),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("priority", sa.String(50), nullable=True),
        sa.Column("progress", sa.Float, nullable=False, server_default="0"),
        *_tenant_constraints("objectives"),
    )
    _member_table("objective_members", "objectives")

    op.create_table(
        "tasks",
        *_listable_columns(),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("priority", sa.String(50), nullable=True),
        sa.Column("weight_id", sa.Uuid, nullable=True),
        sa.Column("progress", sa.Float, nullable=True),
        sa.Column("planned_effort", sa.Float, nullable=True),
        sa.Column("effort_spent", sa.Float, nullable=True),
        sa.Column("budget", sa.Float, nullable=True),
        sa.Column("goal_id", sa.Uuid, nullable=True),
        sa.Column("objective_id", sa.Uuid, nullable=True),
        sa.Column("period_id", sa.Uuid, nullable=True),
        sa.Column("parent_id", sa.Uuid, nullable=True),
        sa.Column("is_subtask", sa.Boolean, nullable=False, server_default=sa.false()),
        *_tenant_constraints("tasks"),
    )
    _member_table("task_members", "tasks")
    op.create_index("ix_tasks_tenant_period", "tasks", ["company_domain", "period_id"])
    op.create_index("ix_tasks_parent", "tasks", ["parent_id"])

    op.create_table(
        "risks",
        *_listable_columns(),
        sa.Column("criticality", sa.String(20), nullable=True),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("mitigation", sa.Text, nullable=False, server_default=""),
        sa.Column("task_id", sa.Uuid, nullable=True),
        sa.Column("reported_by", sa.Uuid, nullable=True),
        sa.Column("created_by", sa.Uuid, nullable=True),
        *_tenant_constraints("risks"),
    )

    op.create_table(
        "challenges",
        *_listable_columns(),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("task_id", sa.Uuid, nullable=True),
        sa.Column("reported_by", sa.Uuid, nullable=True),
        sa.Column("created_by", sa.Uuid, nullable=True),
        *_tenant_constraints("challenges"),
    )

    for table in _LISTABLE_TABLES:
        op.create_index(
            f"ix_{table}_tenant_created", table, ["company_domain", "created_at"],
        )


def downgrade() -> None:
    for table in _LISTABLE_TABLES:
        op.drop_index(f"ix_{table}_tenant_created", table_name=table)
    op.drop_index("ix_tasks_parent", table_name="tasks")
    op.drop_index("ix_tasks_tenant_period", table_name="tasks")
    for table in ("task_members", "objective_members", "goal_members"):
        op.drop_index(f"ix_{table}_role_member", table_name=table)
        op.drop_table(table)
    for table in ("challenges", "risks", "tasks", "objectives", "goals", "periods", "counters"):
        op.drop_table(table)
