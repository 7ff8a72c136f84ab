"""SQLAlchemy Declarative Base — shared base class and column helpers for all ORM models.

Invariants:
    - All models inherit from Base
    - Timestamps are integer epoch milliseconds (BigInteger), never DateTime

Design Decisions:
    - Separate file for Base: avoids circular imports between models
    - Generic Uuid type: native UUID on PostgreSQL, CHAR(32) on SQLite test databases
"""

import time

from sqlalchemy.orm import DeclarativeBase


def now_millis() -> int:
    """Current wall-clock time as epoch milliseconds."""
    return int(time.time() * 1000)


class Base(DeclarativeBase):
    """Base class for all iPerformance ORM models."""
    pass
