"""
inventory_access.db.base

SQLAlchemy declarative base and shared column helpers.

Responsibilities:
- Provide a shared DeclarativeBase for profile, record and claim models.
- Provide id/timestamp defaults used by every table.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utcnow() -> datetime:
    # Naive UTC, matching what SQLite round-trips.
    return datetime.utcnow()


def new_id() -> str:
    return str(uuid.uuid4())


class Base(DeclarativeBase):
    pass


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(nullable=False, default=utcnow, onupdate=utcnow)


# --- Module Notes -----------------------------------------------------------
# All ORM models should inherit from `Base` so Alembic and metadata discovery work.
