"""SQLAlchemy declarative bases and shared model utilities.

Two declarative bases exist because two kinds of database exist: the single
control-plane database (user profiles) and one database per tenant (farm
records). Keeping their metadata apart guarantees that tenant schema
registration never creates control-plane tables and vice versa.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import DateTime
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def _utc_now() -> datetime:
    """Generate UTC timestamp for database defaults.

    Uses a named function instead of lambda for SQLAlchemy 2.0 compatibility.
    Ensures proper INSERT-time evaluation.
    """
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Base class for control-plane ORM models."""

    type_annotation_map: dict[type, Any] = {}


class TenantBase(DeclarativeBase):
    """Base class for ORM models stored in every tenant database."""

    type_annotation_map: dict[type, Any] = {}


class TimestampMixin:
    """Mixin providing created_at and updated_at timestamp columns.

    Automatically sets created_at on insert and updates updated_at on modification.
    Uses timezone-aware UTC timestamps with Python-side default generation.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        insert_default=_utc_now,  # Evaluated at INSERT time
        nullable=False,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        insert_default=_utc_now,  # Evaluated at INSERT time
        onupdate=_utc_now,  # Evaluated at UPDATE time
        nullable=False,
    )
