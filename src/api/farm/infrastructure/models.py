"""SQLAlchemy ORM models for the records stored in every tenant database.

``TENANT_SCHEMAS`` is the fixed list of tables registered on each new tenant
connection, ordered so that referenced tables are created first.
"""

from __future__ import annotations

from datetime import date, datetime

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Index,
    String,
    Table,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column
from ulid import ULID

from infrastructure.database.models import TenantBase, TimestampMixin


def _new_id() -> str:
    return str(ULID())


class CowModel(TenantBase, TimestampMixin):
    """ORM model for the cows table."""

    __tablename__ = "cows"

    id: Mapped[str] = mapped_column(String(26), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    tag_number: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    breed: Mapped[str | None] = mapped_column(String(255), nullable=True)
    date_of_birth: Mapped[date | None] = mapped_column(Date, nullable=True)
    weight: Mapped[float | None] = mapped_column(Float, nullable=True)
    status: Mapped[str] = mapped_column(String(32), nullable=False, default="healthy")
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    image_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<CowModel(id={self.id}, tag_number={self.tag_number})>"


class HealthRecordModel(TenantBase, TimestampMixin):
    """ORM model for the health_records table."""

    __tablename__ = "health_records"

    id: Mapped[str] = mapped_column(String(26), primary_key=True, default=_new_id)
    cow_id: Mapped[str] = mapped_column(
        String(26), ForeignKey("cows.id", ondelete="CASCADE"), nullable=False
    )
    record_date: Mapped[date] = mapped_column(Date, nullable=False)
    record_type: Mapped[str] = mapped_column(String(64), nullable=False)
    diagnosis: Mapped[str | None] = mapped_column(Text, nullable=True)
    treatment: Mapped[str | None] = mapped_column(Text, nullable=True)
    medications: Mapped[str | None] = mapped_column(Text, nullable=True)
    veterinarian: Mapped[str | None] = mapped_column(String(255), nullable=True)
    cost: Mapped[float | None] = mapped_column(Float, nullable=True)
    follow_up_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (Index("idx_health_records_cow_id", "cow_id"),)


class BreedingEventModel(TenantBase, TimestampMixin):
    """ORM model for the breeding_events table."""

    __tablename__ = "breeding_events"

    id: Mapped[str] = mapped_column(String(26), primary_key=True, default=_new_id)
    cow_id: Mapped[str] = mapped_column(
        String(26), ForeignKey("cows.id", ondelete="CASCADE"), nullable=False
    )
    event_type: Mapped[str] = mapped_column(String(64), nullable=False)
    event_date: Mapped[date] = mapped_column(Date, nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(32), nullable=False, default="scheduled")

    __table_args__ = (Index("idx_breeding_events_cow_date", "cow_id", "event_date"),)


class HeatRecordModel(TenantBase, TimestampMixin):
    """ORM model for the heat_records table."""

    __tablename__ = "heat_records"

    id: Mapped[str] = mapped_column(String(26), primary_key=True, default=_new_id)
    cow_id: Mapped[str] = mapped_column(
        String(26), ForeignKey("cows.id", ondelete="CASCADE"), nullable=False
    )
    detected_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    intensity: Mapped[str | None] = mapped_column(String(32), nullable=True)
    sensor_type: Mapped[str | None] = mapped_column(String(64), nullable=True)
    sensor_reading: Mapped[float | None] = mapped_column(Float, nullable=True)
    ai_confidence: Mapped[float | None] = mapped_column(Float, nullable=True)


class MilkRecordModel(TenantBase, TimestampMixin):
    """ORM model for the milk_records table."""

    __tablename__ = "milk_records"

    id: Mapped[str] = mapped_column(String(26), primary_key=True, default=_new_id)
    cow_id: Mapped[str] = mapped_column(
        String(26), ForeignKey("cows.id", ondelete="CASCADE"), nullable=False
    )
    recorded_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    quantity_liters: Mapped[float] = mapped_column(Float, nullable=False)

    __table_args__ = (Index("idx_milk_records_cow_recorded", "cow_id", "recorded_at"),)


class StaffModel(TenantBase, TimestampMixin):
    """ORM model for the staff table."""

    __tablename__ = "staff"

    id: Mapped[str] = mapped_column(String(26), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str | None] = mapped_column(String(64), nullable=True)
    biometric_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    biometric_type: Mapped[str | None] = mapped_column(String(32), nullable=True)


class AttendanceRecordModel(TenantBase, TimestampMixin):
    """ORM model for the attendance_records table."""

    __tablename__ = "attendance_records"

    id: Mapped[str] = mapped_column(String(26), primary_key=True, default=_new_id)
    staff_id: Mapped[str] = mapped_column(
        String(26), ForeignKey("staff.id", ondelete="CASCADE"), nullable=False
    )
    check_in: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    check_out: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    biometric_type: Mapped[str | None] = mapped_column(String(32), nullable=True)
    status: Mapped[str] = mapped_column(String(32), nullable=False, default="present")


class StockItemModel(TenantBase, TimestampMixin):
    """ORM model for the stock_items table."""

    __tablename__ = "stock_items"

    id: Mapped[str] = mapped_column(String(26), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    category: Mapped[str | None] = mapped_column(String(64), nullable=True)
    quantity: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    unit: Mapped[str | None] = mapped_column(String(32), nullable=True)
    reorder_level: Mapped[float | None] = mapped_column(Float, nullable=True)


class AlertModel(TenantBase, TimestampMixin):
    """ORM model for the alerts table."""

    __tablename__ = "alerts"

    id: Mapped[str] = mapped_column(String(26), primary_key=True, default=_new_id)
    cow_id: Mapped[str | None] = mapped_column(
        String(26), ForeignKey("cows.id", ondelete="SET NULL"), nullable=True
    )
    alert_type: Mapped[str] = mapped_column(String(64), nullable=False)
    severity: Mapped[str] = mapped_column(String(32), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    is_read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_dismissed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)


TENANT_SCHEMAS: tuple[Table, ...] = (
    CowModel.__table__,
    HealthRecordModel.__table__,
    BreedingEventModel.__table__,
    HeatRecordModel.__table__,
    MilkRecordModel.__table__,
    StaffModel.__table__,
    AttendanceRecordModel.__table__,
    StockItemModel.__table__,
    AlertModel.__table__,
)
