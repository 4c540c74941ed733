"""Pydantic models for farm record API requests and responses."""

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from farm.infrastructure.models import CowModel, HealthRecordModel


class CreateCowRequest(BaseModel):
    """Request model for registering a cow."""

    name: str = Field(..., min_length=1, max_length=255)
    tag_number: str = Field(..., min_length=1, max_length=64)
    breed: str | None = Field(default=None, max_length=255)
    date_of_birth: date | None = None
    weight: float | None = Field(default=None, ge=0)
    status: str = Field(default="healthy", max_length=32)
    notes: str | None = None
    image_url: str | None = Field(default=None, max_length=1024)

    def to_model(self) -> CowModel:
        """Convert to an ORM model ready to persist."""
        return CowModel(**self.model_dump())


class CowResponse(BaseModel):
    """Response model for a cow."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    tag_number: str
    breed: str | None
    date_of_birth: date | None
    weight: float | None
    status: str
    notes: str | None
    image_url: str | None
    created_at: datetime


class CreateHealthRecordRequest(BaseModel):
    """Request model for recording a health event."""

    record_date: date
    record_type: str = Field(..., min_length=1, max_length=64)
    diagnosis: str | None = None
    treatment: str | None = None
    medications: str | None = None
    veterinarian: str | None = Field(default=None, max_length=255)
    cost: float | None = Field(default=None, ge=0)
    follow_up_date: date | None = None
    notes: str | None = None

    def to_model(self, cow_id: str) -> HealthRecordModel:
        """Convert to an ORM model attached to ``cow_id``."""
        return HealthRecordModel(cow_id=cow_id, **self.model_dump())


class HealthRecordResponse(BaseModel):
    """Response model for a health record."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    cow_id: str
    record_date: date
    record_type: str
    diagnosis: str | None
    treatment: str | None
    medications: str | None
    veterinarian: str | None
    cost: float | None
    follow_up_date: date | None
    notes: str | None
