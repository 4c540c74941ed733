"""HTTP routes for cows and their health records.

Every route receives a session on the caller's tenant database, resolved by
the tenancy dependencies before the handler runs.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from farm.infrastructure.cow_repository import (
    CowNotFoundError,
    CowRepository,
    DuplicateTagNumberError,
)
from farm.presentation.models import (
    CowResponse,
    CreateCowRequest,
    CreateHealthRecordRequest,
    HealthRecordResponse,
)
from tenancy.dependencies import get_tenant_session

router = APIRouter(
    prefix="/cows",
    tags=["cows"],
)


def get_cow_repository(
    session: Annotated[AsyncSession, Depends(get_tenant_session)],
) -> CowRepository:
    """Get a cow repository scoped to the caller's tenant database."""
    return CowRepository(session)


@router.get("")
async def list_cows(
    repository: Annotated[CowRepository, Depends(get_cow_repository)],
) -> list[CowResponse]:
    """List the caller's cows, newest first."""
    cows = await repository.list_all()
    return [CowResponse.model_validate(cow) for cow in cows]


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_cow(
    request: CreateCowRequest,
    repository: Annotated[CowRepository, Depends(get_cow_repository)],
) -> CowResponse:
    """Register a cow.

    Raises:
        HTTPException: 409 if the tag number is already in use
    """
    try:
        cow = await repository.add(request.to_model())
    except DuplicateTagNumberError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"A cow with tag number {request.tag_number} already exists",
        ) from e
    return CowResponse.model_validate(cow)


@router.get("/{cow_id}")
async def get_cow(
    cow_id: str,
    repository: Annotated[CowRepository, Depends(get_cow_repository)],
) -> CowResponse:
    """Get one cow.

    Raises:
        HTTPException: 404 if the cow does not exist in the caller's farm
    """
    cow = await repository.get(cow_id)
    if cow is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Cow not found")
    return CowResponse.model_validate(cow)


@router.delete("/{cow_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_cow(
    cow_id: str,
    repository: Annotated[CowRepository, Depends(get_cow_repository)],
) -> None:
    """Delete a cow together with its records."""
    if not await repository.delete(cow_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Cow not found")


@router.get("/{cow_id}/health-records")
async def list_health_records(
    cow_id: str,
    repository: Annotated[CowRepository, Depends(get_cow_repository)],
) -> list[HealthRecordResponse]:
    """List a cow's health records, most recent first."""
    if await repository.get(cow_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Cow not found")
    records = await repository.list_health_records(cow_id)
    return [HealthRecordResponse.model_validate(record) for record in records]


@router.post("/{cow_id}/health-records", status_code=status.HTTP_201_CREATED)
async def create_health_record(
    cow_id: str,
    request: CreateHealthRecordRequest,
    repository: Annotated[CowRepository, Depends(get_cow_repository)],
) -> HealthRecordResponse:
    """Record a health event for a cow."""
    try:
        record = await repository.add_health_record(request.to_model(cow_id))
    except CowNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Cow not found"
        ) from e
    return HealthRecordResponse.model_validate(record)
