"""Repository for cows and their health records in a tenant database."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from farm.infrastructure.models import CowModel, HealthRecordModel


class DuplicateTagNumberError(Exception):
    """Raised when a cow with the same tag number already exists."""

    pass


class CowNotFoundError(Exception):
    """Raised when a record refers to a cow that does not exist."""

    pass


class CowRepository:
    """Cow and health record persistence bound to one tenant session.

    The session comes from the caller's tenant connection, so every query
    here is scoped to that tenant's database.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_all(self) -> list[CowModel]:
        stmt = select(CowModel).order_by(CowModel.created_at.desc())
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def get(self, cow_id: str) -> CowModel | None:
        return await self._session.get(CowModel, cow_id)

    async def add(self, cow: CowModel) -> CowModel:
        """Persist a new cow.

        Raises:
            DuplicateTagNumberError: If the tag number is already in use
        """
        try:
            async with self._session.begin():
                existing = await self._session.execute(
                    select(CowModel.id).where(CowModel.tag_number == cow.tag_number)
                )
                if existing.scalar_one_or_none() is not None:
                    raise DuplicateTagNumberError(cow.tag_number)
                self._session.add(cow)
        except IntegrityError as e:
            # A concurrent insert took the tag between the check and commit.
            raise DuplicateTagNumberError(cow.tag_number) from e
        return cow

    async def delete(self, cow_id: str) -> bool:
        """Delete a cow and, by cascade, its records.

        Returns:
            True if deleted, False if not found
        """
        async with self._session.begin():
            cow = await self._session.get(CowModel, cow_id)
            if cow is None:
                return False
            await self._session.delete(cow)
        return True

    async def list_health_records(self, cow_id: str) -> list[HealthRecordModel]:
        stmt = (
            select(HealthRecordModel)
            .where(HealthRecordModel.cow_id == cow_id)
            .order_by(HealthRecordModel.record_date.desc())
        )
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def add_health_record(self, record: HealthRecordModel) -> HealthRecordModel:
        """Persist a health record for an existing cow.

        Raises:
            CowNotFoundError: If the referenced cow does not exist
        """
        try:
            async with self._session.begin():
                if await self._session.get(CowModel, record.cow_id) is None:
                    raise CowNotFoundError(record.cow_id)
                self._session.add(record)
        except IntegrityError as e:
            # The cow was deleted before the record committed.
            raise CowNotFoundError(record.cow_id) from e
        return record
