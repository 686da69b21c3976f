"""
inventory_access.db.store

Data-store boundary used by the session manager and adoption service.

Responsibilities:
- Define the `DataStore` protocol (profile lookup/update, conditional adoption).
- Implement it on SQLAlchemy async with one transaction per call.
- Translate database failures into the auth error taxonomy.
"""

from __future__ import annotations

from typing import Any, Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from inventory_access.auth.errors import (
    AdoptionConflict,
    DataStoreError,
    LookupFailed,
    RecordNotFound,
)
from inventory_access.auth.models import Profile
from inventory_access.db.models import RecordType, UserProfile
from inventory_access.db.repositories.claims import ClaimRepo
from inventory_access.db.repositories.profiles import ProfileRepo
from inventory_access.db.repositories.records import OwnableRecordRepo
from inventory_access.observability.logging import get_logger

log = get_logger(__name__)

# Domain field name -> profiles column.
_PROFILE_COLUMNS = {"display_name": "full_name", "avatar_url": "avatar_url", "role": "role"}


class DataStore(Protocol):
    async def fetch_profile(self, subject_id: str) -> Profile | None: ...

    async def create_profile(self, subject_id: str) -> Profile: ...

    async def update_profile(self, subject_id: str, changes: dict[str, Any]) -> Profile: ...

    async def conditional_adopt(
        self, record_type: RecordType, record_id: str, subject_id: str
    ) -> None: ...

    async def record_owner(self, record_type: RecordType, record_id: str) -> str | None: ...

    async def owner_name(self, subject_id: str) -> str | None: ...


def _to_profile(row: UserProfile) -> Profile:
    return Profile(
        subject_id=row.id,
        display_name=row.full_name,
        role=row.role,
        avatar_url=row.avatar_url,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class SqlDataStore:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def fetch_profile(self, subject_id: str) -> Profile | None:
        try:
            async with self._session_factory() as session:
                row = await ProfileRepo(session).get(subject_id)
                return _to_profile(row) if row is not None else None
        except SQLAlchemyError as e:
            raise LookupFailed(f"profile lookup failed: {e}") from e

    async def create_profile(self, subject_id: str) -> Profile:
        try:
            async with self._session_factory() as session:
                repo = ProfileRepo(session)
                # Another tab/process may have created it since our lookup.
                row = await repo.get(subject_id)
                if row is None:
                    row = await repo.create(subject_id=subject_id)
                    await session.commit()
                    log.info("profile_created", subject_id=subject_id)
                return _to_profile(row)
        except SQLAlchemyError as e:
            raise LookupFailed(f"profile creation failed: {e}") from e

    async def update_profile(self, subject_id: str, changes: dict[str, Any]) -> Profile:
        unknown = set(changes) - set(_PROFILE_COLUMNS)
        if unknown:
            raise DataStoreError(f"Unknown profile fields: {', '.join(sorted(unknown))}")
        columns = {_PROFILE_COLUMNS[k]: v for k, v in changes.items()}
        try:
            async with self._session_factory() as session:
                row = await ProfileRepo(session).update(subject_id, columns)
                if row is None:
                    raise DataStoreError("Profile not found")
                await session.commit()
                return _to_profile(row)
        except SQLAlchemyError as e:
            raise DataStoreError(f"profile update failed: {e}") from e

    async def conditional_adopt(
        self, record_type: RecordType, record_id: str, subject_id: str
    ) -> None:
        try:
            async with self._session_factory() as session:
                records = OwnableRecordRepo(session, record_type)
                claimed = await records.claim_orphan(record_id=record_id, subject_id=subject_id)
                if not claimed:
                    await session.rollback()
                    if await records.get(record_id) is None:
                        raise RecordNotFound()
                    raise AdoptionConflict()
                await ClaimRepo(session).add(
                    record_type=record_type, record_id=record_id, claimed_by=subject_id
                )
                await session.commit()
        except SQLAlchemyError as e:
            raise DataStoreError(f"adoption write failed: {e}") from e

    async def record_owner(self, record_type: RecordType, record_id: str) -> str | None:
        try:
            async with self._session_factory() as session:
                record = await OwnableRecordRepo(session, record_type).get(record_id)
        except SQLAlchemyError as e:
            raise DataStoreError(f"record lookup failed: {e}") from e
        if record is None:
            raise RecordNotFound()
        return record.created_by

    async def owner_name(self, subject_id: str) -> str | None:
        try:
            async with self._session_factory() as session:
                row = await ProfileRepo(session).get(subject_id)
        except SQLAlchemyError as e:
            raise DataStoreError(f"owner lookup failed: {e}") from e
        return row.full_name if row is not None else None


# --- Module Notes -----------------------------------------------------------
# No call spans more than one transaction; adoption atomicity comes from the
# conditional UPDATE in `OwnableRecordRepo.claim_orphan`.
