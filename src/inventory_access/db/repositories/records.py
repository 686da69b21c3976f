"""
inventory_access.db.repositories.records

Repository for ownable inventory records.

Responsibilities:
- Read a record's owner.
- Claim an orphaned record with a single conditional update.
"""

from __future__ import annotations

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from inventory_access.db.models import OWNABLE_MODELS, OwnableMixin, RecordType


class OwnableRecordRepo:
    def __init__(self, session: AsyncSession, record_type: RecordType) -> None:
        self._session = session
        self._model = OWNABLE_MODELS[record_type]

    async def get(self, record_id: str) -> OwnableMixin | None:
        return await self._session.get(self._model, record_id)

    async def add(
        self, *, name: str, created_by: str | None = None, record_id: str | None = None
    ) -> OwnableMixin:
        record = self._model(name=name, created_by=created_by)
        if record_id is not None:
            record.id = record_id
        self._session.add(record)
        await self._session.flush()
        return record

    async def claim_orphan(self, *, record_id: str, subject_id: str) -> bool:
        """
        Set `created_by` only while it is still NULL. Returns False when no row
        matched (record missing or already owned).
        """

        model = self._model
        stmt = (
            update(model)
            .where(model.id == record_id, model.created_by.is_(None))
            .values(created_by=subject_id)
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        return result.rowcount == 1


# --- Module Notes -----------------------------------------------------------
# The WHERE clause is the whole concurrency story for adoption: two adopters
# racing on the same row cannot both match it.
