"""
inventory_access.db.repositories.claims

Repository for `OrphanClaim` entities.

Responsibilities:
- Append a claim row whenever an orphaned record is adopted.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from inventory_access.db.models import OrphanClaim, RecordType


class ClaimRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(self, *, record_type: RecordType, record_id: str, claimed_by: str) -> OrphanClaim:
        # Claims are append-only (no update/delete) in normal operation.
        claim = OrphanClaim(
            table_name=record_type.value,
            record_id=record_id,
            claimed_by=claimed_by,
            status="approved",
        )
        self._session.add(claim)
        await self._session.flush()
        return claim
