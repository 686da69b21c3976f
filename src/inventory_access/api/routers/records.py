"""
inventory_access.api.routers.records

Ownership endpoints for inventory records.

Responsibilities:
- Describe the owner of a record (or that it is orphaned).
- Adopt an orphaned record for the signed-in member.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from starlette.status import (
    HTTP_401_UNAUTHORIZED,
    HTTP_403_FORBIDDEN,
    HTTP_404_NOT_FOUND,
    HTTP_409_CONFLICT,
    HTTP_502_BAD_GATEWAY,
)

from inventory_access.api.deps import access_context, http_error
from inventory_access.auth.errors import AccessError
from inventory_access.context import AccessContext
from inventory_access.db.models import RecordType
from inventory_access.services.adoption import AdoptionOutcome

router = APIRouter(prefix="/v1/records", tags=["records"])

_FAILURE_STATUS = {
    AdoptionOutcome.unauthenticated: HTTP_401_UNAUTHORIZED,
    AdoptionOutcome.forbidden: HTTP_403_FORBIDDEN,
    AdoptionOutcome.not_found: HTTP_404_NOT_FOUND,
    AdoptionOutcome.conflict: HTTP_409_CONFLICT,
    AdoptionOutcome.failed: HTTP_502_BAD_GATEWAY,
}


class OwnerResponse(BaseModel):
    record_type: str
    record_id: str
    owner_id: str | None
    owner_name: str | None
    is_orphaned: bool


class AdoptionResponse(BaseModel):
    record_type: str
    record_id: str
    outcome: str
    owner_id: str | None
    message: str


@router.get("/{record_type}/{record_id}", response_model=OwnerResponse)
async def get_owner(
    record_type: RecordType,
    record_id: str,
    context: AccessContext = Depends(access_context),
) -> OwnerResponse:
    try:
        info = await context.adoption.for_type(record_type).describe_owner(record_id)
    except AccessError as e:
        raise http_error(e) from e
    return OwnerResponse(
        record_type=record_type.value,
        record_id=record_id,
        owner_id=info.owner_id,
        owner_name=info.owner_name,
        is_orphaned=info.is_orphaned,
    )


@router.post("/{record_type}/{record_id}/adopt", response_model=AdoptionResponse)
async def adopt_record(
    record_type: RecordType,
    record_id: str,
    context: AccessContext = Depends(access_context),
) -> AdoptionResponse:
    result = await context.adoption.adopt(record_type, record_id)
    if not result.ok:
        raise HTTPException(status_code=_FAILURE_STATUS[result.outcome], detail=result.message)
    return AdoptionResponse(
        record_type=result.record_type.value,
        record_id=result.record_id,
        outcome=result.outcome.value,
        owner_id=result.owner_id,
        message=result.message,
    )
