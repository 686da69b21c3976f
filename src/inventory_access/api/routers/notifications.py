"""
inventory_access.api.routers.notifications

Notification polling endpoint.

Responsibilities:
- Hand queued user-facing notifications to the UI and clear the queue.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from inventory_access.api.deps import access_context
from inventory_access.context import AccessContext

router = APIRouter(prefix="/v1/notifications", tags=["notifications"])


@router.get("")
async def drain_notifications(
    context: AccessContext = Depends(access_context),
) -> list[dict[str, Any]]:
    return [
        {
            "level": n.level.value,
            "title": n.title,
            "message": n.message,
            "created_at": n.created_at.isoformat(),
        }
        for n in context.notifier.drain()
    ]
