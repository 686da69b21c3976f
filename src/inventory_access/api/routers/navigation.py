"""
inventory_access.api.routers.navigation

Route admission endpoint.

Responsibilities:
- Evaluate the guard protecting a location against the current session.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from inventory_access.api.deps import access_context
from inventory_access.api.schemas import GuardDecisionResponse
from inventory_access.context import AccessContext

router = APIRouter(prefix="/v1/navigation", tags=["navigation"])


@router.get("", response_model=GuardDecisionResponse)
async def evaluate_navigation(
    path: str = Query(min_length=1, max_length=2048),
    context: AccessContext = Depends(access_context),
) -> GuardDecisionResponse:
    # No cached decision: each call reads the session as it is now.
    decision = context.routes.evaluate(context.session.state, path)
    return GuardDecisionResponse.from_decision(path, decision)
