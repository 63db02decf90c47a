"""
Case routes.

Diagnostic endpoints of a case: the asset store's health report and the
queue of pending notices.
"""

from typing import List
from fastapi import APIRouter

from case_assets.models.presentation import Notice
from case_assets.schemas.asset import HealthResponse
from case_assets.services.asset_manager_service import get_asset_manager

router = APIRouter()


@router.get("/{case_id}/health", response_model=HealthResponse)
async def case_health_route(case_id: str):
    """
    Return the asset store's diagnostic report for a case, as-is.

    Example:
        >>> GET /cases/cs_two_pizza_reorg/health
    """

    manager = get_asset_manager(case_id)
    report = await manager.store.health(case_id)
    return HealthResponse(case_id=case_id, report=report)


@router.get("/{case_id}/notices", response_model=List[Notice])
async def drain_notices_route(case_id: str):
    """
    Return and clear the notices produced since the last call.
    """

    return get_asset_manager(case_id).drain_notices()
