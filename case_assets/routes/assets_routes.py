"""
Asset routes.

This module defines the API endpoints of the case asset management screen:
listing and rendering the assets of a case, editing an asset through an
edit session, and regenerating assets.

Each route delegates to the case's `AssetManager`
(`case_assets.services.asset_manager_service`) and returns the notices the
operation produced.
"""

from typing import Optional
from fastapi import APIRouter

from case_assets.models.edit_session import EditMode
from case_assets.schemas.asset import (
    AssetListView,
    AssetView,
    BulkRegenerationResponse,
    DraftUpdateRequest,
    EditSessionResponse,
    OpenEditRequest,
    PresentationResponse,
    RegenerateRequest,
    RegenerationResponse,
)
from case_assets.services.asset_manager_service import AssetManager, get_asset_manager
from case_assets.services.edit_session_service import (
    cancel_edit_session,
    open_edit_session,
    save_edit_session,
    update_draft,
)

router = APIRouter()


async def _loaded_manager(case_id: str) -> AssetManager:
    manager = get_asset_manager(case_id)
    if manager.listing is None:
        await manager.load_assets()
    return manager


@router.get("/{case_id}/assets", response_model=AssetListView)
async def list_assets_route(case_id: str, details: Optional[bool] = None):
    """
    Load the asset list of a case and render every asset.

    Each asset is rendered inside its own error boundary: a corrupt asset
    shows a `render_error` presentation while the others render normally.
    Missing assets have no presentation.

    Args:
        case_id (str): Case identifier.
        details (Optional[bool]): Include raw error details in render
            faults. Defaults to the `DEBUG_ASSETS` setting.

    Returns:
        AssetListView: Case metadata, one view per asset and the pending
        notices.

    Example:
        >>> GET /cases/cs_two_pizza_reorg/assets
    """

    manager = get_asset_manager(case_id)
    listing = await manager.load_assets()
    views = await manager.render_views(details)

    assets = []
    for asset, presentation in views:
        session = manager.sessions.get(asset.file_id)
        assets.append(AssetView(
            asset=asset,
            presentation=presentation,
            edit_mode=session.mode if session else EditMode.VIEWING,
            regenerating=manager.regeneration.is_pending(asset.file_id),
        ))

    return AssetListView(
        case_id=listing.case_id,
        case_title=listing.case_title,
        total_assets=listing.total_assets,
        existing_assets=listing.existing_assets,
        case_content=listing.case_content,
        assets=assets,
        notices=manager.drain_notices(),
    )


@router.get("/{case_id}/assets/{file_id}/render", response_model=PresentationResponse)
async def render_asset_route(case_id: str, file_id: str, details: Optional[bool] = None):
    """
    Render an asset from its full, untruncated content.
    """

    manager = await _loaded_manager(case_id)
    presentation = await manager.render_full(file_id, details)
    return PresentationResponse(file_id=file_id, presentation=presentation, notices=manager.drain_notices())


@router.post("/{case_id}/assets/{file_id}/edit", response_model=EditSessionResponse)
async def open_edit_route(case_id: str, file_id: str, data: OpenEditRequest):
    """
    Open the edit session of an asset on the inline or modal surface.

    If the asset is already being edited, the session (and its draft) moves
    to the requested surface.

    Example:
        >>> POST /cases/cs_two_pizza_reorg/assets/memo-1/edit
        {
            "surface": "modal"
        }
    """

    manager = await _loaded_manager(case_id)
    session = await open_edit_session(manager, file_id, data.surface)
    return EditSessionResponse(session=session, notices=manager.drain_notices())


@router.put("/{case_id}/assets/{file_id}/edit", response_model=EditSessionResponse)
async def update_draft_route(case_id: str, file_id: str, data: DraftUpdateRequest):
    """
    Replace the draft of an open edit session.

    The draft is validated locally; the result is returned in
    `session.local_validation` and does not reject the update.
    """

    manager = await _loaded_manager(case_id)
    session = update_draft(manager, file_id, data.content)
    return EditSessionResponse(session=session, notices=manager.drain_notices())


@router.post("/{case_id}/assets/{file_id}/edit/save", response_model=EditSessionResponse)
async def save_edit_route(case_id: str, file_id: str):
    """
    Save the draft to the asset store and reload the list.
    """

    manager = await _loaded_manager(case_id)
    session = await save_edit_session(manager, file_id)
    return EditSessionResponse(session=session, notices=manager.drain_notices())


@router.delete("/{case_id}/assets/{file_id}/edit", status_code=204)
async def cancel_edit_route(case_id: str, file_id: str):
    manager = await _loaded_manager(case_id)
    cancel_edit_session(manager, file_id)


@router.post("/{case_id}/assets/{file_id}/regenerate", response_model=RegenerationResponse)
async def regenerate_asset_route(case_id: str, file_id: str, data: Optional[RegenerateRequest] = None):
    """
    Regenerate one asset.

    A failed generation is reported in `run.status`, `run.error_message` and
    an error notice; the asset keeps its previous content.

    Example:
        >>> POST /cases/cs_two_pizza_reorg/assets/org-chart/regenerate
        {
            "overwrite": true
        }
    """

    data = data or RegenerateRequest()
    manager = await _loaded_manager(case_id)
    run = await manager.regeneration.regenerate(file_id, data.overwrite)
    return RegenerationResponse(
        run=run,
        asset=manager.assets.get(file_id),
        notices=manager.drain_notices(),
    )


@router.post("/{case_id}/assets/regenerate-missing", response_model=BulkRegenerationResponse)
async def regenerate_missing_route(case_id: str):
    """
    Generate every missing asset of the case, one request at a time.
    """

    manager = await _loaded_manager(case_id)
    runs = await manager.regeneration.regenerate_missing()
    return BulkRegenerationResponse(runs=runs, notices=manager.drain_notices())
