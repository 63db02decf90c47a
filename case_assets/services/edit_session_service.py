"""
Edit session service.

This module drives the edit workflow of an asset: open a session seeded
from the full content, update the draft, save it back to the asset store,
or cancel. Sessions are held by the manager's registry, one per asset.

Session conflicts raised by the state machine (`ValueError`) are reported
as `HTTPException(409)`; local validation failures as 400, before any
network call.
"""

import json
import logging

from fastapi import HTTPException

from case_assets.models.asset import JSON_FILE_TYPES, Asset, FileType
from case_assets.models.edit_session import EditSession, EditSurface, LocalValidation

logger = logging.getLogger(__name__)


def expects_json(asset: Asset) -> bool:
    return asset.file_name.lower().endswith(".json") or asset.canonical_type in JSON_FILE_TYPES


def expects_csv(asset: Asset) -> bool:
    return asset.file_name.lower().endswith(".csv") or asset.canonical_type == FileType.FINANCIAL_DATA


def validate_content(asset: Asset, content: str) -> LocalValidation:
    """
    Runs the cheap structural check of a draft.

    Args:
        asset (Asset): Asset being edited (name and tag pick the check).
        content (str): Draft content.

    Returns:
        LocalValidation: `valid=False` with the parser's message for invalid
        JSON, or with a CSV message when no line has content.

    Example:
        >>> validate_content(Asset(file_id="a", file_name="a.json"), "{").valid
        False
    """

    if expects_json(asset):
        try:
            json.loads(content)
        except ValueError as e:
            return LocalValidation(valid=False, error=f"Invalid JSON: {e}")

    if expects_csv(asset) and not any(line.strip() for line in content.splitlines()):
        return LocalValidation(valid=False, error="CSV content must contain at least one non-empty line")

    return LocalValidation()


def _conflict(e: ValueError) -> HTTPException:
    return HTTPException(status_code=409, detail=str(e))


def _require_session(manager, file_id: str) -> EditSession:
    try:
        return manager.sessions.require(file_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


async def open_edit_session(manager, file_id: str, surface: EditSurface) -> EditSession:
    """
    Opens (or moves) the edit session of an asset.

    An asset already being edited keeps its draft and moves to the requested
    surface. Otherwise the full content is fetched; when that fails, a
    preview that can stand in for the body seeds the draft instead.

    Args:
        manager (AssetManager): Owner of the asset list and sessions.
        file_id (str): Asset to edit.
        surface (EditSurface): Inline or modal editor.

    Returns:
        EditSession: The open session.

    Raises:
        HTTPException: 404 for an unknown asset, 409 while the asset is
        saving, or the store error when no content is available.
    """

    asset = manager.get_asset(file_id)

    existing = manager.sessions.get(file_id)
    if existing is not None:
        try:
            existing.switch_surface(surface)
        except ValueError as e:
            raise _conflict(e)
        return existing

    try:
        content = await manager.fetch_full_content(file_id)
    except HTTPException as e:
        preview = manager.usable_preview(asset)
        if preview is None:
            manager.notify("error", f"Failed to load {asset.file_name} for editing: {e.detail}")
            raise
        logger.warning("Editing %s from its preview: %s", file_id, e.detail)
        manager.notify("info", "Full content unavailable, editing from the preview")
        content = preview

    try:
        session = manager.sessions.open(file_id, surface, content)
    except ValueError as e:
        raise _conflict(e)

    session.local_validation = validate_content(asset, content)
    return session


def update_draft(manager, file_id: str, content: str) -> EditSession:
    """Replaces the draft and re-runs local validation."""

    asset = manager.get_asset(file_id)
    session = _require_session(manager, file_id)
    try:
        session.update_draft(content, validate_content(asset, content))
    except ValueError as e:
        raise _conflict(e)
    return session


async def save_edit_session(manager, file_id: str) -> EditSession:
    """
    Saves the draft of an asset to the store.

    On success the session is closed, the cached content is dropped and the
    asset list is reloaded. On failure the draft and the editor stay open
    with `last_error` set.

    Raises:
        HTTPException: 400 when local validation fails, 409 for a save
        already in progress, or the store error.
    """

    asset = manager.get_asset(file_id)
    session = _require_session(manager, file_id)
    if session.is_saving:
        raise HTTPException(status_code=409, detail=f"Save already in progress for asset {file_id}")

    content = session.draft_content or ""
    session.local_validation = validate_content(asset, content)
    if not session.local_validation.valid:
        raise HTTPException(status_code=400, detail=session.local_validation.error)

    try:
        session.begin_save()
    except ValueError as e:
        raise _conflict(e)

    try:
        await manager.store.update_asset(manager.case_id, file_id, content)
    except HTTPException as e:
        session.finish_save(False, str(e.detail))
        manager.notify("error", f"Failed to save {asset.file_name}: {e.detail}")
        raise

    session.finish_save(True)
    manager.sessions.close(file_id)
    manager.invalidate(file_id)
    manager.notify("success", f"{asset.file_name} saved successfully")

    await manager.reload_after_write()
    return session


def cancel_edit_session(manager, file_id: str) -> EditSession:
    """Discards the draft. A session that is saving cannot be cancelled."""

    session = _require_session(manager, file_id)
    if session.is_saving:
        raise HTTPException(status_code=409, detail=f"Cannot cancel while asset {file_id} is saving")
    manager.sessions.close(file_id)
    return session
