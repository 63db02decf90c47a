"""
Asset manager service.

One `AssetManager` per case owns the client-visible state of the management
screen: the asset list, the full-content cache, the pending notices, the
edit-session registry and the regeneration coordinator. It is the only
place where an asset's local state is mutated.

List failures clear the list and surface a retryable error notice; the
store's `HTTPException` is re-raised to the caller.
"""

import asyncio
import logging
from typing import Dict, List, Optional, Tuple

from fastapi import HTTPException

from case_assets.db.client import get_asset_store
from case_assets.models.asset import Asset, AssetListResponse
from case_assets.models.edit_session import SessionRegistry
from case_assets.models.presentation import Notice, Presentation
from case_assets.services.asset_store_client import AssetStoreClient
from case_assets.services.containment import render_safely
from case_assets.services.regeneration_service import RegenerationCoordinator
from case_assets.services.render_service import render_asset_content

logger = logging.getLogger(__name__)


class AssetManager:
    """
    Management-screen state of one case.

    Example:
        >>> manager = get_asset_manager("cs_two_pizza_reorg")
        >>> await manager.load_assets()
        >>> views = await manager.render_views()
    """

    def __init__(self, case_id: str, store: Optional[AssetStoreClient] = None):
        self.case_id = case_id
        self._store = store
        self.assets: Dict[str, Asset] = {}
        self.listing: Optional[AssetListResponse] = None
        self.sessions = SessionRegistry()
        self.regeneration = RegenerationCoordinator(self)
        self._notices: List[Notice] = []
        self._content_cache: Dict[str, Tuple[Optional[str], str]] = {}
        self._epochs: Dict[str, int] = {}
        self._quality_overrides: Dict[str, Tuple[List[str], List[str]]] = {}

    @property
    def store(self) -> AssetStoreClient:
        return self._store or get_asset_store()

    # --------------------------------------------------------------------------
    # Notices
    # --------------------------------------------------------------------------

    def notify(self, level: str, message: str) -> Notice:
        notice = Notice(level=level, message=message)
        self._notices.append(notice)
        return notice

    def drain_notices(self) -> List[Notice]:
        notices, self._notices = self._notices, []
        return notices

    # --------------------------------------------------------------------------
    # Asset list
    # --------------------------------------------------------------------------

    async def load_assets(self) -> AssetListResponse:
        """
        Loads (or reloads) the asset list of the case.

        Optimistic quality patches from a regeneration are kept when the
        reloaded asset reports none of its own.

        Raises:
            HTTPException: If the store call fails. The list is cleared.
        """

        try:
            listing = await self.store.list_assets(self.case_id)
        except HTTPException as e:
            self.assets = {}
            self.listing = None
            self.notify("error", f"Failed to load assets: {e.detail}. Please retry.")
            raise

        assets = {}
        for asset in listing.assets:
            self._keep_quality_patch(asset)
            self._drop_stale_content(asset)
            assets[asset.file_id] = asset

        self.assets = assets
        self.listing = listing
        if listing.warning:
            self.notify("warning", listing.warning)

        logger.info("Loaded %d assets for case %s", len(assets), self.case_id)
        return listing

    async def reload_after_write(self) -> bool:
        """Reloads the list after a save or regeneration; failures only notify."""
        try:
            await self.load_assets()
        except HTTPException:
            return False
        return True

    def _keep_quality_patch(self, asset: Asset) -> None:
        patch = self._quality_overrides.get(asset.file_id)
        if patch is None:
            return
        if asset.validation_errors or asset.warnings:
            self._quality_overrides.pop(asset.file_id)
            return
        asset.validation_errors, asset.warnings = list(patch[0]), list(patch[1])

    def _drop_stale_content(self, asset: Asset) -> None:
        cached = self._content_cache.get(asset.file_id)
        if cached is not None and cached[0] != asset.last_generated_at:
            self._content_cache.pop(asset.file_id)

    def get_asset(self, file_id: str) -> Asset:
        asset = self.assets.get(file_id)
        if asset is None:
            raise HTTPException(status_code=404, detail=f"Asset {file_id} not found in case {self.case_id}")
        return asset

    # --------------------------------------------------------------------------
    # Content
    # --------------------------------------------------------------------------

    def usable_preview(self, asset: Asset) -> Optional[str]:
        """The preview, when it may stand in for the full body."""
        return None if asset.requires_full_fetch() else asset.preview

    async def fetch_full_content(self, file_id: str) -> str:
        """
        Returns the authoritative body of an asset, fetching it on first use.

        Raises:
            HTTPException: If the store call fails.
        """

        asset = self.get_asset(file_id)
        cached = self._content_cache.get(file_id)
        if cached is not None and cached[0] == asset.last_generated_at:
            return cached[1]

        epoch = self._epochs.get(file_id, 0)
        generated_at = asset.last_generated_at
        content = await self.store.get_asset_content(self.case_id, file_id)

        # Invalidated while fetching: the body may predate a regeneration or save.
        if self._epochs.get(file_id, 0) == epoch:
            self._content_cache[file_id] = (generated_at, content)
        return content

    def invalidate(self, file_id: str) -> None:
        """Forgets the cached body and preview so the next read refetches."""
        self._epochs[file_id] = self._epochs.get(file_id, 0) + 1
        self._content_cache.pop(file_id, None)
        asset = self.assets.get(file_id)
        if asset is not None:
            asset.preview = None
            asset.truncated = False

    def apply_regeneration(self, file_id: str, validation_errors: List[str], warnings: List[str]) -> None:
        """
        Patches the quality messages of a regenerated asset before the reload.

        An asset missing from the current list only keeps the patch for the
        next load.
        """

        self._quality_overrides[file_id] = (list(validation_errors), list(warnings))
        asset = self.assets.get(file_id)
        if asset is not None:
            asset.validation_errors = list(validation_errors)
            asset.warnings = list(warnings)
        self.invalidate(file_id)

    # --------------------------------------------------------------------------
    # Rendering
    # --------------------------------------------------------------------------

    def render(self, asset: Asset, content, show_details: Optional[bool] = None) -> Presentation:
        return render_safely(
            asset,
            lambda: render_asset_content(asset.file_type, asset.file_name, asset.mime_type, content),
            show_details,
        )

    async def _content_for_list(self, asset: Asset) -> Optional[str]:
        try:
            return await self.fetch_full_content(asset.file_id)
        except HTTPException as e:
            self.notify("error", f"Failed to load {asset.file_name}: {e.detail}")
            return None

    async def render_views(self, show_details: Optional[bool] = None) -> List[Tuple[Asset, Optional[Presentation]]]:
        """
        Renders every existing asset of the list.

        Previews that cannot stand in for the body (JSON-shaped or truncated)
        are replaced by a full fetch first; those fetches run concurrently.
        An asset whose fetch fails, and a missing asset, has no presentation.

        Returns:
            List[Tuple[Asset, Optional[Presentation]]]: In list order.
        """

        needs_fetch = [a for a in self.assets.values() if a.exists and a.requires_full_fetch()]
        fetched = await asyncio.gather(*(self._content_for_list(a) for a in needs_fetch))
        full_contents = {a.file_id: content for a, content in zip(needs_fetch, fetched)}

        views = []
        for asset in self.assets.values():
            if not asset.exists:
                views.append((asset, None))
                continue

            if asset.file_id in full_contents:
                content = full_contents[asset.file_id]
                if content is None:
                    views.append((asset, None))
                    continue
            else:
                content = asset.preview

            views.append((asset, self.render(asset, content, show_details)))
        return views

    async def render_full(self, file_id: str, show_details: Optional[bool] = None) -> Presentation:
        asset = self.get_asset(file_id)
        content = await self.fetch_full_content(file_id)
        return self.render(asset, content, show_details)


# ------------------------------------------------------------------------------
# Manager registry
# ------------------------------------------------------------------------------

_managers: Dict[str, AssetManager] = {}


def get_asset_manager(case_id: str) -> AssetManager:
    """Returns the manager of a case, creating it on first use."""
    manager = _managers.get(case_id)
    if manager is None:
        manager = AssetManager(case_id)
        _managers[case_id] = manager
    return manager


def reset_asset_managers() -> None:
    _managers.clear()
