"""
Regeneration service.

The `RegenerationCoordinator` of a case asks the generation service to
rebuild assets. At most one regeneration per asset is in flight; different
assets proceed independently. A successful run patches the asset's quality
messages immediately, before the list reload that follows it.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional

from fastapi import HTTPException

from case_assets.core.config import get_settings
from case_assets.models.asset import Asset
from case_assets.models.regeneration import RegenerationRun

logger = logging.getLogger(__name__)


def _messages(result: Any, key: str) -> List[str]:
    if not isinstance(result, dict):
        return []
    value = result.get(key)
    if isinstance(value, list):
        return [str(item) for item in value]
    if isinstance(value, str) and value:
        return [value]
    return []


def _dedupe(messages: List[str]) -> List[str]:
    seen = []
    for message in messages:
        if message not in seen:
            seen.append(message)
    return seen


class RegenerationCoordinator:
    """
    Serializes regenerations per asset for one `AssetManager`.

    Example:
        >>> run = await manager.regeneration.regenerate("org-chart")
        >>> run.status
        'succeeded'
    """

    def __init__(self, manager):
        self.manager = manager
        self._in_flight: Dict[str, RegenerationRun] = {}

    def is_pending(self, file_id: str) -> bool:
        return file_id in self._in_flight

    def _check(self, asset: Asset) -> None:
        if not asset.can_regenerate:
            raise HTTPException(status_code=400, detail=f"{asset.file_name} cannot be regenerated")
        if self.is_pending(asset.file_id):
            raise HTTPException(
                status_code=409,
                detail=f"Regeneration of {asset.file_name} is already in progress",
            )

    async def _run(self, asset: Asset, overwrite: bool) -> RegenerationRun:
        self._check(asset)
        run = RegenerationRun(asset_id=asset.file_id)
        self._in_flight[asset.file_id] = run

        try:
            result = await self.manager.store.generate_asset(self.manager.case_id, asset.file_id, overwrite)
        except HTTPException as e:
            run.fail(str(e.detail))
            self.manager.notify("error", f"Failed to regenerate {asset.file_name}: {e.detail}")
        else:
            validation_errors = _messages(result, "validationErrors")
            warnings = _messages(result, "warnings")
            # The list may have been reloaded meanwhile.
            self.manager.apply_regeneration(asset.file_id, validation_errors, warnings)
            run.succeed(_dedupe(validation_errors + warnings))

            if run.warning_count:
                self.manager.notify("warning", f"Asset regenerated with {run.warning_count} warnings")
            else:
                self.manager.notify("success", "Asset regenerated successfully!")
        finally:
            self._in_flight.pop(asset.file_id, None)

        logger.info("Regeneration of %s/%s %s", self.manager.case_id, asset.file_id, run.status)
        return run

    async def regenerate(self, file_id: str, overwrite: bool = True) -> RegenerationRun:
        """
        Regenerates one asset, then reloads the list.

        Args:
            file_id (str): Asset to regenerate.
            overwrite (bool): Replace existing content.

        Returns:
            RegenerationRun: `failed` runs carry the store's combined message;
            the asset's content is left untouched.

        Raises:
            HTTPException: 404 for an unknown asset, 400 when the asset type
            has no generator, 409 when a regeneration of the same asset is
            already pending.
        """

        asset = self.manager.get_asset(file_id)

        run = await self._run(asset, overwrite)
        if run.status == "succeeded":
            await self.manager.reload_after_write()
        return run

    async def regenerate_missing(self, delay: Optional[float] = None) -> List[RegenerationRun]:
        """
        Generates every missing, regenerable asset one after the other.

        Requests are spaced by `BULK_GENERATION_DELAY_SECONDS`; the list is
        reloaded once at the end. An asset that started regenerating, or
        appeared, while the batch was waiting is skipped.

        Returns:
            List[RegenerationRun]: One run per attempted asset.
        """

        if delay is None:
            delay = get_settings().bulk_generation_delay_seconds

        targets = [asset.file_id for asset in self.manager.assets.values() if self._is_missing(asset)]
        if not targets:
            self.manager.notify("info", "No missing assets to generate")
            return []

        runs = []
        for index, file_id in enumerate(targets):
            if index and delay > 0:
                await asyncio.sleep(delay)

            asset = self.manager.assets.get(file_id)
            if asset is None or not self._is_missing(asset):
                logger.info("Skipping %s/%s in bulk generation", self.manager.case_id, file_id)
                continue
            runs.append(await self._run(asset, overwrite=False))

        succeeded = sum(1 for run in runs if run.status == "succeeded")
        level = "success" if succeeded == len(runs) else "warning"
        self.manager.notify(level, f"Generated {succeeded} of {len(runs)} missing assets")

        await self.manager.reload_after_write()
        return runs

    def _is_missing(self, asset: Asset) -> bool:
        return not asset.exists and asset.can_regenerate and not self.is_pending(asset.file_id)
