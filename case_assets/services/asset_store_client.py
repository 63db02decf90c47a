"""
Asset store client.

This module wraps the external case-generation asset API: listing the
assets of a case, fetching the full content of one asset, saving edited
content, asking the generation service to regenerate an asset, and reading
the diagnostic health report.

Each call opens its own `httpx.AsyncClient`. HTTP and connection errors are
raised as `HTTPException` carrying the upstream status (502 for connection
errors) and the message found in the error body.
"""

import logging
from typing import Any, Optional

import httpx
from fastapi import HTTPException

from case_assets.core.config import get_settings
from case_assets.models.asset import AssetListResponse
from case_assets.util.api_helpers import get_base_url, get_error_message

logger = logging.getLogger(__name__)


class AssetStoreClient:
    """
    Client for the list/get/update/generate/health asset endpoints.

    Example:
        >>> store = AssetStoreClient(base_url="http://localhost:3000/api/case-generation")
        >>> listing = await store.list_assets("cs_two_pizza_reorg")
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        debug: Optional[bool] = None,
    ):
        settings = get_settings()
        self.base_url = base_url or settings.asset_api_base_url
        self.timeout = timeout if timeout is not None else settings.asset_api_timeout_seconds
        self.transport = transport
        self.debug = settings.debug_assets if debug is None else debug

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self.transport)

    async def _send(self, method: str, path: str, fallback: str, **kwargs) -> httpx.Response:
        url = get_base_url(self.base_url, path)
        try:
            async with self._client() as client:
                response = await client.request(method, url, **kwargs)
                response.raise_for_status()
                return response
        except httpx.HTTPStatusError as e:
            message = get_error_message(e.response, fallback)
            logger.warning("%s %s failed with %s: %s", method, path, e.response.status_code, message)
            raise HTTPException(status_code=e.response.status_code, detail=message)
        except httpx.RequestError as e:
            logger.warning("%s %s connection error: %s", method, path, e)
            raise HTTPException(status_code=502, detail=f"Connection error to asset store: {str(e)}")

    @staticmethod
    def _json(response: httpx.Response, fallback: str) -> Any:
        try:
            return response.json()
        except ValueError:
            raise HTTPException(status_code=502, detail=f"{fallback}: invalid JSON response")

    async def list_assets(self, case_id: str) -> AssetListResponse:
        """
        Lists the assets of a case, with their cheap previews.

        Args:
            case_id (str): Case identifier.

        Returns:
            AssetListResponse: Listing, possibly carrying a non-fatal
            `warning`.

        Raises:
            HTTPException: If the store answers with an error or cannot be
            reached.
        """

        logger.info("Listing assets of case %s", case_id)
        response = await self._send("GET", "/list-assets", "Failed to load assets", params={"caseId": case_id})
        data = self._json(response, "Failed to load assets")

        try:
            return AssetListResponse.model_validate(data)
        except ValueError as e:
            raise HTTPException(status_code=502, detail=f"Unexpected asset list format: {str(e)}")

    async def get_asset_content(self, case_id: str, file_id: str) -> str:
        """
        Fetches the full, untruncated content of an asset.

        Returns:
            str: The raw body, byte-for-byte as stored.
        """

        logger.info("Fetching full content of %s/%s", case_id, file_id)
        response = await self._send(
            "GET", "/get-asset", "Failed to fetch asset",
            params={"caseId": case_id, "fileId": file_id},
        )
        return response.text

    async def update_asset(self, case_id: str, file_id: str, content: str) -> dict:
        """
        Saves edited content.

        Returns:
            dict: The store's confirmation body.
        """

        logger.info("Saving %s/%s (%d chars)", case_id, file_id, len(content))
        response = await self._send(
            "POST", "/update-asset", "Failed to update asset",
            json={"caseId": case_id, "fileId": file_id, "content": content},
        )
        return self._json(response, "Failed to update asset")

    async def generate_asset(self, case_id: str, file_id: str, overwrite: bool = True) -> dict:
        """
        Asks the generation service to (re)generate an asset.

        Returns:
            dict: Success body, possibly carrying `validationErrors` or
            `warnings`.
        """

        headers = {"x-debug": "true"} if self.debug else {}
        logger.info("Regenerating %s/%s (overwrite=%s)", case_id, file_id, overwrite)
        response = await self._send(
            "POST", "/generate-asset", "Generation failed",
            json={"caseId": case_id, "fileId": file_id, "overwrite": overwrite},
            headers=headers,
        )
        return self._json(response, "Generation failed")

    async def health(self, case_id: str) -> Any:
        """Reads the free-form diagnostic report of a case (display only)."""
        response = await self._send("GET", "/health", "Health check failed", params={"caseId": case_id})
        return self._json(response, "Health check failed")
