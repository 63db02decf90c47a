"""
Asset store initialization and access utilities.

Case assets are persisted by the external case-generation service; this
backend only talks to it over HTTP. This module configures the shared
`AssetStoreClient` used across the application and exposes it the same way
for every service.

Environment variables:
    - ASSET_API_BASE_URL: Base URL of the asset API
    - ASSET_API_TIMEOUT_SECONDS: Request timeout

Usage example:
    >>> from case_assets.db.client import init_asset_store, get_asset_store
    >>> init_asset_store()
    >>> store = get_asset_store()
    >>> listing = await store.list_assets("cs_two_pizza_reorg")
"""

import logging
from typing import Optional

import httpx

from case_assets.services.asset_store_client import AssetStoreClient

logger = logging.getLogger(__name__)

# Global asset store reference
_store: Optional[AssetStoreClient] = None

# ------------------------------------------------------------------------------
# Initialization
# ------------------------------------------------------------------------------

def init_asset_store(
    base_url: Optional[str] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> AssetStoreClient:
    """
    Initialize the global asset store client.

    It should be called once during application startup (e.g., in
    `main.py`). Tests pass an `httpx.MockTransport` to fake the store.

    Args:
        base_url (Optional[str]): Overrides `ASSET_API_BASE_URL`.
        transport (Optional[httpx.AsyncBaseTransport]): Custom transport.

    Returns:
        AssetStoreClient: The configured client.
    """

    global _store
    _store = AssetStoreClient(base_url=base_url, transport=transport)
    logger.info("Asset store configured at %s", _store.base_url)
    return _store

# ------------------------------------------------------------------------------
# Store Access
# ------------------------------------------------------------------------------

def get_asset_store() -> AssetStoreClient:
    """
    Retrieve the initialized asset store client.

    Raises:
        RuntimeError: If `init_asset_store()` has not been called yet.
    """

    if _store is None:
        raise RuntimeError("Asset store was not initialized. Call init_asset_store() first.")
    return _store
