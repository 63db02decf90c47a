"""
Shared fixtures: a fake asset store and managers wired to it.
"""

import json
from typing import Any, Dict, List

import pytest

from case_assets.services.asset_manager_service import AssetManager, reset_asset_managers
from store_fakes import CASE_ID, FakeAssetStore, make_asset


# ============================================================================
# FIXTURES
# ============================================================================

@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    for name in ("ASSET_API_BASE_URL", "ASSET_RENDER_FALLBACK", "DEBUG_ASSETS", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("BULK_GENERATION_DELAY_SECONDS", "0")
    reset_asset_managers()
    yield
    reset_asset_managers()


@pytest.fixture
def sample_assets() -> List[Dict[str, Any]]:
    return [
        make_asset("memo-1", "ceo_memo.md", "MEMO", preview="# Reorg memo\n\nWe are splitting teams."),
        make_asset(
            "org-chart", "org_chart.json", "ORG_CHART",
            preview='{"root": {"name": "CEO", "children": [{"name": "C... (truncated)',
            truncated=True,
        ),
        make_asset("financials", "q3_financials.csv", "FINANCIAL_DATA", preview="Quarter,Revenue\nQ3,100"),
        make_asset("deck", "board_deck.md", "PRESENTATION_DECK", exists=False),
    ]


@pytest.fixture
def sample_contents() -> Dict[str, str]:
    return {
        "memo-1": "# Reorg memo\n\nWe are splitting teams.",
        "org-chart": json.dumps({"root": {"name": "CEO", "children": [{"name": "CFO"}]}}),
        "financials": "Quarter,Revenue\nQ3,100",
    }


@pytest.fixture
def fake_store(sample_assets, sample_contents) -> FakeAssetStore:
    return FakeAssetStore(sample_assets, sample_contents)


@pytest.fixture
def manager(fake_store) -> AssetManager:
    return AssetManager(CASE_ID, store=fake_store.client())
