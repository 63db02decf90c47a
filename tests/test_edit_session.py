"""
Tests for the edit session state machine, the session registry and the
edit workflow against the fake asset store.

Usage:
    pytest tests/test_edit_session.py -v
"""

import asyncio

import pytest
from fastapi import HTTPException

from case_assets.models.asset import Asset
from case_assets.models.edit_session import EditMode, EditSession, EditSurface, LocalValidation, SessionRegistry
from case_assets.services.edit_session_service import (
    cancel_edit_session,
    open_edit_session,
    save_edit_session,
    update_draft,
    validate_content,
)


def run(coro):
    return asyncio.run(coro)


async def loaded(manager):
    await manager.load_assets()
    return manager


# ============================================================================
# State machine
# ============================================================================

class TestEditSessionModel:

    def test_begin_edit_picks_surface_mode(self):
        session = EditSession(asset_id="memo-1")
        session.begin_edit(EditSurface.MODAL, "# Memo")

        assert session.mode == EditMode.MODAL_EDITING
        assert session.draft_content == "# Memo"
        assert session.is_editing

    def test_cannot_begin_twice(self):
        session = EditSession(asset_id="memo-1")
        session.begin_edit(EditSurface.INLINE, "a")
        with pytest.raises(ValueError):
            session.begin_edit(EditSurface.MODAL, "b")

    def test_draft_requires_editing(self):
        with pytest.raises(ValueError):
            EditSession(asset_id="memo-1").update_draft("x", LocalValidation())

    def test_second_save_is_rejected(self):
        session = EditSession(asset_id="memo-1")
        session.begin_edit(EditSurface.INLINE, "a")
        session.begin_save()

        with pytest.raises(ValueError, match="already in progress"):
            session.begin_save()

    def test_failed_save_returns_to_editor_with_draft(self):
        session = EditSession(asset_id="memo-1")
        session.begin_edit(EditSurface.MODAL, "draft")
        session.begin_save()
        session.finish_save(False, "Write failed")

        assert session.mode == EditMode.MODAL_EDITING
        assert session.draft_content == "draft"
        assert session.last_error == "Write failed"

    def test_successful_save_returns_to_viewing(self):
        session = EditSession(asset_id="memo-1")
        session.begin_edit(EditSurface.INLINE, "draft")
        session.begin_save()
        session.finish_save(True)

        assert session.mode == EditMode.VIEWING
        assert session.last_error is None

    def test_surface_cannot_change_while_saving(self):
        session = EditSession(asset_id="memo-1")
        session.begin_edit(EditSurface.INLINE, "draft")
        session.begin_save()

        with pytest.raises(ValueError):
            session.switch_surface(EditSurface.MODAL)


class TestSessionRegistry:

    def test_one_session_per_asset(self):
        registry = SessionRegistry()
        inline = registry.open("memo-1", EditSurface.INLINE, "draft")
        modal = registry.open("memo-1", EditSurface.MODAL, "other content")

        assert modal is inline
        assert modal.mode == EditMode.MODAL_EDITING
        assert modal.draft_content == "draft"
        assert "memo-1" in registry

    def test_require_and_close(self):
        registry = SessionRegistry()
        with pytest.raises(ValueError):
            registry.require("memo-1")

        registry.open("memo-1", EditSurface.INLINE, "draft")
        assert "memo-1" in registry
        registry.close("memo-1")
        assert "memo-1" not in registry


# ============================================================================
# Local validation
# ============================================================================

class TestLocalValidation:

    def test_json_assets_must_parse(self):
        asset = Asset(file_id="org", file_name="org.txt", file_type="ORG_CHART")
        result = validate_content(asset, '{"a": ')

        assert result.valid is False
        assert result.error.startswith("Invalid JSON:")

    def test_json_by_extension(self):
        asset = Asset(file_id="x", file_name="data.json")
        assert validate_content(asset, "[1, 2]").valid

    def test_csv_needs_a_line(self):
        asset = Asset(file_id="fin", file_name="q3.csv", file_type="FINANCIAL_DATA")

        assert validate_content(asset, "  \n \n").valid is False
        assert validate_content(asset, "a,b").valid

    def test_markdown_is_free_form(self):
        asset = Asset(file_id="memo", file_name="memo.md", file_type="MEMO")
        assert validate_content(asset, "").valid


# ============================================================================
# Edit workflow
# ============================================================================

class TestEditWorkflow:

    def test_open_uses_full_content_not_truncated_preview(self, manager, fake_store, sample_contents):
        async def scenario():
            await loaded(manager)
            return await open_edit_session(manager, "org-chart", EditSurface.INLINE)

        session = run(scenario())

        assert session.draft_content == sample_contents["org-chart"]
        assert session.mode == EditMode.INLINE_EDITING
        assert len(fake_store.endpoint_calls("get-asset")) == 1

    def test_open_other_surface_transfers_session(self, manager, fake_store):
        async def scenario():
            await loaded(manager)
            first = await open_edit_session(manager, "memo-1", EditSurface.INLINE)
            update_draft(manager, "memo-1", "# Edited")
            second = await open_edit_session(manager, "memo-1", EditSurface.MODAL)
            return first, second

        first, second = run(scenario())

        assert second is first
        assert second.mode == EditMode.MODAL_EDITING
        assert second.draft_content == "# Edited"
        assert len(fake_store.endpoint_calls("get-asset")) == 1

    def test_fetch_failure_seeds_from_usable_preview(self, manager, fake_store):
        fake_store.failures["get-asset"] = (500, {"error": "Storage unavailable"})

        async def scenario():
            await loaded(manager)
            return await open_edit_session(manager, "memo-1", EditSurface.MODAL)

        session = run(scenario())

        assert session.draft_content == "# Reorg memo\n\nWe are splitting teams."
        assert [n.level for n in manager.drain_notices()] == ["info"]

    def test_fetch_failure_without_usable_preview_aborts(self, manager, fake_store):
        fake_store.failures["get-asset"] = (500, {"error": "Storage unavailable"})

        async def scenario():
            await loaded(manager)
            await open_edit_session(manager, "org-chart", EditSurface.INLINE)

        with pytest.raises(HTTPException) as exc:
            run(scenario())

        assert exc.value.status_code == 500
        assert "org-chart" not in manager.sessions
        assert manager.drain_notices()[-1].level == "error"

    def test_save_round_trip(self, manager, fake_store):
        new_content = "# Reorg memo v2\n\nTeams of six.\n"

        async def scenario():
            await loaded(manager)
            await open_edit_session(manager, "memo-1", EditSurface.INLINE)
            update_draft(manager, "memo-1", new_content)
            session = await save_edit_session(manager, "memo-1")
            return session, await manager.fetch_full_content("memo-1")

        session, refetched = run(scenario())

        assert session.mode == EditMode.VIEWING
        assert fake_store.contents["memo-1"] == new_content
        assert refetched == new_content
        assert "memo-1" not in manager.sessions
        assert len(fake_store.endpoint_calls("list-assets")) == 2
        assert any(n.level == "success" for n in manager.drain_notices())

    def test_invalid_draft_blocks_save(self, manager, fake_store):
        async def scenario():
            await loaded(manager)
            await open_edit_session(manager, "org-chart", EditSurface.MODAL)
            session = update_draft(manager, "org-chart", '{"root": ')
            assert session.local_validation.valid is False
            await save_edit_session(manager, "org-chart")

        with pytest.raises(HTTPException) as exc:
            run(scenario())

        assert exc.value.status_code == 400
        assert exc.value.detail.startswith("Invalid JSON")
        assert fake_store.endpoint_calls("update-asset") == []
        assert manager.sessions.get("org-chart").mode == EditMode.MODAL_EDITING

    def test_failed_save_keeps_draft(self, manager, fake_store):
        fake_store.failures["update-asset"] = (500, {"error": "Write failed", "details": ["disk full"]})

        async def scenario():
            await loaded(manager)
            await open_edit_session(manager, "memo-1", EditSurface.INLINE)
            update_draft(manager, "memo-1", "# Draft")
            await save_edit_session(manager, "memo-1")

        with pytest.raises(HTTPException) as exc:
            run(scenario())

        session = manager.sessions.get("memo-1")
        assert exc.value.detail == "Write failed: disk full"
        assert session.mode == EditMode.INLINE_EDITING
        assert session.draft_content == "# Draft"
        assert session.last_error == "Write failed: disk full"

    def test_duplicate_save_is_rejected(self, manager, fake_store):
        async def scenario():
            await loaded(manager)
            session = await open_edit_session(manager, "memo-1", EditSurface.INLINE)
            session.begin_save()
            await save_edit_session(manager, "memo-1")

        with pytest.raises(HTTPException) as exc:
            run(scenario())

        assert exc.value.status_code == 409
        assert fake_store.endpoint_calls("update-asset") == []

    def test_cancel(self, manager):
        async def scenario():
            await loaded(manager)
            await open_edit_session(manager, "memo-1", EditSurface.INLINE)

        run(scenario())
        cancel_edit_session(manager, "memo-1")

        assert "memo-1" not in manager.sessions
        with pytest.raises(HTTPException) as exc:
            cancel_edit_session(manager, "memo-1")
        assert exc.value.status_code == 404
