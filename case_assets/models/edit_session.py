"""
Edit session model definition.

An edit session holds the in-progress draft of one asset. Sessions are
transient (never persisted) and there is at most one per asset: the
registry enforces a single writer whatever surface (inline editor or modal
editor) asked for the edit.

State machine:
    viewing -> inline-editing | modal-editing -> saving -> viewing
    saving -> inline-editing | modal-editing   (save failed, draft kept)

Illegal transitions raise `ValueError`.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Dict, Optional
from pydantic import BaseModel, Field


class EditSurface(str, Enum):
    INLINE = "inline"
    MODAL = "modal"


class EditMode(str, Enum):
    VIEWING = "viewing"
    INLINE_EDITING = "inline-editing"
    MODAL_EDITING = "modal-editing"
    SAVING = "saving"


EDITING_MODES = {
    EditSurface.INLINE: EditMode.INLINE_EDITING,
    EditSurface.MODAL: EditMode.MODAL_EDITING,
}


class LocalValidation(BaseModel):
    """Result of the cheap structural check run on every draft update."""

    valid: bool = True
    error: Optional[str] = None


class EditSession(BaseModel):
    """
    Draft state of one asset.

    Example:
        >>> session = EditSession(asset_id="memo-1")
        >>> session.begin_edit(EditSurface.MODAL, "# Memo")
        >>> session.mode
        <EditMode.MODAL_EDITING: 'modal-editing'>
    """

    asset_id: str
    surface: EditSurface = EditSurface.INLINE
    mode: EditMode = EditMode.VIEWING
    draft_content: Optional[str] = None
    """In-progress buffer, seeded from a full (non-truncated) fetch."""

    local_validation: LocalValidation = Field(default_factory=LocalValidation)
    last_error: Optional[str] = None
    """Message of the last failed save, kept with the draft."""

    opened_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def is_editing(self) -> bool:
        return self.mode in (EditMode.INLINE_EDITING, EditMode.MODAL_EDITING)

    @property
    def is_saving(self) -> bool:
        return self.mode == EditMode.SAVING

    def begin_edit(self, surface: EditSurface, content: str) -> None:
        if self.mode != EditMode.VIEWING:
            raise ValueError(f"Asset {self.asset_id} is already {self.mode.value}")
        self.surface = surface
        self.mode = EDITING_MODES[surface]
        self.draft_content = content
        self.last_error = None

    def switch_surface(self, surface: EditSurface) -> None:
        """Moves an open draft to the other surface; the draft is kept."""
        if not self.is_editing:
            raise ValueError(f"Asset {self.asset_id} cannot change editor while {self.mode.value}")
        self.surface = surface
        self.mode = EDITING_MODES[surface]

    def update_draft(self, content: str, validation: LocalValidation) -> None:
        if not self.is_editing:
            raise ValueError(f"Asset {self.asset_id} is not being edited ({self.mode.value})")
        self.draft_content = content
        self.local_validation = validation

    def begin_save(self) -> None:
        if self.is_saving:
            raise ValueError(f"Save already in progress for asset {self.asset_id}")
        if not self.is_editing:
            raise ValueError(f"Asset {self.asset_id} is not being edited")
        self.mode = EditMode.SAVING

    def finish_save(self, succeeded: bool, error: Optional[str] = None) -> None:
        if not self.is_saving:
            raise ValueError(f"No save in progress for asset {self.asset_id}")
        if succeeded:
            self.mode = EditMode.VIEWING
            self.last_error = None
        else:
            self.mode = EDITING_MODES[self.surface]
            self.last_error = error


class SessionRegistry:
    """
    Edit sessions keyed by asset id.

    Opening a session for an asset that already has one returns the
    existing session moved to the requested surface, so inline and modal
    editors can never hold two divergent drafts of the same asset.
    """

    def __init__(self):
        self._sessions: Dict[str, EditSession] = {}

    def get(self, asset_id: str) -> Optional[EditSession]:
        return self._sessions.get(asset_id)

    def require(self, asset_id: str) -> EditSession:
        session = self._sessions.get(asset_id)
        if session is None:
            raise ValueError(f"No edit session open for asset {asset_id}")
        return session

    def open(self, asset_id: str, surface: EditSurface, content: str) -> EditSession:
        existing = self._sessions.get(asset_id)
        if existing is not None:
            existing.switch_surface(surface)
            return existing

        session = EditSession(asset_id=asset_id)
        session.begin_edit(surface, content)
        self._sessions[asset_id] = session
        return session

    def close(self, asset_id: str) -> Optional[EditSession]:
        return self._sessions.pop(asset_id, None)

    def __contains__(self, asset_id: str) -> bool:
        return asset_id in self._sessions
