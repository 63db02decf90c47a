from typing import Any, List, Optional
from pydantic import BaseModel, Field

from case_assets.models.asset import Asset, CaseContentSummary
from case_assets.models.edit_session import EditMode, EditSession, EditSurface
from case_assets.models.presentation import Notice, Presentation
from case_assets.models.regeneration import RegenerationRun


class OpenEditRequest(BaseModel):
    surface: EditSurface = EditSurface.INLINE


class DraftUpdateRequest(BaseModel):
    content: str


class RegenerateRequest(BaseModel):
    overwrite: bool = True


class AssetView(BaseModel):
    asset: Asset
    presentation: Optional[Presentation] = None
    edit_mode: EditMode = EditMode.VIEWING
    regenerating: bool = False


class AssetListView(BaseModel):
    case_id: str
    case_title: str
    total_assets: int
    existing_assets: int
    case_content: Optional[CaseContentSummary] = None
    assets: List[AssetView]
    notices: List[Notice] = Field(default_factory=list)


class PresentationResponse(BaseModel):
    file_id: str
    presentation: Presentation
    notices: List[Notice] = Field(default_factory=list)


class EditSessionResponse(BaseModel):
    session: EditSession
    notices: List[Notice] = Field(default_factory=list)


class RegenerationResponse(BaseModel):
    run: RegenerationRun
    asset: Optional[Asset] = None
    notices: List[Notice] = Field(default_factory=list)


class BulkRegenerationResponse(BaseModel):
    runs: List[RegenerationRun]
    notices: List[Notice] = Field(default_factory=list)


class HealthResponse(BaseModel):
    case_id: str
    report: Any
