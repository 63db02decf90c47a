"""
Asset model definition.

This module defines the `Asset` data model used to represent the generated
case-study artifacts managed by the Case Assets Studio. An asset is a named
unit of generated content (org chart, stakeholder profiles, market dataset,
financial CSV, memo, slide deck...) belonging to a case. Its body is an
opaque string and its declared `file_type` is trusted first but not blindly.

The models are implemented using Pydantic. Field names are snake_case in
Python and camelCase on the wire, matching the asset store's JSON.
"""

from enum import Enum
from typing import Any, List, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


TRUNCATION_SENTINEL = "... (truncated)"
"""Marker the store appends to previews cut at 2000 characters."""


class FileType(str, Enum):
    """Canonical type tags assigned at generation time."""

    FINANCIAL_DATA = "FINANCIAL_DATA"
    MEMO = "MEMO"
    REPORT = "REPORT"
    PRESENTATION_DECK = "PRESENTATION_DECK"
    LEGAL_DOCUMENT = "LEGAL_DOCUMENT"
    ORG_CHART = "ORG_CHART"
    STAKEHOLDER_PROFILES = "STAKEHOLDER_PROFILES"
    MARKET_DATASET = "MARKET_DATASET"
    PRESS_RELEASE = "PRESS_RELEASE"
    INTERNAL_MEMO = "INTERNAL_MEMO"

    @classmethod
    def from_tag(cls, tag: Optional[str]) -> Optional["FileType"]:
        """Returns the canonical tag, or None for missing/generic tags."""
        if not tag:
            return None
        try:
            return cls(tag.strip().upper())
        except ValueError:
            return None


MARKDOWN_FILE_TYPES = frozenset({
    FileType.PRESS_RELEASE,
    FileType.INTERNAL_MEMO,
    FileType.REPORT,
    FileType.MEMO,
    FileType.LEGAL_DOCUMENT,
})

JSON_FILE_TYPES = frozenset({
    FileType.ORG_CHART,
    FileType.STAKEHOLDER_PROFILES,
    FileType.MARKET_DATASET,
})


class WireModel(BaseModel):
    """Base model serializing to the store's camelCase JSON."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Asset(WireModel):
    """
    Represents a generated asset of a case.

    Example:
        >>> asset = Asset(
        ...     file_id="org-chart",
        ...     file_name="org_chart.json",
        ...     file_type="ORG_CHART",
        ...     exists=True,
        ...     preview='{"organization": [...',
        ... )
        >>> asset.requires_full_fetch()
        True
    """

    file_id: str
    """Stable identifier of the asset within its case."""

    file_name: str
    """File name of the asset (extension is used by the sniffer)."""

    file_type: Optional[str] = None
    """Declared canonical tag (may be missing, generic or wrong)."""

    source_type: str = "UNKNOWN"
    """How the asset was produced (`STATIC`, `REFERENCE`, ...)."""

    mime_type: Optional[str] = None
    """Advisory MIME type."""

    exists: bool = False
    """Whether the asset has a persisted body."""

    file_path: Optional[str] = None
    """Advisory storage path. May be stale."""

    file_size: Optional[int] = None
    """Advisory body size in bytes. May be stale."""

    last_generated_at: Optional[str] = None

    can_regenerate: bool = True
    """Whether a regeneration API exists for this asset type."""

    preview: Optional[str] = None
    """Possibly-truncated copy of the body fetched with the list."""

    truncated: bool = False
    """Explicit truncation flag. The sentinel in `preview` counts too."""

    validation_errors: List[str] = Field(default_factory=list)
    """Structural problems reported by the generation service."""

    warnings: List[str] = Field(default_factory=list)

    @property
    def canonical_type(self) -> Optional[FileType]:
        return FileType.from_tag(self.file_type)

    def is_preview_truncated(self) -> bool:
        """True when the preview is flagged or marked as truncated."""
        if self.truncated:
            return True
        return bool(self.preview) and self.preview.rstrip().endswith(TRUNCATION_SENTINEL)

    def is_json_shaped(self) -> bool:
        """True for JSON tags, `.json` names, or previews starting with `{`/`[`."""
        if self.canonical_type in JSON_FILE_TYPES:
            return True
        if self.file_name.lower().endswith(".json"):
            return True
        sample = (self.preview or "").lstrip()
        return sample.startswith("{") or sample.startswith("[")

    def requires_full_fetch(self) -> bool:
        """
        Whether the preview may not be used as the asset's body.

        JSON-shaped previews are never authoritative because truncation
        corrupts JSON syntax; truncated previews of any type are incomplete.
        """
        return self.is_json_shaped() or self.is_preview_truncated() or not self.preview

    def quality_messages(self) -> List[str]:
        """Server-reported problems, de-duplicated, errors first."""
        seen = []
        for message in [*self.validation_errors, *self.warnings]:
            if message not in seen:
                seen.append(message)
        return seen


class CaseContentSummary(WireModel):
    """Core case content returned alongside the asset list (display only)."""

    description: Optional[str] = None
    stages: List[Any] = Field(default_factory=list)
    rubric: Optional[Any] = None
    competencies: List[str] = Field(default_factory=list)
    estimated_duration: Optional[int] = None
    difficulty: Optional[str] = None
    has_stages: bool = False
    has_rubric: bool = False


class AssetListResponse(WireModel):
    """
    Response of the store's list-assets API.

    A degraded response may carry a `warning` string next to the assets;
    it is non-fatal and surfaced as a notice.
    """

    case_id: str
    case_title: str = "Untitled Case"
    assets: List[Asset] = Field(default_factory=list)
    total_assets: int = 0
    existing_assets: int = 0
    case_content: Optional[CaseContentSummary] = None
    warning: Optional[str] = None
