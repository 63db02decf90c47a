"""
Regeneration run model.

One run per in-flight "regenerate this asset" request. The `run_id` is the
request token used to serialize regenerations of the same asset.
"""

from datetime import datetime, timezone
from typing import List, Literal, Optional
from uuid import uuid4
from pydantic import BaseModel, Field


def _now() -> datetime:
    return datetime.now(timezone.utc)


class RegenerationRun(BaseModel):
    """
    Outcome of a regeneration request.

    Example:
        >>> run = RegenerationRun(asset_id="org-chart")
        >>> run.succeed(["missing field X"])
        >>> run.warning_count
        1
    """

    run_id: str = Field(default_factory=lambda: uuid4().hex)
    asset_id: str
    status: Literal["pending", "succeeded", "failed"] = "pending"
    server_validation_errors: List[str] = Field(default_factory=list)
    """Warnings reported by the generation service on success."""

    error_message: Optional[str] = None
    started_at: datetime = Field(default_factory=_now)
    finished_at: Optional[datetime] = None

    @property
    def warning_count(self) -> int:
        return len(self.server_validation_errors)

    def succeed(self, validation_errors: List[str]) -> None:
        self.status = "succeeded"
        self.server_validation_errors = list(validation_errors)
        self.finished_at = _now()

    def fail(self, message: str) -> None:
        self.status = "failed"
        self.error_message = message
        self.finished_at = _now()
