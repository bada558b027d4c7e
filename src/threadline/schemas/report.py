"""Report-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic_core import PydanticCustomError

from threadline.models.report import ReportStatus, ReportType


class ReportCreate(BaseModel):
    """Schema for filing a report against a thread, a post or a user."""

    type: ReportType
    reason: str = Field(..., min_length=5, max_length=100)
    details: str | None = Field(None, max_length=1000)
    thread_id: int | None = None
    post_id: int | None = None
    reported_id: int | None = None

    @field_validator("details", "thread_id", "post_id", "reported_id", mode="before")
    @classmethod
    def _blank_as_missing(cls, value: object) -> object:
        # Form submissions send empty strings for untouched fields.
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @model_validator(mode="after")
    def _exactly_one_target(self) -> "ReportCreate":
        targets = [t for t in (self.thread_id, self.post_id, self.reported_id) if t is not None]
        if not targets:
            raise PydanticCustomError(
                "report_target_missing",
                "You must specify what you are reporting",
            )
        if len(targets) > 1:
            raise PydanticCustomError(
                "report_target_ambiguous",
                "Report only one item at a time",
            )
        return self


class ReportStatusUpdate(BaseModel):
    """Schema for moving a report through its lifecycle."""

    status: ReportStatus
    resolution: str | None = Field(None, max_length=1000)


class ReportResponse(BaseModel):
    """Schema for report information returned by the API."""

    id: int
    type: ReportType
    reason: str
    details: str | None
    thread_id: int | None
    post_id: int | None
    reported_id: int | None
    reporter_id: int
    status: ReportStatus
    resolution: str | None
    closed_by_id: int | None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ReportStats(BaseModel):
    """Counters shown on the moderation dashboard."""

    total: int
    pending: int
    resolved_today: int
    total_this_week: int
