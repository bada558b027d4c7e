"""Post-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class PostCreate(BaseModel):
    """Schema for replying to a thread."""

    thread_id: int
    content: str = Field(..., min_length=1, max_length=5000)
    parent_id: int | None = Field(None, description="Post being replied to, if any")


class PostUpdate(BaseModel):
    """Schema for editing a post's content."""

    content: str = Field(..., min_length=1, max_length=5000)


class PostResponse(BaseModel):
    """Schema for post information returned by the API."""

    id: int
    thread_id: int
    author_id: int
    parent_id: int | None
    content: str
    is_edited: bool
    is_deleted: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
