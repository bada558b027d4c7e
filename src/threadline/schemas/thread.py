"""Thread-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _strip_title(value: str) -> str:
    if not value.strip():
        raise ValueError("Title cannot be empty")
    return value.strip()


class ThreadCreate(BaseModel):
    """Schema for opening a new thread with its first post."""

    title: str = Field(..., min_length=5, max_length=200)
    content: str = Field(..., min_length=10, max_length=10_000)
    category_id: int

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, value: str) -> str:
        return _strip_title(value)


class ThreadUpdate(BaseModel):
    """Partial update of a thread's editable fields."""

    title: str | None = Field(None, min_length=5, max_length=200)
    category_id: int | None = None

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, value: str | None) -> str | None:
        return None if value is None else _strip_title(value)


class ThreadResponse(BaseModel):
    """Schema for thread information returned by the API."""

    id: int
    title: str
    slug: str
    author_id: int
    category_id: int
    is_locked: bool
    is_pinned: bool
    solution_post_id: int | None
    reply_count: int
    last_post_at: datetime | None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
