"""Shared Pydantic schemas for the caller-facing action surface."""
from __future__ import annotations

import math
from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class ActionResult(BaseModel, Generic[T]):
    """Uniform result returned by every forum action."""

    success: bool
    data: T | None = None
    error: str | None = None
    code: str | None = Field(None, description="Machine-readable error kind.")
    reset_time: int | None = Field(
        None,
        description="Epoch milliseconds when a rate-limited caller may retry.",
    )

    @classmethod
    def ok(cls, data: T | None = None) -> ActionResult[T]:
        return cls(success=True, data=data)

    @classmethod
    def fail(
        cls,
        error: str,
        *,
        code: str = "error",
        reset_time: int | None = None,
    ) -> ActionResult[T]:
        return cls(success=False, error=error, code=code, reset_time=reset_time)


class Pagination(BaseModel):
    """Page metadata attached to list results."""

    page: int
    limit: int
    total_count: int
    total_pages: int

    @classmethod
    def build(cls, page: int, limit: int, total_count: int) -> Pagination:
        return cls(
            page=page,
            limit=limit,
            total_count=total_count,
            total_pages=math.ceil(total_count / limit) if limit else 0,
        )


class Page(BaseModel, Generic[T]):
    """A page of items plus its pagination metadata."""

    items: list[T]
    pagination: Pagination
