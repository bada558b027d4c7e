"""Category and subscription Pydantic schemas."""

from pydantic import BaseModel, ConfigDict

from .common import Pagination
from .thread import ThreadResponse


class CategoryResponse(BaseModel):
    """Schema for category information returned by the API."""

    id: int
    slug: str
    name: str
    description: str | None
    display_order: int

    model_config = ConfigDict(from_attributes=True)


class CategoryThreads(BaseModel):
    """A category with one page of its threads, pinned first."""

    category: CategoryResponse
    threads: list[ThreadResponse]
    pagination: Pagination


class SubscriptionState(BaseModel):
    subscribed: bool
