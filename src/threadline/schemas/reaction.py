"""Reaction-related Pydantic schemas."""

from typing import Literal

from pydantic import BaseModel, Field

from threadline.models.reaction import ReactionType


class ReactionToggle(BaseModel):
    """Schema for toggling a reaction on a thread or post."""

    type: ReactionType = ReactionType.LIKE
    entity_type: Literal["thread", "post"]
    entity_id: int


class ReactionState(BaseModel):
    """Outcome of a toggle: whether the caller's reaction is now present."""

    active: bool = Field(..., description="True if the reaction was added")
