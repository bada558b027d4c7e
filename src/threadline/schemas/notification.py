"""Notification-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from threadline.models.notification import EntityType, NotificationType

from .common import Pagination


class NotificationCreate(BaseModel):
    """Payload accepted by the notification dispatcher."""

    type: NotificationType
    user_id: int
    actor_id: int | None = None
    entity_id: int
    entity_type: EntityType
    title: str | None = None
    message: str | None = None
    link: str | None = None


class NotificationResponse(BaseModel):
    """Schema for notification information returned by the API."""

    id: int
    type: NotificationType
    user_id: int
    actor_id: int | None
    entity_id: int
    entity_type: EntityType
    title: str | None
    message: str | None
    link: str | None
    is_read: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class NotificationFeed(BaseModel):
    """A page of notifications plus the caller's unread count."""

    notifications: list[NotificationResponse]
    unread_count: int = Field(..., ge=0)
    pagination: Pagination


class UnreadCount(BaseModel):
    count: int
