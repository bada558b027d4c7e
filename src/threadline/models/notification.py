"""SQLAlchemy models for user notifications."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from sqlalchemy import Boolean, DateTime, Enum, ForeignKey, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from threadline.db.session import Base
from threadline.db.time import utcnow


class NotificationType(StrEnum):
    """Event kinds a notification can describe."""

    REPLY = "REPLY"
    LIKE = "LIKE"
    THREAD = "THREAD"
    MODERATION = "MODERATION"
    MENTION = "MENTION"
    SYSTEM = "SYSTEM"


class EntityType(StrEnum):
    """Kind of entity a notification points at."""

    THREAD = "THREAD"
    POST = "POST"
    USER = "USER"
    SYSTEM = "SYSTEM"


class Notification(Base):
    """A message addressed to one recipient.

    Immutable once written except for ``is_read``, which only the recipient flips.
    """

    __tablename__ = "notification"
    __table_args__ = (
        Index("ix_notification_user_unread", "user_id", "is_read"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    type: Mapped[NotificationType] = mapped_column(
        Enum(NotificationType, native_enum=False, length=16),
        nullable=False,
    )
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("user.id", ondelete="CASCADE"),
        nullable=False,
    )
    # NULL for system-generated notifications.
    actor_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("user.id", ondelete="SET NULL"),
        nullable=True,
    )
    entity_id: Mapped[int] = mapped_column(Integer, nullable=False)
    entity_type: Mapped[EntityType] = mapped_column(
        Enum(EntityType, native_enum=False, length=16),
        nullable=False,
    )
    title: Mapped[str | None] = mapped_column(Text, nullable=True)
    message: Mapped[str | None] = mapped_column(Text, nullable=True)
    link: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
