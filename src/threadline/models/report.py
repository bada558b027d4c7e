"""Models tracking user reports and their moderation lifecycle."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, DateTime, Enum, ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from threadline.db.session import Base
from threadline.db.time import utcnow

if TYPE_CHECKING:
    from .post import Post
    from .thread import Thread
    from .user import User


class ReportType(StrEnum):
    """Why a piece of content or a user was reported."""

    SPAM = "SPAM"
    HARASSMENT = "HARASSMENT"
    INAPPROPRIATE = "INAPPROPRIATE"
    MISINFORMATION = "MISINFORMATION"
    COPYRIGHT = "COPYRIGHT"
    OTHER = "OTHER"


class ReportStatus(StrEnum):
    """Report lifecycle. New reports start PENDING."""

    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    RESOLVED = "RESOLVED"
    REJECTED = "REJECTED"


class Report(Base):
    """A report against a thread, a post or a user."""

    __tablename__ = "report"
    __table_args__ = (
        CheckConstraint(
            "thread_id IS NOT NULL OR post_id IS NOT NULL OR reported_id IS NOT NULL",
            name="ck_report_has_target",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    type: Mapped[ReportType] = mapped_column(
        Enum(ReportType, native_enum=False, length=32),
        nullable=False,
    )
    reason: Mapped[str] = mapped_column(Text, nullable=False)
    details: Mapped[str | None] = mapped_column(Text, nullable=True)

    thread_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("thread.id", ondelete="SET NULL"),
        nullable=True,
    )
    post_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("post.id", ondelete="SET NULL"),
        nullable=True,
    )
    # Set when the report targets a user rather than content.
    reported_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("user.id", ondelete="SET NULL"),
        nullable=True,
    )
    reporter_id: Mapped[int] = mapped_column(Integer, ForeignKey("user.id"), nullable=False)

    status: Mapped[ReportStatus] = mapped_column(
        Enum(ReportStatus, native_enum=False, length=16),
        nullable=False,
        default=ReportStatus.PENDING,
        index=True,
    )
    resolution: Mapped[str | None] = mapped_column(Text, nullable=True)
    closed_by_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("user.id"),
        nullable=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    thread: Mapped[Thread | None] = relationship("Thread")
    post: Mapped[Post | None] = relationship("Post")
    reporter: Mapped[User] = relationship("User", foreign_keys=[reporter_id])
    reported: Mapped[User | None] = relationship("User", foreign_keys=[reported_id])
