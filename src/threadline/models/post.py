"""SQLAlchemy models for thread replies."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from threadline.db.session import Base
from threadline.db.time import utcnow

if TYPE_CHECKING:
    from .thread import Thread
    from .user import User


class Post(Base):
    """A reply inside a thread, optionally nested under another post."""

    __tablename__ = "post"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    thread_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("thread.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    author_id: Mapped[int] = mapped_column(Integer, ForeignKey("user.id"), nullable=False)
    # Reply threading; top-level replies have parent_id = NULL.
    parent_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("post.id", ondelete="SET NULL"),
        nullable=True,
    )

    content: Mapped[str] = mapped_column(Text, nullable=False)
    is_edited: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_deleted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

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

    thread: Mapped[Thread] = relationship("Thread", back_populates="posts")
    author: Mapped[User] = relationship("User")
    parent: Mapped[Post | None] = relationship("Post", remote_side=[id])

    @property
    def link(self) -> str:
        """Return the post anchor inside its thread page."""
        return f"{self.thread.link}#post-{self.id}"
