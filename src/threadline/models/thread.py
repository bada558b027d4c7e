"""SQLAlchemy models for discussion threads."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from threadline.db.session import Base
from threadline.db.time import utcnow

if TYPE_CHECKING:
    from .category import Category
    from .post import Post
    from .user import User


class Thread(Base):
    """A titled discussion inside a category, opened by its first post."""

    __tablename__ = "thread"
    __table_args__ = (
        UniqueConstraint("category_id", "slug", name="uq_thread_category_slug"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    slug: Mapped[str] = mapped_column(Text, nullable=False)
    author_id: Mapped[int] = mapped_column(Integer, ForeignKey("user.id"), nullable=False)
    category_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("category.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    is_locked: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_pinned: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_deleted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    # Plain column rather than a foreign key to avoid a thread <-> post cycle.
    solution_post_id: Mapped[int | None] = mapped_column(Integer, nullable=True)

    reply_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_post_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
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

    author: Mapped[User] = relationship("User")
    category: Mapped[Category] = relationship("Category")
    posts: Mapped[list[Post]] = relationship(
        "Post",
        back_populates="thread",
        cascade="all, delete-orphan",
        order_by="Post.id",
    )

    @property
    def link(self) -> str:
        """Return the thread's path in the web UI."""
        return f"/categories/{self.category.slug}/{self.slug}"
