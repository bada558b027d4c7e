"""SQLAlchemy models for thread and category subscriptions."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer
from sqlalchemy.orm import Mapped, mapped_column

from threadline.db.session import Base
from threadline.db.time import utcnow


class ThreadSubscription(Base):
    """A member following one thread."""

    __tablename__ = "thread_subscription"

    thread_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("thread.id", ondelete="CASCADE"),
        primary_key=True,
    )
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("user.id", ondelete="CASCADE"),
        primary_key=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )


class CategorySubscription(Base):
    """A member following every thread in a category."""

    __tablename__ = "category_subscription"

    category_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("category.id", ondelete="CASCADE"),
        primary_key=True,
    )
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("user.id", ondelete="CASCADE"),
        primary_key=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
