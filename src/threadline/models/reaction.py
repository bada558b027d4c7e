"""Models capturing reactions on threads and posts."""

from enum import StrEnum

from sqlalchemy import (
    CheckConstraint,
    Enum,
    ForeignKey,
    Index,
    Integer,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from threadline.db.session import Base


class ReactionType(StrEnum):
    """Kinds of reaction. Only LIKE moves reputation."""

    LIKE = "LIKE"
    LOVE = "LOVE"
    LAUGH = "LAUGH"
    INSIGHTFUL = "INSIGHTFUL"


class Reaction(Base):
    """Per-user reaction on exactly one thread or post."""

    __tablename__ = "reaction"
    __table_args__ = (
        CheckConstraint(
            "(thread_id IS NULL) <> (post_id IS NULL)",
            name="ck_reaction_single_target",
        ),
        # Last line of defence against concurrent double toggles.
        UniqueConstraint("user_id", "thread_id", "type", name="uq_reaction_user_thread_type"),
        UniqueConstraint("user_id", "post_id", "type", name="uq_reaction_user_post_type"),
        Index("ix_reaction_post_id", "post_id"),
        Index("ix_reaction_thread_id", "thread_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    type: Mapped[ReactionType] = mapped_column(
        Enum(ReactionType, native_enum=False, length=16),
        nullable=False,
    )
    thread_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("thread.id", ondelete="CASCADE"),
        nullable=True,
    )
    post_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("post.id", ondelete="CASCADE"),
        nullable=True,
    )
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("user.id", ondelete="CASCADE"),
        nullable=False,
    )
