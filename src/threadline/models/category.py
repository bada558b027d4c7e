"""SQLAlchemy models for categories and their moderators."""

from sqlalchemy import Boolean, ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from threadline.db.session import Base


class Category(Base):
    """Top-level grouping for threads."""

    __tablename__ = "category"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    slug: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Listings sort by display_order, then name; hidden categories are left out.
    display_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_hidden: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)


class CategoryModerator(Base):
    """Join table granting a user moderation rights over one category."""

    __tablename__ = "category_moderator"

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
    # Composite primary key prevents duplicate grants.
