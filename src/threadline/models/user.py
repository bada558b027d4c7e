"""SQLAlchemy models for forum members."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from sqlalchemy import Boolean, DateTime, Enum, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from threadline.db.session import Base
from threadline.db.time import as_utc, utcnow


class UserRole(StrEnum):
    """Site-wide roles. Category-scoped moderation is granted separately."""

    user = "user"
    moderator = "moderator"
    admin = "admin"


class User(Base):
    """Forum member as seen by this service.

    Identity is owned by the external auth provider; we only keep the role,
    ban state and reputation score that forum actions read and mutate.
    """

    __tablename__ = "user"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    email: Mapped[str | None] = mapped_column(Text, unique=True, nullable=True)
    role: Mapped[UserRole] = mapped_column(
        Enum(UserRole, native_enum=False, length=16),
        nullable=False,
        default=UserRole.user,
    )

    banned: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    ban_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    # NULL while banned means the ban is permanent.
    ban_expires: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # No floor or ceiling; removals alone can drive it negative.
    reputation: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    @property
    def is_admin(self) -> bool:
        """Return True for site administrators."""
        return self.role == UserRole.admin

    def ban_has_expired(self, now: datetime | None = None) -> bool:
        """Return True if a time-boxed ban has run out."""
        if not self.banned or self.ban_expires is None:
            return False
        return (now or utcnow()) > as_utc(self.ban_expires)
