"""Account suspension checks and administration."""

from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy.orm import Session

from threadline.core.errors import ForbiddenError, NotFoundError, ValidationFailedError
from threadline.db.time import as_utc, utcnow
from threadline.models import User
from threadline.schemas.auth import AuthSession
from threadline.schemas.common import ActionResult
from threadline.schemas.user import BanStatus
from threadline.services.actions import action, require_session

logger = logging.getLogger(__name__)

BANNED_MESSAGE = "Your account has been banned"


def _clear_ban(user: User) -> None:
    user.banned = False
    user.ban_reason = None
    user.ban_expires = None


def check_user_ban(db: Session, user_id: int) -> BanStatus:
    """Return the user's ban state, lifting a time-boxed ban that has run out.

    Ban state is only guaranteed accurate at the moment of a check: expiry is
    applied lazily here rather than by a background job. Unknown users and
    lookup failures report not banned.
    """
    try:
        user = db.get(User, user_id)
        if user is None:
            return BanStatus(banned=False)

        if user.ban_has_expired():
            _clear_ban(user)
            db.commit()
            logger.info("Ban on user %s expired and was lifted", user_id)
            return BanStatus(banned=False)

        return BanStatus(
            banned=bool(user.banned),
            reason=user.ban_reason,
            expires_at=as_utc(user.ban_expires) if user.ban_expires else None,
        )
    except Exception:
        db.rollback()
        logger.exception("Error checking ban for user %s", user_id)
        return BanStatus(banned=False)


def ensure_not_banned(db: Session, user_id: int) -> None:
    """Refuse a content mutation by a banned user."""
    if check_user_ban(db, user_id).banned:
        raise ForbiddenError(BANNED_MESSAGE)


def _require_admin(session: AuthSession | None) -> AuthSession:
    session = require_session(session)
    if not session.is_admin:
        raise ForbiddenError("Not authorized")
    return session


@action("Failed to check ban")
def get_user_ban(
    db: Session,
    session: AuthSession | None,
    user_id: int,
) -> ActionResult[BanStatus]:
    """Staff view of a member's ban state."""
    session = require_session(session)
    if not session.is_staff:
        raise ForbiddenError("Not authorized")
    if db.get(User, user_id) is None:
        raise NotFoundError("User not found")
    return ActionResult.ok(check_user_ban(db, user_id))


@action("Failed to ban user")
def ban_user(
    db: Session,
    session: AuthSession | None,
    user_id: int,
    reason: str,
    expires_at: datetime | None = None,
) -> ActionResult[BanStatus]:
    """Suspend an account. Without ``expires_at`` the ban is permanent."""
    session = _require_admin(session)
    if user_id == session.user.id:
        raise ValidationFailedError("You cannot ban yourself")
    if expires_at is not None and as_utc(expires_at) <= utcnow():
        raise ValidationFailedError("Ban expiry must be in the future")

    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")

    user.banned = True
    user.ban_reason = reason
    user.ban_expires = expires_at
    db.commit()
    logger.info("User %s banned by %s until %s", user_id, session.user.id, expires_at or "forever")
    return ActionResult.ok(BanStatus(banned=True, reason=reason, expires_at=expires_at))


@action("Failed to unban user")
def unban_user(
    db: Session,
    session: AuthSession | None,
    user_id: int,
) -> ActionResult[BanStatus]:
    """Lift a suspension and clear its reason and expiry."""
    session = _require_admin(session)
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")

    _clear_ban(user)
    db.commit()
    logger.info("User %s unbanned by %s", user_id, session.user.id)
    return ActionResult.ok(BanStatus(banned=False))
