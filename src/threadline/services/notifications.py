"""Notification dispatch and the recipient-facing read surface."""

from __future__ import annotations

import logging

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from threadline.core.errors import NotFoundError
from threadline.models import Notification
from threadline.schemas.auth import AuthSession
from threadline.schemas.common import ActionResult, Pagination
from threadline.schemas.notification import (
    NotificationCreate,
    NotificationFeed,
    NotificationResponse,
    UnreadCount,
)
from threadline.services.actions import action, page_bounds, require_session
from threadline.services.recipients import ForumEvent, plan_notifications

logger = logging.getLogger(__name__)


def create_notification(
    db: Session,
    payload: NotificationCreate,
) -> ActionResult[NotificationResponse]:
    """Insert one notification inside its own savepoint.

    No duplicate or preference checks are made. Failures are logged and
    reported in the result, never raised, so a lost notification cannot fail
    the action that triggered it. The caller's transaction commits the row.
    """
    try:
        with db.begin_nested():
            notification = Notification(**payload.model_dump())
            db.add(notification)
        return ActionResult.ok(NotificationResponse.model_validate(notification))
    except Exception:
        logger.exception(
            "Error creating %s notification for user %s", payload.type, payload.user_id
        )
        return ActionResult.fail("Failed to create notification", code="internal")


def dispatch(db: Session, event: ForumEvent) -> list[NotificationResponse]:
    """Fan an event out to its recipients. Returns the notifications written."""
    try:
        planned = plan_notifications(db, event)
    except Exception:
        logger.exception("Could not resolve recipients for %s", type(event).__name__)
        return []

    created: list[NotificationResponse] = []
    for payload in planned:
        result = create_notification(db, payload)
        if result.success and result.data is not None:
            created.append(result.data)

    if planned:
        logger.info(
            "%s fanned out to %d of %d recipients",
            type(event).__name__,
            len(created),
            len(planned),
        )
    return created


def _unread_count(db: Session, user_id: int) -> int:
    return db.scalar(
        select(func.count())
        .select_from(Notification)
        .where(Notification.user_id == user_id, Notification.is_read.is_(False))
    ) or 0


@action("Failed to fetch notifications")
def get_user_notifications(
    db: Session,
    session: AuthSession | None,
    page: int = 1,
    limit: int | None = None,
) -> ActionResult[NotificationFeed]:
    """Return the caller's notifications, newest first."""
    session = require_session(session)
    user_id = session.user.id
    page, limit, offset = page_bounds(page, limit)

    notifications = db.scalars(
        select(Notification)
        .where(Notification.user_id == user_id)
        .order_by(Notification.created_at.desc(), Notification.id.desc())
        .offset(offset)
        .limit(limit)
    ).all()
    total_count = db.scalar(
        select(func.count()).select_from(Notification).where(Notification.user_id == user_id)
    ) or 0

    return ActionResult.ok(
        NotificationFeed(
            notifications=[NotificationResponse.model_validate(n) for n in notifications],
            unread_count=_unread_count(db, user_id),
            pagination=Pagination.build(page, limit, total_count),
        )
    )


@action("Failed to count notifications")
def get_unread_notifications_count(
    db: Session,
    session: AuthSession | None,
) -> ActionResult[UnreadCount]:
    session = require_session(session)
    return ActionResult.ok(UnreadCount(count=_unread_count(db, session.user.id)))


@action("Failed to mark notification as read")
def mark_notification_as_read(
    db: Session,
    session: AuthSession | None,
    notification_id: int,
) -> ActionResult[NotificationResponse]:
    """Mark one of the caller's notifications read.

    Someone else's notification is reported as not found, the same as a
    missing one, so ids cannot be probed.
    """
    session = require_session(session)
    notification = db.get(Notification, notification_id)
    if notification is None or notification.user_id != session.user.id:
        raise NotFoundError("Notification not found")

    notification.is_read = True
    db.commit()
    return ActionResult.ok(NotificationResponse.model_validate(notification))


@action("Failed to mark all notifications as read")
def mark_all_notifications_as_read(
    db: Session,
    session: AuthSession | None,
) -> ActionResult[UnreadCount]:
    """Mark every unread notification of the caller as read. Idempotent."""
    session = require_session(session)
    db.execute(
        update(Notification)
        .where(Notification.user_id == session.user.id, Notification.is_read.is_(False))
        .values(is_read=True)
        .execution_options(synchronize_session="fetch")
    )
    db.commit()
    return ActionResult.ok(UnreadCount(count=0))
