"""Thread and category subscriptions.

Subscribing is idempotent and unsubscribing something never followed is
not an error.
"""

from __future__ import annotations

import logging

from sqlalchemy import delete
from sqlalchemy.orm import Session

from threadline.core.errors import NotFoundError
from threadline.models import Category, CategorySubscription, Thread, ThreadSubscription
from threadline.schemas.auth import AuthSession
from threadline.schemas.category import SubscriptionState
from threadline.schemas.common import ActionResult
from threadline.services.actions import action, require_session

logger = logging.getLogger(__name__)


def _require_thread(db: Session, thread_id: int) -> Thread:
    thread = db.get(Thread, thread_id)
    if thread is None or thread.is_deleted:
        raise NotFoundError("Thread not found")
    return thread


def _require_category(db: Session, category_id: int) -> Category:
    category = db.get(Category, category_id)
    if category is None:
        raise NotFoundError("Category not found")
    return category


@action("Failed to subscribe to thread")
def subscribe_to_thread(
    db: Session,
    session: AuthSession | None,
    thread_id: int,
) -> ActionResult[SubscriptionState]:
    session = require_session(session)
    _require_thread(db, thread_id)

    if db.get(ThreadSubscription, (thread_id, session.user.id)) is None:
        db.add(ThreadSubscription(thread_id=thread_id, user_id=session.user.id))
        db.commit()
        logger.info("User %s subscribed to thread %s", session.user.id, thread_id)
    return ActionResult.ok(SubscriptionState(subscribed=True))


@action("Failed to unsubscribe from thread")
def unsubscribe_from_thread(
    db: Session,
    session: AuthSession | None,
    thread_id: int,
) -> ActionResult[SubscriptionState]:
    session = require_session(session)
    _require_thread(db, thread_id)

    db.execute(
        delete(ThreadSubscription).where(
            ThreadSubscription.thread_id == thread_id,
            ThreadSubscription.user_id == session.user.id,
        )
    )
    db.commit()
    return ActionResult.ok(SubscriptionState(subscribed=False))


@action("Failed to check subscription")
def check_thread_subscription(
    db: Session,
    session: AuthSession | None,
    thread_id: int,
) -> ActionResult[SubscriptionState]:
    """Whether the caller follows a thread. Anonymous callers follow nothing."""
    if session is None:
        return ActionResult.ok(SubscriptionState(subscribed=False))
    subscription = db.get(ThreadSubscription, (thread_id, session.user.id))
    return ActionResult.ok(SubscriptionState(subscribed=subscription is not None))


@action("Failed to subscribe to category")
def subscribe_to_category(
    db: Session,
    session: AuthSession | None,
    category_id: int,
) -> ActionResult[SubscriptionState]:
    session = require_session(session)
    _require_category(db, category_id)

    if db.get(CategorySubscription, (category_id, session.user.id)) is None:
        db.add(CategorySubscription(category_id=category_id, user_id=session.user.id))
        db.commit()
        logger.info("User %s subscribed to category %s", session.user.id, category_id)
    return ActionResult.ok(SubscriptionState(subscribed=True))


@action("Failed to unsubscribe from category")
def unsubscribe_from_category(
    db: Session,
    session: AuthSession | None,
    category_id: int,
) -> ActionResult[SubscriptionState]:
    session = require_session(session)
    _require_category(db, category_id)

    db.execute(
        delete(CategorySubscription).where(
            CategorySubscription.category_id == category_id,
            CategorySubscription.user_id == session.user.id,
        )
    )
    db.commit()
    return ActionResult.ok(SubscriptionState(subscribed=False))
