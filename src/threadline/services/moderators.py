"""Resolution of who may moderate a piece of content.

Moderation authority is the union of the category's moderators and every
site admin. The same lookups feed permission checks and report fan-out.
"""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from threadline.core.errors import ForbiddenError, NotFoundError
from threadline.models import Category, CategoryModerator, Post, Thread, User, UserRole
from threadline.schemas.auth import AuthSession
from threadline.schemas.common import ActionResult
from threadline.services.actions import action, require_session

logger = logging.getLogger(__name__)


def category_id_for_thread(db: Session, thread_id: int) -> int | None:
    return db.scalar(select(Thread.category_id).where(Thread.id == thread_id))


def category_id_for_post(db: Session, post_id: int) -> int | None:
    return db.scalar(
        select(Thread.category_id)
        .join(Post, Post.thread_id == Thread.id)
        .where(Post.id == post_id)
    )


def category_id_for_content(
    db: Session,
    *,
    thread_id: int | None = None,
    post_id: int | None = None,
) -> int | None:
    """Return the category owning a thread or post; None for user targets."""
    if thread_id is not None:
        return category_id_for_thread(db, thread_id)
    if post_id is not None:
        return category_id_for_post(db, post_id)
    return None


def moderator_ids_for_category(db: Session, category_id: int) -> set[int]:
    return set(
        db.scalars(
            select(CategoryModerator.user_id).where(CategoryModerator.category_id == category_id)
        )
    )


def moderators_for_content(
    db: Session,
    *,
    thread_id: int | None = None,
    post_id: int | None = None,
) -> set[int]:
    """Return the moderators of the category that owns a thread or post."""
    category_id = category_id_for_content(db, thread_id=thread_id, post_id=post_id)
    if category_id is None:
        return set()
    return moderator_ids_for_category(db, category_id)


def admin_ids(db: Session) -> set[int]:
    return set(db.scalars(select(User.id).where(User.role == UserRole.admin)))


def moderated_category_ids(db: Session, user_id: int) -> list[int]:
    return list(
        db.scalars(
            select(CategoryModerator.category_id).where(CategoryModerator.user_id == user_id)
        )
    )


def is_category_moderator(db: Session, user_id: int, category_id: int) -> bool:
    return db.get(CategoryModerator, (category_id, user_id)) is not None


def can_moderate_category(db: Session, session: AuthSession, category_id: int | None) -> bool:
    """Admins moderate everything; others only categories they are linked to."""
    if session.is_admin:
        return True
    if category_id is None:
        return False
    return is_category_moderator(db, session.user.id, category_id)


def can_modify_content(
    db: Session,
    session: AuthSession,
    *,
    author_id: int,
    category_id: int,
) -> bool:
    """Author, category moderator or admin may act on a piece of content."""
    if session.user.id == author_id:
        return True
    return can_moderate_category(db, session, category_id)


@action("Failed to add moderator")
def add_category_moderator(
    db: Session,
    session: AuthSession | None,
    category_id: int,
    user_id: int,
) -> ActionResult[None]:
    """Grant a user moderation rights over a category. Idempotent."""
    session = require_session(session)
    if not session.is_admin:
        raise ForbiddenError("Not authorized")
    if db.get(Category, category_id) is None:
        raise NotFoundError("Category not found")
    if db.get(User, user_id) is None:
        raise NotFoundError("User not found")

    if not is_category_moderator(db, user_id, category_id):
        db.add(CategoryModerator(category_id=category_id, user_id=user_id))
        db.commit()
        logger.info("User %s now moderates category %s", user_id, category_id)
    return ActionResult.ok()


@action("Failed to remove moderator")
def remove_category_moderator(
    db: Session,
    session: AuthSession | None,
    category_id: int,
    user_id: int,
) -> ActionResult[None]:
    """Revoke a user's moderation rights over a category."""
    session = require_session(session)
    if not session.is_admin:
        raise ForbiddenError("Not authorized")

    link = db.get(CategoryModerator, (category_id, user_id))
    if link is None:
        raise NotFoundError("Moderator not found")
    db.delete(link)
    db.commit()
    logger.info("User %s no longer moderates category %s", user_id, category_id)
    return ActionResult.ok()
