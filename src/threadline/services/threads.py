"""Thread lifecycle actions."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from threadline.core.errors import ForbiddenError, NotFoundError, ValidationFailedError
from threadline.db.time import utcnow
from threadline.models import Category, Post, Thread
from threadline.schemas.auth import AuthSession
from threadline.schemas.common import ActionResult
from threadline.schemas.thread import ThreadCreate, ThreadResponse, ThreadUpdate
from threadline.services.actions import action, require_session
from threadline.services.bans import ensure_not_banned
from threadline.services.moderators import can_moderate_category, can_modify_content
from threadline.services.notifications import dispatch
from threadline.services.rate_limit import get_rate_limiter
from threadline.services.recipients import ThreadCreated
from threadline.utils.slugs import slugify, unique_slug

logger = logging.getLogger(__name__)


def _slug_for(db: Session, title: str, category_id: int, exclude_thread_id: int | None = None) -> str:
    base = slugify(title)
    query = select(Thread.slug).where(
        Thread.category_id == category_id,
        Thread.slug.startswith(base),
    )
    if exclude_thread_id is not None:
        query = query.where(Thread.id != exclude_thread_id)
    return unique_slug(title, set(db.scalars(query)))


def _get_thread(db: Session, thread_id: int) -> Thread:
    thread = db.get(Thread, thread_id)
    if thread is None or thread.is_deleted:
        raise NotFoundError("Thread not found")
    return thread


def _require_category(db: Session, category_id: int) -> Category:
    category = db.get(Category, category_id)
    if category is None:
        raise NotFoundError("Category not found")
    return category


@action("Failed to create thread")
def create_thread(
    db: Session,
    session: AuthSession | None,
    form: Mapping[str, Any],
) -> ActionResult[ThreadResponse]:
    """Open a thread together with its first post and alert the category moderators."""
    session = require_session(session)
    ensure_not_banned(db, session.user.id)
    data = ThreadCreate.model_validate(dict(form))
    get_rate_limiter().enforce("create_thread", session)
    _require_category(db, data.category_id)

    now = utcnow()
    thread = Thread(
        title=data.title,
        slug=_slug_for(db, data.title, data.category_id),
        author_id=session.user.id,
        category_id=data.category_id,
        last_post_at=now,
        created_at=now,
        updated_at=now,
    )
    db.add(thread)
    db.flush()
    db.add(Post(thread_id=thread.id, author_id=session.user.id, content=data.content))
    db.flush()

    dispatch(
        db,
        ThreadCreated(thread_id=thread.id, actor_id=session.user.id, actor_name=session.user.name),
    )
    db.commit()
    logger.info("Thread %s created in category %s", thread.id, thread.category_id)
    return ActionResult.ok(ThreadResponse.model_validate(thread))


@action("Failed to update thread")
def update_thread(
    db: Session,
    session: AuthSession | None,
    thread_id: int,
    form: Mapping[str, Any],
) -> ActionResult[ThreadResponse]:
    """Edit a thread's title or move it; a new title regenerates the slug."""
    session = require_session(session)
    thread = _get_thread(db, thread_id)
    if not can_modify_content(
        db, session, author_id=thread.author_id, category_id=thread.category_id
    ):
        raise ForbiddenError("Not authorized to update this thread")

    data = ThreadUpdate.model_validate(dict(form))
    if data.category_id is not None and data.category_id != thread.category_id:
        _require_category(db, data.category_id)
        thread.category_id = data.category_id
        thread.slug = _slug_for(db, thread.title, data.category_id, exclude_thread_id=thread.id)
    if data.title is not None:
        thread.title = data.title
        thread.slug = _slug_for(db, thread.title, thread.category_id, exclude_thread_id=thread.id)

    thread.updated_at = utcnow()
    db.commit()
    return ActionResult.ok(ThreadResponse.model_validate(thread))


@action("Failed to delete thread")
def delete_thread(
    db: Session,
    session: AuthSession | None,
    thread_id: int,
) -> ActionResult[None]:
    """Hide a thread and its posts.

    The rows stay so reports filed against the thread keep their category
    and remain in its moderators' queue.
    """
    session = require_session(session)
    thread = _get_thread(db, thread_id)
    if not can_modify_content(
        db, session, author_id=thread.author_id, category_id=thread.category_id
    ):
        raise ForbiddenError("Not authorized to delete this thread")

    thread.is_deleted = True
    thread.updated_at = utcnow()
    db.commit()
    logger.info("Thread %s deleted by user %s", thread_id, session.user.id)
    return ActionResult.ok()


def _require_moderator(
    db: Session,
    session: AuthSession | None,
    thread_id: int,
) -> tuple[AuthSession, Thread]:
    session = require_session(session)
    thread = _get_thread(db, thread_id)
    if not can_moderate_category(db, session, thread.category_id):
        raise ForbiddenError("You don't have permission to moderate this content")
    return session, thread


@action("Failed to update thread")
def set_thread_locked(
    db: Session,
    session: AuthSession | None,
    thread_id: int,
    locked: bool,
) -> ActionResult[ThreadResponse]:
    """Lock or unlock a thread. Locked threads accept no new posts."""
    session, thread = _require_moderator(db, session, thread_id)
    thread.is_locked = locked
    db.commit()
    logger.info("Thread %s locked=%s by user %s", thread_id, locked, session.user.id)
    return ActionResult.ok(ThreadResponse.model_validate(thread))


@action("Failed to update thread")
def set_thread_pinned(
    db: Session,
    session: AuthSession | None,
    thread_id: int,
    pinned: bool,
) -> ActionResult[ThreadResponse]:
    session, thread = _require_moderator(db, session, thread_id)
    thread.is_pinned = pinned
    db.commit()
    logger.info("Thread %s pinned=%s by user %s", thread_id, pinned, session.user.id)
    return ActionResult.ok(ThreadResponse.model_validate(thread))


@action("Failed to mark solution")
def mark_solution(
    db: Session,
    session: AuthSession | None,
    thread_id: int,
    post_id: int | None,
) -> ActionResult[ThreadResponse]:
    """Mark (or with ``post_id=None`` clear) the post that answers a thread."""
    session = require_session(session)
    thread = _get_thread(db, thread_id)
    if thread.author_id != session.user.id and not can_moderate_category(
        db, session, thread.category_id
    ):
        raise ForbiddenError("Only the thread author or a moderator can mark a solution")

    if post_id is not None:
        post = db.get(Post, post_id)
        if post is None:
            raise NotFoundError("Post not found")
        if post.thread_id != thread.id:
            raise ValidationFailedError("Post does not belong to this thread")

    thread.solution_post_id = post_id
    db.commit()
    return ActionResult.ok(ThreadResponse.model_validate(thread))
