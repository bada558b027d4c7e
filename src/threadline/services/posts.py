"""Reply actions.

Creating a reply is a primary mutation followed by two best-effort side
effects, applied in order: the author's reputation credit, then the reply
notifications. Either may fail without undoing the post.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from sqlalchemy.orm import Session

from threadline.core.errors import ForbiddenError, NotFoundError, ValidationFailedError
from threadline.db.time import utcnow
from threadline.models import Post, Thread
from threadline.schemas.auth import AuthSession
from threadline.schemas.common import ActionResult
from threadline.schemas.post import PostCreate, PostResponse, PostUpdate
from threadline.services.actions import action, best_effort, require_session
from threadline.services.bans import ensure_not_banned
from threadline.services.moderators import can_modify_content
from threadline.services.notifications import dispatch
from threadline.services.rate_limit import get_rate_limiter
from threadline.services.recipients import ReplyCreated
from threadline.services.reputation import reputation_ledger

logger = logging.getLogger(__name__)

DELETED_CONTENT = "[This post has been deleted]"


def _get_post(db: Session, post_id: int) -> Post:
    post = db.get(Post, post_id)
    if post is None or post.thread.is_deleted:
        raise NotFoundError("Post not found")
    return post


@action("Failed to create post")
def create_post(
    db: Session,
    session: AuthSession | None,
    form: Mapping[str, Any],
) -> ActionResult[PostResponse]:
    """Reply to a thread, optionally quoting a post in the same thread."""
    session = require_session(session)
    ensure_not_banned(db, session.user.id)
    data = PostCreate.model_validate(dict(form))
    get_rate_limiter().enforce("create_post", session)

    thread = db.get(Thread, data.thread_id)
    if thread is None or thread.is_deleted:
        raise NotFoundError("Thread not found")
    if thread.is_locked:
        raise ForbiddenError("Thread is locked")
    if data.parent_id is not None:
        parent = db.get(Post, data.parent_id)
        if parent is None:
            raise NotFoundError("Parent post not found")
        if parent.thread_id != thread.id:
            raise ValidationFailedError("Parent post belongs to a different thread")

    now = utcnow()
    post = Post(
        thread_id=thread.id,
        author_id=session.user.id,
        parent_id=data.parent_id,
        content=data.content,
        created_at=now,
        updated_at=now,
    )
    db.add(post)
    thread.updated_at = now
    thread.last_post_at = now
    thread.reply_count = (thread.reply_count or 0) + 1
    db.flush()

    with best_effort(db, "post reputation"):
        reputation_ledger.reward_post(db, session.user.id)
    dispatch(
        db,
        ReplyCreated(post_id=post.id, actor_id=session.user.id, actor_name=session.user.name),
    )

    db.commit()
    logger.info("Post %s created in thread %s by user %s", post.id, thread.id, session.user.id)
    return ActionResult.ok(PostResponse.model_validate(post))


@action("Failed to update post")
def update_post(
    db: Session,
    session: AuthSession | None,
    post_id: int,
    form: Mapping[str, Any],
) -> ActionResult[PostResponse]:
    session = require_session(session)
    post = _get_post(db, post_id)
    if post.is_deleted:
        raise NotFoundError("Post not found")
    if not can_modify_content(
        db, session, author_id=post.author_id, category_id=post.thread.category_id
    ):
        raise ForbiddenError("Not authorized to update this post")

    data = PostUpdate.model_validate(dict(form))
    post.content = data.content
    post.is_edited = True
    post.updated_at = utcnow()
    db.commit()
    return ActionResult.ok(PostResponse.model_validate(post))


@action("Failed to delete post")
def delete_post(
    db: Session,
    session: AuthSession | None,
    post_id: int,
) -> ActionResult[PostResponse]:
    """Soft-delete a post so replies quoting it keep their place in the thread."""
    session = require_session(session)
    post = _get_post(db, post_id)
    thread = post.thread
    if not can_modify_content(
        db, session, author_id=post.author_id, category_id=thread.category_id
    ):
        raise ForbiddenError("Not authorized to delete this post")

    if not post.is_deleted:
        post.is_deleted = True
        post.content = DELETED_CONTENT
        post.updated_at = utcnow()
        thread.reply_count = max((thread.reply_count or 0) - 1, 0)
        db.commit()
        logger.info("Post %s deleted by user %s", post_id, session.user.id)
    return ActionResult.ok(PostResponse.model_validate(post))
