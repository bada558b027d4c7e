"""Reaction toggling on threads and posts."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from threadline.core.errors import NotFoundError
from threadline.models import Post, Reaction, Thread
from threadline.schemas.auth import AuthSession
from threadline.schemas.common import ActionResult
from threadline.schemas.reaction import ReactionState, ReactionToggle
from threadline.services.actions import action, best_effort, require_session
from threadline.services.bans import ensure_not_banned
from threadline.services.notifications import dispatch
from threadline.services.rate_limit import get_rate_limiter
from threadline.services.recipients import LikeAdded
from threadline.services.reputation import reputation_ledger

logger = logging.getLogger(__name__)


def _target_author(db: Session, toggle: ReactionToggle) -> int:
    if toggle.entity_type == "thread":
        thread = db.get(Thread, toggle.entity_id)
        if thread is None or thread.is_deleted:
            raise NotFoundError("Thread not found")
        return thread.author_id
    post = db.get(Post, toggle.entity_id)
    if post is None or post.thread.is_deleted:
        raise NotFoundError("Post not found")
    return post.author_id


@action("Failed to update reaction")
def toggle_reaction(
    db: Session,
    session: AuthSession | None,
    form: Mapping[str, Any],
) -> ActionResult[ReactionState]:
    """Add the caller's reaction if absent, remove it if present.

    A LIKE moves the target author's reputation by one in either direction
    and, when added, notifies them. Reacting to your own content does neither.
    """
    session = require_session(session, "You must be signed in to react")
    ensure_not_banned(db, session.user.id)
    toggle = ReactionToggle.model_validate(dict(form))
    get_rate_limiter().enforce("toggle_reaction", session)
    author_id = _target_author(db, toggle)
    target_column = Reaction.thread_id if toggle.entity_type == "thread" else Reaction.post_id

    existing = db.scalar(
        select(Reaction).where(
            target_column == toggle.entity_id,
            Reaction.user_id == session.user.id,
            Reaction.type == toggle.type,
        )
    )

    if existing is not None:
        db.delete(existing)
        db.flush()
        with best_effort(db, "reaction reputation"):
            reputation_ledger.like_removed(db, toggle.type, session.user.id, author_id)
        db.commit()
        return ActionResult.ok(ReactionState(active=False))

    reaction = Reaction(type=toggle.type, user_id=session.user.id)
    if toggle.entity_type == "thread":
        reaction.thread_id = toggle.entity_id
    else:
        reaction.post_id = toggle.entity_id
    db.add(reaction)
    db.flush()

    with best_effort(db, "reaction reputation"):
        reputation_ledger.like_added(db, toggle.type, session.user.id, author_id)
    dispatch(
        db,
        LikeAdded(
            entity_type=toggle.entity_type,
            entity_id=toggle.entity_id,
            actor_id=session.user.id,
            actor_name=session.user.name,
            reaction_type=toggle.type,
        ),
    )
    db.commit()
    return ActionResult.ok(ReactionState(active=True))
