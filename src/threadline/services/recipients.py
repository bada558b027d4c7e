"""Who gets notified, and with what, for each forum event.

Every fan-out rule lives here so it can be reviewed and tested in one place.
``plan_notifications`` turns an event into the notifications to write;
``resolve_recipients`` reduces that plan to the set of recipient ids.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from sqlalchemy.orm import Session

from threadline.models import (
    EntityType,
    NotificationType,
    Post,
    ReactionType,
    ReportStatus,
    ReportType,
    Thread,
)
from threadline.schemas.notification import NotificationCreate
from threadline.services.moderators import (
    admin_ids,
    moderator_ids_for_category,
    moderators_for_content,
)


@dataclass(frozen=True)
class ReplyCreated:
    post_id: int
    actor_id: int
    actor_name: str


@dataclass(frozen=True)
class ThreadCreated:
    thread_id: int
    actor_id: int
    actor_name: str


@dataclass(frozen=True)
class LikeAdded:
    entity_type: Literal["thread", "post"]
    entity_id: int
    actor_id: int
    actor_name: str
    reaction_type: ReactionType = ReactionType.LIKE


@dataclass(frozen=True)
class ReportFiled:
    report_id: int
    report_type: ReportType
    reporter_id: int
    thread_id: int | None = None
    post_id: int | None = None


@dataclass(frozen=True)
class ReportResolved:
    report_id: int
    reporter_id: int
    status: ReportStatus
    thread_id: int | None = None
    post_id: int | None = None


ForumEvent = ReplyCreated | ThreadCreated | LikeAdded | ReportFiled | ReportResolved


def plan_notifications(db: Session, event: ForumEvent) -> list[NotificationCreate]:
    """Return the notifications an event should produce, in creation order."""
    match event:
        case ReplyCreated():
            return _plan_reply(db, event)
        case ThreadCreated():
            return _plan_thread(db, event)
        case LikeAdded():
            return _plan_like(db, event)
        case ReportFiled():
            return _plan_report_filed(db, event)
        case ReportResolved():
            return _plan_report_resolved(db, event)
    raise TypeError(f"Unsupported event: {event!r}")


def resolve_recipients(db: Session, event: ForumEvent) -> set[int]:
    """Return the ids of every user the event notifies."""
    return {payload.user_id for payload in plan_notifications(db, event)}


def _plan_reply(db: Session, event: ReplyCreated) -> list[NotificationCreate]:
    post = db.get(Post, event.post_id)
    if post is None:
        return []
    thread = post.thread
    planned: list[NotificationCreate] = []

    # Thread author and parent author are checked independently, so one
    # reply can notify the same person twice when they wrote both.
    if thread.author_id != event.actor_id:
        planned.append(
            NotificationCreate(
                type=NotificationType.REPLY,
                user_id=thread.author_id,
                actor_id=event.actor_id,
                entity_id=post.id,
                entity_type=EntityType.POST,
                title="New Reply",
                message=f"{event.actor_name} replied to your thread: {thread.title}",
                link=post.link,
            )
        )

    parent = post.parent
    if parent is not None and parent.author_id != event.actor_id:
        planned.append(
            NotificationCreate(
                type=NotificationType.REPLY,
                user_id=parent.author_id,
                actor_id=event.actor_id,
                entity_id=post.id,
                entity_type=EntityType.POST,
                title="New Reply",
                message=f"{event.actor_name} replied to your post in thread: {thread.title}",
                link=post.link,
            )
        )
    return planned


def _plan_thread(db: Session, event: ThreadCreated) -> list[NotificationCreate]:
    thread = db.get(Thread, event.thread_id)
    if thread is None:
        return []
    # No self-exclusion: a moderator who opens a thread is notified too.
    return [
        NotificationCreate(
            type=NotificationType.THREAD,
            user_id=moderator_id,
            actor_id=event.actor_id,
            entity_id=thread.id,
            entity_type=EntityType.THREAD,
            title="New Thread",
            message=(
                f"{event.actor_name} started a new thread in "
                f"{thread.category.name}: {thread.title}"
            ),
            link=thread.link,
        )
        for moderator_id in sorted(moderator_ids_for_category(db, thread.category_id))
    ]


def _plan_like(db: Session, event: LikeAdded) -> list[NotificationCreate]:
    if event.reaction_type != ReactionType.LIKE:
        return []

    if event.entity_type == "thread":
        thread = db.get(Thread, event.entity_id)
        if thread is None or thread.author_id == event.actor_id:
            return []
        return [
            NotificationCreate(
                type=NotificationType.LIKE,
                user_id=thread.author_id,
                actor_id=event.actor_id,
                entity_id=thread.id,
                entity_type=EntityType.THREAD,
                title="New Like",
                message=f"{event.actor_name} liked your thread: {thread.title}",
                link=thread.link,
            )
        ]

    post = db.get(Post, event.entity_id)
    if post is None or post.author_id == event.actor_id:
        return []
    return [
        NotificationCreate(
            type=NotificationType.LIKE,
            user_id=post.author_id,
            actor_id=event.actor_id,
            entity_id=post.id,
            entity_type=EntityType.POST,
            title="New Like",
            message=f"{event.actor_name} liked your post in thread: {post.thread.title}",
            link=post.link,
        )
    ]


def _plan_report_filed(db: Session, event: ReportFiled) -> list[NotificationCreate]:
    recipients = admin_ids(db) | moderators_for_content(
        db,
        thread_id=event.thread_id,
        post_id=event.post_id,
    )
    recipients.discard(event.reporter_id)
    kind = event.report_type.value.lower()
    return [
        NotificationCreate(
            type=NotificationType.MODERATION,
            user_id=user_id,
            actor_id=event.reporter_id,
            entity_id=event.report_id,
            entity_type=EntityType.SYSTEM,
            title="New Report",
            message=f"A new {kind} report has been filed and needs review",
            link=f"/admin/reports/{event.report_id}",
        )
        for user_id in sorted(recipients)
    ]


def _plan_report_resolved(db: Session, event: ReportResolved) -> list[NotificationCreate]:
    link: str | None = None
    if event.status == ReportStatus.RESOLVED:
        if event.thread_id is not None:
            thread = db.get(Thread, event.thread_id)
            link = thread.link if thread else None
        elif event.post_id is not None:
            post = db.get(Post, event.post_id)
            link = post.link if post else None

    status_text = event.status.value.lower().replace("_", " ")
    return [
        NotificationCreate(
            type=NotificationType.MODERATION,
            user_id=event.reporter_id,
            actor_id=None,
            entity_id=event.report_id,
            entity_type=EntityType.SYSTEM,
            title="Report Update",
            message=f"Your report has been {status_text}",
            link=link,
        )
    ]
