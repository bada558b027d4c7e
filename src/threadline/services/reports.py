"""Content reports: filing, moderation and the moderation queue."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import timedelta
from typing import Any

from sqlalchemy import ColumnElement, func, or_, select
from sqlalchemy.orm import Session

from threadline.core.errors import ForbiddenError, NotFoundError
from threadline.db.time import utcnow
from threadline.models import Post, Report, ReportStatus, Thread, User
from threadline.schemas.auth import AuthSession
from threadline.schemas.common import ActionResult, Page, Pagination
from threadline.schemas.report import ReportCreate, ReportResponse, ReportStats
from threadline.services.actions import action, page_bounds, require_session
from threadline.services.bans import ensure_not_banned
from threadline.services.moderators import (
    category_id_for_content,
    is_category_moderator,
    moderated_category_ids,
)
from threadline.services.notifications import dispatch
from threadline.services.rate_limit import get_rate_limiter
from threadline.services.recipients import ReportFiled, ReportResolved

logger = logging.getLogger(__name__)


def _require_target_exists(db: Session, form: ReportCreate) -> None:
    if form.thread_id is not None:
        thread = db.get(Thread, form.thread_id)
        if thread is None or thread.is_deleted:
            raise NotFoundError("Thread not found")
    if form.post_id is not None:
        post = db.get(Post, form.post_id)
        if post is None or post.thread.is_deleted:
            raise NotFoundError("Post not found")
    if form.reported_id is not None and db.get(User, form.reported_id) is None:
        raise NotFoundError("User not found")


@action("Failed to submit report")
def create_report(
    db: Session,
    session: AuthSession | None,
    form: Mapping[str, Any],
) -> ActionResult[ReportResponse]:
    """File a report against exactly one thread, post or user.

    Admins and the moderators of the target's category are notified; the
    reporter never is, even when they hold one of those roles.
    """
    session = require_session(session, "You must be signed in to report content")
    ensure_not_banned(db, session.user.id)
    data = ReportCreate.model_validate(dict(form))
    get_rate_limiter().enforce("create_report", session)
    _require_target_exists(db, data)

    report = Report(
        type=data.type,
        reason=data.reason,
        details=data.details,
        thread_id=data.thread_id,
        post_id=data.post_id,
        reported_id=data.reported_id,
        reporter_id=session.user.id,
        status=ReportStatus.PENDING,
    )
    db.add(report)
    db.flush()

    dispatch(
        db,
        ReportFiled(
            report_id=report.id,
            report_type=report.type,
            reporter_id=session.user.id,
            thread_id=report.thread_id,
            post_id=report.post_id,
        ),
    )
    db.commit()
    logger.info("Report %s filed by user %s", report.id, session.user.id)
    return ActionResult.ok(ReportResponse.model_validate(report))


def _require_staff(session: AuthSession | None) -> AuthSession:
    session = require_session(session)
    if not session.is_staff:
        raise ForbiddenError("Unauthorized")
    return session


@action("Failed to update report")
def update_report_status(
    db: Session,
    session: AuthSession | None,
    report_id: int,
    status: ReportStatus,
    resolution: str | None = None,
) -> ActionResult[ReportResponse]:
    """Move a report to a new status and tell the reporter."""
    session = _require_staff(session)
    report = db.get(Report, report_id)
    if report is None:
        raise NotFoundError("Report not found")

    if not session.is_admin:
        category_id = category_id_for_content(
            db, thread_id=report.thread_id, post_id=report.post_id
        )
        if category_id is None:
            raise ForbiddenError("Only administrators can handle user reports")
        if not is_category_moderator(db, session.user.id, category_id):
            raise ForbiddenError("You don't have permission to moderate this content")

    report.status = status
    report.resolution = resolution
    report.closed_by_id = session.user.id
    report.updated_at = utcnow()
    db.flush()

    dispatch(
        db,
        ReportResolved(
            report_id=report.id,
            reporter_id=report.reporter_id,
            status=status,
            thread_id=report.thread_id,
            post_id=report.post_id,
        ),
    )
    db.commit()
    logger.info("Report %s marked %s by user %s", report.id, status, session.user.id)
    return ActionResult.ok(ReportResponse.model_validate(report))


def _moderator_scope(category_ids: list[int]) -> ColumnElement[bool]:
    """Reports whose thread or post lives in one of ``category_ids``."""
    thread_ids = select(Thread.id).where(Thread.category_id.in_(category_ids))
    post_ids = (
        select(Post.id)
        .join(Thread, Post.thread_id == Thread.id)
        .where(Thread.category_id.in_(category_ids))
    )
    return or_(Report.thread_id.in_(thread_ids), Report.post_id.in_(post_ids))


def _visible_reports(db: Session, session: AuthSession) -> list[ColumnElement[bool]]:
    if session.is_admin:
        return []
    return [_moderator_scope(moderated_category_ids(db, session.user.id))]


@action("Failed to load reports")
def get_reports(
    db: Session,
    session: AuthSession | None,
    status: ReportStatus | None = None,
    page: int = 1,
    limit: int | None = None,
) -> ActionResult[Page[ReportResponse]]:
    """List reports, newest first.

    Moderators only see reports on content in categories they moderate, so
    user reports are visible to admins alone.
    """
    session = _require_staff(session)
    page, limit, offset = page_bounds(page, limit)

    conditions = _visible_reports(db, session)
    if status is not None:
        conditions.append(Report.status == status)

    reports = db.scalars(
        select(Report)
        .where(*conditions)
        .order_by(Report.created_at.desc(), Report.id.desc())
        .offset(offset)
        .limit(limit)
    ).all()
    total_count = db.scalar(select(func.count()).select_from(Report).where(*conditions)) or 0

    return ActionResult.ok(
        Page[ReportResponse](
            items=[ReportResponse.model_validate(r) for r in reports],
            pagination=Pagination.build(page, limit, total_count),
        )
    )


@action("Failed to load report statistics")
def get_report_stats(
    db: Session,
    session: AuthSession | None,
) -> ActionResult[ReportStats]:
    """Counters for the moderation dashboard, scoped like ``get_reports``."""
    session = _require_staff(session)
    scope = _visible_reports(db, session)
    now = utcnow()
    start_of_day = now.replace(hour=0, minute=0, second=0, microsecond=0)
    week_ago = now - timedelta(days=7)

    def count(*conditions: ColumnElement[bool]) -> int:
        return db.scalar(
            select(func.count()).select_from(Report).where(*scope, *conditions)
        ) or 0

    return ActionResult.ok(
        ReportStats(
            total=count(),
            pending=count(Report.status == ReportStatus.PENDING),
            resolved_today=count(
                Report.status == ReportStatus.RESOLVED,
                Report.updated_at >= start_of_day,
            ),
            total_this_week=count(Report.created_at >= week_ago),
        )
    )
