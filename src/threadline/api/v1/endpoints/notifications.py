"""Notification endpoints for the Threadline API."""

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse

from threadline.api.v1.dependencies import AuthSessionDep, SessionDep
from threadline.api.v1.results import to_response
from threadline.schemas.common import ActionResult
from threadline.schemas.notification import NotificationFeed, NotificationResponse, UnreadCount
from threadline.services import notifications as notification_service

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=ActionResult[NotificationFeed])
async def list_notifications(
    db: SessionDep,
    session: AuthSessionDep,
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=1),
) -> JSONResponse:
    """The caller's notifications, newest first."""
    return to_response(notification_service.get_user_notifications(db, session, page, limit))


@router.get("/unread-count", response_model=ActionResult[UnreadCount])
async def unread_count(db: SessionDep, session: AuthSessionDep) -> JSONResponse:
    return to_response(notification_service.get_unread_notifications_count(db, session))


@router.post("/{notification_id}/read", response_model=ActionResult[NotificationResponse])
async def mark_read(notification_id: int, db: SessionDep, session: AuthSessionDep) -> JSONResponse:
    return to_response(
        notification_service.mark_notification_as_read(db, session, notification_id)
    )


@router.post("/read-all", response_model=ActionResult[UnreadCount])
async def mark_all_read(db: SessionDep, session: AuthSessionDep) -> JSONResponse:
    return to_response(notification_service.mark_all_notifications_as_read(db, session))
