"""Thread endpoints for the Threadline API."""

from typing import Annotated, Any

from fastapi import APIRouter, Body, status
from fastapi.responses import JSONResponse

from threadline.api.v1.dependencies import AuthSessionDep, SessionDep
from threadline.api.v1.results import to_response
from threadline.schemas.category import SubscriptionState
from threadline.schemas.common import ActionResult
from threadline.schemas.thread import ThreadResponse
from threadline.services import subscriptions
from threadline.services import threads as thread_service

router = APIRouter(prefix="/threads", tags=["threads"])

FormBody = Annotated[dict[str, Any], Body()]


@router.post("", response_model=ActionResult[ThreadResponse], status_code=status.HTTP_201_CREATED)
async def create_thread(payload: FormBody, db: SessionDep, session: AuthSessionDep) -> JSONResponse:
    """Open a thread with its first post."""
    result = thread_service.create_thread(db, session, payload)
    return to_response(result, status.HTTP_201_CREATED)


@router.patch("/{thread_id}", response_model=ActionResult[ThreadResponse])
async def update_thread(
    thread_id: int,
    payload: FormBody,
    db: SessionDep,
    session: AuthSessionDep,
) -> JSONResponse:
    return to_response(thread_service.update_thread(db, session, thread_id, payload))


@router.delete("/{thread_id}", response_model=ActionResult[None])
async def delete_thread(thread_id: int, db: SessionDep, session: AuthSessionDep) -> JSONResponse:
    return to_response(thread_service.delete_thread(db, session, thread_id))


@router.put("/{thread_id}/locked", response_model=ActionResult[ThreadResponse])
async def set_locked(
    thread_id: int,
    locked: Annotated[bool, Body(embed=True)],
    db: SessionDep,
    session: AuthSessionDep,
) -> JSONResponse:
    """Lock or unlock a thread (moderators only)."""
    return to_response(thread_service.set_thread_locked(db, session, thread_id, locked))


@router.put("/{thread_id}/pinned", response_model=ActionResult[ThreadResponse])
async def set_pinned(
    thread_id: int,
    pinned: Annotated[bool, Body(embed=True)],
    db: SessionDep,
    session: AuthSessionDep,
) -> JSONResponse:
    """Pin or unpin a thread (moderators only)."""
    return to_response(thread_service.set_thread_pinned(db, session, thread_id, pinned))


@router.put("/{thread_id}/solution", response_model=ActionResult[ThreadResponse])
async def mark_solution(
    thread_id: int,
    post_id: Annotated[int | None, Body(embed=True)],
    db: SessionDep,
    session: AuthSessionDep,
) -> JSONResponse:
    """Mark the post that answers the thread; send null to clear it."""
    return to_response(thread_service.mark_solution(db, session, thread_id, post_id))


@router.get("/{thread_id}/subscription", response_model=ActionResult[SubscriptionState])
async def get_subscription(thread_id: int, db: SessionDep, session: AuthSessionDep) -> JSONResponse:
    return to_response(subscriptions.check_thread_subscription(db, session, thread_id))


@router.put("/{thread_id}/subscription", response_model=ActionResult[SubscriptionState])
async def subscribe(thread_id: int, db: SessionDep, session: AuthSessionDep) -> JSONResponse:
    """Follow a thread. Idempotent."""
    return to_response(subscriptions.subscribe_to_thread(db, session, thread_id))


@router.delete("/{thread_id}/subscription", response_model=ActionResult[SubscriptionState])
async def unsubscribe(thread_id: int, db: SessionDep, session: AuthSessionDep) -> JSONResponse:
    return to_response(subscriptions.unsubscribe_from_thread(db, session, thread_id))
