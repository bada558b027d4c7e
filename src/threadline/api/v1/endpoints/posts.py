"""Post endpoints for the Threadline API."""

from typing import Annotated, Any

from fastapi import APIRouter, Body, status
from fastapi.responses import JSONResponse

from threadline.api.v1.dependencies import AuthSessionDep, SessionDep
from threadline.api.v1.results import to_response
from threadline.schemas.common import ActionResult
from threadline.schemas.post import PostResponse
from threadline.services import posts as post_service

router = APIRouter(prefix="/posts", tags=["posts"])

FormBody = Annotated[dict[str, Any], Body()]


@router.post("", response_model=ActionResult[PostResponse], status_code=status.HTTP_201_CREATED)
async def create_post(payload: FormBody, db: SessionDep, session: AuthSessionDep) -> JSONResponse:
    """Reply to a thread."""
    return to_response(post_service.create_post(db, session, payload), status.HTTP_201_CREATED)


@router.patch("/{post_id}", response_model=ActionResult[PostResponse])
async def update_post(
    post_id: int,
    payload: FormBody,
    db: SessionDep,
    session: AuthSessionDep,
) -> JSONResponse:
    return to_response(post_service.update_post(db, session, post_id, payload))


@router.delete("/{post_id}", response_model=ActionResult[PostResponse])
async def delete_post(post_id: int, db: SessionDep, session: AuthSessionDep) -> JSONResponse:
    return to_response(post_service.delete_post(db, session, post_id))
