"""Reaction endpoints for the Threadline API."""

from typing import Annotated, Any

from fastapi import APIRouter, Body
from fastapi.responses import JSONResponse

from threadline.api.v1.dependencies import AuthSessionDep, SessionDep
from threadline.api.v1.results import to_response
from threadline.schemas.common import ActionResult
from threadline.schemas.reaction import ReactionState
from threadline.services.reactions import toggle_reaction

router = APIRouter(prefix="/reactions", tags=["reactions"])


@router.post("/toggle", response_model=ActionResult[ReactionState])
async def toggle(
    payload: Annotated[dict[str, Any], Body()],
    db: SessionDep,
    session: AuthSessionDep,
) -> JSONResponse:
    """Add or remove the caller's reaction on a thread or post."""
    return to_response(toggle_reaction(db, session, payload))
