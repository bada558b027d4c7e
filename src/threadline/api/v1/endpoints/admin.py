"""Administration endpoints: bans, roles and category moderators."""

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from threadline.api.v1.dependencies import AuthSessionDep, SessionDep
from threadline.api.v1.results import to_response
from threadline.schemas.common import ActionResult
from threadline.schemas.user import BanRequest, BanStatus, RoleUpdate, UserResponse
from threadline.services import bans, moderators, roles

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/users/{user_id}/ban", response_model=ActionResult[BanStatus])
async def get_ban(user_id: int, db: SessionDep, session: AuthSessionDep) -> JSONResponse:
    """Current ban state of a user, lifting it first if it has expired."""
    return to_response(bans.get_user_ban(db, session, user_id))


@router.post("/users/{user_id}/ban", response_model=ActionResult[BanStatus])
async def ban_user(
    user_id: int,
    request: BanRequest,
    db: SessionDep,
    session: AuthSessionDep,
) -> JSONResponse:
    return to_response(
        bans.ban_user(db, session, user_id, request.reason, request.expires_at)
    )


@router.delete("/users/{user_id}/ban", response_model=ActionResult[BanStatus])
async def unban_user(user_id: int, db: SessionDep, session: AuthSessionDep) -> JSONResponse:
    return to_response(bans.unban_user(db, session, user_id))


@router.put("/users/{user_id}/role", response_model=ActionResult[UserResponse])
async def update_role(
    user_id: int,
    update: RoleUpdate,
    db: SessionDep,
    session: AuthSessionDep,
) -> JSONResponse:
    return to_response(roles.update_user_role(db, session, user_id, update.role))


@router.put(
    "/categories/{category_id}/moderators/{user_id}",
    response_model=ActionResult[None],
)
async def add_moderator(
    category_id: int,
    user_id: int,
    db: SessionDep,
    session: AuthSessionDep,
) -> JSONResponse:
    return to_response(moderators.add_category_moderator(db, session, category_id, user_id))


@router.delete(
    "/categories/{category_id}/moderators/{user_id}",
    response_model=ActionResult[None],
)
async def remove_moderator(
    category_id: int,
    user_id: int,
    db: SessionDep,
    session: AuthSessionDep,
) -> JSONResponse:
    return to_response(moderators.remove_category_moderator(db, session, category_id, user_id))
