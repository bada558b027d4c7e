"""Category endpoints for the Threadline API."""

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse

from threadline.api.v1.dependencies import AuthSessionDep, SessionDep
from threadline.api.v1.results import to_response
from threadline.schemas.category import CategoryResponse, CategoryThreads, SubscriptionState
from threadline.schemas.common import ActionResult
from threadline.services import categories as category_service
from threadline.services import subscriptions

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("", response_model=ActionResult[list[CategoryResponse]])
async def list_categories(db: SessionDep) -> JSONResponse:
    return to_response(category_service.get_categories(db))


@router.get("/{slug}", response_model=ActionResult[CategoryThreads])
async def get_category(
    slug: str,
    db: SessionDep,
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=1),
) -> JSONResponse:
    """A category with a page of its threads, pinned first."""
    return to_response(category_service.get_category_with_threads(db, slug, page, limit))


@router.put("/{category_id}/subscription", response_model=ActionResult[SubscriptionState])
async def subscribe(category_id: int, db: SessionDep, session: AuthSessionDep) -> JSONResponse:
    return to_response(subscriptions.subscribe_to_category(db, session, category_id))


@router.delete("/{category_id}/subscription", response_model=ActionResult[SubscriptionState])
async def unsubscribe(category_id: int, db: SessionDep, session: AuthSessionDep) -> JSONResponse:
    return to_response(subscriptions.unsubscribe_from_category(db, session, category_id))
