"""Report and moderation-queue endpoints for the Threadline API."""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Query, status
from fastapi.responses import JSONResponse

from threadline.api.v1.dependencies import AuthSessionDep, SessionDep
from threadline.api.v1.results import to_response
from threadline.models import ReportStatus
from threadline.schemas.common import ActionResult, Page
from threadline.schemas.report import ReportResponse, ReportStats, ReportStatusUpdate
from threadline.services import reports as report_service

router = APIRouter(prefix="/reports", tags=["reports"])


@router.post("", response_model=ActionResult[ReportResponse], status_code=status.HTTP_201_CREATED)
async def create_report(
    payload: Annotated[dict[str, Any], Body()],
    db: SessionDep,
    session: AuthSessionDep,
) -> JSONResponse:
    """File a report against one thread, post or user."""
    return to_response(
        report_service.create_report(db, session, payload), status.HTTP_201_CREATED
    )


@router.get("", response_model=ActionResult[Page[ReportResponse]])
async def list_reports(
    db: SessionDep,
    session: AuthSessionDep,
    report_status: ReportStatus | None = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=1),
) -> JSONResponse:
    """Moderation queue scoped to the categories the caller moderates."""
    return to_response(report_service.get_reports(db, session, report_status, page, limit))


@router.get("/stats", response_model=ActionResult[ReportStats])
async def report_stats(db: SessionDep, session: AuthSessionDep) -> JSONResponse:
    return to_response(report_service.get_report_stats(db, session))


@router.patch("/{report_id}", response_model=ActionResult[ReportResponse])
async def update_report(
    report_id: int,
    update: ReportStatusUpdate,
    db: SessionDep,
    session: AuthSessionDep,
) -> JSONResponse:
    return to_response(
        report_service.update_report_status(
            db, session, report_id, update.status, update.resolution
        )
    )
